"""Configuration synthesis.

Takes ``ComponentMetadata`` (and optionally a selected entry file) and builds
the three configuration documents a React component package needs:
``package.json``, ``webpack.config.js`` and ``.babelrc``.

Everything here is a pure function of its inputs.  The only syntax-aware
step is :func:`unquote_code_literals`, which turns the serialized ``test``
patterns of the webpack rules back into JavaScript regular expression
literals after JSON serialization.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from ..models import ComponentMetadata, GeneratedConfigSet, dump_document
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Fixed values
# ---------------------------------------------------------------------------

PACKAGE_VERSION = "1.0.0"
PACKAGE_LICENSE = "MIT"
DEFAULT_MAIN = "index.js"
SELECTED_ENTRY_MAIN = "./build/index.js"
BUILD_SCRIPT = "webpack"
TEST_SCRIPT = 'echo "Error: no test specified" && exit 1'

SCRIPT_PATTERN = r"/\.(js|jsx)$/"
STYLE_PATTERN = r"/(\.css$)/"
DEPENDENCY_CACHE_DIR = "/node_modules/"

BABEL_PRESETS: tuple[str, ...] = ("@babel/preset-env", "@babel/preset-react")

WEBPACK_TEMPLATE = "webpack.config.js.j2"


@dataclass(frozen=True)
class CodeLiteral:
    """A document value that must be emitted as raw code, not a JSON string."""

    name: str
    key: str
    value: str

    @property
    def quoted(self) -> str:
        return f'"{self.key}": {json.dumps(self.value)}'

    @property
    def raw(self) -> str:
        return f'"{self.key}": {self.value}'


WEBPACK_CODE_LITERALS: tuple[CodeLiteral, ...] = (
    CodeLiteral(name="script-rule", key="test", value=SCRIPT_PATTERN),
    CodeLiteral(name="style-rule", key="test", value=STYLE_PATTERN),
)


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def build_package_manifest(
    metadata: ComponentMetadata, entry_file: Optional[str] = None
) -> dict[str, Any]:
    """Return the ``package.json`` document."""
    return {
        "name": metadata.name,
        "version": PACKAGE_VERSION,
        "description": metadata.description,
        "main": SELECTED_ENTRY_MAIN if entry_file else DEFAULT_MAIN,
        "scripts": {
            "test": TEST_SCRIPT,
            "build": BUILD_SCRIPT,
        },
        "keywords": [],
        "author": {
            "name": metadata.author_name,
            "url": metadata.author_website,
        },
        "license": PACKAGE_LICENSE,
    }


def _umd_external(package: str, root: str) -> dict[str, str]:
    return {
        "root": root,
        "commonjs2": package,
        "commonjs": package,
        "amd": package,
    }


def build_bundler_config(
    metadata: ComponentMetadata, entry_file: Optional[str] = None
) -> dict[str, Any]:
    """Return the webpack configuration document.

    The entry is ``./src/<entry_file>`` when a file was selected, otherwise
    ``./src/<component name>.js``.
    """
    entry = f"./src/{entry_file}" if entry_file else f"./src/{metadata.name}.js"
    return {
        "entry": [entry],
        "module": {
            "rules": [
                {
                    "test": SCRIPT_PATTERN,
                    "exclude": DEPENDENCY_CACHE_DIR,
                    "use": ["babel-loader"],
                },
                {
                    "test": STYLE_PATTERN,
                    "use": ["style-loader", "css-loader"],
                },
            ]
        },
        "externals": {
            "react": _umd_external("react", "React"),
            "react-dom": _umd_external("react-dom", "ReactDOM"),
        },
        "resolve": {
            "extensions": ["*", ".js", ".jsx"],
        },
        "output": {
            "publicPath": "/",
            "filename": "index.js",
            "libraryTarget": "commonjs2",
        },
        "devServer": {
            "contentBase": "./build",
        },
    }


def build_transpiler_config() -> dict[str, Any]:
    """Return the ``.babelrc`` document."""
    return {"presets": list(BABEL_PRESETS)}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def unquote_code_literals(
    text: str, literals: tuple[CodeLiteral, ...] = WEBPACK_CODE_LITERALS
) -> str:
    """Strip the JSON quoting around each of *literals* in serialized *text*.

    Only the exact ``"key": "value"`` pair of each literal is rewritten, so
    other fields holding the same key or value stay quoted.
    """
    for literal in literals:
        text = text.replace(literal.quoted, literal.raw)
    return text


def render_webpack_module(
    document: dict[str, Any], renderer: TemplateRenderer | None = None
) -> str:
    """Render *document* as a ``module.exports = ...`` CommonJS module."""
    renderer = renderer or TemplateRenderer()
    body = unquote_code_literals(dump_document(document))
    return renderer.render(WEBPACK_TEMPLATE, {"document": body})


# ---------------------------------------------------------------------------
# Synthesizer
# ---------------------------------------------------------------------------

class ConfigSynthesizer:
    """Builds a ``GeneratedConfigSet`` from collected metadata."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def synthesize(
        self, metadata: ComponentMetadata, entry_file: Optional[str] = None
    ) -> GeneratedConfigSet:
        """Produce the three documents and their file contents.

        Args:
            metadata: Operator answers.
            entry_file: Name of the selected file under ``src/``, or ``None``
                to derive the entry from the component name.
        """
        package_manifest = build_package_manifest(metadata, entry_file)
        bundler_config = build_bundler_config(metadata, entry_file)
        transpiler_config = build_transpiler_config()

        return GeneratedConfigSet(
            package_manifest=package_manifest,
            bundler_config=bundler_config,
            transpiler_config=transpiler_config,
            package_json_text=dump_document(package_manifest),
            webpack_config_text=render_webpack_module(bundler_config, self.renderer),
            babelrc_text=dump_document(transpiler_config),
            entry_file=entry_file,
        )


def synthesize(
    metadata: ComponentMetadata, entry_file: Optional[str] = None
) -> GeneratedConfigSet:
    """Module-level shortcut for :meth:`ConfigSynthesizer.synthesize`."""
    return ConfigSynthesizer().synthesize(metadata, entry_file)
