"""Pydantic v2 models for the Reactor scaffolding workflow.

Defines the operator-supplied component metadata, the entry file selection,
the fixed dependency groups and the generated configuration set.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Operator input
# ---------------------------------------------------------------------------

class ComponentMetadata(BaseModel):
    """Answers collected from the operator.

    No validation is applied: empty strings and arbitrary text are kept as
    typed.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Main component name, e.g. 'awesomeComponent'")
    description: str = Field(default="")
    author_name: str = Field(default="")
    author_website: str = Field(default="")


class EntryFileSelection(BaseModel):
    """An entry file chosen from the discovered candidates."""

    model_config = ConfigDict(frozen=True)

    candidate_list: tuple[str, ...] = Field(..., min_length=1)
    selected: str

    @model_validator(mode="after")
    def selected_is_candidate(self) -> "EntryFileSelection":
        if self.selected not in self.candidate_list:
            raise ValueError(
                f"selected entry file {self.selected!r} is not one of the candidates"
            )
        return self


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

class DependencyGroup(BaseModel):
    """A named set of dev dependencies installed in a single invocation."""

    model_config = ConfigDict(frozen=True)

    name: str
    packages: tuple[str, ...] = Field(..., min_length=1)


BUNDLER_DEPENDENCIES = DependencyGroup(
    name="Webpack",
    packages=("webpack", "webpack-dev-server", "webpack-cli"),
)
TRANSPILER_DEPENDENCIES = DependencyGroup(
    name="Babel",
    packages=("@babel/core", "@babel/preset-env", "@babel/preset-react"),
)
LOADER_DEPENDENCIES = DependencyGroup(
    name="Loader",
    packages=("babel-loader", "style-loader", "css-loader"),
)

# Install order matters: bundler, transpiler, loaders.
DEFAULT_DEPENDENCY_GROUPS: tuple[DependencyGroup, ...] = (
    BUNDLER_DEPENDENCIES,
    TRANSPILER_DEPENDENCIES,
    LOADER_DEPENDENCIES,
)


# ---------------------------------------------------------------------------
# Generated configuration
# ---------------------------------------------------------------------------

class GeneratedConfigSet(BaseModel):
    """The three configuration documents plus their serialized text.

    The documents are independent nested mappings; the text fields are what
    the provisioner writes to disk.
    """

    model_config = ConfigDict(frozen=True)

    package_manifest: dict[str, Any]
    bundler_config: dict[str, Any]
    transpiler_config: dict[str, Any]
    package_json_text: str
    webpack_config_text: str
    babelrc_text: str
    entry_file: Optional[str] = None

    def files(
        self,
        package_file: str = "package.json",
        webpack_file: str = "webpack.config.js",
        babel_file: str = ".babelrc",
    ) -> dict[str, str]:
        """Return ``{filename: text}`` in write order."""
        return {
            package_file: self.package_json_text,
            webpack_file: self.webpack_config_text,
            babel_file: self.babelrc_text,
        }


def dump_document(document: dict[str, Any]) -> str:
    """Serialize a configuration document as 4-space indented JSON.

    Key order follows the document's insertion order so output is stable.
    """
    return json.dumps(document, indent=4, ensure_ascii=False)
