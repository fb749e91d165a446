"""Reactor configuration.

Centralised, typed configuration for the scaffolding workflow. Settings live
in a frozen Pydantic v2 model that is passed explicitly to the provisioner
and the workflow driver.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScaffoldConfig(BaseModel):
    """Global Reactor configuration.

    Holds the fixed output filenames, the conventional directory names and
    the package manager settings. Instances are created once by the CLI entry
    point (or by tests) and handed to the provisioner and the workflow.
    """

    model_config = ConfigDict(frozen=True)

    working_dir: Path = Field(default=Path("."))
    package_file: str = Field(default="package.json")
    webpack_file: str = Field(default="webpack.config.js")
    babel_file: str = Field(default=".babelrc")
    source_dir: str = Field(default="src")
    build_dir: str = Field(default="build")
    dist_dir: str = Field(default="dist", description="Directory the bundler writes to by default")
    package_manager: str = Field(default="npm")
    script_extensions: tuple[str, ...] = Field(
        default=(".js",),
        description="Filename suffixes treated as candidate entry scripts",
    )
    command_timeout: int | None = Field(
        default=None, ge=1, description="Per-command timeout in seconds; None waits forever"
    )

    @field_validator("script_extensions")
    @classmethod
    def normalise_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalised = tuple(ext if ext.startswith(".") else f".{ext}" for ext in value if ext)
        if not normalised:
            raise ValueError("at least one script extension is required")
        return normalised

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def package_path(self) -> Path:
        """Path to the generated ``package.json``."""
        return self.working_dir / self.package_file

    @property
    def webpack_path(self) -> Path:
        """Path to the generated ``webpack.config.js``."""
        return self.working_dir / self.webpack_file

    @property
    def babel_path(self) -> Path:
        """Path to the generated ``.babelrc``."""
        return self.working_dir / self.babel_file

    @property
    def source_path(self) -> Path:
        return self.working_dir / self.source_dir

    @property
    def build_path(self) -> Path:
        return self.working_dir / self.build_dir

    @property
    def dist_path(self) -> Path:
        return self.working_dir / self.dist_dir

    # ------------------------------------------------------------------
    # Package manager commands
    # ------------------------------------------------------------------

    def install_command(self, packages: tuple[str, ...] | list[str]) -> list[str]:
        """Return the dev-dependency install invocation for *packages*."""
        return [self.package_manager, "i", "--save-dev", *packages]

    def build_command(self) -> list[str]:
        """Return the invocation of the manifest's ``build`` script."""
        return [self.package_manager, "run", "build"]

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            REACTOR_WORKING_DIR, REACTOR_SOURCE_DIR, REACTOR_PACKAGE_MANAGER,
            REACTOR_SCRIPT_EXTENSIONS (comma-separated), REACTOR_COMMAND_TIMEOUT.

        Keyword *overrides* win over the environment.  Values are validated by
        the model, so a malformed variable raises ``pydantic.ValidationError``.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("REACTOR_WORKING_DIR"):
            kwargs["working_dir"] = Path(os.environ["REACTOR_WORKING_DIR"])
        if os.environ.get("REACTOR_SOURCE_DIR"):
            kwargs["source_dir"] = os.environ["REACTOR_SOURCE_DIR"]
        if os.environ.get("REACTOR_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["REACTOR_PACKAGE_MANAGER"]
        if os.environ.get("REACTOR_SCRIPT_EXTENSIONS"):
            kwargs["script_extensions"] = tuple(
                ext.strip() for ext in os.environ["REACTOR_SCRIPT_EXTENSIONS"].split(",") if ext.strip()
            )
        if os.environ.get("REACTOR_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = os.environ["REACTOR_COMMAND_TIMEOUT"]

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
