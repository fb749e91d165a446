"""Exception hierarchy shared by the Reactor workflow.

Every failure is terminal for the run: the workflow driver catches
``ReactorError``, prints it and exits with ``exit_code``.
"""

from __future__ import annotations


class ReactorError(Exception):
    """Base class for every fatal Reactor failure."""

    exit_code: int = 1


# ---------------------------------------------------------------------------
# Source discovery
# ---------------------------------------------------------------------------


class SourceDiscoveryError(ReactorError):
    """Raised when the source directory cannot provide an entry file."""

    def __init__(self, message: str, source_dir: str = "") -> None:
        self.source_dir = source_dir
        super().__init__(message)


class MissingSourceDirectory(SourceDiscoveryError):
    """The source directory does not exist or cannot be listed."""


class EmptySourceDirectory(SourceDiscoveryError):
    """The source directory exists but holds no candidate entry files."""


# ---------------------------------------------------------------------------
# Provisioning
# ---------------------------------------------------------------------------


class ProvisionError(ReactorError):
    """Raised (or reported) when a provisioning phase fails."""

    def __init__(
        self,
        phase: str,
        message: str,
        command: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        self.phase = phase
        self.command = command
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"{phase}: {message}")


class ConfigWriteFailure(ProvisionError):
    """A configuration file could not be written."""


class DependencyInstallFailure(ProvisionError):
    """A dependency group install exited with a non-zero status."""


class BuildFailure(ProvisionError):
    """The package build script exited with a non-zero status."""


class RelocateFailure(ProvisionError):
    """The bundler output could not be moved to the build directory."""
