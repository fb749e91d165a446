"""Provisioning pipeline: write configs, install dependencies, build, relocate.

Phases run strictly one after another.  Each phase returns a
:class:`PhaseResult`; the first failed phase stops the pipeline and nothing
that already happened is undone (written files and installed groups stay in
place).
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from .config import ScaffoldConfig
from .errors import (
    BuildFailure,
    ConfigWriteFailure,
    DependencyInstallFailure,
    ProvisionError,
    RelocateFailure,
)
from .models import DEFAULT_DEPENDENCY_GROUPS, DependencyGroup, GeneratedConfigSet
from .utils import print_step, print_success, run_command

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]

WRITE_PHASE = "write-configs"
BUILD_PHASE = "build"
RELOCATE_PHASE = "relocate"


def install_phase_name(group: DependencyGroup) -> str:
    return f"install:{group.name}"


@dataclass
class PhaseResult:
    """Outcome of a single provisioning phase."""

    name: str
    success: bool
    detail: str = ""
    failure: Optional[ProvisionError] = None


@dataclass
class ProvisionResult:
    """Ordered phase outcomes of one provisioning run."""

    phases: list[PhaseResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.phases) and all(p.success for p in self.phases)

    @property
    def failure(self) -> Optional[ProvisionError]:
        for phase in self.phases:
            if phase.failure is not None:
                return phase.failure
        return None

    @property
    def phase_names(self) -> list[str]:
        return [p.name for p in self.phases]


class Provisioner:
    """Runs the provisioning phases against the configured working directory.

    Args:
        config: Filenames, directories and package manager settings.
        runner: Coroutine used to execute external commands.  Called as
            ``runner(cmd, cwd=..., timeout=...)`` and expected to return
            ``(returncode, stdout, stderr)``.
    """

    def __init__(self, config: ScaffoldConfig, runner: CommandRunner | None = None) -> None:
        self.config = config
        self.runner = runner or run_command

    async def provision(
        self,
        config_set: GeneratedConfigSet,
        dependency_groups: Sequence[DependencyGroup] = DEFAULT_DEPENDENCY_GROUPS,
        build_command: list[str] | None = None,
    ) -> ProvisionResult:
        """Run every phase in order, stopping at the first failure."""
        result = ProvisionResult()

        steps: list[Callable[[], Awaitable[PhaseResult]]] = [
            lambda: self.write_configs(config_set)
        ]
        for group in dependency_groups:
            steps.append(lambda group=group: self.install(group))
        steps.append(lambda: self.build(build_command))
        steps.append(self.relocate)

        for step in steps:
            phase = await step()
            result.phases.append(phase)
            if not phase.success:
                break

        return result

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def write_configs(self, config_set: GeneratedConfigSet) -> PhaseResult:
        """Write the three configuration files, overwriting existing ones."""
        files = config_set.files(
            self.config.package_file, self.config.webpack_file, self.config.babel_file
        )
        written: list[str] = []
        for filename, text in files.items():
            path = self.config.working_dir / filename
            try:
                path.write_bytes(text.encode("utf-8"))
            except (OSError, UnicodeError) as exc:
                reason = getattr(exc, "strerror", None) or exc
                return PhaseResult(
                    name=WRITE_PHASE,
                    success=False,
                    detail=", ".join(written),
                    failure=ConfigWriteFailure(WRITE_PHASE, f"could not write {path}: {reason}"),
                )
            written.append(filename)
            print_success(f"{filename} has been created.")

        return PhaseResult(name=WRITE_PHASE, success=True, detail=", ".join(written))

    async def install(self, group: DependencyGroup) -> PhaseResult:
        """Install one dependency group as dev dependencies."""
        name = install_phase_name(group)
        cmd = self.config.install_command(group.packages)

        print_step(f"Installing {group.name} dependencies...")
        returncode, _stdout, stderr = await self.runner(
            cmd, cwd=self.config.working_dir, timeout=self.config.command_timeout
        )
        if returncode != 0:
            return PhaseResult(
                name=name,
                success=False,
                failure=DependencyInstallFailure(
                    name,
                    f"{group.name} dependencies failed to install (exit {returncode})\n{stderr}".rstrip(),
                    command=" ".join(cmd),
                    stderr=stderr,
                    returncode=returncode,
                ),
            )

        print_success(f"{group.name} dependencies have been installed.")
        return PhaseResult(name=name, success=True, detail=" ".join(group.packages))

    async def build(self, build_command: list[str] | None = None) -> PhaseResult:
        """Run the package's ``build`` script."""
        cmd = build_command or self.config.build_command()

        print_step("Building package")
        returncode, _stdout, stderr = await self.runner(
            cmd, cwd=self.config.working_dir, timeout=self.config.command_timeout
        )
        if returncode != 0:
            return PhaseResult(
                name=BUILD_PHASE,
                success=False,
                failure=BuildFailure(
                    BUILD_PHASE,
                    f"build failed (exit {returncode})\n{stderr}".rstrip(),
                    command=" ".join(cmd),
                    stderr=stderr,
                    returncode=returncode,
                ),
            )
        return PhaseResult(name=BUILD_PHASE, success=True, detail=" ".join(cmd))

    async def relocate(self) -> PhaseResult:
        """Replace the build directory with the bundler's ``dist`` output."""
        dist = self.config.dist_path
        build = self.config.build_path

        if not dist.is_dir():
            if dist.exists():
                message = f"bundler output {dist} is not a directory"
            else:
                message = (
                    f"bundler output directory {dist} does not exist; "
                    "the build produced no output"
                )
            return PhaseResult(
                name=RELOCATE_PHASE,
                success=False,
                failure=RelocateFailure(RELOCATE_PHASE, message),
            )

        try:
            _remove_path(build)
            dist.rename(build)
        except OSError as exc:
            return PhaseResult(
                name=RELOCATE_PHASE,
                success=False,
                failure=RelocateFailure(
                    RELOCATE_PHASE, f"could not move {dist} to {build}: {exc.strerror or exc}"
                ),
            )

        print_success("Package built successfully!")
        return PhaseResult(name=RELOCATE_PHASE, success=True, detail=str(build))


def _remove_path(path: Path) -> None:
    """Delete *path* whether it is a directory, a file or a dangling link."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
