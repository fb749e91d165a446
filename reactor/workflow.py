"""Reactor workflow driver.

Wires discovery, prompting, synthesis and provisioning into a single run:

    START -> DISCOVERING (entry selection only) -> COLLECTING
          -> SYNTHESIZING -> PROVISIONING -> DONE

``FAILED`` is reachable from ``DISCOVERING`` and ``PROVISIONING`` and ends the
run.  No state is visited twice.

Usage::

    reactor                     # entry is src/<component name>.js
    reactor --select-entry      # pick an existing file under src/
    python -m reactor.workflow -C ./my-component
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import ScaffoldConfig
from .discovery import discover
from .errors import ReactorError, SourceDiscoveryError
from .models import ComponentMetadata, EntryFileSelection, GeneratedConfigSet
from .prompts import PromptCollector
from .provisioner import ProvisionResult, Provisioner
from .scaffolder import ConfigSynthesizer
from .utils import (
    console,
    print_banner,
    print_error,
    print_phase_header,
    print_summary_table,
)


class WorkflowState(str, Enum):
    START = "start"
    DISCOVERING = "discovering"
    COLLECTING = "collecting"
    SYNTHESIZING = "synthesizing"
    PROVISIONING = "provisioning"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS: dict[WorkflowState, frozenset[WorkflowState]] = {
    WorkflowState.START: frozenset({WorkflowState.DISCOVERING, WorkflowState.COLLECTING}),
    WorkflowState.DISCOVERING: frozenset({WorkflowState.COLLECTING, WorkflowState.FAILED}),
    WorkflowState.COLLECTING: frozenset({WorkflowState.SYNTHESIZING}),
    WorkflowState.SYNTHESIZING: frozenset({WorkflowState.PROVISIONING}),
    WorkflowState.PROVISIONING: frozenset({WorkflowState.DONE, WorkflowState.FAILED}),
    WorkflowState.DONE: frozenset(),
    WorkflowState.FAILED: frozenset(),
}


class WorkflowStateError(RuntimeError):
    """Raised on a transition the state machine does not allow."""


@dataclass
class WorkflowResult:
    """Everything a finished run produced."""

    state: WorkflowState
    history: list[WorkflowState] = field(default_factory=list)
    metadata: Optional[ComponentMetadata] = None
    selection: Optional[EntryFileSelection] = None
    config_set: Optional[GeneratedConfigSet] = None
    provision: Optional[ProvisionResult] = None
    failure: Optional[ReactorError] = None

    @property
    def success(self) -> bool:
        return self.state is WorkflowState.DONE

    @property
    def exit_code(self) -> int:
        if self.success:
            return 0
        return self.failure.exit_code if self.failure is not None else 1


class Workflow:
    """Drives one scaffolding run.

    Args:
        config: Shared settings (paths, package manager).
        select_entry: When ``True`` the entry file is chosen among the
            scripts discovered in the source directory; otherwise it is
            derived from the component name.
        collector: Prompt collector; defaults to Rich console prompts.
        synthesizer: Config synthesizer.
        provisioner: Provisioner; defaults to one running real commands.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        select_entry: bool = False,
        collector: PromptCollector | None = None,
        synthesizer: ConfigSynthesizer | None = None,
        provisioner: Provisioner | None = None,
    ) -> None:
        self.config = config
        self.select_entry = select_entry
        self.collector = collector or PromptCollector()
        self.synthesizer = synthesizer or ConfigSynthesizer()
        self.provisioner = provisioner or Provisioner(config)
        self.state = WorkflowState.START
        self.history: list[WorkflowState] = [WorkflowState.START]

    def _transition(self, new_state: WorkflowState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise WorkflowStateError(
                f"Illegal transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state
        self.history.append(new_state)

    def _fail(self, result: WorkflowResult, failure: ReactorError) -> WorkflowResult:
        self._transition(WorkflowState.FAILED)
        result.state = self.state
        result.failure = failure
        print_error(f"❌ {failure}")
        return result

    async def run(self) -> WorkflowResult:
        """Execute the run and return its result.  Never raises ``ReactorError``."""
        result = WorkflowResult(state=self.state, history=self.history)

        candidates: list[str] = []
        if self.select_entry:
            self._transition(WorkflowState.DISCOVERING)
            try:
                candidates = discover(self.config.source_path, self.config.script_extensions)
            except SourceDiscoveryError as exc:
                return self._fail(result, exc)

        self._transition(WorkflowState.COLLECTING)
        result.metadata = self.collector.collect()
        if self.select_entry:
            result.selection = self.collector.select_entry(candidates)

        self._transition(WorkflowState.SYNTHESIZING)
        entry_file = result.selection.selected if result.selection else None
        result.config_set = self.synthesizer.synthesize(result.metadata, entry_file)

        self._transition(WorkflowState.PROVISIONING)
        print_phase_header("Provisioning")
        result.provision = await self.provisioner.provision(result.config_set)
        if not result.provision.success:
            failure = result.provision.failure
            assert failure is not None
            return self._fail(result, failure)

        self._transition(WorkflowState.DONE)
        result.state = self.state
        return result


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``reactor`` / ``python -m reactor.workflow``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="reactor",
        description="Reactor -- scaffold, install and build a React component package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  reactor\n"
            "  reactor --select-entry\n"
            "  reactor -C ./my-component --package-manager npm\n"
        ),
    )
    parser.add_argument(
        "--select-entry",
        action="store_true",
        help="Choose the entry file among the scripts in the source directory",
    )
    parser.add_argument(
        "--directory", "-C",
        default=None,
        help="Working directory of the component package (default: .)",
    )
    parser.add_argument(
        "--source-dir",
        default=None,
        help="Source directory, relative to the working directory (default: src)",
    )
    parser.add_argument(
        "--package-manager",
        default=None,
        help="Package manager executable (default: npm)",
    )
    parser.add_argument(
        "--no-banner",
        action="store_true",
        help="Do not print the start banner",
    )

    args = parser.parse_args(argv)

    working_dir = Path(args.directory) if args.directory else None
    if working_dir is not None and not working_dir.is_dir():
        print_error(f"Error: Working directory not found: {working_dir}")
        sys.exit(1)

    try:
        config = ScaffoldConfig.from_env(
            working_dir=working_dir,
            source_dir=args.source_dir,
            package_manager=args.package_manager,
        )
    except ValidationError as exc:
        print_error(f"Error: Invalid configuration: {exc}")
        sys.exit(1)

    if not args.no_banner:
        print_banner()

    workflow = Workflow(config, select_entry=args.select_entry)
    result = asyncio.run(workflow.run())

    if not result.success:
        console.print("[bold red]Scaffolding failed.[/bold red]")
        sys.exit(result.exit_code)

    assert result.metadata is not None and result.config_set is not None
    print_summary_table(
        {
            "Component": result.metadata.name,
            "Entry": result.config_set.bundler_config["entry"][0],
            "Main": result.config_set.package_manifest["main"],
            "Output": str(config.build_path),
        },
        title="Package ready",
    )


if __name__ == "__main__":
    main()
