"""Tests for the workflow driver and CLI (reactor.workflow).

Covers:
- State machine transitions for both entry modes
- Discovery failures end the run before any file is written
- Provisioning failures end in FAILED with exit code 1
- Illegal transitions
- CLI argument handling and exit status
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from rich.markup import escape

from conftest import FakeRunner, scripted_collector
from reactor.config import ScaffoldConfig
from reactor.errors import (
    DependencyInstallFailure,
    EmptySourceDirectory,
    MissingSourceDirectory,
)
from reactor.provisioner import Provisioner
from reactor.workflow import (
    TRANSITIONS,
    Workflow,
    WorkflowResult,
    WorkflowState,
    WorkflowStateError,
    main,
)

pytestmark = pytest.mark.unit

S = WorkflowState


def _workflow(config: ScaffoldConfig, metadata, runner: FakeRunner, select_entry=False, entry=None):
    collector, asked = scripted_collector(metadata, entry)
    workflow = Workflow(
        config,
        select_entry=select_entry,
        collector=collector,
        provisioner=Provisioner(config, runner),
    )
    return workflow, asked


def _add_sources(config: ScaffoldConfig, names: list[str]) -> None:
    config.source_path.mkdir()
    for name in names:
        (config.source_path / name).write_text("", encoding="utf-8")


class TestSimpleVariant:
    async def test_happy_path(self, scaffold_config, sample_metadata, fake_runner):
        workflow, asked = _workflow(scaffold_config, sample_metadata, fake_runner)
        result = await workflow.run()

        assert result.success
        assert result.exit_code == 0
        assert result.history == [S.START, S.COLLECTING, S.SYNTHESIZING, S.PROVISIONING, S.DONE]
        assert len(asked) == 4
        assert result.selection is None
        assert result.config_set.bundler_config["entry"] == ["./src/awesomeComponent.js"]
        assert result.config_set.package_manifest["main"] == "index.js"

    async def test_does_not_need_source_dir(self, scaffold_config, sample_metadata, fake_runner):
        workflow, _ = _workflow(scaffold_config, sample_metadata, fake_runner)
        result = await workflow.run()
        assert result.success
        assert not scaffold_config.source_path.exists()

    async def test_install_failure(self, scaffold_config, sample_metadata):
        runner = FakeRunner(fail_on=1)
        workflow, _ = _workflow(scaffold_config, sample_metadata, runner)
        result = await workflow.run()

        assert result.state is S.FAILED
        assert result.history[-2:] == [S.PROVISIONING, S.FAILED]
        assert isinstance(result.failure, DependencyInstallFailure)
        assert result.exit_code == 1
        assert scaffold_config.package_path.exists()


class TestSelectionVariant:
    async def test_happy_path(self, scaffold_config, sample_metadata, fake_runner):
        _add_sources(scaffold_config, ["bar.js", "notes.txt"])
        workflow, asked = _workflow(
            scaffold_config, sample_metadata, fake_runner, select_entry=True, entry="bar.js"
        )
        result = await workflow.run()

        assert result.success
        assert result.history == [
            S.START, S.DISCOVERING, S.COLLECTING, S.SYNTHESIZING, S.PROVISIONING, S.DONE,
        ]
        assert len(asked) == 5
        assert result.selection.candidate_list == ("bar.js",)
        assert result.config_set.bundler_config["entry"] == ["./src/bar.js"]
        assert result.config_set.package_manifest["main"] == "./build/index.js"

    async def test_missing_source_dir(self, scaffold_config, sample_metadata, fake_runner):
        workflow, asked = _workflow(scaffold_config, sample_metadata, fake_runner, select_entry=True)
        result = await workflow.run()

        assert result.history == [S.START, S.DISCOVERING, S.FAILED]
        assert isinstance(result.failure, MissingSourceDirectory)
        assert result.exit_code == 1
        assert asked == []
        assert fake_runner.calls == []
        assert list(scaffold_config.working_dir.iterdir()) == []

    async def test_empty_source_dir(self, scaffold_config, sample_metadata, fake_runner):
        _add_sources(scaffold_config, [])
        workflow, asked = _workflow(scaffold_config, sample_metadata, fake_runner, select_entry=True)
        result = await workflow.run()

        assert result.state is S.FAILED
        assert isinstance(result.failure, EmptySourceDirectory)
        assert asked == []
        assert not scaffold_config.package_path.exists()
        assert not scaffold_config.webpack_path.exists()
        assert not scaffold_config.babel_path.exists()


class TestStateMachine:
    def test_terminal_states_have_no_exits(self):
        assert TRANSITIONS[S.DONE] == frozenset()
        assert TRANSITIONS[S.FAILED] == frozenset()

    def test_failed_reachable_only_from_discovery_and_provisioning(self):
        sources = {state for state, targets in TRANSITIONS.items() if S.FAILED in targets}
        assert sources == {S.DISCOVERING, S.PROVISIONING}

    def test_illegal_transition(self, scaffold_config):
        workflow = Workflow(scaffold_config)
        with pytest.raises(WorkflowStateError):
            workflow._transition(S.PROVISIONING)

    def test_no_state_revisited(self, scaffold_config):
        workflow = Workflow(scaffold_config)
        workflow._transition(S.COLLECTING)
        with pytest.raises(WorkflowStateError):
            workflow._transition(S.COLLECTING)

    def test_result_exit_code_without_failure(self):
        assert WorkflowResult(state=S.FAILED).exit_code == 1
        assert WorkflowResult(state=S.DONE).exit_code == 0


class TestMain:
    def test_exits_one_on_missing_source(self, tmp_component_dir: Path):
        with pytest.raises(SystemExit) as excinfo:
            main(["--select-entry", "--no-banner", "-C", str(tmp_component_dir)])
        assert excinfo.value.code == 1
        assert list(tmp_component_dir.iterdir()) == []

    def test_exits_one_on_unknown_directory(self, tmp_path: Path):
        with pytest.raises(SystemExit) as excinfo:
            main(["-C", str(tmp_path / "nope")])
        assert excinfo.value.code == 1

    def test_successful_run(self, tmp_component_dir: Path, sample_metadata):
        collector, _ = scripted_collector(sample_metadata)
        runner = FakeRunner()

        def provisioner_factory(config):
            return Provisioner(config, runner)

        with patch("reactor.workflow.PromptCollector", return_value=collector), patch(
            "reactor.workflow.Provisioner", side_effect=provisioner_factory
        ):
            main(["-C", str(tmp_component_dir), "--package-manager", "npm"])

        assert (tmp_component_dir / "build" / "index.js").is_file()
        assert len(runner.calls) == 4

    def test_failed_run_exits_one(self, tmp_component_dir: Path, sample_metadata):
        collector, _ = scripted_collector(sample_metadata)
        runner = FakeRunner(fail_on=0)

        with patch("reactor.workflow.PromptCollector", return_value=collector), patch(
            "reactor.workflow.Provisioner", side_effect=lambda config: Provisioner(config, runner)
        ):
            with pytest.raises(SystemExit) as excinfo:
                main(["--no-banner", "-C", str(tmp_component_dir)])

        assert excinfo.value.code == 1
        assert (tmp_component_dir / "package.json").exists()

    def test_unknown_directory_with_markup_characters(self, tmp_path: Path):
        missing = tmp_path / "[bold]component"
        with patch("reactor.utils.console.print") as mock_print:
            with pytest.raises(SystemExit) as excinfo:
                main(["-C", str(missing)])
        assert excinfo.value.code == 1
        rendered = mock_print.call_args.args[0]
        assert escape(str(missing)) in rendered
        assert rendered.startswith("[bold red]Error: Working directory not found")

    def test_malformed_timeout_exits_one(self, tmp_component_dir: Path, capsys):
        with patch.dict("os.environ", {"REACTOR_COMMAND_TIMEOUT": "soon"}):
            with pytest.raises(SystemExit) as excinfo:
                main(["--no-banner", "-C", str(tmp_component_dir)])
        assert excinfo.value.code == 1
        assert "Invalid configuration" in capsys.readouterr().out
        assert list(tmp_component_dir.iterdir()) == []
