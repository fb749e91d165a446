"""Shared pytest fixtures for the Reactor test suite.

Provides reusable fixtures for:
- Temporary component package directories
- Sample component metadata
- A recording fake command runner standing in for the package manager
- Scripted prompt collectors
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import pytest

from reactor.config import ScaffoldConfig
from reactor.models import ComponentMetadata
from reactor.prompts import QUESTIONS, PromptCollector


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_component_dir(tmp_path: Path) -> Path:
    """Empty working directory for a component package (auto-cleanup)."""
    component_dir = tmp_path / "component"
    component_dir.mkdir()
    yield component_dir


@pytest.fixture
def scaffold_config(tmp_component_dir: Path) -> ScaffoldConfig:
    """A ScaffoldConfig rooted at the temporary component directory."""
    return ScaffoldConfig(working_dir=tmp_component_dir)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_metadata() -> ComponentMetadata:
    return ComponentMetadata(
        name="awesomeComponent",
        description="This is the BeSt coMponEnt EveR",
        author_name="Ada Lovelace",
        author_website="ada.example.com",
    )


# ---------------------------------------------------------------------------
# Fake package manager
# ---------------------------------------------------------------------------

class FakeRunner:
    """Records every command and plays back scripted exit codes.

    ``fail_on`` is the zero-based index of the call that should fail.  When
    ``produce_dist`` is set, a successful build call creates ``dist/index.js``
    in the working directory, like webpack would.
    """

    def __init__(
        self,
        fail_on: int | None = None,
        returncode: int = 1,
        stderr: str = "npm ERR! code E404",
        produce_dist: bool = True,
    ) -> None:
        self.calls: list[list[str]] = []
        self.fail_on = fail_on
        self.returncode = returncode
        self.stderr = stderr
        self.produce_dist = produce_dist

    async def __call__(
        self, cmd: list[str], cwd: str | Path | None = None, timeout: int | None = None
    ) -> tuple[int, str, str]:
        index = len(self.calls)
        self.calls.append(list(cmd))
        if self.fail_on is not None and index == self.fail_on:
            return (self.returncode, "", self.stderr)
        if self.produce_dist and cmd[1:] == ["run", "build"] and cwd is not None:
            dist = Path(cwd) / "dist"
            dist.mkdir(exist_ok=True)
            (dist / "index.js").write_text("module.exports = {};\n", encoding="utf-8")
        return (0, "", "")

    @property
    def install_calls(self) -> list[list[str]]:
        return [c for c in self.calls if c[1:3] == ["i", "--save-dev"]]

    @property
    def build_calls(self) -> list[list[str]]:
        return [c for c in self.calls if c[1:] == ["run", "build"]]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_runner_factory():
    """Factory building a FakeRunner that fails on the given call index."""

    def factory(fail_on: int, **kwargs: Any) -> FakeRunner:
        return FakeRunner(fail_on=fail_on, **kwargs)

    return factory


# ---------------------------------------------------------------------------
# Scripted prompts
# ---------------------------------------------------------------------------

def scripted_collector(
    metadata: ComponentMetadata, entry: str | None = None
) -> tuple[PromptCollector, list[str]]:
    """Return a collector answering from *metadata* plus the list of questions it saw."""
    answers = {
        QUESTIONS["name"]: metadata.name,
        QUESTIONS["description"]: metadata.description,
        QUESTIONS["author_name"]: metadata.author_name,
        QUESTIONS["author_website"]: metadata.author_website,
    }
    asked: list[str] = []

    def ask(question: str) -> str:
        asked.append(question)
        return answers[question]

    def choose(question: str, candidates: Sequence[str]) -> str:
        asked.append(question)
        return entry if entry is not None else candidates[0]

    return PromptCollector(ask=ask, choose=choose), asked


@pytest.fixture
def collector(sample_metadata: ComponentMetadata) -> PromptCollector:
    prompt_collector, _asked = scripted_collector(sample_metadata)
    return prompt_collector
