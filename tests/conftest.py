"""Tests configurations and fixtures."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pytest
import yaml

from pytest_atf.context import ExecutionContext
from pytest_atf.progress import ProgressRecorder

if TYPE_CHECKING:
    from collections.abc import Mapping

pytest_plugins = ('pytester',)


class FakeRunner:
    """Process runner returning predefined results.

    Unknown commands succeed, except `false` which fails, so that the
    `true` and `false` commands behave as the shell utilities.
    """

    def __init__(self, results: 'Mapping[str, tuple[str, bool]] | None' = None) -> None:
        self.results = dict(results or {})
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, script: str, args: Sequence[str]) -> tuple[str, bool]:
        self.calls.append((script, list(args)))
        if script in self.results:
            return self.results[script]

        return f'{script} output', script != 'false'

    @property
    def scripts(self) -> list[str]:
        """Executed commands, in order."""
        return [script for script, _ in self.calls]


@pytest.fixture
def loader() -> type[yaml.SafeLoader]:
    """Provide an isolated YAML SafeLoader class for tests.

    Creates a dedicated subclass of `yaml.SafeLoader` to ensure that
    YAML constructors registered during a test do not leak into other
    tests or affect global loader state.
    """
    class Loader(yaml.SafeLoader):
        pass

    return Loader


@pytest.fixture
def progress() -> ProgressRecorder:
    """Provide a progress sink recording every message."""
    return ProgressRecorder()


@pytest.fixture
def runner() -> FakeRunner:
    """Provide a process runner which never starts a process."""
    return FakeRunner()


@pytest.fixture
def context(progress: ProgressRecorder, runner: FakeRunner) -> ExecutionContext:
    """Provide an execution context with recording sink and fake runner."""
    return ExecutionContext(
        progress=progress,
        runner=runner,
    )
