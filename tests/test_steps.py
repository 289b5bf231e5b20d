"""Tests for test step normalization, execution and evaluation."""

from typing import TYPE_CHECKING

import pytest

from pytest_atf.errors import ATFConfigError
from pytest_atf.progress import Level
from pytest_atf.results import TestResult
from pytest_atf.schema import (
    TestStep,
    create_action,
    create_empty_action,
    create_manual_action,
    evaluate_step,
)

if TYPE_CHECKING:
    from pytest_atf.context import ExecutionContext
    from pytest_atf.progress import ProgressRecorder


@pytest.mark.parametrize('expected, result, status', (
    pytest.param(TestResult.PASS, TestResult.PASS, TestResult.PASS, id='pass expected pass'),
    pytest.param(TestResult.PASS, TestResult.FAIL, TestResult.FAIL, id='pass expected fail'),
    pytest.param(TestResult.PASS, TestResult.NOT_TESTED, TestResult.FAIL, id='pass expected not tested'),
    pytest.param(TestResult.XFAIL, TestResult.FAIL, TestResult.PASS, id='xfail expected fail'),
    pytest.param(TestResult.XFAIL, TestResult.NOT_TESTED, TestResult.PASS, id='xfail expected not tested'),
    pytest.param(TestResult.XFAIL, TestResult.PASS, TestResult.FAIL, id='xfail expected pass'),
    pytest.param(TestResult.FAIL, TestResult.PASS, TestResult.NOT_TESTED, id='fail expected'),
    pytest.param(TestResult.UNKNOWN, TestResult.PASS, TestResult.NOT_TESTED, id='unknown expected'),
    pytest.param(None, TestResult.PASS, TestResult.NOT_TESTED, id='unset expected'),
))
def test_evaluate_step(expected: TestResult | None, result: TestResult, status: TestResult) -> None:
    """Derive step status from expectation and action result."""
    assert evaluate_step(expected, result) == status


def test_normalize_without_action() -> None:
    """Reject steps without action."""
    step = TestStep(name='Broken')

    with pytest.raises(ATFConfigError, match=r'^Test step action is empty'):
        step.normalize()


@pytest.mark.parametrize('step, expected', (
    pytest.param(TestStep(action=create_action('true')), TestResult.PASS, id='executable'),
    pytest.param(TestStep(action=create_action('true'), expected='XFail'), TestResult.XFAIL, id='executable xfail'),
    pytest.param(TestStep(action=create_manual_action('Check')), None, id='manual'),
    pytest.param(TestStep(action=create_empty_action()), None, id='empty'),
))
def test_normalize_defaults_expectation(step: TestStep, expected: TestResult | None) -> None:
    """Default the expectation of executable steps to Pass."""
    step.normalize()

    assert step.expected == expected
    assert step.status == TestResult.NOT_TESTED


def test_normalize_is_idempotent() -> None:
    """Normalize twice without changes."""
    step = TestStep(name='Ping', action=create_action('ping', 'localhost'))
    step.normalize()
    normalized = step.model_dump()
    step.normalize()

    assert step.model_dump() == normalized


@pytest.mark.parametrize('script, status', (
    pytest.param('true', TestResult.PASS, id='pass'),
    pytest.param('false', TestResult.FAIL, id='fail'),
))
def test_execute_executable(script: str, status: TestResult,
                            context: 'ExecutionContext', progress: 'ProgressRecorder') -> None:
    """Execute a step running a command."""
    step = TestStep(name='Run', action=create_action(script))
    step.normalize()
    step.execute(context)

    assert step.status == status
    assert step.action is not None
    assert step.action.output == f'{script} output'

    notices = progress.messages(Level.NOTICE)
    assert notices[0] == f'Executing test step action: {script}'
    assert notices[-1] == f'Test step evaluated to {status}'

    infos = progress.messages(Level.INFO)
    assert infos[0] == ">>> Entering test step 'Run'"
    assert f'{script} output' in infos[1]
    assert infos[-1] == "<<< Leaving test step 'Run'"


def test_execute_xfail_step(context: 'ExecutionContext') -> None:
    """Pass a step whose command is expected to fail."""
    step = TestStep(action=create_action('false'), expected=TestResult.XFAIL)
    step.normalize()
    step.execute(context)

    assert step.status == TestResult.PASS


def test_execute_manual(context: 'ExecutionContext', progress: 'ProgressRecorder') -> None:
    """Report manual step descriptions without running anything."""
    step = TestStep(action=create_manual_action('Plug the cable'))
    step.normalize()
    step.execute(context)

    assert step.status == TestResult.NOT_TESTED
    assert 'Manual test step action:\nPlug the cable' in progress.messages(Level.NOTICE)
    assert context.runner.calls == []  # type: ignore[attr-defined]


def test_execute_empty(context: 'ExecutionContext', progress: 'ProgressRecorder') -> None:
    """Warn about empty step actions."""
    step = TestStep(action=create_empty_action())
    step.normalize()
    step.execute(context)

    assert step.status == TestResult.NOT_TESTED
    assert progress.messages(Level.WARNING) == ['Test step action is empty']
