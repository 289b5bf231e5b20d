"""Test result vocabulary and normalization rules.

This module defines the closed set of result values used by every level
of the execution engine, together with annotated types that normalize
serialized values into that set before they reach the engine.

Values outside the vocabulary are never propagated as-is: result fields
collapse them to `Unknown`, and expectation fields additionally treat an
empty value as "not set".
"""

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, ValidationInfo


class TestResult(StrEnum):
    """Closed vocabulary of test results."""

    __test__ = False

    UNKNOWN = 'Unknown'
    PASS = 'Pass'
    FAIL = 'Fail'
    XFAIL = 'XFail'
    NOT_TESTED = 'NotTested'


#: Spellings accepted in addition to the canonical values.
LEGACY_RESULTS = {
    'UnknownResult': TestResult.UNKNOWN,
}

#: Only these values are meaningful as expectations.
EXPECTATIONS = frozenset((TestResult.PASS, TestResult.XFAIL))


def parse_result(value: Any) -> TestResult:  # noqa: ANN401
    """Normalize a serialized value into a `TestResult`.

    Args:
        value: Raw value from a configuration file or a model.

    Returns:
        The matching result, or `TestResult.UNKNOWN` for anything
        outside the vocabulary.
    """
    if isinstance(value, TestResult):
        return value

    if isinstance(value, str):
        value = value.strip()
        if value in LEGACY_RESULTS:
            return LEGACY_RESULTS[value]
        try:
            return TestResult(value)
        except ValueError:
            return TestResult.UNKNOWN

    return TestResult.UNKNOWN


def parse_expectation(value: Any, info: ValidationInfo) -> TestResult | None:  # noqa: ANN401
    """Normalize a serialized expectation.

    When validation runs with a `strict` context flag, expectations
    outside of `Pass` and `XFail` are rejected instead of normalized.

    Args:
        value: Raw value from a configuration file or a model.
        info: Validation info carrying the optional context.

    Returns:
        `None` when the expectation is not set, otherwise the
        normalized result value.

    Raises:
        ValueError: If the expectation is invalid in strict mode.
    """
    if value is None:
        return None

    if isinstance(value, str) and not value.strip():
        return None

    result = parse_result(value)
    if result not in EXPECTATIONS and info.context and info.context.get('strict'):
        choices = ', '.join(sorted(EXPECTATIONS))
        raise ValueError(f'expected result must be one of {choices}, got {value!r}')

    return result


Result = Annotated[
    TestResult, BeforeValidator(parse_result), Field(
        title='Result',
        description=(
            'Result of an execution unit. Values outside the result '
            'vocabulary are normalized to `Unknown`.'
        ),
        examples=[
            'Pass',
            'NotTested',
        ],
    ),
]

Expectation = Annotated[
    TestResult | None, BeforeValidator(parse_expectation), Field(
        title='Expected result',
        description=(
            'Expected outcome of an execution unit. Only `Pass` and '
            '`XFail` are meaningful; any other value evaluates to '
            '`NotTested`.'
        ),
        examples=[
            'Pass',
            'XFail',
        ],
    ),
]
