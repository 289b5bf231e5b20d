"""Action definitions.

An action is the atomic unit of work of a test tree. There are three
kinds of actions:

- executable: an external program or script, run by a process runner;
- manual: a description of something a person performs, never run;
- empty: a do-nothing placeholder, used where setup or cleanup is absent.

The kinds form a tagged variant. Raw data (from a configuration file) is
classified by `classify` and validated into the matching model, so an
action can never be both executable and manual. The classification is a
pure function of the data: a non-empty script takes precedence over a
non-empty description.
"""

import shlex
from abc import abstractmethod
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, ClassVar

from pydantic import Discriminator, Field, Tag, field_validator, model_validator
from pydantic.alias_generators import to_snake

from pytest_atf.models import SchemaModel
from pytest_atf.results import Result, TestResult

if TYPE_CHECKING:
    from pytest_atf.runners import ProcessRunner

#: Keys describing the kind explicitly. The kind is always derived from
#: the data, so these keys are accepted and dropped.
KIND_FLAGS = frozenset(('executable', 'manual', 'kind'))

#: Characters quoting an argument containing whitespace.
QUOTES = ('"', "'")


class ActionKind(StrEnum):
    """Kinds of actions."""

    EXECUTABLE = 'executable'
    MANUAL = 'manual'
    EMPTY = 'empty'


def _is_present(value: Any) -> bool:  # noqa: ANN401
    """Check whether a raw field value is set."""
    if isinstance(value, str):
        return bool(value.strip())

    return bool(value)


def _get_field(data: Mapping[str, Any], name: str) -> Any:  # noqa: ANN401
    """Read a raw field by its Python name or its alias."""
    for key, value in data.items():
        if isinstance(key, str) and to_snake(key) == name:
            return value

    return None


def _unquote(token: str) -> str:
    """Remove the quotes surrounding an argument."""
    if len(token) > 1 and token[0] in QUOTES and token[-1] == token[0]:
        return token[1:-1]

    return token


def classify(value: Any) -> ActionKind:  # noqa: ANN401
    """Determine the kind of an action.

    Used as the discriminator of the `Action` union, so it accepts both
    raw mappings and already constructed models.

    Args:
        value: Raw action data or an action model.

    Returns:
        `EXECUTABLE` if a script is set, otherwise `MANUAL` if a
        description is set, otherwise `EMPTY`.
    """
    if isinstance(value, BaseAction):
        return value.kind

    if isinstance(value, Mapping):
        if _is_present(_get_field(value, 'script')):
            return ActionKind.EXECUTABLE
        if _is_present(_get_field(value, 'description')):
            return ActionKind.MANUAL

    return ActionKind.EMPTY


class BaseAction(SchemaModel):
    """Base class for all action kinds.

    Holds the state shared by every action: the free-text description
    and the output and result of the last execution.
    """

    #: Kind of the action, fixed per subclass.
    kind: ClassVar[ActionKind]

    description: str = Field(
        default='',
        title='Description',
        description=(
            'Free-text description of the action. Mandatory for manual '
            'actions, informative for the other kinds.'
        ),
    )

    output: str = Field(
        default='',
        title='Output',
        description='Text produced by the last execution.',
    )

    result: Result = Field(
        default=TestResult.NOT_TESTED,
        title='Result',
        description='Result of the last execution.',
    )

    @model_validator(mode='before')
    @classmethod
    def drop_foreign_fields(cls, data: Any) -> Any:  # noqa: ANN401
        """Drop kind flags and empty fields belonging to other kinds.

        Configuration files commonly carry every action field, with
        the unused ones left empty, and the legacy `Executable` and
        `Manual` flags. Non-empty foreign fields are kept, so they are
        still rejected as extra inputs.

        Args:
            data: Raw action data.

        Returns:
            The data without kind flags and empty foreign fields.
        """
        if not isinstance(data, Mapping):
            return data

        cleaned = {}
        for key, value in data.items():
            name = to_snake(key) if isinstance(key, str) else key
            if name in KIND_FLAGS:
                continue
            if name not in cls.model_fields and not _is_present(value):
                continue
            cleaned[key] = value

        return cleaned

    def init(self) -> None:
        """Reset the execution state of the action."""
        self.output = ''
        self.result = TestResult.NOT_TESTED

    @abstractmethod
    def execute(self, runner: 'ProcessRunner') -> tuple[str, TestResult]:
        """Execute the action.

        Args:
            runner: Process runner used by executable actions.

        Returns:
            A tuple of the produced output and the action result.
        """


class ExecutableAction(BaseAction):
    """Action running an external program or script."""

    kind: ClassVar[ActionKind] = ActionKind.EXECUTABLE

    script: str = Field(
        min_length=1,
        title='Command',
        description=(
            'Path or name of the program or script to run. The '
            'interpreter is selected from the file extension.'
        ),
        examples=[
            'true',
            'scripts/check_link.py',
        ],
    )

    args: list[str] = Field(
        default_factory=list,
        title='Arguments',
        description=(
            'Arguments passed to the command. A single string is split '
            'on whitespace, quotes group words and backslashes are kept.'
        ),
    )

    @field_validator('args', mode='before')
    @classmethod
    def split_args(cls, value: Any) -> Any:  # noqa: ANN401
        """Split an argument string into a list.

        Strings are split in non-POSIX mode, so Windows paths keep their
        backslashes. Numbers in argument lists are converted to strings.

        Args:
            value: Raw arguments value.

        Returns:
            A list of arguments for strings, lists and `None`, the value
            unchanged otherwise.
        """
        if value is None:
            return []

        if isinstance(value, str):
            return [_unquote(token) for token in shlex.split(value, posix=False)]

        if isinstance(value, (list, tuple)):
            return [f'{item}' if isinstance(item, (int, float)) else item for item in value]

        return value

    def __str__(self) -> str:
        """Command line of the action."""
        return shlex.join((self.script, *self.args))

    def execute(self, runner: 'ProcessRunner') -> tuple[str, TestResult]:
        """Run the command and record its output and result.

        Any failure, including a runner that raises, is recorded as a
        `Fail` result with the diagnostic text as output.

        Args:
            runner: Process runner executing the command.

        Returns:
            A tuple of the command output and `Pass` or `Fail`.
        """
        try:
            output, success = runner(self.script, self.args)
        except Exception as error:  # noqa: BLE001
            output, success = f'{error!r}', False

        self.output = output
        self.result = TestResult.PASS if success else TestResult.FAIL

        return self.output, self.result


class ManualAction(BaseAction):
    """Action performed by a person, described but never run.

    Manual actions are not pass/fail evaluated by themselves: executing
    one only copies its description to the output.
    """

    kind: ClassVar[ActionKind] = ActionKind.MANUAL

    description: str = Field(
        min_length=1,
        title='Description',
        description='Instructions for the manual action.',
    )

    def __str__(self) -> str:
        """Human-readable form of the action."""
        return f'Manual Action:\n{self.description}'

    def execute(self, runner: 'ProcessRunner') -> tuple[str, TestResult]:  # noqa: ARG002
        """Copy the description to the output."""
        self.output = self.description

        return self.output, self.result


class EmptyAction(BaseAction):
    """Do-nothing action."""

    kind: ClassVar[ActionKind] = ActionKind.EMPTY

    def __str__(self) -> str:
        """Human-readable form of the action."""
        return 'No action'

    def execute(self, runner: 'ProcessRunner') -> tuple[str, TestResult]:  # noqa: ARG002
        """Do nothing."""
        self.output = ''

        return self.output, self.result


Action = Annotated[
    Annotated[ExecutableAction, Tag(ActionKind.EXECUTABLE)]
    | Annotated[ManualAction, Tag(ActionKind.MANUAL)]
    | Annotated[EmptyAction, Tag(ActionKind.EMPTY)],
    Discriminator(classify),
]


def is_executable(action: BaseAction | None) -> bool:
    """Check whether an optional action is executable."""
    return action is not None and action.kind is ActionKind.EXECUTABLE


def create_action(script: str, args: str | Sequence[str] = ()) -> ExecutableAction:
    """Create an executable action.

    Args:
        script: Program or script to run.
        args: Arguments as a list or a single string.

    Returns:
        A new executable action with a `NotTested` result.
    """
    return ExecutableAction(script=script, args=args)


def create_manual_action(description: str) -> ManualAction:
    """Create a manual action.

    Args:
        description: Instructions for the manual action.

    Returns:
        A new manual action with a `NotTested` result.
    """
    return ManualAction(description=description)


def create_empty_action() -> EmptyAction:
    """Create an empty (do-nothing) action."""
    return EmptyAction()
