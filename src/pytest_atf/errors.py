"""Core exception hierarchy.

This module defines the error types used across the library to report
malformed test definitions, configuration loading failures and report
generation problems in a structured way.

Action failures are deliberately absent from this hierarchy: a failing
command is an expected outcome that is recorded as a `Fail` result and
never raised.
"""

from datetime import date, datetime, timedelta
from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump
from yaml.error import MarkedYAMLError

if TYPE_CHECKING:
    from json import JSONDecodeError
    from typing import Self

if TYPE_CHECKING:
    from lxml.etree import XMLSyntaxError
    from pydantic_core import ErrorDetails, ValidationError

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool)
SEQUENCES = (list, tuple, set)


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values. Positions are zero-based and rendered one-based.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file.
    line_num: int | None
    #: Column number in the source file.
    column_num: int | None

    #: Position of the test case within the test set.
    case_num: int | None
    #: Position of the test step within the test case.
    step_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Serialized artifact associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting test-definition errors.

    This formatter produces human-readable error messages with optional
    source location and a YAML rendering of the failing artifact.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source and tree location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line,
            column, case, and step numbers when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            line_num += 1
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                column_num += 1
                message += f', column {column_num}'
        message += linesep

        position = []
        if (case_num := context.get('case_num')) is not None:
            position.append(f'case {case_num + 1}')
        if (step_num := context.get('step_num')) is not None:
            position.append(f'step {step_num + 1}')
        if position:
            message += f'{indent}on {", ".join(position)}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing artifact or exception data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if (error := context.get('error')) and isinstance(error, MarkedYAMLError):
            snippet = error.problem_mark.get_snippet(indent=0) or ''
            return cls._make_indent(snippet, indent)

        if element := context.get('element'):
            snippet = f'{indent}{SNIPPET_ELLIPSIS}'
            snippet += cls._make_yaml(element, indent)
            snippet += linesep
            return snippet

        return ''

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return str(value) if isinstance(value, str) else value

        if isinstance(value, MAPPINGS):
            return {
                str(key): cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to an indented YAML string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ATFError(Exception, ErrorFormatter):
    """Base exception for all pytest-atf errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location and data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)

    def locate(self, **position: Any) -> 'Self':  # noqa: ANN401
        """Return a copy of the error enriched with location data.

        Existing context values are preserved; the given values are
        added on top. This lets containers annotate errors raised by
        their children with their own position.

        Args:
            **position: `ErrorContext` keys to add.

        Returns:
            A new error of the same type.
        """
        context = ErrorContext(**{**(self.context or {}), **position})

        return type(self)(self.message, context=context)


class ATFConfigError(ATFError):
    """Error raised for a malformed test definition.

    This is a fatal condition: the test tree cannot be executed and the
    run must stop before any action is started.
    """


class ATFSchemaError(ATFError):
    """Error raised when a configuration document cannot be loaded.

    Covers unsupported formats, syntax errors in JSON, XML and YAML
    sources, and structural validation failures.
    """

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError, *,
                        filename: str | None = None) -> 'Self':
        """Create a schema error from a YAML parsing failure.

        Args:
            error: Exception raised by the YAML parser.
            filename: Optional name of the source file.

        Returns:
            ATFSchemaError representing the YAML parsing failure.
        """
        mark = error.problem_mark
        error_context = ErrorContext(
            filename=filename or (mark.name if mark else None),
            line_num=mark.line if mark else None,
            column_num=mark.column if mark else None,
            error=error,
        )

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error.problem}'

        return cls(message, context=error_context)

    @classmethod
    def from_json_error(cls, error: 'JSONDecodeError', *,
                        filename: str | None = None) -> 'Self':
        """Create a schema error from a JSON parsing failure.

        Args:
            error: Exception raised by the JSON decoder.
            filename: Optional name of the source file.

        Returns:
            ATFSchemaError representing the JSON parsing failure.
        """
        error_context = ErrorContext(
            filename=filename,
            line_num=error.lineno - 1,
            column_num=error.colno - 1,
            error=error,
        )

        return cls(f'Invalid JSON{linesep}{' ' * FORMAT_INDENT}{error.msg}',
                   context=error_context)

    @classmethod
    def from_xml_error(cls, error: 'XMLSyntaxError', *,
                       filename: str | None = None) -> 'Self':
        """Create a schema error from an XML parsing failure.

        Args:
            error: Exception raised by the lxml parser.
            filename: Optional name of the source file.

        Returns:
            ATFSchemaError representing the XML parsing failure.
        """
        line_num = column_num = None
        if error.lineno:
            line_num = error.lineno - 1
            column_num = max(error.offset or 0, 0)

        error_context = ErrorContext(
            filename=filename,
            line_num=line_num,
            column_num=column_num,
            error=error,
        )

        return cls(f'Invalid XML{linesep}{' ' * FORMAT_INDENT}{error}',
                   context=error_context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None) -> 'Self':
        """Create a schema error from a Pydantic validation failure.

        The first validation issue that can be located in the source data
        is reported together with the minimal failing fragment.

        Args:
            error: ValidationError raised by Pydantic.
            data: Document data that failed validation.
            filename: Name of the source file where the error occurred.

        Returns:
            ATFSchemaError representing the validation failure.
        """
        error_context = ErrorContext(
            filename=filename,
            error=error,
        )

        if not data or not isinstance(data, dict):
            return cls('Type validation error', context=error_context)

        for item in error.errors(include_url=False, include_input=False):
            if context := cls._locate_pydantic_context(data, item):
                message, value = context
                return cls(message, context=ErrorContext({**error_context, 'element': value}))

        return cls('Validation error', context=error_context)

    @classmethod
    def _locate_pydantic_context(cls, value: Any,  # noqa: ANN401
                                 error: 'ErrorDetails') -> tuple[str, Any] | None:
        """Locate the most specific failing element in validated data.

        Walks the Pydantic error location path and extracts the minimal
        substructure responsible for the failure. Location entries that
        do not exist in the data (such as union tags) are skipped.

        Args:
            value: Root data structure being validated.
            error: Pydantic error details including location path.

        Returns:
            A tuple of (error message, extracted element) if a relevant
            context can be located, otherwise None.
        """
        container = last_item = value
        last_key: int | str | None = None

        for key in error['loc']:
            if isinstance(last_item, (list, tuple)):
                if isinstance(key, int) and 0 <= key < len(last_item):
                    container = last_item
                    last_item = last_item[key]
                    last_key = key
            elif isinstance(last_item, dict):
                if key in last_item:
                    container = last_item
                    last_item = last_item[key]
                    last_key = key
            else:
                break

        message = None
        for item in (error.get('msg') or '').splitlines():
            if item_message := item.strip():
                message = item_message
                break

        if not message:
            return None

        if isinstance(last_key, int) and isinstance(container, (list, tuple)):
            return message, [last_item]
        if isinstance(last_key, str) and isinstance(container, dict):
            return message, {last_key: last_item}

        return message, container


class ATFReportError(ATFError):
    """Error raised when a report cannot be produced.

    Raised for unknown report types and for failures while rendering or
    writing report files.
    """
