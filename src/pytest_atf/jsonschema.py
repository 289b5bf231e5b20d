"""JSON Schema of test set documents."""

from functools import cache
from json import dumps

from pydantic.json_schema import GenerateJsonSchema

from pytest_atf.schema import TestSet


@cache
def make_schema(indent: int | str | None = 4) -> str:
    """Generate the JSON Schema of test set documents.

    Field names are PascalCase, as in JSON and XML configuration files.

    Args:
        indent: Indentation level used for JSON formatting.

    Returns:
        Serialized JSON Schema string.
    """
    schema = {
        **TestSet.model_json_schema(by_alias=True, mode='validation'),
        'title': 'pytest-atf',
        'description': 'JSON Schema for pytest-atf test set documents',
        '$schema': GenerateJsonSchema.schema_dialect,
    }

    return dumps(
        schema,
        ensure_ascii=False,
        sort_keys=True,
        indent=indent,
    )
