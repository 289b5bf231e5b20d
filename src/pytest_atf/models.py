"""Base Pydantic models for test artifacts and runtime objects.

This module defines the foundational model classes used by every test
artifact (actions, steps, cases, sets, plans) and by runtime helpers.

Artifact models are intentionally mutable: execution records outputs,
results, and statuses on the artifacts themselves, and the reporting
layer reads them back afterwards. Runtime and settings models are
immutable.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base model for all test artifacts.

    Design principles enforced by this model:
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in configuration files.
        - Validated mutation: assignments made during execution pass
          through the same validators as loaded data.
        - Dual naming: fields are accepted under their Python names and
          under PascalCase aliases (`Name`, `Steps`, `Expected`), which
          is the layout of JSON and XML test-set files.

    All artifact models must inherit from this class.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        validate_by_alias=True,
        validate_by_name=True,
        validate_assignment=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing artifact self-documentation.

    The fields defined in this model do not affect execution semantics
    and are used for progress messages and reports.
    """

    name: str = Field(
        default='',
        title='Name',
        description='Short human-readable name of the artifact.',
    )

    description: str = Field(
        default='',
        title='Description',
        description='Detailed human-readable description of the artifact.',
    )


class RuntimeModel(BaseModel):
    """Base immutable model for runtime collaborators.

    Runtime models hold callables (sinks, runners) rather than data and
    are never serialized.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so the surrounding environment may contain unrelated variables.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
