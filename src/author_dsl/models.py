"""Base Pydantic models for declarative DSL elements.

This module defines the foundational model classes used by plugin
declarations and runtime settings. Declarations are immutable and strictly
validated so that a registered plugin cannot change its capabilities after
it has been classified by a registry.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all declarative DSL elements.

    Design principles enforced by this model:
        - Immutability: declarations cannot be modified after creation.
          A registry classifies plugins once, at registration time.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in plugin declarations.

    Callables are accepted as field values, so arbitrary types are allowed.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Settings are resolved from keyword arguments and environment variables.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
