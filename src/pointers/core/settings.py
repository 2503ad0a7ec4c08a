"""Pointers settings and configuration.

This module defines the configuration options of the pointers abstraction.
Settings are loaded from environment variables with sensible defaults and are
resolved once, when this module is first imported.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Settings(BaseSettings):
    """Pointers settings loaded from environment variables.

    The trigger function names and trigger prefixes are spliced into DDL
    unquoted, so every name setting must be a plain SQL identifier.
    """

    # Database configuration
    database_url: str = Field(default="sqlite:///./pointers.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Physical tables backing the abstraction
    table_table: str = Field(default="pointers_table", alias="POINTERS_TABLE_TABLE")
    pointer_table: str = Field(default="pointers_pointer", alias="POINTERS_POINTER_TABLE")

    # Trigger wiring
    trigger_function: str = Field(default="insert_pointer", alias="POINTERS_TRIGGER_FUNCTION")
    trigger_prefix: str = Field(default="insert_pointer_", alias="POINTERS_TRIGGER_PREFIX")
    delete_trigger_function: str = Field(
        default="delete_pointer",
        alias="POINTERS_DELETE_TRIGGER_FUNCTION",
    )
    delete_trigger_prefix: str = Field(
        default="delete_pointer_",
        alias="POINTERS_DELETE_TRIGGER_PREFIX",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator(
        "table_table",
        "pointer_table",
        "trigger_function",
        "trigger_prefix",
        "delete_trigger_function",
        "delete_trigger_prefix",
    )
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"{value!r} is not a plain SQL identifier")
        return value

    def trigger_name(self, table: str) -> str:
        """Return the name of the insert trigger installed on `table`."""
        return f"{self.trigger_prefix}{table}"

    def delete_trigger_name(self, table: str) -> str:
        """Return the name of the delete trigger installed on `table`."""
        return f"{self.delete_trigger_prefix}{table}"


settings = Settings()
