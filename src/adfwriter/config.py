from contextvars import ContextVar
import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from adfwriter.files import get_config_file

LOG_LEVEL_NAMES = ('CRITICAL', 'FATAL', 'ERROR', 'WARN', 'WARNING', 'INFO', 'DEBUG', 'NOTSET')


class ApplicationConfiguration(BaseSettings):
    """The configuration for the adfwriter CLI tool."""

    log_file: str | None = None
    """The filename of the log file to use. If you set an empty string logging to a file is disabled."""
    log_level: str = 'WARNING'
    """The log level to use. Use Python's `logging` names: `CRITICAL`, `FATAL`, `ERROR`, `WARN`, `WARNING`, `INFO`,
    `DEBUG` and `NOTSET`."""
    json_indent: int | None = Field(default=2, ge=0, le=8)
    """Number of spaces used to indent the JSON output. When this is None the document is printed on a single line."""
    report_warnings: bool = False
    """If True the CLI prints warnings about malformed Markdown (e.g. an unclosed `**`) to stderr after converting.
    Can be enabled per invocation with --warnings."""
    default_payload: Literal['doc', 'comment', 'description'] = 'doc'
    """The kind of JSON to print when --payload is not given. `doc` prints the bare ADF document, `comment` wraps it as
    the body of a new comment and `description` wraps it as the description field of a work item update."""

    model_config = SettingsConfigDict(
        extra='ignore',
        validate_assignment=True,
        env_prefix='ADFWRITER_',
        env_nested_delimiter='__',
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Accept log level names regardless of their case."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in LOG_LEVEL_NAMES:
                raise ValueError(f'Unknown log level "{v}"')
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        if adfwriter_config_file := os.getenv('ADFWRITER_CONFIG_FILE'):
            conf_file = Path(adfwriter_config_file).resolve()
        else:
            conf_file = get_config_file()

        if conf_file.exists():
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                YamlConfigSettingsSource(settings_cls, yaml_file=conf_file),
            )
        else:
            return (
                init_settings,
                env_settings,
                dotenv_settings,
            )


CONFIGURATION: ContextVar[ApplicationConfiguration] = ContextVar('configuration')
