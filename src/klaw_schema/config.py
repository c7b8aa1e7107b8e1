"""Process-wide configuration: SchemaConfig, configure, and get_config."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from klaw_schema._logging import configure_logging, get_logger
from klaw_schema.issues import ErrorOverride

__all__ = [
    'SchemaConfig',
    'configure',
    'get_config',
    'reset_config',
]

log = get_logger(__name__)


@dataclass(frozen=True)
class SchemaConfig:
    """Global defaults consulted while finalizing issues.

    Attributes:
        custom_error: Error override used when neither the issue, its schema, nor
            the parse context supplies a message.
        log_level: Logging level for library events (e.g. "DEBUG"). None = silent.
        report_input: Keep the offending input on finalized issues. A parse
            context can only narrow this (switch it off), never re-enable it.
    """

    custom_error: ErrorOverride | None = None
    log_level: str | None = None
    report_input: bool = True


_config = SchemaConfig()


def configure(**changes: Any) -> SchemaConfig:
    """Replace fields of the global configuration.

    Args:
        **changes: SchemaConfig fields to set.

    Returns:
        The new SchemaConfig.

    Raises:
        TypeError: If a keyword is not a SchemaConfig field.

    Example:
        ```python
        from klaw_schema import configure

        configure(custom_error=lambda issue: f'bad value ({issue.code})', log_level='DEBUG')
        ```
    """
    global _config

    _config = replace(_config, **changes)

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    log.debug('config.configure', fields=sorted(changes))
    return _config


def get_config() -> SchemaConfig:
    """Get the current global configuration."""
    return _config


def reset_config() -> SchemaConfig:
    """Restore the default configuration."""
    global _config

    _config = SchemaConfig()
    return _config
