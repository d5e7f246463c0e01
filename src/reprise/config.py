"""Runtime configuration for reprise."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

ENV_PREFIX = "REPRISE_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    """A configuration value could not be parsed."""

    pass


@dataclass
class ReplConfig:
    """Settings for a REPL session.

    Values come from the defaults below, then ``REPRISE_*`` environment
    variables (e.g. ``REPRISE_DEFAULT_KERNEL``), then explicit overrides.
    """

    default_kernel: str = "python"
    shell_timeout: float = 30.0
    reset_history_on_submit: bool = False
    log_level: str = "WARNING"
    log_file: str | None = None
    markdown: bool = True

    @classmethod
    def load(cls, environ: dict[str, str] | None = None, **overrides: Any) -> ReplConfig:
        """Build a config from the environment and overrides.

        Overrides set to None are ignored so argparse defaults can be
        passed straight through.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is not None:
                values[f.name] = _parse(f.name, raw)
        for name, value in overrides.items():
            if value is not None:
                values[name] = value
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges. Raises ConfigError."""
        self.default_kernel = self.default_kernel.lower()
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.log_level}")
        if self.shell_timeout <= 0:
            raise ConfigError(f"shell_timeout must be positive, got {self.shell_timeout}")


def _parse(name: str, raw: str) -> Any:
    """Convert an environment string to the field's type."""
    if name in ("reset_history_on_submit", "markdown"):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
    if name == "shell_timeout":
        try:
            return float(raw)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}SHELL_TIMEOUT must be a number, got {raw!r}") from None
    if name == "log_file":
        return raw or None
    return raw
