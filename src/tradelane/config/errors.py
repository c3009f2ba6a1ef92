"""Errors raised while reading tradelane settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting needed for importing, syncing or storage cannot be used."""


class MissingConfigurationError(ConfigurationError):
    """One or more required environment variables are unset or blank."""

    def __init__(self, names: list[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidSettingError(ConfigurationError):
    """A setting is present but its value is out of range or unparseable."""

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for {name}: {value!r} ({reason})")
