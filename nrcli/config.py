"""Persistent CLI configuration stored as JSON in the configuration directory."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nrcli.logsetup import DEFAULT_LOG_LEVEL, init_logger
from nrcli.ternary import Ternary

__all__ = [
    "ConfigError",
    "ConfigValue",
    "Config",
    "default_config_directory",
    "valid_config_keys",
    "load_config",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TYPE",
    "DEFAULT_ENV_PREFIX",
]

DEFAULT_CONFIG_NAME = "config"
DEFAULT_CONFIG_TYPE = "json"
DEFAULT_ENV_PREFIX = "NEW_RELIC_CLI"
GLOBAL_SCOPE = "*"

_LOG_LEVELS = ("Info", "Debug", "Trace", "Warn", "Error")

# Public key name paired with the attribute that holds it, in output order.
_FIELDS = (
    ("logLevel", "log_level"),
    ("pluginDir", "plugin_dir"),
    ("sendUsageData", "send_usage_data"),
    ("preReleaseFeatures", "pre_release_features"),
)
_TERNARY_ATTRS = frozenset({"send_usage_data", "pre_release_features"})

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when configuration cannot be read, validated or stored."""


@dataclass(frozen=True)
class ConfigValue:
    """One configuration field with its current and default values."""

    name: str
    value: Any
    default: Any

    def is_default(self) -> bool:
        """True when the value equals the default (strings compare without case)."""
        if isinstance(self.value, str):
            return isinstance(self.default, str) and (
                self.value.casefold() == self.default.casefold()
            )
        return self.value == self.default


def default_config_directory() -> str:
    """The directory that holds the CLI's configuration files."""
    return str(Path.home() / ".newrelic")


def valid_config_keys() -> list[str]:
    """The keys that may be set in the configuration."""
    return [name for name, _ in _FIELDS]


def _defaults() -> "Config":
    return Config(
        log_level=DEFAULT_LOG_LEVEL,
        plugin_dir=default_config_directory() + "/plugins",
        send_usage_data=Ternary.UNKNOWN,
        pre_release_features=Ternary.UNKNOWN,
    )


def _coerce(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (dict, list, tuple)):
        raise ConfigError(
            f"failed to unmarshal config with error: cannot use {value!r} as a string"
        )
    return str(value)


def _config_path(config_dir: str) -> Path:
    return Path(config_dir) / f"{DEFAULT_CONFIG_NAME}.{DEFAULT_CONFIG_TYPE}"


def _read_document(config_dir: str) -> dict[str, Any]:
    path = _config_path(config_dir)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("no config file found, using defaults")
        return {}
    except OSError as exc:
        log.debug("could not read config file %s: %s", path, exc)
        return {}

    try:
        document = json.loads(raw) if raw.strip() else {}
    except ValueError as exc:
        raise ConfigError(f"error parsing config file: {exc}") from exc

    if not isinstance(document, dict) or not all(
        isinstance(scope, dict) for scope in document.values()
    ):
        raise ConfigError(
            "failed to unmarshal config with error: scopes must be JSON objects"
        )
    return document


def _unmarshal(scope: dict[str, Any] | None) -> "Config | None":
    if scope is None:
        return None
    attrs = {name.lower(): attr for name, attr in _FIELDS}
    config = Config()
    for key, value in scope.items():
        attr = attrs.get(key.lower())
        if attr is None:
            continue
        text = _coerce(value)
        setattr(config, attr, Ternary(text) if attr in _TERNARY_ATTRS else text)
    return config


def _apply_defaults(config: "Config") -> None:
    log.debug("setting config default")
    defaults = _defaults()
    for _, attr in _FIELDS:
        if not getattr(config, attr):
            setattr(config, attr, getattr(defaults, attr))


def _apply_overrides(config: "Config") -> None:
    log.debug("setting config overrides")
    override = os.environ.get("NEW_RELIC_CLI_PRERELEASEFEATURES", "")
    if override:
        config.pre_release_features = Ternary(override)


def _render_table(values: list[ConfigValue]) -> str:
    rows = [("NAME", "VALUE", "DEFAULT")] + [
        (item.name, str(item.value), str(item.default)) for item in values
    ]
    widths = [max(len(cell) for cell in column) for column in zip(*rows)]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    )


@dataclass
class Config:
    """The main CLI configuration."""

    log_level: str = ""
    plugin_dir: str = ""
    send_usage_data: Ternary = Ternary("")
    pre_release_features: Ternary = Ternary("")
    config_dir: str = field(default="", repr=False, compare=False)

    def values(self, key: str | None = None) -> list[ConfigValue]:
        """All configuration values, or only the one named ``key``."""
        defaults = _defaults()
        return [
            ConfigValue(name, getattr(self, attr), getattr(defaults, attr))
            for name, attr in _FIELDS
            if not key or key == name
        ]

    def get(self, key: str) -> None:
        """Print the value named ``key`` as a table."""
        print(_render_table(self.values(key)))

    def list(self) -> None:
        """Print every configuration value as a table."""
        print(_render_table(self.values()))

    def set(self, key: str, value: Any) -> None:
        """Validate and store a configuration value."""
        keys = valid_config_keys()
        if key not in keys:
            raise ConfigError(
                f'"{key}" is not a valid key; Please use one of: [{" ".join(keys)}]'
            )
        self._store(key, value)
        print(f"{key} set to {value}")

    def delete(self, key: str) -> None:
        """Revert a configuration value to its default."""
        defaults = {item.name: item.default for item in self.values()}
        if key not in defaults:
            raise ConfigError(f"failed to locate default value for {key}")
        self._store(key, defaults[key])
        print(f"\u2714 {key} removed successfully")

    def _validate(self) -> None:
        for item in self.values():
            lowered = item.name.lower()
            if lowered == "loglevel":
                if not any(
                    item.value.casefold() == level.casefold() for level in _LOG_LEVELS
                ):
                    raise ConfigError(
                        f'"{item.value}" is not a valid {item.name} value; '
                        f'Please use one of: [{" ".join(_LOG_LEVELS)}]'
                    )
            elif lowered in ("sendusagedata", "prereleasefeatures"):
                try:
                    Ternary(item.value).validate()
                except ValueError as exc:
                    raise ConfigError(
                        f"invalid value for '{item.name}': {exc}"
                    ) from exc

    def _store(self, key: str, value: Any) -> None:
        document = _read_document(self.config_dir)
        scope = document.setdefault(GLOBAL_SCOPE, {})
        for existing in [name for name in scope if name.lower() == key.lower()]:
            del scope[existing]
        scope[key] = _coerce(value)

        updated = _unmarshal(document.get(GLOBAL_SCOPE))
        if updated is None:
            raise ConfigError("failed to locate global scope")
        _apply_defaults(updated)
        updated._validate()

        for _, attr in _FIELDS:
            setattr(self, attr, getattr(updated, attr))

        path = _config_path(self.config_dir)
        if not path.exists():
            scope.clear()
            scope.update({name: str(getattr(self, attr)) for name, attr in _FIELDS})
            Path(self.config_dir).mkdir(parents=True, exist_ok=True)
            log.debug("creating config file at %s: %s", path, document)
            path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        else:
            log.debug("writing config file at %s", path)
            try:
                path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            except OSError as exc:
                log.error("%s", exc)


def load_config(config_dir: str | None = None) -> Config:
    """Load the configuration from ``config_dir``, falling back to defaults."""
    log.debug("loading config file from %s", config_dir)
    if not config_dir:
        config_dir = default_config_directory()
    else:
        config_dir = os.path.expandvars(config_dir)

    document = _read_document(config_dir)
    config = _unmarshal(document.get(GLOBAL_SCOPE)) or Config()
    _apply_defaults(config)
    _apply_overrides(config)

    init_logger(config.log_level)
    config.config_dir = config_dir
    return config