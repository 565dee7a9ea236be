"""
Keyspace Configuration Management
==================================

Centralised configuration using dataclasses and TOML-based persistence.

A configuration file has two optional tables::

    [global]
    log_level = "DEBUG"
    log_file = "keyspace.log"
    log_json = true
    max_workers = 8
    output_format = "json"

    [analyzer]
    guesses_per_second = 1e10
    pools = ["lowercase", "numbers"]
    custom_pool = "äöü"

Missing keys fall back to the dataclass defaults and unknown keys are
ignored. ``KEYSPACE_LOG_LEVEL`` and ``KEYSPACE_GUESSES_PER_SECOND``
override the corresponding values after the file is read.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import math
import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from keyspace.core.models import BUILTIN_POOLS, CharacterPool

_ENV_LOG_LEVEL = "KEYSPACE_LOG_LEVEL"
_ENV_GUESSES_PER_SECOND = "KEYSPACE_GUESSES_PER_SECOND"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_OUTPUT_FORMATS = ("console", "json")


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong type or range."""


# ========================== Sections =======================================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging, output and concurrency settings."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    max_workers: int = 4
    output_format: str = "console"

    def validate(self) -> None:
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(
                f"global.log_level must be one of {', '.join(_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigError(f"global.log_file must be a path, got {self.log_file!r}")
        if not isinstance(self.log_json, bool):
            raise ConfigError(f"global.log_json must be true or false, got {self.log_json!r}")
        if (
            isinstance(self.max_workers, bool)
            or not isinstance(self.max_workers, int)
            or self.max_workers < 1
        ):
            raise ConfigError(
                f"global.max_workers must be a positive integer, got {self.max_workers!r}"
            )
        if self.output_format not in _OUTPUT_FORMATS:
            raise ConfigError(
                f"global.output_format must be one of {', '.join(_OUTPUT_FORMATS)}, "
                f"got {self.output_format!r}"
            )


@dataclass(frozen=False, slots=True)
class AnalyzerConfig:
    """Character pools and attacker model for the passphrase analyzer.

    Attributes:
        guesses_per_second: Attack speed used for crack time estimates.
        pools: Names of the built-in pools to allow.
        custom_pool: Extra characters forming one custom pool (ignored
            when empty).
    """

    guesses_per_second: float = 100_000_000_000.0
    pools: list[str] = field(
        default_factory=lambda: [pool.kind.value for pool in BUILTIN_POOLS]
    )
    custom_pool: str = ""

    def validate(self) -> None:
        rate = self.guesses_per_second
        if (
            isinstance(rate, bool)
            or not isinstance(rate, (int, float))
            or not math.isfinite(rate)
            or rate <= 0
        ):
            raise ConfigError(
                f"analyzer.guesses_per_second must be a positive number, got {rate!r}"
            )
        if not isinstance(self.pools, list) or not all(
            isinstance(name, str) for name in self.pools
        ):
            raise ConfigError("analyzer.pools must be a list of pool names")
        if not isinstance(self.custom_pool, str):
            raise ConfigError("analyzer.custom_pool must be a string")

    def build_pools(self) -> list[CharacterPool]:
        """Resolve the configured pool names (and custom pool) to pools.

        Raises:
            ConfigError: If a pool name is unknown.
        """
        try:
            pools = [CharacterPool.from_name(name) for name in self.pools]
        except ValueError as exc:
            raise ConfigError(f"analyzer.pools: {exc}") from exc
        if self.custom_pool:
            pools.append(CharacterPool.custom(self.custom_pool))
        return pools


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class KeyspaceConfig:
    """Master configuration aggregating all sections.

    Usage:
        >>> config = KeyspaceConfig.load("keyspace.toml")
        >>> config.analyzer.guesses_per_second
        10000000000.0
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)

    # ------------------------------------------------------------------ #
    #  Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> KeyspaceConfig:
        """Load configuration from a TOML file and the environment.

        Args:
            path: TOML configuration file. ``None`` uses defaults only.
            environ: Environment mapping (defaults to :data:`os.environ`).

        Returns:
            A validated :class:`KeyspaceConfig`.

        Raises:
            FileNotFoundError: If *path* is given but does not exist.
            ConfigError: If a value is invalid.
        """
        raw: dict[str, Any] = {}
        if path is not None:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            with open(config_path, "rb") as fh:
                try:
                    raw = tomllib.load(fh)
                except tomllib.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

        config = cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            analyzer=cls._build_section(AnalyzerConfig, raw.get("analyzer", {})),
        )
        config._apply_env(os.environ if environ is None else environ)
        config.validate()
        return config

    def validate(self) -> None:
        self.global_settings.validate()
        self.analyzer.validate()

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _apply_env(self, environ: Mapping[str, str]) -> None:
        level = environ.get(_ENV_LOG_LEVEL)
        if level:
            self.global_settings.log_level = level.upper()
        rate = environ.get(_ENV_GUESSES_PER_SECOND)
        if rate:
            try:
                self.analyzer.guesses_per_second = float(rate)
            except ValueError as exc:
                raise ConfigError(
                    f"{_ENV_GUESSES_PER_SECOND} must be a number, got {rate!r}"
                ) from exc

    @staticmethod
    def _build_section(cls: type, data: Any) -> Any:
        """Instantiate dataclass *cls* from the keys it declares.

        Unknown keys are ignored so that newer config files keep working.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Section for {cls.__name__} must be a table")
        valid_keys = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in valid_keys})
