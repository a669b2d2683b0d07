"""
Configuration management for pycurves.

This module provides:
- CurvesConfig: Typed configuration dataclass
- ConfigManager: Central configuration management with environment support
- create_default_config: Factory function for the default configuration
- load_config: Load configuration from YAML files

The configuration only supplies defaults. Safe mode in particular is read
once when a curve or linear variable is constructed and stored on the
instance; changing the configuration afterwards does not affect existing
objects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pycurves.exceptions import ConfigNotFoundError, ConfigValidationError
from pycurves.logging import get_logger

logger = get_logger("config")

# Eigen::NumTraits<double>::dummy_precision()
DEFAULT_PRECISION = 1e-12
DEFAULT_SAMPLING_STEP = 0.01
DEFAULT_MAX_DERIVATIVE_ORDER = 5

TRUE_STRINGS = ("true", "yes", "on", "1")
FALSE_STRINGS = ("false", "no", "off", "0")


def _to_bool(value: Any) -> Any:
    """Map 0/1 and the accepted spellings to booleans; anything else is left to validate()."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        if value.lower() in TRUE_STRINGS:
            return True
        if value.lower() in FALSE_STRINGS:
            return False
    return value


def _to_number(key: str, value: Any, kind: type) -> Any:
    """Coerce a numeric setting.

    YAML 1.1 reads exponents without a dot (``1e-9``) as strings.
    """
    if isinstance(value, bool):
        raise ConfigValidationError(key, "must be a number, not a boolean", value)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(key, f"must be {kind.__name__}", value) from e
    if kind is int:
        if not number.is_integer():
            raise ConfigValidationError(key, "must be an integer", value)
        return int(number)
    return number


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class PolynomialConfig:
    """Polynomial curve defaults."""

    safe: bool = False

    def validate(self) -> None:
        if not isinstance(self.safe, bool):
            raise ConfigValidationError("polynomial.safe", "must be a boolean", self.safe)


@dataclass
class LinearVariableConfig:
    """Linear variable defaults."""

    safe: bool = True

    def validate(self) -> None:
        if not isinstance(self.safe, bool):
            raise ConfigValidationError("linear_variable.safe", "must be a boolean", self.safe)


@dataclass
class ComparisonConfig:
    """Approximate equality defaults."""

    precision: float = DEFAULT_PRECISION
    sampling_step: float = DEFAULT_SAMPLING_STEP
    max_derivative_order: int = DEFAULT_MAX_DERIVATIVE_ORDER

    def validate(self) -> None:
        """Validate comparison configuration."""
        if self.precision <= 0:
            raise ConfigValidationError("comparison.precision", "must be > 0", self.precision)
        if self.sampling_step <= 0:
            raise ConfigValidationError(
                "comparison.sampling_step", "must be > 0", self.sampling_step
            )
        if self.max_derivative_order < 0:
            raise ConfigValidationError(
                "comparison.max_derivative_order", "must be >= 0", self.max_derivative_order
            )


@dataclass
class CurvesConfig:
    """Complete pycurves configuration."""

    polynomial: PolynomialConfig = field(default_factory=PolynomialConfig)
    linear_variable: LinearVariableConfig = field(default_factory=LinearVariableConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)

    def validate(self) -> None:
        """Validate all configuration settings."""
        self.polynomial.validate()
        self.linear_variable.validate()
        self.comparison.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "polynomial": {
                "safe": self.polynomial.safe,
            },
            "linear_variable": {
                "safe": self.linear_variable.safe,
            },
            "comparison": {
                "precision": self.comparison.precision,
                "sampling_step": self.comparison.sampling_step,
                "max_derivative_order": self.comparison.max_derivative_order,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CurvesConfig":
        """Create CurvesConfig from dictionary, missing keys take defaults."""
        polynomial_data = data.get("polynomial", {})
        linear_data = data.get("linear_variable", {})
        comparison_data = data.get("comparison", {})

        return cls(
            polynomial=PolynomialConfig(
                safe=_to_bool(polynomial_data.get("safe", False)),
            ),
            linear_variable=LinearVariableConfig(
                safe=_to_bool(linear_data.get("safe", True)),
            ),
            comparison=ComparisonConfig(
                precision=_to_number(
                    "comparison.precision",
                    comparison_data.get("precision", DEFAULT_PRECISION),
                    float,
                ),
                sampling_step=_to_number(
                    "comparison.sampling_step",
                    comparison_data.get("sampling_step", DEFAULT_SAMPLING_STEP),
                    float,
                ),
                max_derivative_order=_to_number(
                    "comparison.max_derivative_order",
                    comparison_data.get("max_derivative_order", DEFAULT_MAX_DERIVATIVE_ORDER),
                    int,
                ),
            ),
        )


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Central configuration management with environment variable support.

    Environment variables take precedence over config files.
    Config files take precedence over defaults.

    Environment variable format: PYCURVES_<SECTION>_<KEY>
    Example: PYCURVES_POLYNOMIAL_SAFE=true, PYCURVES_COMPARISON_SAMPLING_STEP=0.05
    """

    ENV_PREFIX = "PYCURVES"
    # PYCURVES_LOG_* is owned by pycurves.logging
    IGNORED_ENV_SECTIONS = ("log",)

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to YAML configuration file.
        """
        self._config: Optional[CurvesConfig] = None
        self._config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}

    def load(self, validate: bool = True) -> CurvesConfig:
        """Load and return configuration.

        Args:
            validate: Whether to validate configuration after loading.

        Returns:
            Loaded CurvesConfig instance.
        """
        self._raw_config = create_default_config()

        if self._config_path:
            self._load_from_file(self._config_path)

        self._load_from_env()

        self._config = CurvesConfig.from_dict(self._raw_config)

        if validate:
            self._config.validate()

        logger.debug("Loaded configuration: %s", self._raw_config)
        return self._config

    def _load_from_file(self, path: Path) -> None:
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        with open(path, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config:
            self._deep_update(self._raw_config, file_config)

    def _load_from_env(self) -> None:
        for key, value in os.environ.items():
            if key.startswith(f"{self.ENV_PREFIX}_"):
                config_key = key[len(self.ENV_PREFIX) + 1 :].lower()
                self._set_nested_value(config_key, value)

    def _set_nested_value(self, key: str, value: str) -> None:
        """Set a section value from an environment variable.

        Section names may themselves contain underscores (``linear_variable``),
        so the longest known section prefix wins and the rest is the key.
        """
        for section in sorted(self._raw_config, key=len, reverse=True):
            prefix = f"{section}_"
            if key.startswith(prefix) and isinstance(self._raw_config[section], dict):
                self._raw_config[section][key[len(prefix) :]] = self._parse_value(value)
                return

        section = key.split("_", 1)[0]
        if section not in self.IGNORED_ENV_SECTIONS:
            logger.debug("Ignoring unknown configuration variable %s_%s", self.ENV_PREFIX, key.upper())

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _deep_update(base: dict, update: dict) -> dict:
        """Deep merge update into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_update(base[key], value)
            else:
                base[key] = value
        return base

    @property
    def config(self) -> CurvesConfig:
        """Get current configuration (loads if not already loaded)."""
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key path.

        Args:
            key: Dotted key path (e.g., "comparison.precision").
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        parts = key.split(".")
        value = self._raw_config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Create the default configuration dictionary."""
    return CurvesConfig().to_dict()


def load_config(path: Union[str, Path], validate: bool = True) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.
        validate: Whether to validate configuration.

    Returns:
        Configuration dictionary.
    """
    manager = ConfigManager(path)
    config = manager.load(validate=validate)
    return config.to_dict()


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize global configuration from file.

    Args:
        path: Optional path to configuration file.

    Returns:
        Initialized ConfigManager instance.
    """
    global _global_config
    _global_config = ConfigManager(path)
    _global_config.load()
    return _global_config


def reset_config() -> None:
    """Drop the global configuration; the next get_config() reloads defaults."""
    global _global_config
    _global_config = None


def default_safe(kind: str) -> bool:
    """Configured default safe mode for ``"polynomial"`` or ``"linear_variable"``."""
    return getattr(get_config().config, kind).safe


def default_precision() -> float:
    return get_config().config.comparison.precision
