"""
Static configuration management for Notifier.

Purpose
-------
Provides centralized static configuration loaded from environment variables
with sensible defaults and type validation. Values are read once on import
and can be reloaded explicitly.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to logging and notifier defaults
- Fall back to defaults (with a warning) on invalid values
- Track which values came from the environment versus defaults

Non-Responsibilities
--------------------
- Per-instance settings (passed to Notifier directly, which take precedence)
- Logging setup (handled by notifier.logging)

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Auto-loads on module import via Config.load()
- Invalid values never raise; they are logged and recorded in load metrics

Environment Variables
---------------------
- ENVIRONMENT: Environment type (default: development)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Force JSON log output (default: unset, JSON in production)
- LOG_COLORS: Colored console output on a TTY (default: True)
- NOTIFIER_ERROR_POLICY: "raise" or "collect" (default: raise)
- NOTIFIER_ENABLE_METRICS: Collect notifier metrics (default: True)

Dependencies
------------
- python-dotenv: Environment variable loading
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            logging.warning(
                f"Unknown environment '{value}', defaulting to development"
            )
            return cls.DEVELOPMENT


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_ERROR_POLICIES = ("raise", "collect")


# ============================================================================
# Configuration Metrics Tracker
# ============================================================================


class _ConfigLoadMetrics:
    """
    Internal metrics tracker for configuration loading.

    Tracks which configuration values came from environment variables
    versus defaults, and any validation errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, value: Any, default: Any):
        """Record whether a config value came from environment."""
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default
        else:
            self.defaults_used.pop(key, None)

    def record_validation_error(self, key: str, error: str):
        """Record a validation error."""
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration loading summary."""
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for Notifier.

    Usage
    -----
    >>> Config.NOTIFIER_ERROR_POLICY
    'raise'
    >>> Config.is_production()
    False
    """

    # =========================================================================
    # Internal State
    # =========================================================================

    _metrics: Optional[_ConfigLoadMetrics] = None

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True

    # =========================================================================
    # Notifier Defaults
    # =========================================================================

    NOTIFIER_ERROR_POLICY: str = "raise"
    NOTIFIER_ENABLE_METRICS: bool = True

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        if cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _invalid(cls, key: str, error: str) -> None:
        logging.warning(error)
        if cls._metrics:
            cls._metrics.record_validation_error(key, error)

    @classmethod
    def _safe_bool(cls, key: str, default: bool) -> bool:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).

        Example
        -------
        >>> Config._safe_bool("LOG_COLORS", True)
        True
        """
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            cls._metrics.record_env_load(key, False, default, default)
            return default

        normalized = raw_value.lower().strip()
        true_values = {"true", "yes", "1", "on"}
        false_values = {"false", "no", "0", "off"}

        if normalized in true_values:
            value = True
        elif normalized in false_values:
            value = False
        else:
            cls._invalid(
                key, f"{key}='{raw_value}' is not a valid boolean, using default {default}"
            )
            return default

        cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_optional_bool(cls, key: str) -> Optional[bool]:
        """Parse an optional boolean; unset or invalid yields None."""
        if os.getenv(key) is None:
            cls._init_metrics()
            cls._metrics.record_env_load(key, False, None, None)
            return None
        return cls._safe_bool(key, None)  # type: ignore[arg-type]

    @classmethod
    def _safe_choice(cls, key: str, default: str, choices: tuple) -> str:
        """
        Safely read a string restricted to a set of choices (case-insensitive).

        Example
        -------
        >>> Config._safe_choice("LOG_LEVEL", "INFO", VALID_LOG_LEVELS)
        'INFO'
        """
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            cls._metrics.record_env_load(key, False, default, default)
            return default

        lowered = {choice.lower(): choice for choice in choices}
        value = lowered.get(raw_value.strip().lower())
        if value is None:
            cls._invalid(
                key,
                f"{key}='{raw_value}' is not one of {list(choices)}, using default {default}",
            )
            return default

        cls._metrics.record_env_load(key, True, value, default)
        return value

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        cls._init_metrics()

        value = os.getenv(key, default)
        cls._metrics.record_env_load(key, key in os.environ, value, default)
        return value

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables.

        Called automatically on module import; call again after changing the
        environment to pick up new values.
        """
        cls._init_metrics()

        cls.ENVIRONMENT = Environment.from_string(
            cls._safe_str("ENVIRONMENT", "development")
        ).value

        cls.LOG_LEVEL = cls._safe_choice("LOG_LEVEL", "INFO", VALID_LOG_LEVELS)
        cls.LOG_JSON = cls._safe_optional_bool("LOG_JSON")
        cls.LOG_COLORS = cls._safe_bool("LOG_COLORS", True)

        cls.NOTIFIER_ERROR_POLICY = cls._safe_choice(
            "NOTIFIER_ERROR_POLICY", "raise", VALID_ERROR_POLICIES
        )
        cls.NOTIFIER_ENABLE_METRICS = cls._safe_bool("NOTIFIER_ENABLE_METRICS", True)

        cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    @classmethod
    def reset(cls) -> None:
        """Discard load metrics and reload from the current environment."""
        cls._metrics = None
        cls.load()

    # =========================================================================
    # Environment Check
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    # =========================================================================
    # Load Metrics
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics


Config.load()
