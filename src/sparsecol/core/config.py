"""
sparsecol Config - Runtime Configuration

Provides global configuration with thread-local overrides for the sparse
storage engine. Knobs are grouped into small dataclasses so they can be
swapped as a unit, either globally or inside a ``local()`` block.

Example:
    # Global configuration
    sparsecol.config.validation = ValidationConfig(check_invariants=True)

    # Local configuration (context manager)
    with sparsecol.config.local(numeric=NumericConfig(default_dtype="object")):
        storage = CompressedColumn(3, 3)   # OBJECT kind here
    # Back to global config
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger("sparsecol.config")

_ENV_CHECK_INVARIANTS = "SPARSECOL_CHECK_INVARIANTS"


def _env_flag(name: str) -> bool:
    """Read a boolean flag from the environment (default: False)."""
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ValidationConfig:
    """Configuration for invariant checking.

    Attributes:
        check_invariants: Validate adopted raw buffers (column range, row
            order, row bounds) when a storage takes ownership of them.
    """
    check_invariants: bool = False


@dataclass
class NumericConfig:
    """Configuration for numeric kinds.

    Attributes:
        default_dtype: Kind used when none is supplied or inferable.
    """
    default_dtype: str = "float64"


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SparseConfig:
    """
    Global configuration manager for sparsecol.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.
    """

    _SECTIONS = ("validation", "numeric")

    def __init__(self):
        self._global_validation = ValidationConfig(
            check_invariants=_env_flag(_ENV_CHECK_INVARIANTS)
        )
        self._global_numeric = NumericConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

        self._callbacks: Dict[str, List[Callable]] = {
            name: [] for name in self._SECTIONS
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def validation(self) -> ValidationConfig:
        """Get validation configuration."""
        local = getattr(self._local, "validation", None)
        return local if local is not None else self._global_validation

    @validation.setter
    def validation(self, value: ValidationConfig):
        """Set global validation configuration."""
        self._global_validation = value
        self._notify("validation", value)

    @property
    def numeric(self) -> NumericConfig:
        """Get numeric configuration."""
        local = getattr(self._local, "numeric", None)
        return local if local is not None else self._global_numeric

    @numeric.setter
    def numeric(self, value: NumericConfig):
        """Set global numeric configuration."""
        self._global_numeric = value
        self._notify("numeric", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def check_invariants(self) -> bool:
        """Whether adopted buffers are validated."""
        return self.validation.check_invariants

    @check_invariants.setter
    def check_invariants(self, value: bool):
        self.validation = ValidationConfig(check_invariants=bool(value))

    @property
    def default_dtype(self) -> str:
        """Kind used when no dtype is given."""
        return self.numeric.default_dtype

    @default_dtype.setter
    def default_dtype(self, value: str):
        self.numeric = NumericConfig(default_dtype=value)

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (validation, numeric)

        Returns:
            Context manager

        Raises:
            KeyError: If an override names an unknown section.
        """
        for key in kwargs:
            if key not in self._SECTIONS:
                raise KeyError(f"Unknown configuration section: {key!r}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        """Set thread-local configuration, returning the previous overrides."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Restore thread-local overrides saved by _set_local."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for global configuration changes.

        Args:
            config_name: Name of config ("validation" or "numeric")
            callback: Function called with the new section value
        """
        if config_name not in self._callbacks:
            raise KeyError(f"Unknown configuration section: {config_name!r}")
        self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        for callback in self._callbacks.get(config_name, []):
            try:
                callback(value)
            except Exception:
                logger.warning(
                    f"Config callback {callback!r} failed for section {config_name!r}",
                    exc_info=True,
                )

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_validation = ValidationConfig(
            check_invariants=_env_flag(_ENV_CHECK_INVARIANTS)
        )
        self._global_numeric = NumericConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "validation": asdict(self.validation),
            "numeric": asdict(self.numeric),
        }

    def __repr__(self) -> str:
        return f"SparseConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SparseConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Dict[str, Any] = {}

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = SparseConfig()


def get_config() -> SparseConfig:
    """Get the global configuration instance."""
    return config


__all__ = [
    "ValidationConfig",
    "NumericConfig",
    "SparseConfig",
    "config",
    "get_config",
]
