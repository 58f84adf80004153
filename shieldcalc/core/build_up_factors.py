"""Build-up factor parameters — Archer-style exponential model.

B(x) = A · exp(α · x),  x = barrier thickness in half-value layers.

Parameters are held per material key (lowercase first word of the material
display name, e.g. "plasterboard") in a ``BuildupParameterStore``.  The store
is mutable and thread-safe; engine entry points take a ``snapshot()`` so one
calculation never sees parameters change half-way.

Persistence is left to the caller via ``to_dict`` / ``from_dict``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from shieldcalc.constants import (
    BUILDUP_FORMULA,
    DEFAULT_BUILDUP_A,
    DEFAULT_BUILDUP_ALPHA,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildupParameters:
    """Build-up fit parameters for one material.

    Attributes:
        A: Amplitude [dimensionless, ≥ 0].
        alpha: Exponential growth per HVL [dimensionless, ≥ 0].
    """
    A: float = DEFAULT_BUILDUP_A
    alpha: float = DEFAULT_BUILDUP_ALPHA


FALLBACK_BUILDUP_PARAMS = BuildupParameters(DEFAULT_BUILDUP_A, DEFAULT_BUILDUP_ALPHA)

# Empirical defaults per material key
DEFAULT_BUILDUP_PARAMS: Mapping[str, BuildupParameters] = MappingProxyType({
    "lead": BuildupParameters(A=1.0, alpha=0.1),
    "concrete": BuildupParameters(A=1.2, alpha=0.08),
    "steel": BuildupParameters(A=1.1, alpha=0.09),
    "plasterboard": BuildupParameters(A=1.3, alpha=0.07),
    "glass": BuildupParameters(A=1.2, alpha=0.08),
    "brick": BuildupParameters(A=1.2, alpha=0.08),
    "wood": BuildupParameters(A=1.3, alpha=0.06),
})

_PARAM_NAMES = ("A", "alpha")


def material_key(display_name: str) -> str:
    """Build-up key for a material display name.

    "Plasterboard (Gypsum)" → "plasterboard".
    """
    words = display_name.lower().split(" ")
    return words[0]


class BuildupProvider(Protocol):
    """Read-only view of build-up configuration used by the engine."""

    def get_buildup_params(self, material: str) -> BuildupParameters: ...

    def is_buildup_enabled(self) -> bool: ...


@dataclass(frozen=True)
class BuildupConfig:
    """Immutable build-up configuration (a store snapshot).

    Attributes:
        params: Parameters keyed by material key.
        enabled: Global build-up switch; False → B = 1 exactly.
    """
    params: Mapping[str, BuildupParameters] = field(
        default_factory=lambda: DEFAULT_BUILDUP_PARAMS,
    )
    enabled: bool = True

    def get_buildup_params(self, material: str) -> BuildupParameters:
        params = self.params.get(material)
        if params is None:
            logger.debug("Default build-up parameters for %s", material)
            return FALLBACK_BUILDUP_PARAMS
        return params

    def is_buildup_enabled(self) -> bool:
        return self.enabled

    def snapshot(self) -> BuildupConfig:
        return self


def snapshot_of(buildup: BuildupProvider) -> BuildupProvider:
    """Consistent view of *buildup* for the duration of one calculation."""
    snapshot = getattr(buildup, "snapshot", None)
    if callable(snapshot):
        return snapshot()
    return buildup


class BuildupParameterStore:
    """Mutable, thread-safe build-up parameter store.

    Args:
        params: Initial parameters per material key.  Defaults to
            ``DEFAULT_BUILDUP_PARAMS``.
        enabled: Initial state of the global build-up switch.
    """

    def __init__(
        self,
        params: Mapping[str, BuildupParameters] | None = None,
        enabled: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._params: dict[str, BuildupParameters] = dict(
            DEFAULT_BUILDUP_PARAMS if params is None else params
        )
        self._enabled = enabled
        self._formula = BUILDUP_FORMULA

    # ------------------------------------------------------------------
    # Read API (BuildupProvider)
    # ------------------------------------------------------------------

    def get_buildup_params(self, material: str) -> BuildupParameters:
        with self._lock:
            params = self._params.get(material)
        if params is None:
            logger.debug("Default build-up parameters for %s", material)
            return FALLBACK_BUILDUP_PARAMS
        return params

    def is_buildup_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def snapshot(self) -> BuildupConfig:
        """Frozen copy of the current parameters and switch."""
        with self._lock:
            return BuildupConfig(
                params=MappingProxyType(dict(self._params)),
                enabled=self._enabled,
            )

    @property
    def formula(self) -> str:
        return self._formula

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_param(self, material: str, param: str, value: float) -> None:
        """Update A or alpha for one material.

        Unknown materials start from the fallback pair.

        Raises:
            ValueError: If *param* is not "A"/"alpha" or *value* is negative.
        """
        if param not in _PARAM_NAMES:
            raise ValueError(f"Unknown build-up parameter: {param!r}")
        if value < 0:
            raise ValueError(f"Build-up parameter {param} must be >= 0, got {value}")
        with self._lock:
            current = self._params.get(material, FALLBACK_BUILDUP_PARAMS)
            if param == "A":
                self._params[material] = BuildupParameters(A=value, alpha=current.alpha)
            else:
                self._params[material] = BuildupParameters(A=current.A, alpha=value)

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = bool(enabled)

    def reset_to_defaults(self) -> None:
        """Restore the default parameter table and enable build-up."""
        with self._lock:
            self._params = dict(DEFAULT_BUILDUP_PARAMS)
            self._enabled = True
            self._formula = BUILDUP_FORMULA

    # ------------------------------------------------------------------
    # Caller-side persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation of the store."""
        with self._lock:
            return {
                "buildup_params": {
                    key: {"A": p.A, "alpha": p.alpha}
                    for key, p in self._params.items()
                },
                "use_buildup": self._enabled,
                "custom_formula": self._formula,
            }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BuildupParameterStore:
        """Rebuild a store from ``to_dict`` output.

        Malformed or negative material entries are skipped with a warning;
        a missing parameter table falls back to the defaults.
        """
        raw_params = data.get("buildup_params")
        params: dict[str, BuildupParameters] | None = None
        if isinstance(raw_params, Mapping):
            params = {}
            for key, entry in raw_params.items():
                try:
                    A = float(entry["A"])
                    alpha = float(entry["alpha"])
                    if A < 0 or alpha < 0:
                        raise ValueError(f"Negative build-up parameter for {key!r}")
                    params[key] = BuildupParameters(A=A, alpha=alpha)
                except (KeyError, TypeError, ValueError):
                    logger.warning("Skipping malformed build-up entry: %s", key)

        store = cls(params=params, enabled=bool(data.get("use_buildup", True)))
        formula = data.get("custom_formula")
        if isinstance(formula, str) and formula:
            store._formula = formula
        return store
