# src/pkg_jose/domain/value_objects.py

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import HeaderParameter

# JSON-typed claim value: string, number, boolean, null, array or object.
ClaimValue = Union[
    str, int, float, bool, None, List["ClaimValue"], Dict[str, "ClaimValue"]
]

Leeway = Union[int, float, timedelta]
Timestamp = Union[int, float, datetime]

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


# --- Time helpers ---------------------------------------------------------


def coerce_timestamp(value: Any) -> Optional[float]:
    """
    Interpret a claim value as seconds since the epoch.

    Accepts native numbers and decimal numeric strings. Returns None for
    anything else (booleans, non-finite numbers, integers too large for a
    float, other types).
    """
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)) and not (
        isinstance(value, str) and _DECIMAL.fullmatch(value)
    ):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def leeway_seconds(leeway: Leeway) -> float:
    if isinstance(leeway, timedelta):
        return leeway.total_seconds()
    return float(leeway)


def to_epoch(value: Timestamp) -> int | float:
    """Turn a datetime (naive means UTC) or number into an epoch claim value."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return value


def from_epoch(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


# --- Header ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JOSEHeader:
    """
    Header parameters of a token, exactly as parsed from the first segment.

    Construction is pass-through: nothing is normalized or dropped.
    """
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "parameters", MappingProxyType(dict(self.parameters))
        )

    @property
    def algorithm(self) -> Optional[str]:
        alg = self.parameters.get(HeaderParameter.ALGORITHM.value)
        return alg if isinstance(alg, str) else None

    @property
    def type(self) -> Optional[str]:
        typ = self.parameters.get(HeaderParameter.TYPE.value)
        return typ if isinstance(typ, str) else None

    @property
    def key_id(self) -> Optional[str]:
        kid = self.parameters.get(HeaderParameter.KEY_ID.value)
        return kid if isinstance(kid, str) else None

    def get(self, key: str, default: Any = None) -> Any:
        return self.parameters.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.parameters[key]

    def __contains__(self, key: object) -> bool:
        return key in self.parameters

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.parameters)
