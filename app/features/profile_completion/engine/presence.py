"""
Field presence rules shared by every section evaluator.
"""

import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from ..domain.models import is_nan


@dataclass(slots=True, frozen=True)
class FillStats:
    filled: int
    total: int
    ratio: float


def is_filled(value: Any) -> bool:
    """
    Decide whether a single profile value counts as filled.

    A stored ``False`` is treated like a missing value, ``0`` is filled, any
    date is filled, and empty strings/containers are not.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, bool):
        return value is True
    if isinstance(value, numbers.Number):
        return not is_nan(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    if isinstance(value, date):
        return True
    if isinstance(value, Mapping):
        return len(value) > 0
    return False


def count_filled(values: Iterable[Any]) -> FillStats:
    values = list(values)
    total = len(values)
    if total == 0:
        return FillStats(filled=0, total=0, ratio=0.0)
    filled = sum(1 for value in values if is_filled(value))
    return FillStats(filled=filled, total=total, ratio=filled / total)
