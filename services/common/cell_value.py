"""
Cell Value - Tagged representation of a raw CSV cell

The CSV collaborator hands us loosely typed cells (text, numbers, booleans,
dates or nothing at all). Transforms match on the kind instead of sniffing
Python types themselves.
"""

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class CellKind(str, Enum):
    """Kinds of raw cell value"""
    ABSENT = 'absent'
    TEXT = 'text'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    DATE = 'date'


@dataclass(frozen=True)
class CellValue:
    """A raw cell paired with its kind

    ``raw`` is always the value exactly as received so that fields without a
    transform can pass it through untouched.
    """

    kind: CellKind
    raw: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> 'CellValue':
        """Classify any raw value. Never raises."""
        if isinstance(raw, CellValue):
            return raw
        if raw is None:
            return cls(CellKind.ABSENT, None)
        # bool before int: bool is an int subclass
        if isinstance(raw, bool):
            return cls(CellKind.BOOLEAN, raw)
        if isinstance(raw, (int, float, Decimal)):
            if isinstance(raw, float) and math.isnan(raw):
                return cls(CellKind.ABSENT, raw)
            return cls(CellKind.NUMBER, raw)
        if isinstance(raw, date):
            return cls(CellKind.DATE, raw)
        return cls(CellKind.TEXT, raw)

    @property
    def is_blank(self) -> bool:
        """True for missing cells and empty strings"""
        if self.kind is CellKind.ABSENT:
            return True
        return self.kind is CellKind.TEXT and self.text == ''

    @property
    def text(self) -> str:
        """String form of the raw value ('' when absent)"""
        if self.kind is CellKind.ABSENT:
            return ''
        if isinstance(self.raw, str):
            return self.raw
        try:
            return str(self.raw)
        except Exception:
            return ''
