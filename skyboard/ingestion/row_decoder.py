"""
Heterogeneous row decoder for positional feed records.

OpenSky returns each aircraft as a JSON array without field names. Each
element is a string, a number, a boolean or null, and any position may be
missing or hold an unexpected kind. This module turns such an array into a
RawRow of tagged values with bounds-checked accessors:

    row = RawRow.from_array(['abc123', 'PS101 ', None, 30.45])
    row.string_at(0)   # 'abc123'
    row.double_at(3)   # 30.45
    row.double_at(99)  # None - out of range is "no value", never an error
    row.bool_at(0)     # None - kind mismatch is "no value"

Coercions kept on purpose:
- double_at() parses a STRING holding a number ('12.5' -> 12.5)
- double_at() treats NaN and infinities, numeric or string, as absent
- int_at() truncates whatever double_at() returns (12.9 -> 12, '-3.7' -> -3)
- bool_at() never coerces

Elements of any other shape (nested arrays, objects) make the whole row
undecodable; callers drop that row and keep going.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple


class RowDecodeError(ValueError):
    """A feed row (or one of its elements) has an unsupported shape."""


class ValueKind(str, Enum):
    """Tag of a decoded feed element."""
    STRING = 'string'
    NUMBER = 'number'
    BOOL = 'bool'
    NULL = 'null'


@dataclass(frozen=True)
class FeedValue:
    """One tagged element of a RawRow."""
    kind: ValueKind
    value: Any = None

    @classmethod
    def classify(cls, raw: Any) -> 'FeedValue':
        """
        Classify a JSON-decoded element.

        bool is checked before numbers because bool is an int subclass.

        Raises:
            RowDecodeError: for lists, dicts and any other shape
        """
        if raw is None:
            return NULL_VALUE
        if isinstance(raw, bool):
            return cls(ValueKind.BOOL, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, float(raw))
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        raise RowDecodeError(f'Unsupported feed element type: {type(raw).__name__}')

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL


NULL_VALUE = FeedValue(ValueKind.NULL)


@dataclass(frozen=True)
class RawRow:
    """
    Ordered, fixed-position sequence of tagged feed values.

    Position defines meaning (0 = identifier, 5 = longitude, 6 = latitude
    for the OpenSky feed). All accessors return None instead of raising.
    """
    values: Tuple[FeedValue, ...]

    @classmethod
    def from_array(cls, arr: Any) -> 'RawRow':
        """
        Decode one JSON array into a RawRow.

        Raises:
            RowDecodeError: if arr is not a list/tuple or holds an
                unsupported element
        """
        if not isinstance(arr, (list, tuple)):
            raise RowDecodeError(f'Feed row is not an array: {type(arr).__name__}')
        return cls(tuple(FeedValue.classify(item) for item in arr))

    def __len__(self) -> int:
        return len(self.values)

    def value_at(self, index: int) -> FeedValue:
        """Tagged value at index; NULL when out of range."""
        if index < 0 or index >= len(self.values):
            return NULL_VALUE
        return self.values[index]

    def string_at(self, index: int) -> Optional[str]:
        item = self.value_at(index)
        if item.kind is ValueKind.STRING:
            return item.value
        return None

    def double_at(self, index: int) -> Optional[float]:
        """Finite number at index; NaN and infinities are absent."""
        item = self.value_at(index)
        if item.kind is ValueKind.NUMBER:
            number = item.value
        elif item.kind is ValueKind.STRING:
            try:
                number = float(item.value)
            except ValueError:
                return None
        else:
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return number

    def bool_at(self, index: int) -> Optional[bool]:
        item = self.value_at(index)
        if item.kind is ValueKind.BOOL:
            return item.value
        return None

    def int_at(self, index: int) -> Optional[int]:
        number = self.double_at(index)
        if number is None:
            return None
        return int(number)


def decode_rows(rows: Sequence[Any]) -> Tuple[List[RawRow], int]:
    """
    Decode a list of feed rows, skipping the undecodable ones.

    Returns:
        Tuple of (decoded rows in input order, count of dropped rows)
    """
    decoded = []
    dropped = 0
    for arr in rows:
        try:
            decoded.append(RawRow.from_array(arr))
        except RowDecodeError:
            dropped += 1
    return decoded, dropped
