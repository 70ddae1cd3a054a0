"""Transition store matching characters against inclusive ranges.

This is the representation a regular-expression compiler typically needs:
character classes like ``[a-z0-9]`` become one edge per range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from nfakit.exceptions import ValidationError
from nfakit.state import State
from nfakit.stores.base import ITransitionStore


@dataclass(frozen=True)
class CharRange:
    """Inclusive range of ordered values, usually single characters.

    Attributes:
        low: Smallest matching value.
        high: Largest matching value.
    """

    low: Any
    high: Any

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise ValueError(f"Empty range: {self.low!r}-{self.high!r}")

    def __contains__(self, value: Any) -> bool:
        try:
            return self.low <= value <= self.high
        except TypeError:
            return False

    def __str__(self) -> str:
        if self.low == self.high:
            return str(self.low)
        return f"{self.low}-{self.high}"

    @classmethod
    def single(cls, value: Any) -> CharRange:
        return cls(value, value)


class RangeTransitionStore(ITransitionStore):
    """Store whose predicates are ``CharRange`` instances.

    Lookups scan the ranges in insertion order; a value matches every range
    that contains it, so overlapping ranges fan out to several destinations.
    """

    kind = "range"

    def __init__(self) -> None:
        super().__init__()
        self._ranges: List[Tuple[CharRange, State]] = []

    def _index(self, predicate: Any, target: State) -> None:
        self._ranges.append((predicate, target))

    @classmethod
    def coerce_predicate(cls, predicate: Any) -> CharRange:
        return cls.parse_predicate(predicate)

    def _lookup(self, value: Any) -> Iterable[State]:
        return tuple(target for char_range, target in self._ranges if value in char_range)

    @classmethod
    def parse_predicate(cls, raw: Any) -> CharRange:
        """Convert ``"a"``, ``"a-z"`` or ``["a", "z"]`` to a ``CharRange``.

        Raises:
            ValidationError: If ``raw`` has none of the accepted forms.
        """
        if isinstance(raw, CharRange):
            return raw
        try:
            if isinstance(raw, str):
                if len(raw) == 1:
                    return CharRange.single(raw)
                if len(raw) == 3 and raw[1] == "-":
                    return CharRange(raw[0], raw[2])
            elif isinstance(raw, (list, tuple)) and len(raw) == 2:
                return CharRange(raw[0], raw[1])
        except (TypeError, ValueError) as e:
            raise ValidationError(str(e), context={"predicate": raw}) from e
        raise ValidationError(
            f"Invalid range predicate: {raw!r}",
            context={"predicate": raw, "accepted": ["a", "a-z", ["a", "z"]]},
        )

    @classmethod
    def dump_predicate(cls, predicate: CharRange) -> Any:
        """Inverse of ``parse_predicate``.

        Only a single one-character string is written as a bare scalar; every
        other range is written as ``[low, high]``.
        """
        is_char = isinstance(predicate.low, str) and len(predicate.low) == 1
        if is_char and predicate.low == predicate.high:
            return predicate.low
        return [predicate.low, predicate.high]
