"""Transition guards.

A guard is either the ``EPSILON`` sentinel, for transitions taken without
consuming input, or a ``Predicate`` wrapping an opaque matcher that the
transition store knows how to evaluate. Keeping the two cases explicit means
a missing predicate can never be mistaken for an epsilon edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from nfakit.exceptions import ValidationError


class Epsilon:
    """Guard of transitions taken without consuming input.

    Only one instance exists, ``EPSILON``; compare with ``is``.
    """

    _instance: Epsilon | None = None

    def __new__(cls) -> Epsilon:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EPSILON"

    def __reduce__(self) -> str:
        return "EPSILON"


EPSILON = Epsilon()


@dataclass(frozen=True)
class Predicate:
    """Guard wrapping a store-specific matcher.

    Attributes:
        value: The predicate as understood by the transition store, e.g. a
            symbol, a character range or a callable.
    """

    value: Any


Guard = Union[Epsilon, Predicate]


def as_guard(guard: Any) -> Guard:
    """Coerce a construction argument to a guard.

    ``EPSILON`` and ``Predicate`` instances pass through; any other value is
    wrapped as ``Predicate(value)``.

    Raises:
        ValidationError: If ``guard`` is None.
    """
    if guard is EPSILON or isinstance(guard, Predicate):
        return guard
    if guard is None:
        raise ValidationError("Guard cannot be None; use EPSILON for epsilon transitions")
    return Predicate(guard)
