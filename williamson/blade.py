# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Generators, basis blades and the sign/reduction rule.

The Williamson algebra is generated by four indices: ``0`` (time-like) and
``1``, ``2``, ``3`` (space-like). A basis blade is a signed product of
distinct generators, written ``a<indices>`` with ``ap`` for the scalar
"point" element.

Two rules reduce any product of generators to a single signed blade:

    a_mu a_nu = -a_nu a_mu      (mu != nu, adjacent swap negates)
    a_mu a_mu = metric[mu] ap   (repeated generators cancel)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from williamson.errors import ConfigurationError


class Index(enum.IntEnum):
    """The four generators of the algebra."""

    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3

    def __str__(self) -> str:
        return str(self.value)


# Canonical blade forms in zet order: B, T, A, E.
DEFAULT_ALLOWED = (
    "p", "23", "31", "12",
    "0", "023", "031", "012",
    "123", "1", "2", "3",
    "0123", "01", "02", "03",
)

# Square of each generator under the +--- metric.
DEFAULT_METRIC = (1, -1, -1, -1)

ZETS = ("B", "T", "A", "E")

POINT = "p"


def to_index(value) -> Index:
    """Coerce a generator identifier (``Index``, int or digit) to an ``Index``.

    Raises:
        ConfigurationError: If *value* does not name one of the generators.
    """
    if isinstance(value, Index):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Unknown generator: {value!r}")
    if isinstance(value, str) and len(value) == 1 and value.isdigit():
        value = int(value)
    if isinstance(value, int):
        try:
            return Index(value)
        except ValueError:
            pass
    raise ConfigurationError(f"Unknown generator: {value!r}")


def parse_indices(text: str) -> Tuple[int, Tuple[Index, ...]]:
    """Split a textual blade like ``"-a031"`` into ``(sign, indices)``.

    Accepts an optional leading sign, an optional ``a`` prefix and either
    ``p`` (the point) or a run of generator digits. The indices are
    returned as written; no canonicalisation happens here.
    """
    s = text.strip()
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s[:1] in ("a", "α"):
        s = s[1:]
    if s == POINT:
        return sign, ()
    if not s:
        raise ConfigurationError(f"Empty blade literal: {text!r}")
    return sign, tuple(to_index(c) for c in s)


def reduce_indices(indices: Iterable, metric: Sequence[int]) -> Tuple[int, Tuple[Index, ...]]:
    """Reduce a product of generators to ``(sign, sorted distinct indices)``.

    Bubble passes over the sequence: adjacent equal generators are removed
    and their square folded into the sign, adjacent generators that are out
    of order are swapped at the cost of a sign flip. Each step shortens the
    sequence or removes an inversion, so the loop reaches a fixed point.

    Args:
        indices: Generators in product order, repeats allowed.
        metric: Square of each generator, indexed by generator value.

    Returns:
        The accumulated sign (0 only for a null generator) and the
        remaining generators in ascending order.
    """
    seq = [to_index(i) for i in indices]
    sign = 1

    changed = True
    while changed:
        changed = False
        j = 0
        while j < len(seq) - 1:
            a, b = seq[j], seq[j + 1]
            if a == b:
                sign *= metric[a]
                del seq[j:j + 2]
                changed = True
                if sign == 0:
                    return 0, ()
            elif a > b:
                seq[j], seq[j + 1] = b, a
                sign = -sign
                changed = True
                j += 1
            else:
                j += 1

    return sign, tuple(seq)


def reorder(indices: Sequence[Index], target: Sequence[Index]) -> int:
    """Sign picked up permuting distinct *indices* into *target* order."""
    position = {ix: pos for pos, ix in enumerate(target)}
    perm = [position[ix] for ix in indices]
    inversions = 0
    for i in range(len(perm)):
        for j in range(i + 1, len(perm)):
            if perm[i] > perm[j]:
                inversions += 1
    return -1 if inversions % 2 else 1


@dataclass(frozen=True)
class Blade:
    """An immutable signed basis blade.

    Blades are plain values: equality and hashing compare ``indices`` and
    ``sign`` exactly as stored. Constructing a ``Blade`` directly performs
    no reduction, so ``Blade((1, 3))`` and ``-Blade((3, 1))`` are the same
    element but compare unequal. Only blades in canonical order compare
    by element; build them with :meth:`WilliamsonAlgebra.blade` or pass
    existing ones through :meth:`WilliamsonAlgebra.canonical_blade`.
    Multivectors canonicalise their keys on construction.

    Attributes:
        indices (Tuple[Index, ...]): Distinct generators, canonical order.
        sign (int): +1 or -1.
    """

    indices: Tuple[Index, ...] = ()
    sign: int = 1

    def __post_init__(self):
        ixs = tuple(to_index(i) for i in self.indices)
        if len(set(ixs)) != len(ixs):
            raise ConfigurationError(
                f"Repeated generator in blade {ixs}; reduce it through the algebra"
            )
        if self.sign not in (1, -1):
            raise ValueError(f"Blade sign must be +1 or -1, got {self.sign!r}")
        object.__setattr__(self, "indices", ixs)

    @classmethod
    def parse(cls, text: str) -> "Blade":
        """Parse ``"a31"``, ``"-023"`` or ``"p"`` without canonicalising."""
        sign, ixs = parse_indices(text)
        return cls(ixs, sign)

    @property
    def grade(self) -> int:
        return len(self.indices)

    @property
    def form(self) -> str:
        """Index string of this blade, ``"p"`` for the scalar."""
        if not self.indices:
            return POINT
        return "".join(str(i) for i in self.indices)

    @property
    def unsigned(self) -> "Blade":
        if self.sign == 1:
            return self
        return Blade(self.indices, 1)

    @property
    def subset(self) -> Tuple[Index, ...]:
        """Generators in ascending order; identifies the blade up to sign."""
        return tuple(sorted(self.indices))

    @property
    def zet(self) -> str:
        """Zet of this blade: B, T, A or E."""
        timelike = Index.ZERO in self.indices
        odd = self.grade % 2 == 1
        if timelike:
            return "T" if odd else "E"
        return "A" if odd else "B"

    def sort_key(self) -> Tuple[int, Tuple[Index, ...]]:
        """Canonical display order: grade, then generator subset."""
        return (self.grade, self.subset)

    def __neg__(self) -> "Blade":
        return Blade(self.indices, -self.sign)

    def __str__(self) -> str:
        prefix = "-" if self.sign < 0 else ""
        return f"{prefix}a{self.form}"

    def __repr__(self) -> str:
        return f"Blade({self})"

    def to_multivector(self, algebra):
        from williamson.multivector import Multivector
        return Multivector(algebra, {self.unsigned: self.sign})


def forms_to_blades(forms: Iterable[str]) -> Tuple[Blade, ...]:
    """Parse a collection of textual forms into unsigned blades."""
    return tuple(Blade.parse(f) for f in forms)
