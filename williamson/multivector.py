# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Multivector Container Class.

Sparse, immutable mapping from basis blade to exact coefficient, with
operator overloading (e.g., A * B for geometric product) on top of the
kernel in :mod:`williamson.algebra`.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Iterator, Protocol, Tuple, runtime_checkable

import sympy
import torch

from williamson.blade import ZETS, Blade
from williamson.validation import is_exact, is_zero, normalize_coefficient


@runtime_checkable
class Prodable(Protocol):
    """Anything that can take part in a geometric product.

    Implementers convert themselves into a :class:`Multivector` of the
    given algebra; the product itself is only defined on multivectors.
    """

    def to_multivector(self, algebra) -> "Multivector":
        ...


@dataclass(frozen=True)
class Term:
    """A blade paired with a symbolic value.

    The value defaults to the sympy symbol ``ξ<form>``, so ``Term(a31)``
    stands for ``ξ31 a31``.
    """

    blade: Blade
    value: Any = None

    def __post_init__(self):
        if self.value is None:
            object.__setattr__(self, "value", sympy.Symbol(f"ξ{self.blade.form}"))

    def to_multivector(self, algebra) -> "Multivector":
        return Multivector(algebra, [(self.blade, self.value)])

    def __str__(self):
        return f"{self.blade}({self.value})"


class Multivector:
    """Sparse exact multivector.

    Allows natural mathematical syntax like A * B, A + B, 2 * A, ~A.
    Instances are never mutated; every operation returns a new one.

    Attributes:
        algebra (WilliamsonAlgebra): The owning algebra.
    """

    __hash__ = None

    def __init__(self, algebra, terms=None):
        """Initializes a Multivector.

        Args:
            algebra (WilliamsonAlgebra): The algebra instance.
            terms: Mapping or iterable of ``(blade, coefficient)`` pairs.
                Blades may be literals like ``"31"`` and are canonicalised;
                repeated blades are summed and exact zeros dropped.
        """
        self.algebra = algebra
        if terms is None:
            terms = ()
        elif isinstance(terms, Mapping):
            terms = terms.items()

        acc = {}
        for blade, coeff in terms:
            if not isinstance(blade, Blade):
                blade = algebra.blade(blade)
            blade = algebra.canonical_blade(blade)
            coeff = normalize_coefficient(coeff)
            key = blade.unsigned
            value = coeff if blade.sign > 0 else -coeff
            acc[key] = acc[key] + value if key in acc else value

        self._terms: Dict[Blade, Any] = {}
        for key in sorted(acc, key=Blade.sort_key):
            coeff = normalize_coefficient(acc[key])
            if not is_zero(coeff):
                self._terms[key] = coeff

    @classmethod
    def from_pairs(cls, algebra, pairs):
        """Creates a Multivector from ``(blade, coefficient)`` pairs."""
        return cls(algebra, pairs)

    @classmethod
    def from_tensor(cls, algebra, tensor: torch.Tensor):
        """Creates a Multivector from a dense integer tensor [Dim].

        Args:
            algebra (WilliamsonAlgebra): The algebra instance.
            tensor (torch.Tensor): Coefficients in ``algebra.basis`` order.

        Returns:
            Multivector: Sparse wrapper instance.
        """
        if tensor.is_floating_point() or tensor.is_complex():
            raise TypeError(f"dense coefficients must be integers, got {tensor.dtype}")
        if tuple(tensor.shape) != (algebra.dim,):
            raise ValueError(f"expected shape ({algebra.dim},), got {tuple(tensor.shape)}")
        return cls(algebra, zip(algebra.basis, tensor.tolist()))

    def to_tensor(self, dtype=torch.long, device=None) -> torch.Tensor:
        """Dense coefficients in ``algebra.basis`` order.

        Only integer coefficients have an exact dense form.
        """
        out = torch.zeros(self.algebra.dim, dtype=dtype, device=device)
        for blade, coeff in self._terms.items():
            if not isinstance(coeff, int):
                raise TypeError(f"coefficient {coeff!r} of {blade} has no exact {dtype} form")
            out[self.algebra.basis.index(blade)] = coeff
        return out

    def to_multivector(self, algebra) -> "Multivector":
        if algebra is not self.algebra:
            raise ValueError("Multivector belongs to a different algebra")
        return self

    # ------------------------------------------------------------------
    # Mapping-like access
    # ------------------------------------------------------------------

    def items(self) -> Iterator[Tuple[Blade, Any]]:
        """``(blade, coefficient)`` pairs in canonical order."""
        return iter(self._terms.items())

    def blades(self) -> Tuple[Blade, ...]:
        return tuple(self._terms)

    def __iter__(self):
        return self.items()

    def __len__(self):
        return len(self._terms)

    def __bool__(self):
        return bool(self._terms)

    def __contains__(self, blade):
        return self._key(blade)[0] in self._terms

    def __getitem__(self, blade):
        key, sign = self._key(blade)
        coeff = self._terms.get(key, 0)
        return coeff if sign > 0 else -coeff

    def _key(self, blade):
        if not isinstance(blade, Blade):
            blade = self.algebra.blade(blade)
        blade = self.algebra.canonical_blade(blade)
        return blade.unsigned, blade.sign

    def to_dict(self) -> Dict[str, Any]:
        """``{form: coefficient}`` in canonical order."""
        return {b.form: c for b, c in self._terms.items()}

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if isinstance(other, Multivector):
            return self.algebra is other.algebra and self._terms == other._terms
        if is_exact(other):
            return self._terms == self.algebra.as_multivector(other)._terms
        return NotImplemented

    def __add__(self, other):
        try:
            return self.algebra.add(self, other)
        except TypeError:
            return NotImplemented

    def __radd__(self, other):
        try:
            return self.algebra.add(other, self)
        except TypeError:
            return NotImplemented

    def __neg__(self):
        return Multivector(self.algebra, [(b, -c) for b, c in self._terms.items()])

    def __pos__(self):
        return self

    def __sub__(self, other):
        try:
            return self.algebra.add(self, -self.algebra.as_multivector(other))
        except TypeError:
            return NotImplemented

    def __rsub__(self, other):
        try:
            return self.algebra.add(other, -self)
        except TypeError:
            return NotImplemented

    def __mul__(self, other):
        """Geometric product (A * B), or scaling by an exact scalar."""
        if is_exact(other):
            return self.algebra.scale(self, other)
        try:
            return self.algebra.geometric_product(self, other)
        except TypeError:
            return NotImplemented

    def __rmul__(self, other):
        if is_exact(other):
            return self.algebra.scale(self, other)
        try:
            return self.algebra.geometric_product(other, self)
        except TypeError:
            return NotImplemented

    def __truediv__(self, other):
        """Exact division by a scalar."""
        if not is_exact(other):
            return NotImplemented
        if isinstance(other, sympy.Basic):
            return self.algebra.scale(self, 1 / other)
        return self.algebra.scale(self, Fraction(1) / other)

    def __invert__(self):
        """Reversion (~A)."""
        from williamson.operations import reverse
        return reverse(self.algebra, self)

    def grade(self, k: int) -> "Multivector":
        """Projects to grade k."""
        return self.algebra.grade_projection(self, k)

    def grades(self) -> Tuple[int, ...]:
        """Grades with at least one non-zero term."""
        return tuple(sorted({b.grade for b in self._terms}))

    def scalar_part(self):
        return self.algebra.scalar_part(self)

    def subs(self, *args, **kwargs) -> "Multivector":
        """Substitute into symbolic coefficients (see ``sympy.Basic.subs``)."""
        pairs = []
        for blade, coeff in self._terms.items():
            if isinstance(coeff, sympy.Basic):
                coeff = coeff.subs(*args, **kwargs)
            pairs.append((blade, coeff))
        return Multivector(self.algebra, pairs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self):
        if not self._terms:
            return "0"
        return "".join(
            _format_term(b, c, first=(n == 0))
            for n, (b, c) in enumerate(self._terms.items())
        )

    def __repr__(self):
        return f"Multivector({self})"

    def format_zets(self) -> str:
        """Multi-line listing of the terms grouped by zet (B, T, A, E)."""
        lines = []
        for zet in ZETS:
            blades = [b for b in self.algebra.allowed if b.zet == zet and b in self._terms]
            if not blades:
                continue
            sub = Multivector(self.algebra, [(b, self._terms[b]) for b in blades])
            lines.append(f"  {zet}: {sub}")
        return "{\n" + "\n".join(lines) + "\n}" if lines else "{}"


def _format_term(blade: Blade, coeff, first: bool) -> str:
    if isinstance(coeff, sympy.Basic):
        negative = coeff.could_extract_minus_sign()
        magnitude = -coeff if negative else coeff
        text = str(magnitude)
        if isinstance(magnitude, sympy.Add):
            text = f"({text})"
    else:
        negative = coeff < 0
        text = str(abs(coeff))

    if blade.grade == 0:
        body = text
    elif text == "1":
        body = f"a{blade.form}"
    else:
        body = f"{text} a{blade.form}"

    if first:
        return f"-{body}" if negative else body
    return f" - {body}" if negative else f" + {body}"
