# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Lightweight input validation.

Dense tensor checks use ``assert`` so they are free under ``python -O``.
Set ``VALIDATE = False`` to disable even without the -O flag.
Coefficient checks always run: a float silently breaks exactness.
"""

import numbers
from fractions import Fraction

import sympy
import torch

VALIDATE = True


def check_multivector(x: torch.Tensor, algebra, name: str = "x") -> None:
    """Assert *x* looks like a dense multivector for *algebra*.

    Checks ``x.ndim >= 1`` and ``x.shape[-1] == algebra.dim``.
    """
    if not VALIDATE:
        return
    assert x.ndim >= 1, (
        f"{name}: expected ndim >= 1, got shape {tuple(x.shape)}"
    )
    assert x.shape[-1] == algebra.dim, (
        f"{name}: last dim should be {algebra.dim} (algebra dim), "
        f"got {x.shape[-1]} (shape {tuple(x.shape)})"
    )


def is_exact(value) -> bool:
    """True for ints, Fractions and sympy expressions."""
    if isinstance(value, sympy.Basic):
        return True
    return isinstance(value, numbers.Rational) and not isinstance(value, bool)


def normalize_coefficient(value):
    """Return *value* as an exact coefficient in its simplest type.

    Rationals with denominator 1 become ``int``, other rationals become
    ``Fraction``. Sympy expressions are expanded and collapse back to
    ``int``/``Fraction`` once they are plain numbers.

    Raises:
        TypeError: For floats and anything else that is not exact.
    """
    if isinstance(value, sympy.Basic):
        value = sympy.expand(value)
        if value.atoms(sympy.Float):
            raise TypeError(f"coefficients must be exact, got sympy float in {value}")
        if value.is_Rational:
            value = Fraction(int(value.p), int(value.q))
        else:
            return value
    if not is_exact(value):
        raise TypeError(
            f"coefficients must be exact (int, Fraction or sympy), "
            f"got {type(value).__name__}: {value!r}"
        )
    if isinstance(value, int):
        return int(value)
    value = Fraction(value)
    if value.denominator == 1:
        return value.numerator
    return value


def is_zero(value) -> bool:
    """Exact zero test; sympy values must already be normalized."""
    return value == 0
