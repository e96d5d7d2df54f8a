# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Conjugations and derived products.

Every function takes the algebra first, followed by any operands it
accepts (multivectors, blades, terms, exact scalars).
"""

from williamson.algebra import WilliamsonAlgebra
from williamson.blade import Blade
from williamson.errors import NotInvertibleError
from williamson.multivector import Multivector
from williamson.validation import is_zero


def _reversion_sign(grade: int) -> int:
    """(-1)^(k(k-1)/2): bivectors and trivectors flip."""
    return -1 if (grade * (grade - 1) // 2) % 2 else 1


def _self_square(algebra: WilliamsonAlgebra, blade: Blade) -> int:
    """Sign of ``blade * blade`` (always a multiple of ap)."""
    return algebra.entry(blade, blade).sign


def reverse(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Computes the reversion, written with an over tilde.

    Reversing k generators takes k(k-1)/2 adjacent swaps, so grade-k terms
    pick up ``(-1)^(k(k-1)/2)``.

    Args:
        algebra (WilliamsonAlgebra): The algebra instance.
        x: Input multivector.

    Returns:
        Multivector: Reversed multivector.
    """
    mv = algebra.as_multivector(x)
    return Multivector(algebra, [(b, _reversion_sign(b.grade) * c) for b, c in mv.items()])


def hermitian(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Hermitian conjugate ``a0 rev(M) a0``, taken term by term.

    The net effect is to negate every term whose blade squares to ``-ap``.
    """
    mv = algebra.as_multivector(x)
    return Multivector(algebra, [(b, _self_square(algebra, b) * c) for b, c in mv.items()])


def dagger(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Alias for :func:`hermitian`."""
    return hermitian(algebra, x)


def diamond(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Diamond conjugate ``2<M>0 - M``: negates everything except ap."""
    mv = algebra.as_multivector(x)
    return Multivector(algebra, [(b, c if b.grade == 0 else -c) for b, c in mv.items()])


def dual(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Dual ``-a0123 M``, written with an overbar."""
    q = -algebra.blade("0123")
    return algebra.geometric_product(q, x)


def mm_bar(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Product of a multivector with its dual: ``M dual(M)``."""
    return algebra.geometric_product(x, dual(algebra, x))


def commutator(algebra: WilliamsonAlgebra, a, b) -> Multivector:
    """``(ab - ba) / 2``."""
    ab = algebra.geometric_product(a, b)
    ba = algebra.geometric_product(b, a)
    return (ab - ba) / 2


def anticommutator(algebra: WilliamsonAlgebra, a, b) -> Multivector:
    """``(ab + ba) / 2``."""
    ab = algebra.geometric_product(a, b)
    ba = algebra.geometric_product(b, a)
    return (ab + ba) / 2


def blade_inverse(algebra: WilliamsonAlgebra, blade: Blade) -> Blade:
    """The blade ``b^-1`` with ``b b^-1 = ap``.

    Every blade squares to ``+-ap``, so the inverse is the blade itself,
    negated when it squares to ``-ap``.
    """
    blade = algebra.canonical_blade(blade)
    square = algebra.entry(blade.unsigned, blade.unsigned).sign
    return blade if square > 0 else -blade


def inverse(algebra: WilliamsonAlgebra, x) -> Multivector:
    """Multiplicative inverse of a multivector.

    A single term is inverted directly. Anything else goes through the
    van der Mark construction::

        phi     = M dagger(M)
        divisor = <phi diamond(phi)>0
        M^-1    = dagger(M) diamond(phi) / divisor

    Raises:
        NotInvertibleError: If *x* is zero, or ``phi diamond(phi)`` is not
            a non-zero scalar.
    """
    mv = algebra.as_multivector(x)
    if not mv:
        raise NotInvertibleError("the zero multivector has no inverse")

    if len(mv) == 1:
        (blade, coeff), = mv.items()
        return Multivector(algebra, [(blade_inverse(algebra, blade), 1)]) / coeff

    m_dagger = hermitian(algebra, mv)
    phi = algebra.geometric_product(mv, m_dagger)
    diamond_phi = diamond(algebra, phi)
    phi_diamond_phi = algebra.geometric_product(phi, diamond_phi)

    divisor = phi_diamond_phi.scalar_part()
    if is_zero(divisor):
        raise NotInvertibleError(f"{mv} has no inverse (phi diamond(phi) = {phi_diamond_phi})")
    if phi_diamond_phi.grades() != (0,):
        raise NotInvertibleError(
            f"van der Mark divisor for {mv} is not a scalar: {phi_diamond_phi}"
        )

    return algebra.geometric_product(m_dagger, diamond_phi) / divisor


def divide(algebra: WilliamsonAlgebra, left, right) -> Multivector:
    """Divide *left* into *right*: ``left^-1 right``.

    The algebra is non-commutative, so the divisor sits on the left.
    """
    return algebra.geometric_product(inverse(algebra, left), right)
