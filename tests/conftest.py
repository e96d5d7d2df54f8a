# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Shared fixtures for the Williamson test suite."""

import random
from fractions import Fraction

import pytest

from williamson.algebra import WilliamsonAlgebra
from williamson.config import AlgebraConfig


@pytest.fixture
def algebra():
    """The default +--- Williamson algebra."""
    return WilliamsonAlgebra()


@pytest.fixture
def euclidean():
    """Same generators and forms with every generator squaring to +1."""
    return WilliamsonAlgebra(AlgebraConfig(metric=[1, 1, 1, 1]))


def _random_multivector(algebra, rng, max_terms=5, rational=False):
    """Multivector with a few small integer (or rational) coefficients."""
    pairs = []
    for blade in rng.sample(algebra.basis, rng.randint(1, max_terms)):
        coeff = rng.randint(-5, 5)
        if rational:
            coeff = Fraction(coeff, rng.randint(1, 4))
        pairs.append((blade, coeff))
    return algebra.multivector(*pairs)


@pytest.fixture
def samples(algebra):
    rng = random.Random(1234)
    return [_random_multivector(algebra, rng, rational=(i % 2 == 1)) for i in range(12)]


@pytest.fixture
def random_mv():
    """Factory ``random_mv(algebra, seed, rational=False)``."""
    def make(algebra, seed, rational=False):
        return _random_multivector(algebra, random.Random(seed), rational=rational)
    return make
