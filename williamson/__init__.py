# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Exact algebra kernel for the Williamson algebra of Absolute Relativity.

Provides the generator set, basis blades and their reduction rule, the
geometric product engine with its cached Cayley table, sparse exact
multivectors and the conjugations used by the theory.
"""

__version__ = "0.1.0"

from .errors import WilliamsonError, ConfigurationError, NotInvertibleError
from .blade import Index, Blade, DEFAULT_ALLOWED, DEFAULT_METRIC, ZETS, reduce_indices
from .config import AlgebraConfig, load_config
from .algebra import WilliamsonAlgebra, generator_blades
from .multivector import Multivector, Prodable, Term

from .operations import (
    reverse,
    hermitian,
    dagger,
    diamond,
    dual,
    mm_bar,
    commutator,
    anticommutator,
    blade_inverse,
    inverse,
    divide,
)

__all__ = [
    "__version__",
    # errors
    "WilliamsonError",
    "ConfigurationError",
    "NotInvertibleError",
    # blades
    "Index",
    "Blade",
    "DEFAULT_ALLOWED",
    "DEFAULT_METRIC",
    "ZETS",
    "reduce_indices",
    # algebra
    "AlgebraConfig",
    "load_config",
    "WilliamsonAlgebra",
    "generator_blades",
    "Multivector",
    "Prodable",
    "Term",
    # operations
    "reverse",
    "hermitian",
    "dagger",
    "diamond",
    "dual",
    "mm_bar",
    "commutator",
    "anticommutator",
    "blade_inverse",
    "inverse",
    "divide",
]
