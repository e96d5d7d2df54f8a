# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

import concurrent.futures
import threading
import time
from collections import namedtuple
from typing import Iterable, List, Optional, Tuple

import torch

from log import get_logger
from williamson.blade import ZETS, Blade, Index, parse_indices, reduce_indices, reorder
from williamson.config import AlgebraConfig
from williamson.validation import check_multivector, is_exact

logger = get_logger(__name__)

_CayleyTables = namedtuple(
    "_CayleyTables",
    [
        "cayley_indices",
        "cayley_signs",
        "right_indices",
        "gp_signs",
        "grade_masks",
        "index_rows",
        "sign_rows",
    ],
)


class WilliamsonAlgebra:
    """Exact geometric algebra kernel for the Williamson algebra.

    Owns the generator metric, the canonical blade forms and the Cayley
    table. The table is built once, on first use, and shared by every
    multivector created through this instance.

    Basis blades are indexed in canonical display order: grade, then the
    ascending generator subset. Index ``k`` of a dense tensor is the
    coefficient of ``algebra.basis[k]``.

    Attributes:
        config (AlgebraConfig): Validated configuration.
        metric (Tuple[int, ...]): Square of each generator.
        n (int): Number of generators (4).
        dim (int): Number of basis blades (2^n).
        basis (Tuple[Blade, ...]): Unsigned canonical blades.
        device (str): Device for the dense tables.
    """

    def __init__(self, config: Optional[AlgebraConfig] = None, device='cpu'):
        """Initialize the algebra. The Cayley table is built lazily.

        Args:
            config (AlgebraConfig, optional): Defaults to the ``+---``
                Williamson algebra.
            device (str, optional): Device for dense tables. Defaults to 'cpu'.
        """
        self.config = config if config is not None else AlgebraConfig()
        self.metric = tuple(self.config.metric)
        self.n = len(Index)
        self.dim = 2 ** self.n
        self.device = device

        # Canonical ordering for each generator subset
        self._targets = {tuple(sorted(f)): f for f in self.config.forms}
        self.basis = tuple(sorted(
            (Blade(f) for f in self._targets.values()), key=Blade.sort_key
        ))
        self._positions = {b: k for k, b in enumerate(self.basis)}
        self._by_subset = {b.subset: b for b in self.basis}

        self._lock = threading.Lock()
        self._tables = None

    def __repr__(self):
        signature = "".join("+" if s > 0 else "-" for s in self.metric)
        return f"WilliamsonAlgebra(metric={signature})"

    @property
    def num_grades(self) -> int:
        """Counts the number of grades (n + 1)."""
        return self.n + 1

    @property
    def allowed(self) -> Tuple[Blade, ...]:
        """Unsigned canonical blades in configured (zet) order."""
        return tuple(self._by_subset[tuple(sorted(f))] for f in self.config.forms)

    # ------------------------------------------------------------------
    # Blades and the product engine
    # ------------------------------------------------------------------

    def canonical(self, indices: Iterable, sign: int = 1) -> Blade:
        """Reduce a product of generators to a canonical signed blade.

        Args:
            indices: Generators in product order. Repeats are cancelled
                through the metric, out-of-order pairs are swapped.
            sign (int, optional): Sign to start from. Defaults to 1.

        Returns:
            Blade: The signed blade in canonical order.

        Raises:
            ConfigurationError: On an unknown generator identifier.
        """
        reduced_sign, subset = reduce_indices(indices, self.metric)
        target = self._targets[subset]
        return Blade(target, sign * reduced_sign * reorder(subset, target))

    def canonical_blade(self, blade: Blade) -> Blade:
        """Rewrite *blade* in canonical order, adjusting its sign."""
        if blade.unsigned in self._positions:
            return blade
        return self.canonical(blade.indices, blade.sign)

    def blade(self, *indices) -> Blade:
        """Construct a basis blade from a literal generator list.

        Accepts ``algebra.blade("31")``, ``algebra.blade("-a023")``,
        ``algebra.blade(3, 1)``, ``algebra.blade([Index.THREE, Index.ONE])``
        or an existing :class:`Blade`. The result is always canonical:
        ``algebra.blade("13")`` is ``-a31``.

        Raises:
            ConfigurationError: On an unknown generator identifier.
        """
        sign = 1
        if len(indices) == 1:
            arg = indices[0]
            if isinstance(arg, Blade):
                return self.canonical_blade(arg)
            if isinstance(arg, str):
                sign, indices = parse_indices(arg)
            elif not isinstance(arg, (int, Index)):
                indices = tuple(arg)
        return self.canonical(indices, sign)

    def product(self, a: Blade, b: Blade) -> Blade:
        """Geometric product of two blades, computed from scratch.

        Concatenates the generators of *a* and *b* and reduces the result.

        Args:
            a (Blade): Left operand.
            b (Blade): Right operand.

        Returns:
            Blade: The signed product blade.
        """
        return self.canonical(a.indices + b.indices, a.sign * b.sign)

    # ------------------------------------------------------------------
    # Cayley table
    # ------------------------------------------------------------------

    def _ensure_tables(self) -> _CayleyTables:
        tables = self._tables
        if tables is not None:
            return tables
        with self._lock:
            if self._tables is None:
                self._tables = self._generate_cayley_table()
            return self._tables

    def _cayley_row(self, i: int) -> Tuple[int, List[int], List[int]]:
        a = self.basis[i]
        indices, signs = [], []
        for b in self.basis:
            r = self.product(a, b)
            indices.append(self._positions[r.unsigned])
            signs.append(r.sign)
        return i, indices, signs

    def _generate_cayley_table(self) -> _CayleyTables:
        """Compute every basis product, the dense gather tables and grade masks."""
        start = time.perf_counter()
        index_rows: List[Optional[List[int]]] = [None] * self.dim
        sign_rows: List[Optional[List[int]]] = [None] * self.dim

        workers = self.config.workers
        if workers > 0:
            with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
                rows = list(pool.map(self._cayley_row, range(self.dim)))
        else:
            rows = [self._cayley_row(i) for i in range(self.dim)]
        for i, indices, signs in rows:
            index_rows[i] = indices
            sign_rows[i] = signs

        cayley_indices = torch.tensor(index_rows, dtype=torch.long, device=self.device)
        cayley_signs = torch.tensor(sign_rows, dtype=torch.long, device=self.device)

        # For each left blade i and result blade k, the unique right blade j
        # with basis[i] * basis[j] = +-basis[k]
        right = [[0] * self.dim for _ in range(self.dim)]
        gp = [[0] * self.dim for _ in range(self.dim)]
        for i in range(self.dim):
            for j in range(self.dim):
                k = index_rows[i][j]
                right[i][k] = j
                gp[i][k] = sign_rows[i][j]
        right_indices = torch.tensor(right, dtype=torch.long, device=self.device)
        gp_signs = torch.tensor(gp, dtype=torch.long, device=self.device)

        grade_masks = []
        for k in range(self.num_grades):
            mask = torch.tensor(
                [b.grade == k for b in self.basis],
                dtype=torch.bool, device=self.device,
            )
            grade_masks.append(mask)

        logger.debug(
            "Built %dx%d Cayley table for %r in %.2f ms (workers=%d)",
            self.dim, self.dim, self, (time.perf_counter() - start) * 1e3, workers,
        )
        return _CayleyTables(
            cayley_indices, cayley_signs, right_indices, gp_signs,
            grade_masks, index_rows, sign_rows,
        )

    @property
    def cayley_indices(self) -> torch.Tensor:
        """``[dim, dim]`` basis position of ``basis[i] * basis[j]``."""
        return self._ensure_tables().cayley_indices

    @property
    def cayley_signs(self) -> torch.Tensor:
        """``[dim, dim]`` sign (+1/-1) of ``basis[i] * basis[j]``."""
        return self._ensure_tables().cayley_signs

    @property
    def grade_masks(self) -> List[torch.Tensor]:
        return self._ensure_tables().grade_masks

    def entry(self, a: Blade, b: Blade) -> Blade:
        """Cayley table lookup for ``a * b``.

        Same result as :meth:`product`, served from the cached table.
        """
        a = self.canonical_blade(a)
        b = self.canonical_blade(b)
        tables = self._ensure_tables()
        i = self._positions[a.unsigned]
        j = self._positions[b.unsigned]
        k = tables.index_rows[i][j]
        return Blade(self.basis[k].indices, a.sign * b.sign * tables.sign_rows[i][j])

    def cayley_table(self) -> List[List[Blade]]:
        """The full table as rows of signed blades, in basis order."""
        return [[self.entry(a, b) for b in self.basis] for a in self.basis]

    # ------------------------------------------------------------------
    # Multivectors
    # ------------------------------------------------------------------

    def as_multivector(self, x):
        """Convert any accepted operand into a :class:`Multivector`.

        Accepted: multivectors, blades, terms, exact scalars (int,
        Fraction, sympy expression) and anything implementing
        :class:`Prodable`.

        Raises:
            TypeError: For any other operand.
        """
        from williamson.multivector import Multivector, Prodable

        if isinstance(x, Multivector):
            if x.algebra is not self:
                raise ValueError("Multivector belongs to a different algebra")
            return x
        if is_exact(x):
            return Multivector(self, {self.basis[0]: x})
        if isinstance(x, str):
            return Multivector(self, {self.blade(x): 1})
        if isinstance(x, Prodable):
            mv = x.to_multivector(self)
            if not isinstance(mv, Multivector) or mv.algebra is not self:
                raise TypeError(f"{type(x).__name__}.to_multivector did not return a Multivector of this algebra")
            return mv
        raise TypeError(f"Cannot use {type(x).__name__} as a multivector: {x!r}")

    def multivector(self, *pairs):
        """Build a multivector from ``(blade, coefficient)`` pairs.

        Blades may be :class:`Blade` values or literals such as ``"31"``.
        Repeated blades are summed.
        """
        from williamson.multivector import Multivector
        return Multivector(self, pairs)

    def zero(self):
        from williamson.multivector import Multivector
        return Multivector(self)

    def one(self):
        return self.as_multivector(1)

    def add(self, a, b):
        """Coefficient-wise sum; terms that cancel exactly are dropped."""
        from williamson.multivector import Multivector
        A = self.as_multivector(a)
        B = self.as_multivector(b)
        return Multivector(self, list(A.items()) + list(B.items()))

    def scale(self, mv, k):
        """Multiply every coefficient by the exact scalar *k*."""
        from williamson.multivector import Multivector
        A = self.as_multivector(mv)
        if not is_exact(k):
            raise TypeError(f"scale factor must be exact, got {type(k).__name__}: {k!r}")
        return Multivector(self, [(b, c * k) for b, c in A.items()])

    def geometric_product(self, a, b):
        """Computes the geometric product of two operands.

        Distributive expansion over both operands' terms, each pair of
        blades resolved through the Cayley table.

        Args:
            a: Left operand (any :class:`Prodable` value).
            b: Right operand (any :class:`Prodable` value).

        Returns:
            Multivector: The product ``ab``.
        """
        from williamson.multivector import Multivector
        A = self.as_multivector(a)
        B = self.as_multivector(b)
        tables = self._ensure_tables()

        acc = {}
        for blade_a, ca in A.items():
            i = self._positions[blade_a]
            index_row = tables.index_rows[i]
            sign_row = tables.sign_rows[i]
            for blade_b, cb in B.items():
                j = self._positions[blade_b]
                key = self.basis[index_row[j]]
                term = sign_row[j] * ca * cb
                acc[key] = acc[key] + term if key in acc else term
        return Multivector(self, acc)

    def grade_projection(self, mv, grade: int):
        """Isolates a specific grade.

        Args:
            mv: Multivector (or any Prodable value).
            grade (int): Target grade.

        Returns:
            Multivector: Terms of *mv* whose blade has the given grade.
        """
        from williamson.multivector import Multivector
        A = self.as_multivector(mv)
        return Multivector(self, [(b, c) for b, c in A.items() if b.grade == grade])

    def scalar_part(self, mv):
        """Coefficient of ``ap`` in *mv* (0 when absent)."""
        return self.as_multivector(mv)[self.basis[0]]

    # ------------------------------------------------------------------
    # Symbolic terms
    # ------------------------------------------------------------------

    def term(self, form, value=None):
        """A :class:`Term` for *form* with a symbolic value (``ξ<form>`` by default)."""
        from williamson.multivector import Term
        return Term(self.blade(form), value)

    def symbolic(self, *forms):
        """Sum of one symbolic term per form."""
        from williamson.multivector import Multivector
        pairs = []
        for form in forms:
            t = self.term(form)
            pairs.append((t.blade, t.value))
        return Multivector(self, pairs)

    def zet(self, name: str):
        """Symbolic multivector over the blades of zet B, T, A or E."""
        name = name.upper()
        if name not in ZETS:
            raise ValueError(f"Unknown zet {name!r}. Available: {list(ZETS)}")
        return self.symbolic(*(b for b in self.allowed if b.zet == name))

    def general(self):
        """Symbolic multivector with one term for every basis blade."""
        return self.symbolic(*self.allowed)

    # ------------------------------------------------------------------
    # Dense tensor kernels
    # ------------------------------------------------------------------

    def dense_product(self, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        """Computes the geometric product of dense coefficient tensors.

        Uses vectorized gather + broadcast multiply + sum. Integer tensors
        give exact results.

        Args:
            A (torch.Tensor): Left operand [..., Dim].
            B (torch.Tensor): Right operand [..., Dim].

        Returns:
            torch.Tensor: The product AB [..., Dim].
        """
        check_multivector(A, self, "dense_product(A)")
        check_multivector(B, self, "dense_product(B)")
        tables = self._ensure_tables()

        idx = tables.right_indices
        signs = tables.gp_signs
        if idx.device != B.device:
            idx = idx.to(B.device)
        if signs.device != A.device or signs.dtype != A.dtype:
            signs = signs.to(device=A.device, dtype=A.dtype)

        # B_gathered[..., i, k] = B[..., j] where basis[i] * basis[j] ~ basis[k]
        B_gathered = B[..., idx]  # [..., D, D]

        # result[..., k] = sum_i A[..., i] * B_gathered[..., i, k] * signs[i, k]
        return (A.unsqueeze(-1) * B_gathered * signs).sum(dim=-2)

    def dense_grade_projection(self, mv: torch.Tensor, grade: int) -> torch.Tensor:
        """Isolates a specific grade of a dense tensor.

        Args:
            mv (torch.Tensor): Multivector [..., Dim].
            grade (int): Target grade.

        Returns:
            torch.Tensor: Projected multivector.
        """
        check_multivector(mv, self, "dense_grade_projection(mv)")
        result = torch.zeros_like(mv)
        if not 0 <= grade < self.num_grades:
            return result
        mask = self.grade_masks[grade]
        if mask.device != mv.device:
            mask = mask.to(mv.device)
        result[..., mask] = mv[..., mask]
        return result


def generator_blades(algebra: WilliamsonAlgebra) -> Tuple[Blade, ...]:
    """The grade-1 blades ``a0, a1, a2, a3`` of *algebra*."""
    return tuple(algebra.blade(ix) for ix in Index)

