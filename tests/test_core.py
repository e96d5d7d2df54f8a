# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

import unittest

import torch

from williamson.algebra import WilliamsonAlgebra
from williamson.blade import Blade, Index
from williamson.config import AlgebraConfig


class TestWilliamsonAlgebra(unittest.TestCase):
    def setUp(self):
        self.alg = WilliamsonAlgebra()

    def test_basis_order(self):
        # grade, then ascending generator subset; 31 sorts as {1, 3}
        forms = [b.form for b in self.alg.basis]
        self.assertEqual(forms, [
            "p",
            "0", "1", "2", "3",
            "01", "02", "03", "12", "31", "23",
            "012", "031", "023", "123",
            "0123",
        ])
        self.assertEqual(self.alg.dim, 16)
        self.assertEqual(self.alg.num_grades, 5)

    def test_allowed_in_zet_order(self):
        forms = [b.form for b in self.alg.allowed]
        self.assertEqual(forms[:4], ["p", "23", "31", "12"])
        self.assertEqual(forms[-4:], ["0123", "01", "02", "03"])

    def test_cayley_entries(self):
        # indices: 2 (a1), 3 (a2), 4 (a3), 8 (a12), 9 (a31)
        # a1 a2 -> +a12
        self.assertEqual(self.alg.cayley_indices[2, 3].item(), 8)
        self.assertEqual(self.alg.cayley_signs[2, 3].item(), 1)

        # a2 a1 -> -a12
        self.assertEqual(self.alg.cayley_indices[3, 2].item(), 8)
        self.assertEqual(self.alg.cayley_signs[3, 2].item(), -1)

        # a1 a3 -> -a31 since 31 is the canonical form
        self.assertEqual(self.alg.cayley_indices[2, 4].item(), 9)
        self.assertEqual(self.alg.cayley_signs[2, 4].item(), -1)

        # a1 a1 -> -ap, a0 a0 -> +ap
        self.assertEqual(self.alg.cayley_indices[2, 2].item(), 0)
        self.assertEqual(self.alg.cayley_signs[2, 2].item(), -1)
        self.assertEqual(self.alg.cayley_signs[1, 1].item(), 1)

    def test_table_dtypes(self):
        self.assertEqual(self.alg.cayley_indices.dtype, torch.long)
        self.assertEqual(self.alg.cayley_signs.dtype, torch.long)
        self.assertEqual(tuple(self.alg.cayley_signs.shape), (16, 16))
        self.assertTrue(torch.all(self.alg.cayley_signs.abs() == 1))

    def test_reference_products(self):
        b = self.alg.blade
        self.assertEqual(self.alg.product(b("31"), b("01")), b("-03"))
        self.assertEqual(self.alg.product(b("31"), b("31")), b("-p"))
        self.assertEqual(self.alg.product(b("023"), b("-01")), b("-123"))
        self.assertEqual(self.alg.product(b("23"), b("123")), b("-1"))
        self.assertEqual(self.alg.product(b("p"), b("-012")), b("-012"))

    def test_geometric_product_simple(self):
        # (2 a1)(3 a2) = 6 a12
        A = self.alg.multivector(("1", 2))
        B = self.alg.multivector(("2", 3))
        C = self.alg.geometric_product(A, B)
        self.assertEqual(C, self.alg.multivector(("12", 6)))
        self.assertEqual(C["12"], 6)
        self.assertEqual(C["21"], -6)

    def test_blade_literals(self):
        self.assertEqual(self.alg.blade("13"), Blade((Index.THREE, Index.ONE), -1))
        self.assertEqual(self.alg.blade(1, 3), -self.alg.blade("31"))
        self.assertEqual(self.alg.blade([3, 2, 0]), self.alg.blade("-023"))
        self.assertEqual(self.alg.blade("a0123"), Blade((0, 1, 2, 3)))
        self.assertEqual(self.alg.blade(1, 1), Blade((), -1))
        self.assertEqual(self.alg.blade(), Blade())

    def test_custom_forms(self):
        allowed = ["p", "23", "13", "12", "0", "023", "013", "012",
                   "123", "1", "2", "3", "0123", "01", "02", "03"]
        alg = WilliamsonAlgebra(AlgebraConfig(allowed=allowed))
        self.assertEqual(alg.blade("31"), Blade((1, 3), -1))
        self.assertEqual(alg.product(alg.blade("1"), alg.blade("3")), Blade((1, 3)))
        self.assertEqual(alg.product(alg.blade("31"), alg.blade("01")), alg.blade("-03"))


if __name__ == '__main__':
    unittest.main()
