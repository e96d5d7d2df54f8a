# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Exceptions raised by the Williamson algebra engine."""


class WilliamsonError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(WilliamsonError, ValueError):
    """The algebra was asked to use something outside its configuration.

    Raised for unknown generator identifiers, metric values other than
    +1/-1 and malformed sets of allowed blade forms. Always fatal.
    """


class NotInvertibleError(WilliamsonError, ZeroDivisionError):
    """Division by a multivector that has no inverse."""
