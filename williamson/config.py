# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Algebra configuration.

Centralises the canonical blade forms, the generator metric and the
Cayley table build settings into a single :class:`AlgebraConfig`
dataclass. Configs can be loaded from YAML through OmegaConf::

    allowed: [p, "23", "31", "12", "0", "023", "031", "012",
              "123", "1", "2", "3", "0123", "01", "02", "03"]
    metric: [1, -1, -1, -1]
    workers: 4
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from log import get_logger
from williamson.blade import DEFAULT_ALLOWED, DEFAULT_METRIC, Index, parse_indices
from williamson.errors import ConfigurationError

logger = get_logger(__name__)

CONFIG_ENV = "WILLIAMSON_CONFIG"

# Number of forms expected per grade: 1 point, 4 vectors, 6 bivectors,
# 4 trivectors and 1 quadrivector.
_EXPECTED_PER_GRADE = (
    ("points", 1),
    ("vectors", 4),
    ("bivectors", 6),
    ("trivectors", 4),
    ("quadrivectors", 1),
)


@dataclass
class AlgebraConfig:
    """Validated settings for a :class:`WilliamsonAlgebra`.

    Attributes:
        allowed: The 16 canonical blade forms, e.g. ``"31"`` rather than
            ``"13"``. Order is irrelevant to the algebra.
        metric: Square of each generator, indexed by generator. Every entry
            must be +1 or -1.
        workers: Thread count for building the Cayley table. ``0`` builds
            on the calling thread.
    """

    allowed: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED))
    metric: List[int] = field(default_factory=lambda: list(DEFAULT_METRIC))
    workers: int = 0

    def __post_init__(self) -> None:
        self.allowed = [str(f) for f in self.allowed]
        self.metric = list(self.metric)
        self._validate_metric()
        self._validate_allowed()
        if self.workers < 0:
            raise ConfigurationError(f"workers must be non-negative, got {self.workers}")

    def _validate_metric(self) -> None:
        if len(self.metric) != len(Index):
            raise ConfigurationError(
                f"metric must give a square for each of the {len(Index)} "
                f"generators, got {len(self.metric)} values"
            )
        for ix, square in zip(Index, self.metric):
            if isinstance(square, bool) or square not in (1, -1):
                raise ConfigurationError(
                    f"metric value for generator {ix} must be +1 or -1, got {square!r}"
                )

    def _validate_allowed(self) -> None:
        counts = [0] * len(_EXPECTED_PER_GRADE)
        seen = {}
        for form in self.allowed:
            sign, ixs = parse_indices(form)
            if sign != 1:
                raise ConfigurationError(f"allowed form {form!r} must not carry a sign")
            if len(set(ixs)) != len(ixs):
                raise ConfigurationError(f"allowed form {form!r} repeats a generator")
            if len(ixs) >= len(counts):
                raise ConfigurationError(f"allowed form {form!r} has too many generators")
            subset = tuple(sorted(ixs))
            if subset in seen:
                raise ConfigurationError(
                    f"allowed forms {seen[subset]!r} and {form!r} name the same blade"
                )
            seen[subset] = form
            counts[len(ixs)] += 1

        for (name, want), have in zip(_EXPECTED_PER_GRADE, counts):
            if have != want:
                raise ConfigurationError(
                    f"allowed contained wrong number of {name}: {have} != {want}"
                )

    @property
    def forms(self) -> Tuple[Tuple[Index, ...], ...]:
        """Allowed forms as index tuples."""
        return tuple(parse_indices(f)[1] for f in self.allowed)


def load_config(path: Optional[str] = None) -> AlgebraConfig:
    """Load an :class:`AlgebraConfig` from YAML.

    Values in the file are merged over the structured defaults, so missing
    keys keep their defaults and mistyped values are rejected.

    Args:
        path: YAML file. Falls back to ``$WILLIAMSON_CONFIG`` and then to
            the built-in defaults.

    Raises:
        ConfigurationError: If the file does not describe a valid algebra.
    """
    path = path or os.environ.get(CONFIG_ENV)
    if not path:
        return AlgebraConfig()

    try:
        schema = OmegaConf.structured(AlgebraConfig)
        merged = OmegaConf.merge(schema, OmegaConf.load(path))
        cfg = OmegaConf.to_object(merged)
    except OmegaConfBaseException as exc:
        raise ConfigurationError(f"Invalid algebra config {path}: {exc}") from exc

    logger.info("Loaded algebra config from %s (metric=%s)", path, cfg.metric)
    return cfg
