# Williamson: Exact Clifford Algebra for Absolute Relativity
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

import logging
import threading
import time

import pytest
import torch

from log import get_logger
from williamson.algebra import WilliamsonAlgebra
from williamson.blade import DEFAULT_ALLOWED
from williamson.config import CONFIG_ENV, AlgebraConfig, load_config
from williamson.errors import ConfigurationError


def _write(tmp_path, text):
    path = tmp_path / "algebra.yaml"
    path.write_text(text)
    return str(path)


class TestAlgebraConfig:
    def test_defaults(self):
        cfg = AlgebraConfig()
        assert cfg.metric == [1, -1, -1, -1]
        assert cfg.allowed == list(DEFAULT_ALLOWED)
        assert cfg.workers == 0
        assert len(cfg.forms) == 16
        assert cfg.forms[2] == (3, 1)

    @pytest.mark.parametrize("metric", [
        [1, -1, -1],
        [1, -1, -1, -1, 1],
        [1, 0, -1, -1],
        [2, -1, -1, -1],
        [True, -1, -1, -1],
    ])
    def test_bad_metric(self, metric):
        with pytest.raises(ConfigurationError):
            AlgebraConfig(metric=metric)

    def test_signed_form(self):
        allowed = list(DEFAULT_ALLOWED)
        allowed[1] = "-23"
        with pytest.raises(ConfigurationError, match="sign"):
            AlgebraConfig(allowed=allowed)

    def test_repeated_generator(self):
        allowed = list(DEFAULT_ALLOWED)
        allowed[1] = "22"
        with pytest.raises(ConfigurationError, match="repeats"):
            AlgebraConfig(allowed=allowed)

    def test_same_blade_twice(self):
        allowed = list(DEFAULT_ALLOWED)
        allowed[3] = "32"
        with pytest.raises(ConfigurationError, match="same blade"):
            AlgebraConfig(allowed=allowed)

    def test_missing_form(self):
        with pytest.raises(ConfigurationError, match="bivectors"):
            AlgebraConfig(allowed=[f for f in DEFAULT_ALLOWED if f != "12"])

    def test_unknown_generator(self):
        allowed = list(DEFAULT_ALLOWED)
        allowed[-1] = "04"
        with pytest.raises(ConfigurationError):
            AlgebraConfig(allowed=allowed)

    def test_negative_workers(self):
        with pytest.raises(ConfigurationError):
            AlgebraConfig(workers=-1)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            AlgebraConfig(metric=[1, 1])


class TestLoadConfig:
    def test_no_source(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        assert load_config() == AlgebraConfig()

    def test_yaml(self, tmp_path):
        path = _write(tmp_path, "metric: [1, 1, 1, 1]\nworkers: 2\n")
        cfg = load_config(path)
        assert isinstance(cfg, AlgebraConfig)
        assert cfg.metric == [1, 1, 1, 1]
        assert cfg.workers == 2
        assert cfg.allowed == list(DEFAULT_ALLOWED)

    def test_yaml_allowed(self, tmp_path):
        forms = ", ".join(f'"{f}"' for f in DEFAULT_ALLOWED).replace('"31"', '"13"')
        path = _write(tmp_path, f"allowed: [{forms}]\n")
        alg = WilliamsonAlgebra(load_config(path))
        assert alg.blade("31").form == "13"
        assert alg.blade("31").sign == -1

    def test_env_var(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "metric: [-1, 1, 1, 1]\n")
        monkeypatch.setenv(CONFIG_ENV, path)
        assert load_config().metric == [-1, 1, 1, 1]

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV, _write(tmp_path, "workers: 3\n"))
        other = tmp_path / "other.yaml"
        other.write_text("workers: 1\n")
        assert load_config(str(other)).workers == 1

    def test_invalid_metric_value(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "metric: [1, 2, 1, 1]\n"))

    def test_mistyped_value(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "workers: many\n"))

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "signature: [1, 3]\n"))

    def test_logs_source(self, tmp_path, caplog):
        path = _write(tmp_path, "workers: 1\n")
        with caplog.at_level(logging.INFO, logger="williamson"):
            load_config(path)
        assert any("Loaded algebra config" in r.getMessage() for r in caplog.records)


class TestTableBuild:
    def test_parallel_build_matches_sequential(self):
        sequential = WilliamsonAlgebra()
        threaded = WilliamsonAlgebra(AlgebraConfig(workers=4))
        assert torch.equal(sequential.cayley_indices, threaded.cayley_indices)
        assert torch.equal(sequential.cayley_signs, threaded.cayley_signs)

    def test_built_once_under_concurrent_access(self, monkeypatch):
        calls = []
        original = WilliamsonAlgebra._generate_cayley_table

        def slow_generate(self):
            calls.append(1)
            time.sleep(0.05)
            return original(self)

        monkeypatch.setattr(WilliamsonAlgebra, "_generate_cayley_table", slow_generate)
        alg = WilliamsonAlgebra()
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(alg.cayley_indices)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_tables_are_per_instance(self):
        a = WilliamsonAlgebra()
        b = WilliamsonAlgebra(AlgebraConfig(metric=[1, 1, 1, 1]))
        # a1 a1 differs in sign between the two metrics
        assert a.cayley_signs[2, 2].item() == -1
        assert b.cayley_signs[2, 2].item() == 1

    def test_build_is_logged(self, caplog):
        alg = WilliamsonAlgebra()
        with caplog.at_level(logging.DEBUG, logger="williamson"):
            alg.cayley_table()
        messages = [r.getMessage() for r in caplog.records]
        assert any("Built 16x16 Cayley table" in m for m in messages)


class TestLogger:
    def test_hierarchy(self):
        assert get_logger("williamson.algebra").name == "williamson.algebra"
        assert get_logger("scripts.demo").name == "williamson.scripts.demo"
        assert get_logger("williamson").name == "williamson"
