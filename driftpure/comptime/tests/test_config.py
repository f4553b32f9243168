# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import os
from pathlib import Path

import pytest

from driftpure.comptime.config import DEFAULT_TIMEOUT_S, EvalConfig


def test_defaults():
	cfg = EvalConfig.from_env({})
	assert cfg.toolchain_root is None
	assert cfg.module_paths == ()
	assert cfg.timeout_s == DEFAULT_TIMEOUT_S
	assert cfg.verbosity == 0
	assert not cfg.accept_empty_string
	assert not cfg.recursion_guard_active


def test_values_from_env():
	env = {
		"DRIFT_ROOT": "/opt/drift",
		"DRIFT_MODULE_PATH": os.pathsep.join(["/a", "", "/b"]),
		"DRIFT_PURE_EVAL_TIMEOUT": "2.5",
		"DRIFT_PURE_EVAL_VERBOSE": "2",
		"DRIFT_PURE_EVAL_HELPER": "1",
	}
	cfg = EvalConfig.from_env(env)
	assert cfg.toolchain_root == Path("/opt/drift")
	assert cfg.module_paths == (Path("/a"), Path("/b"))
	assert cfg.timeout_s == 2.5
	assert cfg.verbosity == 2
	assert cfg.recursion_guard_active


def test_non_positive_timeout_disables_limit():
	assert EvalConfig.from_env({"DRIFT_PURE_EVAL_TIMEOUT": "0"}).timeout_s is None


def test_overrides_win_over_env():
	cfg = EvalConfig.from_env({"DRIFT_PURE_EVAL_VERBOSE": "2"}, verbosity=0, accept_empty_string=True)
	assert cfg.verbosity == 0
	assert cfg.accept_empty_string


def test_malformed_numbers_raise():
	with pytest.raises(ValueError):
		EvalConfig.from_env({"DRIFT_PURE_EVAL_TIMEOUT": "soon"})
	with pytest.raises(ValueError):
		EvalConfig.from_env({"DRIFT_PURE_EVAL_VERBOSE": "loud"})
