# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Evaluation coordinator tests: stage ordering, fallback to the runtime call,
the recursion guard and trace output.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from driftpure.comptime.config import EvalConfig
from driftpure.comptime.coordinator import PureCallEvaluator
from driftpure.comptime.executor import IsolatedExecutor, default_runner_factory
from driftpure.comptime.toolchain import ToolchainResult
from driftpure.comptime.trace import Tracer
from driftpure.core.span import Span
from driftpure.core.types_core import INT, STRING
from driftpure.stage1 import hir_nodes as H
from driftpure.test_support import POSIX_ONLY, FakeToolchain, make_signature, scratch_dirs, write_fake_drift

ADD = make_signature("m_math", "add_pure", {"a": INT, "b": INT}, INT)
LOWER = make_signature("std.strings", "lower", {"s": STRING}, STRING)


def _evaluator(fake: FakeToolchain, tmp_path: Path, **cfg) -> PureCallEvaluator:
	config = EvalConfig(**cfg)
	tracer = Tracer(config.verbosity, stream=io.StringIO())
	executor = IsolatedExecutor(config, runner=fake, scratch_parent=tmp_path, tracer=tracer)
	return PureCallEvaluator(config, executor=executor, tracer=tracer)


def _add_call(a: H.HExpr, b: H.HExpr) -> H.HCall:
	loc = Span(file="main.drift", line=7, column=13)
	return H.HCall(fn=H.HVar(name="add_pure", module_id="m_math"), args=[a, b], loc=loc)


def test_add_pure_constants_fold_to_literal(tmp_path: Path):
	fake = FakeToolchain(stdout=b"30")
	result = _evaluator(fake, tmp_path).try_evaluate(_add_call(H.HLiteralInt(10), H.HLiteralInt(20)), ADD)
	assert isinstance(result, H.HLiteralInt)
	assert result.value == 30
	assert result.ty == INT
	assert result.loc.line == 7
	assert "m_math.add_pure(10, 20)" in fake.calls[0].source


def test_variable_argument_returns_none_without_running(tmp_path: Path):
	fake = FakeToolchain(stdout=b"30")
	call = _add_call(H.HVar("x"), H.HLiteralInt(20))
	before = repr(call)
	assert _evaluator(fake, tmp_path).try_evaluate(call, ADD) is None
	assert fake.calls == []
	assert repr(call) == before


def test_execution_failure_falls_back_and_is_repeatable(tmp_path: Path):
	fake = FakeToolchain(stderr=b"error: module m_math not found\n", exit_code=1)
	evaluator = _evaluator(fake, tmp_path)
	call = _add_call(H.HLiteralInt(1), H.HLiteralInt(2))
	assert evaluator.try_evaluate(call, ADD) is None
	assert evaluator.try_evaluate(call, ADD) is None
	assert len(fake.calls) == 2
	assert fake.calls[0].source == fake.calls[1].source
	assert scratch_dirs(tmp_path) == []


def test_empty_output_falls_back(tmp_path: Path):
	call = H.HCall(fn=H.HVar("lower", "std.strings"), args=[H.HLiteralString("")])
	assert _evaluator(FakeToolchain(stdout=b""), tmp_path).try_evaluate(call, LOWER) is None


def test_empty_output_folds_when_opted_in(tmp_path: Path):
	call = H.HCall(fn=H.HVar("lower", "std.strings"), args=[H.HLiteralString("")])
	result = _evaluator(FakeToolchain(stdout=b""), tmp_path, accept_empty_string=True).try_evaluate(call, LOWER)
	assert isinstance(result, H.HLiteralString) and result.value == ""


def test_unparsable_output_falls_back(tmp_path: Path):
	result = _evaluator(FakeToolchain(stdout=b"thirty"), tmp_path).try_evaluate(
		_add_call(H.HLiteralInt(10), H.HLiteralInt(20)), ADD
	)
	assert result is None


def test_recursion_guard_short_circuits_before_any_stage(tmp_path: Path):
	fake = FakeToolchain(stdout=b"30")
	evaluator = _evaluator(fake, tmp_path, recursion_guard_active=True, verbosity=2)
	assert evaluator.try_evaluate(_add_call(H.HLiteralInt(10), H.HLiteralInt(20)), ADD) is None
	assert fake.calls == []
	assert evaluator.tracer.diagnostics == []


def test_guard_is_read_from_env_only_through_config():
	assert EvalConfig.from_env({"DRIFT_PURE_EVAL_HELPER": "1"}).recursion_guard_active
	assert not EvalConfig.from_env({}).recursion_guard_active


def test_each_attempt_gets_its_own_scratch_dir(tmp_path: Path):
	fake = FakeToolchain(stdout=b"3")
	evaluator = _evaluator(fake, tmp_path)
	evaluator.try_evaluate(_add_call(H.HLiteralInt(1), H.HLiteralInt(2)), ADD)
	evaluator.try_evaluate(_add_call(H.HLiteralInt(1), H.HLiteralInt(2)), ADD)
	assert fake.calls[0].path.parent != fake.calls[1].path.parent
	assert scratch_dirs(tmp_path) == []


def test_trace_levels(tmp_path: Path):
	stream = io.StringIO()
	config = EvalConfig(verbosity=1)
	tracer = Tracer(1, stream=stream)
	executor = IsolatedExecutor(config, runner=FakeToolchain(stdout=b"30"), scratch_parent=tmp_path, tracer=tracer)
	PureCallEvaluator(config, executor=executor, tracer=tracer).try_evaluate(
		_add_call(H.HLiteralInt(10), H.HLiteralInt(20)), ADD
	)
	out = stream.getvalue()
	assert "compile-time evaluated m_math::add_pure to constant 30" in out
	assert "generated helper program" not in out
	assert all(d.phase == "comptime" and d.severity == "note" for d in tracer.diagnostics)


def test_verbose_trace_shows_program_and_stderr(tmp_path: Path):
	fake = FakeToolchain(stderr=b"error: boom\n", exit_code=2)
	evaluator = _evaluator(fake, tmp_path, verbosity=2)
	evaluator.try_evaluate(_add_call(H.HLiteralInt(1), H.HLiteralInt(2)), ADD)
	messages = [d.message for d in evaluator.tracer.diagnostics]
	assert messages[0] == "attempting compile-time evaluation of m_math::add_pure"
	assert any(m.startswith("generated helper program:\nmodule m_pure_eval") for m in messages)
	assert any("execution failed: helper program exited with status 2" in m for m in messages)
	assert any("error: boom" in m for m in messages)


def test_handler_sees_exact_program(tmp_path: Path):
	seen = {}

	def handler(source: str, env) -> ToolchainResult:
		seen["source"] = source
		seen["guard"] = env.get("DRIFT_PURE_EVAL_HELPER")
		return ToolchainResult(stdout=b"hello world", stderr=b"", exit_code=0)

	call = H.HCall(fn=H.HVar("lower", "std.strings"), args=[H.HLiteralString("HELLO WORLD")])
	result = _evaluator(FakeToolchain(handler=handler), tmp_path).try_evaluate(call, LOWER)
	assert isinstance(result, H.HLiteralString) and result.value == "hello world"
	assert seen["guard"] == "1"
	assert 'strings.lower("HELLO WORLD")' in seen["source"]


@pytest.mark.skipif(POSIX_ONLY, reason="fake toolchain is a POSIX script")
def test_end_to_end_with_fake_drift(tmp_path: Path):
	root = tmp_path / "tc"
	write_fake_drift(root)
	config = EvalConfig(toolchain_root=root)
	executor = IsolatedExecutor(config, runner_factory=default_runner_factory, scratch_parent=tmp_path)
	evaluator = PureCallEvaluator(config, executor=executor)

	call = H.HCall(fn=H.HVar("lower", "std.strings"), args=[H.HLiteralString("HELLO WORLD")])
	result = evaluator.try_evaluate(call, LOWER)
	assert isinstance(result, H.HLiteralString) and result.value == "hello world"

	folded = evaluator.try_evaluate(_add_call(H.HLiteralInt(10), H.HLiteralInt(20)), ADD)
	assert isinstance(folded, H.HLiteralInt) and folded.value == 30

	fails = make_signature("m_err", "fail", {}, STRING)
	assert evaluator.try_evaluate(H.HCall(fn=H.HVar("fail", "m_err"), args=[]), fails) is None
	assert scratch_dirs(tmp_path) == []
