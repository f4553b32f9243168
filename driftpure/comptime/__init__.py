# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Speculative out-of-process constant evaluation of pure calls.

Given a call to a `@pure` function whose arguments are all literals, the
evaluator writes a tiny caller program, runs it with the Drift toolchain in a
child process and turns what it printed into a typed literal.

Public API:
  - PureCallEvaluator (coordinator) and EvalConfig
  - stage functions: is_eligible / constant_arguments, synthesize,
    IsolatedExecutor, materialize
  - ToolchainRunner protocol for substituting the build-and-run step
"""

from .call_site import ConstantArgument, PureCallSite, SynthesizedProgram
from .config import EvalConfig
from .coordinator import PureCallEvaluator
from .eligibility import constant_arguments, is_eligible, literal_constant
from .errors import (
	ComptimeError,
	ExecutionFailure,
	IneligibleCallError,
	MaterializationFailure,
	SynthesisUnsupportedError,
	ToolchainTimeout,
)
from .executor import ExecutionOutcome, IsolatedExecutor, ScratchWorkspace
from .materialize import EvaluatedConstant, materialize, try_materialize
from .synthesize import synthesize, try_synthesize
from .toolchain import SubprocessToolchain, ToolchainResult, ToolchainRunner, locate_toolchain
from .trace import Tracer

__all__ = [
	"ConstantArgument",
	"PureCallSite",
	"SynthesizedProgram",
	"EvalConfig",
	"PureCallEvaluator",
	"constant_arguments",
	"is_eligible",
	"literal_constant",
	"ComptimeError",
	"ExecutionFailure",
	"IneligibleCallError",
	"MaterializationFailure",
	"SynthesisUnsupportedError",
	"ToolchainTimeout",
	"ExecutionOutcome",
	"IsolatedExecutor",
	"ScratchWorkspace",
	"EvaluatedConstant",
	"materialize",
	"try_materialize",
	"synthesize",
	"try_synthesize",
	"SubprocessToolchain",
	"ToolchainResult",
	"ToolchainRunner",
	"locate_toolchain",
	"Tracer",
]
