# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Evaluation coordinator: eligibility → synthesis → execution → materialization.

`try_evaluate` either returns a typed literal to substitute for the call or
None, in which case the call is left exactly as it was. Every failure is
recovered here; the fallback (an ordinary runtime call to the same pure
function) is always correct, so nothing is reported as a compile error.

No state is kept between attempts: asking again about a call that failed
fails again the same way.
"""

from __future__ import annotations

from typing import Optional

from driftpure.core.types_core import FnSignature
from driftpure.stage1 import hir_nodes as H

from .call_site import PureCallSite
from .config import EvalConfig
from .eligibility import constant_arguments
from .errors import ComptimeError, ExecutionFailure
from .executor import IsolatedExecutor
from .materialize import EvaluatedConstant, materialize
from .synthesize import synthesize
from .trace import Tracer


class PureCallEvaluator:
	def __init__(
		self,
		config: Optional[EvalConfig] = None,
		*,
		executor: Optional[IsolatedExecutor] = None,
		tracer: Optional[Tracer] = None,
	) -> None:
		self.config = config if config is not None else EvalConfig()
		self.tracer = tracer or Tracer(self.config.verbosity)
		self.executor = executor or IsolatedExecutor(self.config, tracer=self.tracer)

	def evaluate(self, call: H.HCall, signature: FnSignature) -> EvaluatedConstant:
		"""Run every stage; raises the first stage's `ComptimeError`."""
		site = PureCallSite(signature=signature, loc=call.loc)
		args = constant_arguments(call, signature)
		program = synthesize(site, args)
		if self.tracer.enabled(2):
			self.tracer.trace(2, f"generated helper program:\n{program.source}", span=call.loc)
		outcome = self.executor.run(program)
		if not outcome.ok:
			raise ExecutionFailure(outcome.reason, stderr=outcome.stderr)
		return materialize(outcome, site, loc=call.loc, accept_empty_string=self.config.accept_empty_string)

	def try_evaluate(self, call: H.HCall, signature: FnSignature) -> Optional[H.HExpr]:
		"""Return the replacement literal for `call`, or None to keep the call."""
		if self.config.recursion_guard_active:
			return None
		self.tracer.trace(2, f"attempting compile-time evaluation of {signature.symbol}", span=call.loc)
		try:
			const = self.evaluate(call, signature)
		except ExecutionFailure as err:
			self.tracer.trace(2, f"{err.stage} failed: {err.reason}", span=call.loc)
			if err.stderr:
				self.tracer.trace(2, f"helper stderr:\n{err.stderr.rstrip()}", span=call.loc)
			return None
		except ComptimeError as err:
			self.tracer.trace(2, f"{err.stage} failed: {err.reason}", span=call.loc)
			return None
		self.tracer.trace(1, f"compile-time evaluated {signature.symbol} to constant {const.value!r}", span=call.loc)
		return const.to_literal()


__all__ = ["PureCallEvaluator"]
