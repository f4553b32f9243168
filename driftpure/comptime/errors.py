# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Failure taxonomy for compile-time evaluation.

None of these ever reach the user as a compile error: the coordinator catches
`ComptimeError`, traces the reason and leaves the call as an ordinary runtime
call, which is always a correct fallback.
"""

from __future__ import annotations


class ComptimeError(Exception):
	"""Base class for every recoverable evaluation failure."""

	stage = "comptime"

	def __init__(self, reason: str) -> None:
		super().__init__(reason)
		self.reason = reason


class IneligibleCallError(ComptimeError):
	"""The call site does not qualify (impure, non-literal argument, kind mismatch)."""

	stage = "eligibility"


class SynthesisUnsupportedError(ComptimeError):
	"""An argument or return kind cannot be rendered into a caller program."""

	stage = "synthesis"


class ExecutionFailure(ComptimeError):
	"""Spawn error, missing toolchain, non-zero exit, timeout or scratch I/O error."""

	stage = "execution"

	def __init__(self, reason: str, *, stderr: str = "") -> None:
		super().__init__(reason)
		self.stderr = stderr


class MaterializationFailure(ComptimeError):
	"""Captured output is empty or cannot be decoded as the expected kind."""

	stage = "materialization"


class ToolchainTimeout(Exception):
	"""Raised by toolchain runners when the child outlives its time budget."""

	def __init__(self, timeout_s: float, *, stderr: bytes = b"") -> None:
		super().__init__(f"toolchain timed out after {timeout_s:g}s")
		self.timeout_s = timeout_s
		self.stderr = stderr


__all__ = [
	"ComptimeError",
	"IneligibleCallError",
	"SynthesisUnsupportedError",
	"ExecutionFailure",
	"MaterializationFailure",
	"ToolchainTimeout",
]
