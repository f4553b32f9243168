# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
driftpure: speculative out-of-process constant evaluation for the Drift compiler.

Packages:
  - core: spans, diagnostics, function ids, scalar type model
  - stage1: HIR nodes and the pure-call folding pass
  - comptime: eligibility, program synthesis, isolated execution, materialization
  - parser: signatures and call expressions (lark)
"""

__version__ = "0.1.0"
