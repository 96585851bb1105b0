# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Method reuse detection.

A type is considered to already have a deep-copy operation when either
  - it is one of the types generated in this batch (its method will exist once
    the emitted file is compiled with the package), or
  - it declares a method under the configured name with no parameters and a
    single result whose type, ignoring one pointer level, is the receiver type.

Nothing verifies that such a method really performs a deep copy: the naming
convention is trusted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from godeepcopy.core.types_core import Type, identical, method_set, reduce_pointer


@dataclass(frozen=True)
class Reuse:
	found: bool
	result_is_pointer: bool = False


NOT_FOUND = Reuse(False)


class ReuseDetector:
	def __init__(self, generating: Sequence[Type], method_name: str, pointer_receiver: bool) -> None:
		self.generating: Tuple[Type, ...] = tuple(generating)
		self.method_name = method_name
		self.pointer_receiver = pointer_receiver

	def detect(self, t: Type) -> Reuse:
		for target in self.generating:
			if identical(t, target):
				return Reuse(True, self.pointer_receiver)

		for method in method_set(t):
			if method.name != self.method_name:
				continue
			sig = method.signature
			if sig.param_count != 0 or len(sig.results) != 1 or sig.recv is None:
				continue
			result, result_is_pointer = reduce_pointer(sig.results[0])
			recv, _ = reduce_pointer(sig.recv)
			if not identical(result, recv):
				continue
			return Reuse(True, result_is_pointer)
		return NOT_FOUND


__all__ = ["Reuse", "NOT_FOUND", "ReuseDetector"]
