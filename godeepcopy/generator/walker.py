# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type graph walker: emits the Go statements that deep-copy one value.

The walker runs after a whole-value assignment (`var cp T = o`) has already
produced a shallow copy. Every statement it emits replaces one shared
reference in the sink with a fresh one: slices and maps are reallocated,
pointers get a new pointee, channels are recreated empty. Anything it does
not touch stays shared with the source, which is how skips and the depth
cutoff degrade.

Three expressions travel through the recursion:
  - `source` / `sink`: Go expressions to read from and assign to,
  - `path`: the root-relative skip path (`Items[*].Tags`), which ignores
    pointers and loop variables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List

from godeepcopy.core.diagnostics import Diagnostic
from godeepcopy.core.types_core import (
	ArrayShape,
	BasicShape,
	Chan,
	ChanShape,
	MapShape,
	Named,
	PackageRef,
	PointerShape,
	SliceShape,
	StructShape,
	Type,
	classify,
)
from godeepcopy.generator.bookkeeper import Bookkeeper
from godeepcopy.generator.reuse import Reuse, ReuseDetector

logger = logging.getLogger(__name__)

ELEMENTS = "[*]"
KEYS = "[key]"
VALUES = "[value]"


def field_path(path: str, name: str) -> str:
	return f"{path}.{name}" if path else name


def needs_deref(t: Type) -> bool:
	"""Whether `*p` must be spelled out to use a `*t` like a `t` value."""
	return not isinstance(classify(t), StructShape)


@dataclass
class WalkContext:
	"""Per-target state threaded through one walk."""

	package: PackageRef
	root_name: str
	books: Bookkeeper
	reuse: ReuseDetector
	method_name: str
	skips: FrozenSet[str] = frozenset()
	max_depth: int = 0
	diagnostics: List[Diagnostic] = field(default_factory=list)


class Walker:
	def __init__(self, ctx: WalkContext) -> None:
		self.ctx = ctx

	def walk(
		self,
		source: str,
		sink: str,
		t: Type,
		path: str = "",
		depth: int = 0,
		*,
		foreign: bool = False,
	) -> List[str]:
		"""
		Statements deep-copying `source` (of type `t`) into `sink`.

		`depth == 0` marks the target's own root, which is never replaced by
		a reuse call (that would make the method call itself).
		"""
		ctx = self.ctx
		initial = depth == 0
		if ctx.max_depth > 0 and depth >= ctx.max_depth:
			self._cutoff(path, depth)
			return []

		if isinstance(t, Named) and t.package is not None:
			foreign = t.package.path != ctx.package.path

		if not initial and isinstance(t, Named):
			found = ctx.reuse.detect(t)
			if found.found:
				return self._reuse(source, sink, found, pointer=False)

		depth += 1
		shape = classify(t)
		if isinstance(shape, StructShape):
			return self._struct(source, sink, shape, path, depth, foreign)
		if isinstance(shape, SliceShape):
			return self._slice(source, sink, shape, path, depth, foreign)
		if isinstance(shape, ArrayShape):
			return self._array(source, sink, shape, path, depth, foreign)
		if isinstance(shape, PointerShape):
			return self._pointer(source, sink, shape, path, depth, foreign, initial)
		if isinstance(shape, MapShape):
			return self._map(source, sink, shape, path, depth, foreign)
		if isinstance(shape, ChanShape):
			return self._chan(source, sink, shape)
		assert isinstance(shape, BasicShape)
		return []

	def _struct(self, source: str, sink: str, shape: StructShape, path: str, depth: int, foreign: bool) -> List[str]:
		out: List[str] = []
		for f in shape.fields:
			if f.name == "_":
				continue
			# Unexported fields of another package cannot be referenced here.
			if foreign and not f.exported:
				continue
			sub = field_path(path, f.name)
			if sub in self.ctx.skips:
				continue
			out.extend(self.walk(f"{source}.{f.name}", f"{sink}.{f.name}", f.type, sub, depth, foreign=foreign))
		return out

	def _slice(self, source: str, sink: str, shape: SliceShape, path: str, depth: int, foreign: bool) -> List[str]:
		kind = self.ctx.books.qualify(shape.elem)
		out = [
			f"if {source} != nil {{",
			f"{sink} = make([]{kind}, len({source}))",
			f"copy({sink}, {source})",
		]
		out.extend(self._elements(source, sink, shape.elem, path, depth, foreign))
		out.append("}")
		return out

	def _array(self, source: str, sink: str, shape: ArrayShape, path: str, depth: int, foreign: bool) -> List[str]:
		# Arrays are values: the enclosing assignment already copied them.
		return self._elements(source, sink, shape.elem, path, depth, foreign)

	def _elements(self, source: str, sink: str, elem: Type, path: str, depth: int, foreign: bool) -> List[str]:
		sub = path + ELEMENTS
		if sub in self.ctx.skips:
			return []
		idx = self.ctx.books.loop_index(depth)
		body = self.walk(f"{source}[{idx}]", f"{sink}[{idx}]", elem, sub, depth, foreign=foreign)
		if not body:
			return []
		return [f"for {idx} := range {source} {{", *body, "}"]

	def _pointer(
		self, source: str, sink: str, shape: PointerShape, path: str, depth: int, foreign: bool, initial: bool
	) -> List[str]:
		ctx = self.ctx
		out = [f"if {source} != nil {{"]
		if not initial and isinstance(shape.elem, Named):
			found = ctx.reuse.detect(shape.elem)
			if found.found:
				out.extend(self._reuse(source, sink, found, pointer=True))
				out.append("}")
				return out

		kind = ctx.books.qualify(shape.elem)
		out.append(f"{sink} = new({kind})")
		out.append(f"*{sink} = *{source}")
		inner_source, inner_sink = source, sink
		if needs_deref(shape.elem):
			inner_source, inner_sink = f"(*{source})", f"(*{sink})"
		out.extend(self.walk(inner_source, inner_sink, shape.elem, path, depth, foreign=foreign))
		out.append("}")
		return out

	def _map(self, source: str, sink: str, shape: MapShape, path: str, depth: int, foreign: bool) -> List[str]:
		books = self.ctx.books
		key_kind = books.qualify(shape.key)
		value_kind = books.qualify(shape.elem)
		k, v = books.map_key(depth), books.map_value(depth)
		out = [
			f"if {source} != nil {{",
			f"{sink} = make(map[{key_kind}]{value_kind}, len({source}))",
			f"for {k}, {v} := range {source} {{",
		]
		# Keys and values are decided independently.
		key_sink = self._entry(k, sink, shape.key, key_kind, path + KEYS, depth, foreign, out)
		value_sink = self._entry(v, sink, shape.elem, value_kind, path + VALUES, depth, foreign, out)
		out.append(f"{sink}[{key_sink}] = {value_sink}")
		out.append("}")
		out.append("}")
		return out

	def _entry(
		self, var: str, sink: str, t: Type, kind: str, path: str, depth: int, foreign: bool, out: List[str]
	) -> str:
		"""Deep-copy one map key or value into a temporary; returns what to store."""
		if path in self.ctx.skips:
			return var
		tmp = self.ctx.books.temp(sink, var)
		body = self.walk(var, tmp, t, path, depth, foreign=foreign)
		if not body:
			return var
		out.append(f"var {tmp} {kind} = {var}")
		out.extend(body)
		return tmp

	def _chan(self, source: str, sink: str, shape: ChanShape) -> List[str]:
		# Buffered contents are not transferred: the copy gets an empty
		# channel of the same capacity.
		kind = self.ctx.books.qualify(Chan(shape.elem))
		return [
			f"if {source} != nil {{",
			f"{sink} = make({kind}, cap({source}))",
			"}",
		]

	def _reuse(self, source: str, sink: str, found: Reuse, *, pointer: bool) -> List[str]:
		call = f"{source}.{self.ctx.method_name}()"
		if pointer == found.result_is_pointer:
			return [f"{sink} = {call}"]
		if pointer:
			return ["{", f"retV := {call}", f"{sink} = &retV", "}"]
		return ["{", f"retV := {call}", f"{sink} = *retV", "}"]

	def _cutoff(self, path: str, depth: int) -> None:
		ctx = self.ctx
		where = field_path(ctx.root_name, path) if path and not path.startswith("[") else ctx.root_name + path
		logger.debug("reached max depth %d; stopped recursion at %s", depth, where)
		ctx.diagnostics.append(
			Diagnostic(
				message=f"reached max depth {depth}; stopped recursion at {where}",
				code="W_MAX_DEPTH",
				phase="walk",
				severity="warning",
				notes=[where],
			)
		)


__all__ = ["ELEMENTS", "KEYS", "VALUES", "WalkContext", "Walker", "field_path", "needs_deref"]
