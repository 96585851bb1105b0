# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Skip path validation.

A skip path only has an effect when the walker tests it. `unmatched()`
follows each path through the type graph the same way the walker descends
(pointers transparent, the same depth accounting, the same export filter)
and reports the paths that name nothing. Reuse calls are not considered:
a path below a type with an existing copy method is still accepted.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from godeepcopy.core.types_core import (
	ArrayShape,
	MapShape,
	Named,
	PackageRef,
	PointerShape,
	SliceShape,
	StructShape,
	Type,
	classify,
)
from godeepcopy.generator.walker import ELEMENTS, KEYS, VALUES

_SEGMENT_RE = re.compile(r"\[[^\]]*\]|[^.\[\]]+")
_IDENT_RE = re.compile(r"[^\W\d]\w*")


def split_path(path: str) -> Optional[List[str]]:
	"""`A.B[*][key]` -> `["A", "B", "[*]", "[key]"]`; None when malformed."""
	segments = _SEGMENT_RE.findall(path)
	rendered = ""
	for seg in segments:
		if seg.startswith("["):
			if seg not in (ELEMENTS, KEYS, VALUES):
				return None
			rendered += seg
		else:
			if not _IDENT_RE.fullmatch(seg):
				return None
			rendered += f".{seg}" if rendered else seg
	if not segments or rendered != path:
		return None
	return segments


class SkipPathMatcher:
	def __init__(self, package: PackageRef, max_depth: int = 0) -> None:
		self.package = package
		self.max_depth = max_depth

	def matches(self, t: Type, path: str) -> bool:
		segments = split_path(path)
		if segments is None:
			return False
		return self._match(t, segments, 0, False)

	def unmatched(self, t: Type, paths: Iterable[str]) -> List[str]:
		return sorted(p for p in set(paths) if not self.matches(t, p))

	def _match(self, t: Type, segments: Sequence[str], depth: int, foreign: bool) -> bool:
		if self.max_depth > 0 and depth >= self.max_depth:
			return False
		if isinstance(t, Named) and t.package is not None:
			foreign = t.package.path != self.package.path
		depth += 1

		head, rest = segments[0], segments[1:]
		shape = classify(t)
		if isinstance(shape, PointerShape):
			return self._match(shape.elem, segments, depth, foreign)
		if isinstance(shape, StructShape):
			for f in shape.fields:
				if f.name != head or f.name == "_" or (foreign and not f.exported):
					continue
				return not rest or self._match(f.type, rest, depth, foreign)
			return False
		if isinstance(shape, (SliceShape, ArrayShape)) and head == ELEMENTS:
			return not rest or self._match(shape.elem, rest, depth, foreign)
		if isinstance(shape, MapShape) and head in (KEYS, VALUES):
			sub = shape.key if head == KEYS else shape.elem
			return not rest or self._match(sub, rest, depth, foreign)
		return False


__all__ = ["SkipPathMatcher", "split_path"]
