# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by diagnostics and AST nodes.

Spans are built from Lark node metadata and carry best-effort file,
line and column information.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_meta(cls, meta: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a Lark tree `meta` (or token).

		Lark leaves `meta` empty for rules that matched no tokens; in that case
		only the file is known.
		"""
		if meta is None or getattr(meta, "empty", False):
			return cls(file=file)
		return cls(
			file=file,
			line=getattr(meta, "line", None),
			column=getattr(meta, "column", None),
			end_line=getattr(meta, "end_line", None),
			end_column=getattr(meta, "end_column", None),
		)


__all__ = ["Span"]
