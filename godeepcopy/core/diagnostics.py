"""
Common diagnostic structure for the loader/generator passes.

A diagnostic is a message plus optional span/metadata. Hard failures are
raised as `DeepCopyError`; diagnostics carry the non-fatal findings
(e.g. depth cutoffs) alongside a successful generation result.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a generator diagnostic (warning/info/etc.)."""

	message: str
	code: str | None = None
	# Phase label ("load", "walk", "assemble", ...). Lets JSON consumers
	# group findings without parsing the message text.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		head = f"{self.severity}"
		if self.code:
			head += f"[{self.code}]"
		return f"{head}: {self.message}"


__all__ = ["Diagnostic"]
