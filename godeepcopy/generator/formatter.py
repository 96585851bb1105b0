# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Formatters turn the assembled text into canonical Go source.

A formatter is also the only validity check the generated text gets: it
raises `FormatError` when the text is not well-formed.
"""

from __future__ import annotations

import subprocess
from typing import List, Protocol

from godeepcopy.golang.parser import GoSyntaxError, parse_file


class FormatError(Exception):
	"""The formatter rejected its input."""


class Formatter(Protocol):
	"""Canonicalise Go source text, raising `FormatError` on invalid input."""

	def format(self, source: str) -> str:
		...


class BuiltinFormatter:
	"""
	Validate with the project's own Go grammar, then lay the text out.

	Layout is deliberately small: tab indentation by brace/paren depth,
	no trailing whitespace, at most one blank line in a row and a single
	trailing newline. It does not align comments or struct fields.
	"""

	def format(self, source: str) -> str:
		try:
			parse_file(source, path="<generated>")
		except GoSyntaxError as err:
			raise FormatError(str(err)) from err

		out: List[str] = []
		depth = 0
		for raw in source.splitlines():
			line = raw.strip()
			if not line:
				if out and out[-1]:
					out.append("")
				continue
			indent = depth - 1 if line[0] in ")}" else depth
			out.append("\t" * max(indent, 0) + line)
			depth = max(depth + _nesting_delta(line), 0)
		while out and not out[-1]:
			out.pop()
		return "\n".join(out) + "\n"


def _nesting_delta(line: str) -> int:
	"""Opened minus closed `{`/`(` on one line, ignoring literals and comments."""
	delta = 0
	quote: str | None = None
	i = 0
	while i < len(line):
		ch = line[i]
		if quote is not None:
			if ch == "\\" and quote != "`":
				i += 2
				continue
			if ch == quote:
				quote = None
		elif ch in "\"'`":
			quote = ch
		elif line.startswith("//", i):
			break
		elif ch in "{(":
			delta += 1
		elif ch in "})":
			delta -= 1
		i += 1
	return delta


class GofmtFormatter:
	"""Pipe the text through the `gofmt` executable."""

	def __init__(self, binary: str = "gofmt") -> None:
		self.binary = binary

	def format(self, source: str) -> str:
		try:
			proc = subprocess.run([self.binary], input=source, capture_output=True, text=True)
		except OSError as err:
			raise FormatError(f"cannot run {self.binary}: {err}") from err
		if proc.returncode != 0:
			raise FormatError(proc.stderr.strip() or f"{self.binary} exited with status {proc.returncode}")
		return proc.stdout


__all__ = ["FormatError", "Formatter", "BuiltinFormatter", "GofmtFormatter"]
