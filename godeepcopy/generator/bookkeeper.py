# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import table and identifier synthesis for one generation run.

The bookkeeper is the only state shared by every walk in a batch: it records
which foreign packages the emitted code references (and under which alias)
and derives temporary identifiers from sink expressions.
"""

from __future__ import annotations

import re
from typing import Dict, Set

from godeepcopy.core.types_core import PackageRef, Type, type_string

_NON_IDENT_RE = re.compile(r"\W")


def sanitize_import_path(path: str) -> str:
	"""`github.com/a/b-c` -> `github_com_a_b_c`."""
	return _NON_IDENT_RE.sub("_", path)


def sel_to_ident(sel: str) -> str:
	"""
	Turn a sink expression into an identifier fragment.

	`cp.Items[i].Tags` -> `cp_Items_i_Tags`; dereferences and parentheses
	are dropped.
	"""
	sel = sel.replace("(", "").replace(")", "").replace("*", "").replace("]", "")
	sel = sel.replace("[", "_").replace(".", "_")
	return _NON_IDENT_RE.sub("_", sel)


def _depth_suffix(base: str, depth: int) -> str:
	return base if depth <= 1 else f"{base}{depth}"


class Bookkeeper:
	"""Alias -> import path table plus collision-free temporary names."""

	def __init__(self, context: PackageRef) -> None:
		self.context = context
		self.imports: Dict[str, str] = {}
		# Aliases referenced since the last `start_function()`.
		self.used: Set[str] = set()

	def qualifier(self, package: PackageRef) -> str:
		"""
		Prefix for types declared in `package`, recording the import.

		An alias already bound to another path is replaced by the sanitized
		full path, so one alias never maps to two packages.
		"""
		if package.path == self.context.path:
			return ""
		alias = package.name
		bound = self.imports.get(alias)
		if bound is not None and bound != package.path:
			alias = sanitize_import_path(package.path)
		self.imports[alias] = package.path
		self.used.add(alias)
		return alias

	def start_function(self) -> None:
		self.used = set()

	def qualify(self, t: Type) -> str:
		return type_string(t, self.qualifier)

	def loop_index(self, depth: int) -> str:
		return _depth_suffix("i", depth)

	def map_key(self, depth: int) -> str:
		return _depth_suffix("k", depth)

	def map_value(self, depth: int) -> str:
		return _depth_suffix("v", depth)

	def temp(self, sink: str, var: str) -> str:
		"""Holder for a deep-copied map key/value: `cp_Index_k`."""
		return f"{sel_to_ident(sink)}_{var}"

	def import_lines(self) -> list[str]:
		"""Import specs sorted by path; the alias is omitted when redundant."""
		lines = []
		for alias, path in sorted(self.imports.items(), key=lambda item: (item[1], item[0])):
			if path.rsplit("/", 1)[-1] == alias:
				lines.append(f'"{path}"')
			else:
				lines.append(f'{alias} "{path}"')
		return lines


__all__ = ["Bookkeeper", "sanitize_import_path", "sel_to_ident"]
