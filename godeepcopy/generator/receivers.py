# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Receiver name inference.

Generated methods reuse the receiver variable name the package's authors
already chose for a type (`func (s *Server) ...` -> `s`). Previously
generated files are ignored so the generator never learns from its own
output.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Dict, Iterable

from godeepcopy.core.errors import MissingSyntaxError
from godeepcopy.golang import ast as A
from godeepcopy.golang.loader import Package

logger = logging.getLogger(__name__)

GENERATED_MARKER = re.compile(r"^// Code generated .* DO NOT EDIT\.$")


def is_generated(f: A.File) -> bool:
	return any(GENERATED_MARKER.match(c) for c in f.comments)


class ReceiverNameTable:
	"""Type name -> receiver variable name; the first recorded name wins."""

	def __init__(self) -> None:
		self._lock = threading.Lock()
		self._names: Dict[str, str] = {}

	def add(self, type_name: str, var_name: str) -> None:
		with self._lock:
			self._names.setdefault(type_name, var_name)

	def get(self, type_name: str, default: str) -> str:
		return self._names.get(type_name, default)

	def as_dict(self) -> Dict[str, str]:
		return dict(self._names)

	def visit(self, files: Iterable[A.File]) -> None:
		for f in files:
			if is_generated(f):
				logger.debug("skipping generated file %s", f.path)
				continue
			for fn in f.funcs:
				recv = fn.receiver
				# `func (Server) ...` and `func (_ *Server) ...` name nothing usable.
				if recv is None or not recv.name or recv.name == "_":
					continue
				self.add(recv.type_name, recv.name)


def receiver_names(package: Package) -> ReceiverNameTable:
	"""Scan `package` for hand-written receiver names."""
	if not package.syntax:
		raise MissingSyntaxError(message="package has no syntax to infer receiver names from", package=package.path)
	table = ReceiverNameTable()
	table.visit(package.syntax)
	return table


__all__ = ["GENERATED_MARKER", "ReceiverNameTable", "is_generated", "receiver_names"]
