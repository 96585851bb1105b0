# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Package loading (the type resolution service the generator consumes).

A package is a directory of `.go` files sharing one package clause. Its
import path is derived from the nearest `go.mod`; imports that stay inside
that module are loaded recursively so foreign struct types can be walked.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from godeepcopy.core.errors import PackageLoadError
from godeepcopy.core.types_core import Named, PackageRef, Type
from godeepcopy.golang import ast as A
from godeepcopy.golang.parser import GoSyntaxError, parse_file
from godeepcopy.golang.type_resolver import TypeResolver

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?", re.M)


@dataclass
class Package:
	"""A loaded Go package: its syntax plus the resolved package scope."""

	name: str
	path: str
	directory: Optional[Path] = None
	syntax: List[A.File] = field(default_factory=list)
	scope: Dict[str, Type] = field(default_factory=dict)

	@property
	def ref(self) -> PackageRef:
		return PackageRef(self.name, self.path)

	def lookup(self, name: str) -> Optional[Named]:
		"""
		Named type declared in this package under `name`.

		Aliases pointing elsewhere (`type A = other.B`) do not count: the
		generator can only add methods to types declared here.
		"""
		found = self.scope.get(name)
		if isinstance(found, Named) and found.package == self.ref and found.name == name and found.origin is None:
			return found
		return None


@dataclass(frozen=True)
class Module:
	root: Path
	path: str


def find_module(directory: Path) -> Optional[Module]:
	"""Nearest enclosing `go.mod` (walking up from `directory`)."""
	for candidate in (directory, *directory.parents):
		gomod = candidate / "go.mod"
		if gomod.is_file():
			m = _MODULE_RE.search(gomod.read_text(encoding="utf-8"))
			if m is not None:
				return Module(root=candidate, path=m.group(1))
	return None


class PackageLoader:
	"""Load packages with a per-run cache keyed by directory."""

	def __init__(self, *, include_tests: bool = False) -> None:
		self.include_tests = include_tests
		self._cache: Dict[Path, Package] = {}

	def load(self, directory: Path | str) -> Package:
		directory = Path(directory).resolve()
		cached = self._cache.get(directory)
		if cached is not None:
			return cached
		if not directory.is_dir():
			raise PackageLoadError(message=f"package directory '{directory}' does not exist", package=str(directory))

		files = self._source_files(directory)
		if not files:
			raise PackageLoadError(message=f"no Go source files in '{directory}'", package=str(directory))

		parsed: List[A.File] = []
		for path in files:
			try:
				parsed.append(parse_file(path.read_text(encoding="utf-8"), path=str(path)))
			except GoSyntaxError as err:
				raise PackageLoadError(message="cannot parse Go source", package=str(directory), detail=str(err)) from err

		# Files with a different package clause (e.g. external `_test`
		# packages) are not part of this package.
		name = Counter(f.package for f in parsed).most_common(1)[0][0]
		syntax = [f for f in parsed if f.package == name]

		module = find_module(directory)
		pkg = Package(name=name, path=_import_path(directory, module, name), directory=directory, syntax=syntax)
		self._cache[directory] = pkg
		TypeResolver(pkg, importer=lambda import_path: self._import(import_path, module)).resolve()
		logger.debug("loaded package %s (%s) from %s: %d file(s)", pkg.name, pkg.path, directory, len(syntax))
		return pkg

	def _source_files(self, directory: Path) -> List[Path]:
		return sorted(
			p for p in directory.glob("*.go") if p.is_file() and (self.include_tests or not p.name.endswith("_test.go"))
		)

	def _import(self, import_path: str, module: Optional[Module]) -> Optional[Package]:
		if module is None:
			return None
		if import_path != module.path and not import_path.startswith(module.path + "/"):
			return None
		rel = import_path[len(module.path):].lstrip("/")
		directory = module.root / rel if rel else module.root
		if not directory.is_dir() or not self._source_files(directory):
			logger.debug("import %s is inside module %s but has no sources", import_path, module.path)
			return None
		return self.load(directory)


def _import_path(directory: Path, module: Optional[Module], name: str) -> str:
	if module is None:
		return name
	rel = directory.relative_to(module.root).as_posix()
	return module.path if rel == "." else f"{module.path}/{rel}"


def load_package(directory: Path | str, *, include_tests: bool = False) -> Package:
	"""Load the package in `directory` (and in-module imports it references)."""
	return PackageLoader(include_tests=include_tests).load(directory)


__all__ = ["Package", "Module", "PackageLoader", "find_module", "load_package"]
