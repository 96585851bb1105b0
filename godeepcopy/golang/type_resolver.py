# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolve declaration syntax into the `types_core` model for one package.

Resolution runs in three steps so that declarations may reference each other
in any order (and recursively):
  1. declare a `Named` shell for every non-alias type spec,
  2. resolve underlying types (aliases resolve on first use),
  3. attach methods from func decls with receivers.

Imports inside the loaded module are resolved through the `importer`
callback; everything else becomes an opaque named type.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

from godeepcopy.core import types_core as T
from godeepcopy.golang import ast as A

if TYPE_CHECKING:
	from godeepcopy.golang.loader import Package

logger = logging.getLogger(__name__)

Importer = Callable[[str], Optional["Package"]]

PREDECLARED = frozenset(
	{
		"any",
		"bool",
		"byte",
		"comparable",
		"complex64",
		"complex128",
		"error",
		"float32",
		"float64",
		"int",
		"int8",
		"int16",
		"int32",
		"int64",
		"rune",
		"string",
		"uint",
		"uint8",
		"uint16",
		"uint32",
		"uint64",
		"uintptr",
	}
)

_MAJOR_VERSION_RE = re.compile(r"v\d+")
_GOPKG_VERSION_RE = re.compile(r"\.v\d+$")
_NON_IDENT_RE = re.compile(r"\W")


def guess_package_name(import_path: str) -> str:
	"""Best-effort package name for an import path we do not load."""
	segments = import_path.split("/")
	last = segments[-1]
	if _MAJOR_VERSION_RE.fullmatch(last) and len(segments) > 1:
		last = segments[-2]
	last = _GOPKG_VERSION_RE.sub("", last)
	if last.startswith("go-"):
		last = last[3:]
	return _NON_IDENT_RE.sub("_", last)


class TypeResolver:
	"""Populate `package.scope` and method sets from `package.syntax`."""

	def __init__(self, package: "Package", importer: Importer) -> None:
		self.package = package
		self.importer = importer
		self._alias_specs: Dict[str, Tuple[A.TypeSpec, A.File]] = {}
		self._resolving_aliases: set[str] = set()
		self._opaque: Dict[Tuple[str, str], T.Named] = {}

	def resolve(self) -> None:
		scope = self.package.scope
		ref = self.package.ref
		for f in self.package.syntax:
			for spec in f.types:
				if spec.alias:
					self._alias_specs[spec.name] = (spec, f)
					continue
				scope[spec.name] = T.Named(ref, spec.name, type_params=tuple(spec.type_params))

		for f in self.package.syntax:
			file_scope = FileScope(self, f)
			for spec in f.types:
				if spec.alias:
					self.lookup_local(spec.name)
					continue
				named = scope[spec.name]
				assert isinstance(named, T.Named)
				named.set_underlying(file_scope.resolve(spec.type_expr, spec.type_params))

		for f in self.package.syntax:
			file_scope = FileScope(self, f)
			for fn in f.funcs:
				if fn.receiver is not None:
					self._attach_method(file_scope, fn)

	def lookup_local(self, name: str) -> Optional[T.Type]:
		"""Package-level type name, resolving aliases on demand."""
		found = self.package.scope.get(name)
		if found is not None:
			return found
		entry = self._alias_specs.get(name)
		if entry is None or name in self._resolving_aliases:
			return None
		spec, f = entry
		self._resolving_aliases.add(name)
		try:
			target = FileScope(self, f).resolve(spec.type_expr, spec.type_params)
		finally:
			self._resolving_aliases.discard(name)
		self.package.scope[name] = target
		return target

	def opaque(self, package: T.PackageRef, name: str) -> T.Named:
		key = (package.path, name)
		if key not in self._opaque:
			self._opaque[key] = T.Named(package, name, opaque=True)
		return self._opaque[key]

	def _attach_method(self, file_scope: "FileScope", fn: A.FuncDecl) -> None:
		assert fn.receiver is not None
		named = self.package.scope.get(fn.receiver.type_name)
		if not isinstance(named, T.Named) or named.package != self.package.ref:
			logger.debug("ignoring method %s on unknown receiver %s", fn.name, fn.receiver.type_name)
			return
		params = fn.receiver.type_params
		recv: T.Type = named
		if params:
			recv = T.Named(named.package, named.name, origin=named, type_args=tuple(T.TypeParam(p) for p in params))
		if fn.receiver.pointer:
			recv = T.Pointer(recv)
		results = tuple(file_scope.resolve(r, params) for r in fn.results)
		named.add_method(T.Method(fn.name, T.Signature(param_count=fn.param_count, results=results, recv=recv)))


class FileScope:
	"""Name resolution in the context of one file (its imports)."""

	def __init__(self, resolver: TypeResolver, f: A.File) -> None:
		self.resolver = resolver
		self.file = f
		self._imports: Dict[str, Tuple[str, Optional["Package"]]] = {}
		self._dot_imports: List["Package"] = []
		for spec in f.imports:
			if spec.alias == "_":
				continue
			pkg = resolver.importer(spec.path)
			if spec.alias == ".":
				if pkg is not None:
					self._dot_imports.append(pkg)
				continue
			if spec.alias is not None:
				local = spec.alias
			elif pkg is not None:
				local = pkg.name
			else:
				local = guess_package_name(spec.path)
			self._imports[local] = (spec.path, pkg)

	def resolve(self, expr: A.TypeExpr, type_params: Iterable[str] = ()) -> T.Type:
		params = set(type_params)
		return self._resolve(expr, params)

	def _resolve(self, expr: A.TypeExpr, params: set[str]) -> T.Type:
		if isinstance(expr, A.TypeName):
			return self._type_name(expr, params)
		if isinstance(expr, A.PointerExpr):
			return T.Pointer(self._resolve(expr.elem, params))
		if isinstance(expr, A.SliceExpr):
			return T.Slice(self._resolve(expr.elem, params))
		if isinstance(expr, A.ArrayExpr):
			return T.Array(expr.length, self._resolve(expr.elem, params))
		if isinstance(expr, A.MapExpr):
			return T.Map(self._resolve(expr.key, params), self._resolve(expr.elem, params))
		if isinstance(expr, A.ChanExpr):
			direction = {"send": T.ChanDir.SEND, "recv": T.ChanDir.RECV}.get(expr.direction, T.ChanDir.BOTH)
			return T.Chan(self._resolve(expr.elem, params), direction)
		if isinstance(expr, A.StructExpr):
			fields: List[T.Field] = []
			for decl in expr.fields:
				ty = self._resolve(decl.type_expr, params)
				for name in decl.names:
					fields.append(T.Field(name=name, type=ty, embedded=decl.embedded, tag=decl.tag))
			return T.Struct(tuple(fields))
		if isinstance(expr, A.FuncExpr):
			return self._func(expr, params)
		if isinstance(expr, A.InterfaceExpr):
			methods = tuple((m.name, self._func(m.signature, params)) for m in expr.methods)
			return T.Interface(methods, tuple(self._resolve(e, params) for e in expr.embeds))
		if isinstance(expr, A.UnionExpr):
			return T.Union(tuple(self._resolve(t, params) for t in expr.terms), tuple(expr.tilde))
		raise TypeError(f"unsupported type expression {expr!r}")

	def _func(self, expr: A.FuncExpr, params: set[str]) -> T.Func:
		return T.Func(
			tuple(self._resolve(p, params) for p in expr.params),
			tuple(self._resolve(r, params) for r in expr.results),
			expr.variadic,
		)

	def _type_name(self, expr: A.TypeName, params: set[str]) -> T.Type:
		args = tuple(self._resolve(a, params) for a in expr.args)
		if expr.package is not None:
			return self._qualified(expr.package, expr.name, args)
		if expr.name in params:
			return T.TypeParam(expr.name)
		local = self.resolver.lookup_local(expr.name)
		if local is not None:
			return _instantiate(local, args)
		if expr.name in PREDECLARED:
			return T.Basic(expr.name)
		for pkg in self._dot_imports:
			found = pkg.scope.get(expr.name)
			if found is not None:
				return _instantiate(found, args)
		logger.debug("%s: unresolved type name %s", self.file.path, expr.name)
		return T.Basic(expr.name)

	def _qualified(self, local: str, name: str, args: Tuple[T.Type, ...]) -> T.Type:
		entry = self._imports.get(local)
		if entry is None:
			# Unknown qualifier: keep the reference opaque under its own name.
			return self.resolver.opaque(T.PackageRef(local, local), name)
		path, pkg = entry
		if pkg is not None:
			found = pkg.scope.get(name)
			if found is not None:
				return _instantiate(found, args)
			return self.resolver.opaque(pkg.ref, name)
		return self.resolver.opaque(T.PackageRef(guess_package_name(path), path), name)


def _instantiate(t: T.Type, args: Tuple[T.Type, ...]) -> T.Type:
	if not args or not isinstance(t, T.Named):
		return t
	return T.Named(t.package, t.name, origin=t, type_args=args)


__all__ = ["PREDECLARED", "TypeResolver", "FileScope", "guess_package_name"]
