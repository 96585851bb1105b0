# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go type model shared by the loader and the generator.

Types form a graph: `Named` nodes own an underlying type and a method set,
composites (`Struct`, `Slice`, `Map`, ...) point at their component types.
Recursion in the graph only ever passes through a `Named` node, which is
the only mutable class (its underlying type and methods are filled in after
creation so that self/mutually-referencing declarations can be resolved).

The walker never dispatches on the raw model. `classify()` maps every type
to one member of the closed `Shape` union and the walker branches on that.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
import typing
from typing import Callable, List, Optional, Tuple


@dataclass(frozen=True)
class PackageRef:
	"""Declaring package of a named type: package name + import path."""

	name: str
	path: str


class Type:
	"""Base of every type in the model."""

	def underlying(self) -> "Type":
		return self


@dataclass(frozen=True)
class Basic(Type):
	"""Predeclared or otherwise opaque type (int, string, error, ...)."""

	name: str


@dataclass(frozen=True)
class TypeParam(Type):
	"""Type parameter of a generic declaration (`T` in `List[T any]`)."""

	name: str


@dataclass(frozen=True)
class Field:
	name: str
	type: Type
	embedded: bool = False
	tag: str | None = None  # raw literal text, quotes included

	@property
	def exported(self) -> bool:
		return self.name[:1].isupper()


@dataclass(frozen=True)
class Struct(Type):
	fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class Slice(Type):
	elem: Type


@dataclass(frozen=True)
class Array(Type):
	"""Fixed-size array; `length` is the source text of the length expression."""

	length: str
	elem: Type


@dataclass(frozen=True)
class Map(Type):
	key: Type
	elem: Type


@dataclass(frozen=True)
class Pointer(Type):
	elem: Type


class ChanDir(Enum):
	BOTH = auto()
	SEND = auto()
	RECV = auto()


@dataclass(frozen=True)
class Chan(Type):
	elem: Type
	direction: ChanDir = ChanDir.BOTH


@dataclass(frozen=True)
class Func(Type):
	"""Function type. When `variadic`, the last parameter holds the element type of `...T`."""

	params: Tuple[Type, ...] = ()
	results: Tuple[Type, ...] = ()
	variadic: bool = False


@dataclass(frozen=True)
class Interface(Type):
	"""Interface type: methods in source order plus embedded types and unions. Copied shallowly."""

	methods: Tuple[Tuple[str, Func], ...] = ()
	embeds: Tuple[Type, ...] = ()


@dataclass(frozen=True)
class Union(Type):
	"""Constraint union `~int | string`; only valid inside interfaces."""

	terms: Tuple[Type, ...]
	tilde: Tuple[bool, ...]


@dataclass(frozen=True)
class Signature:
	"""Method signature as far as reuse detection needs it."""

	param_count: int
	results: Tuple[Type, ...]
	recv: Optional[Type] = None


@dataclass(frozen=True)
class Method:
	name: str
	signature: Signature


_OPAQUE = Basic("<opaque>")


class Named(Type):
	"""
	A declared type `type Name <underlying>`.

	- `opaque` named types come from packages outside the loaded module
	  (stdlib/third-party); their structure is unknown so they copy shallowly.
	- Instantiations of generic types (`List[int]`) keep a pointer to their
	  `origin` and share its method set. They are treated as opaque for the
	  structural walk but still take part in method reuse.
	"""

	def __init__(
		self,
		package: Optional[PackageRef],
		name: str,
		underlying: Optional[Type] = None,
		*,
		type_params: Tuple[str, ...] = (),
		origin: Optional["Named"] = None,
		type_args: Tuple[Type, ...] = (),
		opaque: bool = False,
	) -> None:
		self.package = package
		self.name = name
		self._underlying = underlying
		self.type_params = type_params
		self.origin = origin
		self.type_args = type_args
		self.opaque = opaque
		self._methods: List[Method] = []

	def __repr__(self) -> str:
		return f"Named({self.qualified_name})"

	@property
	def qualified_name(self) -> str:
		if self.package is None:
			return self.name
		return f"{self.package.path}.{self.name}"

	@property
	def methods(self) -> List[Method]:
		if self.origin is not None:
			return self.origin.methods
		return self._methods

	def add_method(self, method: Method) -> None:
		self._methods.append(method)

	def set_underlying(self, t: Type) -> None:
		self._underlying = t

	def underlying(self) -> Type:
		if self.opaque or self.origin is not None:
			return _OPAQUE
		seen: set[int] = set()
		u = self._underlying
		# `type A B` stores B itself; chase until a non-named type.
		while isinstance(u, Named):
			if id(u) in seen or u.opaque or u.origin is not None:
				return _OPAQUE
			seen.add(id(u))
			u = u._underlying
		return u if u is not None else _OPAQUE


def identical(a: Type, b: Type) -> bool:
	"""
	Go type identity.

	Named types are identical iff they are the same declaration (package path
	+ name) with identical type arguments; everything else compares
	structurally.
	"""
	if a is b:
		return True
	if isinstance(a, Named) or isinstance(b, Named):
		if not (isinstance(a, Named) and isinstance(b, Named)):
			return False
		oa = a.origin or a
		ob = b.origin or b
		if oa.name != ob.name or _package_path(oa) != _package_path(ob):
			return False
		if len(a.type_args) != len(b.type_args):
			return False
		return all(identical(x, y) for x, y in zip(a.type_args, b.type_args))
	if type(a) is not type(b):
		return False
	if isinstance(a, (Basic, TypeParam)):
		return a.name == b.name  # type: ignore[attr-defined]
	if isinstance(a, Struct):
		fb = b.fields  # type: ignore[attr-defined]
		if len(a.fields) != len(fb):
			return False
		return all(
			f.name == g.name and f.embedded == g.embedded and f.tag == g.tag and identical(f.type, g.type)
			for f, g in zip(a.fields, fb)
		)
	if isinstance(a, (Slice, Pointer)):
		return identical(a.elem, b.elem)  # type: ignore[attr-defined]
	if isinstance(a, Array):
		return a.length == b.length and identical(a.elem, b.elem)  # type: ignore[attr-defined]
	if isinstance(a, Map):
		return identical(a.key, b.key) and identical(a.elem, b.elem)  # type: ignore[attr-defined]
	if isinstance(a, Chan):
		return a.direction is b.direction and identical(a.elem, b.elem)  # type: ignore[attr-defined]
	if isinstance(a, Func):
		return a.variadic == b.variadic and _all_identical(a.params, b.params) and _all_identical(a.results, b.results)  # type: ignore[attr-defined]
	if isinstance(a, Interface):
		mb = b.methods  # type: ignore[attr-defined]
		if [n for n, _ in a.methods] != [n for n, _ in mb]:
			return False
		return all(identical(f, g) for (_, f), (_, g) in zip(a.methods, mb)) and _all_identical(a.embeds, b.embeds)  # type: ignore[attr-defined]
	if isinstance(a, Union):
		return a.tilde == b.tilde and _all_identical(a.terms, b.terms)  # type: ignore[attr-defined]
	return False


def _all_identical(xs: Tuple[Type, ...], ys: Tuple[Type, ...]) -> bool:
	return len(xs) == len(ys) and all(identical(x, y) for x, y in zip(xs, ys))


def _package_path(n: Named) -> str | None:
	return n.package.path if n.package is not None else None


def reduce_pointer(t: Type) -> Tuple[Type, bool]:
	"""Strip at most one pointer indirection; report whether one was stripped."""
	if isinstance(t, Pointer):
		return t.elem, True
	return t, False


def method_set(t: Type) -> Tuple[Method, ...]:
	"""Declared methods of `t` (value and pointer receivers alike)."""
	if isinstance(t, Named):
		return tuple(t.methods)
	return ()


# --- Shapes -----------------------------------------------------------------


@dataclass(frozen=True)
class StructShape:
	fields: Tuple[Field, ...]


@dataclass(frozen=True)
class SliceShape:
	elem: Type


@dataclass(frozen=True)
class ArrayShape:
	length: str
	elem: Type


@dataclass(frozen=True)
class MapShape:
	key: Type
	elem: Type


@dataclass(frozen=True)
class PointerShape:
	elem: Type


@dataclass(frozen=True)
class ChanShape:
	elem: Type


@dataclass(frozen=True)
class BasicShape:
	"""Nothing to deep-copy: the enclosing whole-value assignment suffices."""

	type: Type


Shape = typing.Union[StructShape, SliceShape, ArrayShape, MapShape, PointerShape, ChanShape, BasicShape]


def classify(t: Type) -> Shape:
	"""Classify `t` by the structure of its underlying type."""
	u = t.underlying()
	if isinstance(u, Struct):
		return StructShape(u.fields)
	if isinstance(u, Slice):
		return SliceShape(u.elem)
	if isinstance(u, Array):
		return ArrayShape(u.length, u.elem)
	if isinstance(u, Map):
		return MapShape(u.key, u.elem)
	if isinstance(u, Pointer):
		return PointerShape(u.elem)
	if isinstance(u, Chan):
		return ChanShape(u.elem)
	return BasicShape(u)


# --- Rendering --------------------------------------------------------------

Qualifier = Callable[[PackageRef], str]


def type_string(t: Type, qualifier: Qualifier) -> str:
	"""
	Render `t` as Go source text.

	`qualifier` maps a declaring package to the prefix used in the output
	(empty string means "same package, no prefix").
	"""
	if isinstance(t, Named):
		decl = t.origin or t
		prefix = qualifier(decl.package) if decl.package is not None else ""
		text = f"{prefix}.{decl.name}" if prefix else decl.name
		if t.type_args:
			text += "[" + ", ".join(type_string(a, qualifier) for a in t.type_args) + "]"
		return text
	if isinstance(t, (Basic, TypeParam)):
		return t.name
	if isinstance(t, Pointer):
		return "*" + type_string(t.elem, qualifier)
	if isinstance(t, Slice):
		return "[]" + type_string(t.elem, qualifier)
	if isinstance(t, Array):
		return f"[{t.length}]" + type_string(t.elem, qualifier)
	if isinstance(t, Map):
		return f"map[{type_string(t.key, qualifier)}]{type_string(t.elem, qualifier)}"
	if isinstance(t, Chan):
		elem = type_string(t.elem, qualifier)
		if t.direction is ChanDir.SEND:
			return "chan<- " + elem
		if t.direction is ChanDir.RECV:
			return "<-chan " + elem
		if isinstance(t.elem, Chan) and t.elem.direction is ChanDir.RECV:
			return f"chan ({elem})"
		return "chan " + elem
	if isinstance(t, Struct):
		if not t.fields:
			return "struct{}"
		parts = []
		for f in t.fields:
			ty = type_string(f.type, qualifier)
			text = ty if f.embedded else f"{f.name} {ty}"
			if f.tag is not None:
				text += f" {f.tag}"
			parts.append(text)
		return "struct{ " + "; ".join(parts) + " }"
	if isinstance(t, Func):
		return "func" + _signature_string(t, qualifier)
	if isinstance(t, Interface):
		parts = [name + _signature_string(sig, qualifier) for name, sig in t.methods]
		parts.extend(type_string(e, qualifier) for e in t.embeds)
		return "interface{ " + "; ".join(parts) + " }" if parts else "interface{}"
	if isinstance(t, Union):
		return " | ".join(("~" if tilde else "") + type_string(term, qualifier) for term, tilde in zip(t.terms, t.tilde))
	raise TypeError(f"unsupported type {t!r}")


def _signature_string(f: Func, qualifier: Qualifier) -> str:
	params = [type_string(p, qualifier) for p in f.params]
	if f.variadic and params:
		params[-1] = "..." + params[-1]
	text = "(" + ", ".join(params) + ")"
	results = [type_string(r, qualifier) for r in f.results]
	if len(results) == 1:
		return f"{text} {results[0]}"
	if results:
		return f"{text} (" + ", ".join(results) + ")"
	return text

__all__ = [
	"PackageRef",
	"Type",
	"Basic",
	"TypeParam",
	"Field",
	"Struct",
	"Slice",
	"Array",
	"Map",
	"Pointer",
	"ChanDir",
	"Chan",
	"Func",
	"Interface",
	"Union",
	"Signature",
	"Method",
	"Named",
	"identical",
	"reduce_pointer",
	"method_set",
	"Shape",
	"StructShape",
	"SliceShape",
	"ArrayShape",
	"MapShape",
	"PointerShape",
	"ChanShape",
	"BasicShape",
	"classify",
	"Qualifier",
	"type_string",
]
