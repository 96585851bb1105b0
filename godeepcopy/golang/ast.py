# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration-level syntax tree for Go source files.

Only what type resolution and receiver-name inference need is modelled:
imports, type specs (with full type expressions), and function/method
signatures. Statements are not represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from godeepcopy.core.span import Span


class TypeExpr:
	"""Base of syntactic type expressions."""

	span: Span


@dataclass
class TypeName(TypeExpr):
	name: str
	package: Optional[str] = None  # import alias/package name for `pkg.T`
	args: List[TypeExpr] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class PointerExpr(TypeExpr):
	elem: TypeExpr
	span: Span = field(default_factory=Span)


@dataclass
class SliceExpr(TypeExpr):
	elem: TypeExpr
	span: Span = field(default_factory=Span)


@dataclass
class ArrayExpr(TypeExpr):
	length: str
	elem: TypeExpr
	span: Span = field(default_factory=Span)


@dataclass
class MapExpr(TypeExpr):
	key: TypeExpr
	elem: TypeExpr
	span: Span = field(default_factory=Span)


@dataclass
class ChanExpr(TypeExpr):
	elem: TypeExpr
	direction: str = "both"  # "both" | "send" | "recv"
	span: Span = field(default_factory=Span)


@dataclass
class FieldDecl:
	names: List[str]
	type_expr: TypeExpr
	embedded: bool = False
	tag: Optional[str] = None
	span: Span = field(default_factory=Span)


@dataclass
class StructExpr(TypeExpr):
	fields: List[FieldDecl] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class FuncExpr(TypeExpr):
	"""`func(params) results`; a variadic last parameter is stored as its element type."""

	params: List[TypeExpr] = field(default_factory=list)
	results: List[TypeExpr] = field(default_factory=list)
	variadic: bool = False
	span: Span = field(default_factory=Span)


@dataclass
class InterfaceMethod:
	name: str
	signature: FuncExpr


@dataclass
class UnionExpr(TypeExpr):
	"""Type set element of a constraint interface: `~int | string`."""

	terms: List[TypeExpr] = field(default_factory=list)
	tilde: List[bool] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class InterfaceExpr(TypeExpr):
	methods: List[InterfaceMethod] = field(default_factory=list)
	embeds: List[TypeExpr] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class ImportSpec:
	path: str
	alias: Optional[str] = None  # explicit alias, "." or "_"
	span: Span = field(default_factory=Span)


@dataclass
class TypeSpec:
	name: str
	type_expr: TypeExpr
	alias: bool = False
	type_params: List[str] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class Receiver:
	type_name: str
	name: Optional[str] = None
	pointer: bool = False
	type_params: List[str] = field(default_factory=list)


@dataclass
class FuncDecl:
	name: str
	receiver: Optional[Receiver]
	param_count: int
	results: List[TypeExpr] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass
class File:
	path: str
	package: str
	imports: List[ImportSpec] = field(default_factory=list)
	types: List[TypeSpec] = field(default_factory=list)
	funcs: List[FuncDecl] = field(default_factory=list)
	comments: List[str] = field(default_factory=list)


__all__ = [
	"TypeExpr",
	"TypeName",
	"PointerExpr",
	"SliceExpr",
	"ArrayExpr",
	"MapExpr",
	"ChanExpr",
	"FieldDecl",
	"StructExpr",
	"FuncExpr",
	"InterfaceMethod",
	"UnionExpr",
	"InterfaceExpr",
	"ImportSpec",
	"TypeSpec",
	"Receiver",
	"FuncDecl",
	"File",
]
