# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from godeepcopy.golang import ast as A
from godeepcopy.golang.parser import GoSyntaxError, parse_file, parse_type_expr


def test_parse_package_and_imports() -> None:
	source = """// Package demo is a fixture.
package demo

import "fmt"

import (
	"time"
	m "example.com/demo/model"
	. "example.com/demo/dot"
	_ "embed"
)
"""
	f = parse_file(source, path="demo.go")
	assert f.package == "demo"
	assert [(i.path, i.alias) for i in f.imports] == [
		("fmt", None),
		("time", None),
		("example.com/demo/model", "m"),
		("example.com/demo/dot", "."),
		("embed", "_"),
	]
	assert f.comments == ["// Package demo is a fixture."]


def test_parse_struct_fields() -> None:
	source = """package demo

type Item struct {
	Name, Alias string `json:"name"`
	Tags        []string
	*Base
	model.Meta
	Counts map[string][4]int
	Events chan<- *Event
	Done   <-chan struct{}
}
"""
	f = parse_file(source)
	(spec,) = f.types
	assert spec.name == "Item"
	assert not spec.alias
	st = spec.type_expr
	assert isinstance(st, A.StructExpr)
	names = [d.names for d in st.fields]
	assert names == [["Name", "Alias"], ["Tags"], ["Base"], ["Meta"], ["Counts"], ["Events"], ["Done"]]
	assert st.fields[0].tag == '`json:"name"`'

	base = st.fields[2]
	assert base.embedded
	assert isinstance(base.type_expr, A.PointerExpr)
	meta = st.fields[3].type_expr
	assert isinstance(meta, A.TypeName) and meta.package == "model" and meta.name == "Meta"

	counts = st.fields[4].type_expr
	assert isinstance(counts, A.MapExpr)
	assert isinstance(counts.elem, A.ArrayExpr) and counts.elem.length == "4"

	events = st.fields[5].type_expr
	assert isinstance(events, A.ChanExpr) and events.direction == "send"
	assert isinstance(events.elem, A.PointerExpr)
	done = st.fields[6].type_expr
	assert isinstance(done, A.ChanExpr) and done.direction == "recv"


def test_parse_grouped_types_aliases_and_generics() -> None:
	source = """package demo

type (
	ID    string
	Alias = Item
	List[T any] struct { items []T }
	Pair[K comparable, V any] struct { Key K; Value V }
	Grid [Size][Size]int
)
"""
	specs = {s.name: s for s in parse_file(source).types}
	assert isinstance(specs["ID"].type_expr, A.TypeName)
	assert specs["Alias"].alias
	assert specs["List"].type_params == ["T"]
	assert specs["Pair"].type_params == ["K", "V"]
	pair = specs["Pair"].type_expr
	assert isinstance(pair, A.StructExpr)
	assert [d.names for d in pair.fields] == [["Key"], ["Value"]]
	grid = specs["Grid"].type_expr
	assert isinstance(grid, A.ArrayExpr) and grid.length == "Size"
	assert specs["Grid"].type_params == []


def test_parse_methods_and_signatures() -> None:
	source = """package demo

func New(a, b int, c string) *Item { return nil }

func (it *Item) DeepCopy() *Item {
	cp := *it
	return &cp
}

func (Item) Len() (n int) { return 0 }

func (l List[T]) Get(i int) (T, error) {
	return l.items[i], nil
}

func (s Server) Start(ctx context.Context, opts ...Option) error {
	go func() {
		for {
			select {}
		}
	}()
	return nil
}
"""
	funcs = {fn.name: fn for fn in parse_file(source).funcs}

	new = funcs["New"]
	assert new.receiver is None
	assert new.param_count == 3

	dc = funcs["DeepCopy"]
	assert dc.receiver == A.Receiver(type_name="Item", name="it", pointer=True)
	assert dc.param_count == 0
	(result,) = dc.results
	assert isinstance(result, A.PointerExpr)

	length = funcs["Len"]
	assert length.receiver is not None and length.receiver.name is None
	(named,) = length.results
	assert isinstance(named, A.TypeName) and named.name == "int"

	get = funcs["Get"]
	assert get.receiver is not None and get.receiver.type_params == ["T"]
	t, err = get.results
	assert isinstance(t, A.TypeName) and t.name == "T"
	assert isinstance(err, A.TypeName) and err.name == "error"

	start = funcs["Start"]
	assert start.param_count == 2


def test_var_and_const_declarations_are_skipped() -> None:
	source = """package demo

var defaults = map[string]int{"a": 1, "b": 2}

const (
	A = iota
	B
)

type T struct{ X int; Y []string }
"""
	f = parse_file(source)
	assert [s.name for s in f.types] == ["T"]
	st = f.types[0].type_expr
	assert isinstance(st, A.StructExpr)
	assert [d.names for d in st.fields] == [["X"], ["Y"]]


def test_interface_and_func_types_are_structured() -> None:
	source = """package demo

type Getter interface {
	Get(key string, def ...int) (int, error)
	fmt.Stringer

	Close()
}

type Number interface{ ~int | ~float64 | Big }

type Handler func(w Writer, r *Request) error

type Visit func(a, b int, opts ...func(*Node)) (stop bool, err error)
"""
	specs = {s.name: s.type_expr for s in parse_file(source).types}

	getter = specs["Getter"]
	assert isinstance(getter, A.InterfaceExpr)
	assert [m.name for m in getter.methods] == ["Get", "Close"]
	get = getter.methods[0].signature
	assert len(get.params) == 2 and get.variadic
	assert isinstance(get.params[1], A.TypeName) and get.params[1].name == "int"
	assert [r.name for r in get.results] == ["int", "error"]
	(embed,) = getter.embeds
	assert isinstance(embed, A.TypeName) and embed.package == "fmt" and embed.name == "Stringer"
	assert getter.methods[1].signature == A.FuncExpr(span=getter.methods[1].signature.span)

	number = specs["Number"]
	assert isinstance(number, A.InterfaceExpr)
	(union,) = number.embeds
	assert isinstance(union, A.UnionExpr)
	assert [t.name for t in union.terms] == ["int", "float64", "Big"]
	assert union.tilde == [True, True, False]

	handler = specs["Handler"]
	assert isinstance(handler, A.FuncExpr)
	assert [type(p) for p in handler.params] == [A.TypeName, A.PointerExpr]
	assert not handler.variadic
	(result,) = handler.results
	assert result.name == "error"

	visit = specs["Visit"]
	assert isinstance(visit, A.FuncExpr)
	assert len(visit.params) == 3 and visit.variadic
	assert isinstance(visit.params[2], A.FuncExpr)
	assert [r.name for r in visit.results] == ["bool", "error"]


def test_interface_method_with_named_results() -> None:
	(spec,) = parse_file("package demo\n\ntype R interface{ Read(p []byte) (n int, err error) }\n").types
	(method,) = spec.type_expr.methods
	assert method.name == "Read"
	(param,) = method.signature.params
	assert isinstance(param, A.SliceExpr)
	assert len(method.signature.results) == 2


def test_constant_array_lengths() -> None:
	source = """package demo

const N = 4

type Buffers struct {
	Head  [N+1]byte
	Grid  [a * b][]int
	Sized [len(x)]string
	Wide  [pkg.Max]int
}

type Block [N + 1]byte
"""
	specs = {s.name: s.type_expr for s in parse_file(source).types}
	lengths = [d.type_expr.length for d in specs["Buffers"].fields]
	assert lengths == ["N+1", "a * b", "len(x)", "pkg.Max"]
	assert isinstance(specs["Buffers"].fields[1].type_expr.elem, A.SliceExpr)
	block = specs["Block"]
	assert isinstance(block, A.ArrayExpr) and block.length == "N + 1"
	assert isinstance(parse_type_expr("[2 << 3]T"), A.ArrayExpr)


def test_embedded_generic_fields() -> None:
	source = """package demo

type Holder struct {
	List[int]
	*Pair[string, []byte]
	model.Set[K] `json:"set"`
	Items []int
}
"""
	(spec,) = parse_file(source).types
	fields = spec.type_expr.fields
	assert [d.names for d in fields] == [["List"], ["Pair"], ["Set"], ["Items"]]
	assert [d.embedded for d in fields] == [True, True, True, False]

	plain = fields[0].type_expr
	assert isinstance(plain, A.TypeName) and plain.name == "List"
	assert [a.name for a in plain.args] == ["int"]

	pointer = fields[1].type_expr
	assert isinstance(pointer, A.PointerExpr)
	assert isinstance(pointer.elem.args[1], A.SliceExpr)

	foreign = fields[2].type_expr
	assert foreign.package == "model" and [a.name for a in foreign.args] == ["K"]
	assert fields[2].tag == '`json:"set"`'


def test_multi_name_field_needs_a_type() -> None:
	with pytest.raises(GoSyntaxError, match="missing field type"):
		parse_file("package demo\n\ntype T struct {\n\ta, b [2]\n}\n", path="t.go")

def test_generated_marker_comment_is_collected() -> None:
	source = "// Code generated by godeepcopy; DO NOT EDIT.\n\npackage demo\n"
	f = parse_file(source)
	assert f.comments == ["// Code generated by godeepcopy; DO NOT EDIT."]


def test_missing_trailing_newline() -> None:
	f = parse_file("package demo\n\ntype A int")
	assert [s.name for s in f.types] == ["A"]


def test_syntax_error_reports_location() -> None:
	with pytest.raises(GoSyntaxError) as excinfo:
		parse_file("package demo\n\ntype A struct {\n\tX int\n", path="broken.go")
	err = excinfo.value
	assert err.file == "broken.go"
	assert str(err).startswith("broken.go:")


def test_parse_type_expr() -> None:
	t = parse_type_expr("map[string][]*pkg.T")
	assert isinstance(t, A.MapExpr)
	assert isinstance(t.elem, A.SliceExpr)
	inner = t.elem.elem
	assert isinstance(inner, A.PointerExpr)
	assert inner.elem == A.TypeName(name="T", package="pkg", span=inner.elem.span)
