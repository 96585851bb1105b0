# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from godeepcopy.core.errors import MissingSyntaxError
from godeepcopy.generator.receivers import ReceiverNameTable, is_generated, receiver_names
from godeepcopy.golang.loader import Package
from godeepcopy.golang.parser import parse_file


def test_first_receiver_name_wins(go_module) -> None:
	go_module.write(
		"server.go",
		"""package demo

type Server struct{ Routes map[string][]string }

func (s *Server) Start() error { return nil }

func (srv Server) Name() string { return "" }

func (Server) Kind() string { return "server" }

func (_ Server) Ignored() {}
""",
	)
	names = receiver_names(go_module.load())
	assert names.get("Server", "o") == "s"
	assert names.get("Unknown", "o") == "o"


def test_generated_files_are_skipped(go_module) -> None:
	go_module.write(
		"a_deepcopy.go",
		"""// Code generated by godeepcopy -t Server; DO NOT EDIT.

package demo

func (gen *Server) DeepCopy() *Server { return gen }
""",
	)
	go_module.write(
		"server.go",
		"""package demo

type Server struct{ Port int }

func (s *Server) Stop() {}
""",
	)
	assert receiver_names(go_module.load()).as_dict() == {"Server": "s"}


def test_unnamed_or_blank_receivers_leave_no_entry(go_module) -> None:
	go_module.write(
		"demo.go",
		"""package demo

type T int

func (T) A() {}

func (_ *T) B() {}
""",
	)
	assert receiver_names(go_module.load()).as_dict() == {}


def test_is_generated_requires_the_exact_marker() -> None:
	assert is_generated(parse_file("// Code generated by stringer; DO NOT EDIT.\n\npackage demo\n"))
	assert not is_generated(parse_file("// Code generated by hand, edit freely.\n\npackage demo\n"))
	assert not is_generated(parse_file("package demo\n"))


def test_package_without_syntax_is_an_error() -> None:
	with pytest.raises(MissingSyntaxError) as excinfo:
		receiver_names(Package(name="demo", path="example.com/demo"))
	assert excinfo.value.package == "example.com/demo"


def test_table_add_keeps_first() -> None:
	table = ReceiverNameTable()
	table.add("T", "t")
	table.add("T", "x")
	assert table.as_dict() == {"T": "t"}
