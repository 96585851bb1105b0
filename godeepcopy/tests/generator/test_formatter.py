# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import shutil

import pytest

from godeepcopy.core.errors import InvalidOutputError
from godeepcopy.generator.assembler import assemble, header
from godeepcopy.generator.formatter import BuiltinFormatter, FormatError, GofmtFormatter


def test_builtin_layout() -> None:
	source = "\n".join(
		[
			"// Code generated by godeepcopy; DO NOT EDIT.",
			"",
			"",
			"package demo   ",
			"import (",
			'"time"',
			")",
			"func (o T) DeepCopy() T {",
			"    var cp T = o",
			"if o.M != nil {",
			"cp.M = make(map[string]time.Time, len(o.M))",
			"}",
			"{",
			"retV := o.P.DeepCopy()",
			"cp.P = &retV",
			"}",
			"return cp",
			"}",
			"",
			"",
		]
	)
	assert BuiltinFormatter().format(source) == "\n".join(
		[
			"// Code generated by godeepcopy; DO NOT EDIT.",
			"",
			"package demo",
			"import (",
			'\t"time"',
			")",
			"func (o T) DeepCopy() T {",
			"\tvar cp T = o",
			"\tif o.M != nil {",
			"\t\tcp.M = make(map[string]time.Time, len(o.M))",
			"\t}",
			"\t{",
			"\t\tretV := o.P.DeepCopy()",
			"\t\tcp.P = &retV",
			"\t}",
			"\treturn cp",
			"}",
		]
	) + "\n"


def test_braces_in_literals_and_comments_do_not_nest() -> None:
	source = 'package demo\n\nfunc F() {\ns := "{("\nr := \'{\'\n// }\nt := `)`\n}\n'
	assert BuiltinFormatter().format(source) == (
		'package demo\n\nfunc F() {\n\ts := "{("\n\tr := \'{\'\n\t// }\n\tt := `)`\n}\n'
	)


def test_builtin_rejects_unbalanced_input() -> None:
	with pytest.raises(FormatError) as excinfo:
		BuiltinFormatter().format("package demo\n\nfunc F() {\n")
	assert "<generated>" in str(excinfo.value)


def test_missing_gofmt_binary() -> None:
	with pytest.raises(FormatError, match="cannot run"):
		GofmtFormatter(binary="definitely-not-gofmt-binary").format("package demo\n")


@pytest.mark.skipif(shutil.which("gofmt") is None, reason="gofmt not installed")
def test_gofmt_formats_and_rejects() -> None:
	gofmt = GofmtFormatter()
	assert gofmt.format("package demo\nfunc F( ) {\nreturn\n}\n") == "package demo\n\nfunc F() {\n\treturn\n}\n"
	with pytest.raises(FormatError):
		gofmt.format("package demo\nfunc F( {\n")


class _Rejecting:
	def format(self, source: str) -> str:
		raise FormatError("nope")


def test_assemble_layout() -> None:
	text = assemble(
		command="godeepcopy -t T .",
		package_name="demo",
		imports=['"time"'],
		functions=["func (o T) DeepCopy() T {\nvar cp T = o\nreturn cp\n}"],
		formatter=BuiltinFormatter(),
	)
	assert text == (
		f"{header('godeepcopy -t T .')}\n"
		"\n"
		"package demo\n"
		"\n"
		"import (\n"
		'\t"time"\n'
		")\n"
		"\n"
		"func (o T) DeepCopy() T {\n"
		"\tvar cp T = o\n"
		"\treturn cp\n"
		"}\n"
	)


def test_rejected_output_keeps_the_unformatted_text() -> None:
	with pytest.raises(InvalidOutputError) as excinfo:
		assemble(
			command="godeepcopy",
			package_name="demo",
			imports=[],
			functions=["func (o T) DeepCopy() T {\nreturn o\n}"],
			formatter=_Rejecting(),
		)
	err = excinfo.value
	assert err.reason_code == "E_INVALID_OUTPUT"
	assert err.detail == "nope"
	assert err.package == "demo"
	assert err.source_text is not None and "func (o T) DeepCopy() T {" in err.source_text
	assert isinstance(err.__cause__, FormatError)
