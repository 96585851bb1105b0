# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go declaration parser.

Lark LALR parser over `grammar.lark` plus a post-lexer that implements Go's
automatic semicolon insertion. The resulting parse tree is lowered into the
declaration-level AST in `godeepcopy.golang.ast`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from . import ast as A
from godeepcopy.core.span import Span

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class GoSyntaxError(ValueError):
	"""Source text is not in the supported Go declaration subset."""

	def __init__(self, message: str, *, file: str | None = None, line: int | None = None, column: int | None = None) -> None:
		super().__init__(message)
		self.file = file
		self.line = line
		self.column = column

	@property
	def span(self) -> Span:
		return Span(file=self.file, line=self.line, column=self.column)


class TerminatorInserter:
	always_accept = ("NEWLINE", "SEMI", "LINE_COMMENT")

	TERMINABLE = {
		"NAME",
		"NUMBER",
		"STRING",
		"RAW_STRING",
		"RUNE",
		"RPAR",
		"RSQB",
		"RBRACE",
	}

	def __init__(self) -> None:
		self.comments: List[Token] = []

	def process(self, stream):
		"""
		Insert `_TERM` tokens for statement/declaration boundaries.

		An explicit `;` always terminates. A newline terminates only when the
		last token on the line is an identifier, a literal, `++`/`--`, or a
		closing `) ] }`. Keywords lex as their own token types, so `struct`,
		`func` etc. at end of line never terminate.

		Line comments are diverted into `self.comments` (generated-file
		detection needs them); they do not affect termination.
		"""
		self.comments = []
		can_terminate = False
		last: Token | None = None

		for token in stream:
			ttype = token.type

			if ttype == "LINE_COMMENT":
				self.comments.append(token)
				continue

			if ttype == "NEWLINE":
				if can_terminate:
					yield Token.new_borrow_pos("_TERM", token.value, token)
					can_terminate = False
				continue

			if ttype == "SEMI":
				yield Token.new_borrow_pos("_TERM", token.value, token)
				can_terminate = False
				continue

			yield token
			last = token
			can_terminate = self._is_terminable(token)

		# A file may end without a trailing newline.
		if can_terminate and last is not None:
			yield Token.new_borrow_pos("_TERM", "", last)

	def _is_terminable(self, token: Token) -> bool:
		if token.type == "OP":
			return token.value.endswith(("++", "--"))
		return token.type in self.TERMINABLE


_POSTLEX = TerminatorInserter()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["file", "type_only"],
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=_POSTLEX,
)

_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.S)
_NAMED_ENTRY_RE = re.compile(r"([^\W\d]\w*)\s+(\S.*)", re.S)
_TYPE_KEYWORDS = frozenset({"chan", "func", "interface", "map", "struct"})


def parse_file(source: str, *, path: str = "<input>") -> A.File:
	"""Parse one Go source file into a declaration-level AST."""
	try:
		tree = _PARSER.parse(source, start="file")
	except UnexpectedInput as err:
		raise _syntax_error(err, path) from err
	comments = [tok.value.rstrip() for tok in _POSTLEX.comments]
	return _FileBuilder(source, path).build(tree, comments)


def parse_type_expr(source: str) -> A.TypeExpr:
	"""Parse a standalone type expression (e.g. the inside of `(T)` results)."""
	try:
		tree = _PARSER.parse(source, start="type_only")
	except UnexpectedInput as err:
		raise _syntax_error(err, "<type>") from err
	return _FileBuilder(source, "<type>").type_expr(tree.children[0])


def _syntax_error(err: UnexpectedInput, path: str) -> GoSyntaxError:
	line = getattr(err, "line", None)
	column = getattr(err, "column", None)
	first = str(err).strip().splitlines()[0] if str(err).strip() else "syntax error"
	return GoSyntaxError(f"{path}:{line}:{column}: {first}", file=path, line=line, column=column)


def _tokens(node: Tree, ttype: str) -> List[str]:
	return [c.value for c in node.children if isinstance(c, Token) and c.type == ttype]


def _subtrees(node: Tree, name: str) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree) and c.data == name]


def _subtree(node: Tree, name: str) -> Optional[Tree]:
	found = _subtrees(node, name)
	return found[0] if found else None


class _FileBuilder:
	"""Lower a Lark parse tree into `godeepcopy.golang.ast` nodes."""

	def __init__(self, source: str, path: str) -> None:
		self.source = source
		self.path = path

	def build(self, tree: Tree, comments: List[str]) -> A.File:
		clause = _subtree(tree, "package_clause")
		assert clause is not None
		out = A.File(path=self.path, package=_tokens(clause, "NAME")[0], comments=comments)
		for child in tree.children:
			if not isinstance(child, Tree):
				continue
			if child.data == "import_decl":
				out.imports.extend(self._import_spec(spec) for spec in _subtrees(child, "import_spec"))
			elif child.data == "type_decl":
				out.types.extend(self._type_spec(spec) for spec in child.children if isinstance(spec, Tree))
			elif child.data == "func_decl":
				out.funcs.append(self._func_decl(child))
			# var/const declarations carry nothing we need.
		return out

	def _span(self, node: Tree) -> Span:
		return Span.from_meta(node.meta, file=self.path)

	def _text(self, node: Tree) -> str:
		return self.source[node.meta.start_pos:node.meta.end_pos]

	# --- imports / type specs ---

	def _import_spec(self, node: Tree) -> A.ImportSpec:
		alias_node = _subtree(node, "import_alias")
		alias = alias_node.children[0].value if alias_node is not None else None
		lit = next(c for c in node.children if isinstance(c, Token) and c.type in ("STRING", "RAW_STRING"))
		return A.ImportSpec(path=lit.value[1:-1], alias=alias, span=self._span(node))

	def _type_spec(self, node: Tree) -> A.TypeSpec:
		name = _tokens(node, "NAME")[0]
		params_node = _subtree(node, "type_params")
		params: List[str] = []
		if params_node is not None:
			for group in _subtrees(params_node, "tparam_group"):
				params.extend(_tokens(group, "NAME"))
		return A.TypeSpec(
			name=name,
			type_expr=self.type_expr(node.children[-1]),
			alias=node.data == "type_alias",
			type_params=params,
			span=self._span(node),
		)

	# --- type expressions ---

	def type_expr(self, node: Tree) -> A.TypeExpr:
		kind = node.data
		span = self._span(node)
		if kind == "type_name":
			names = _tokens(node, "NAME")
			args_node = _subtree(node, "type_args")
			args = [self.type_expr(c) for c in args_node.children if isinstance(c, Tree)] if args_node is not None else []
			if len(names) == 2:
				return A.TypeName(name=names[1], package=names[0], args=args, span=span)
			return A.TypeName(name=names[0], args=args, span=span)
		if kind == "pointer_type":
			return A.PointerExpr(elem=self.type_expr(node.children[0]), span=span)
		if kind == "slice_type":
			return A.SliceExpr(elem=self.type_expr(node.children[0]), span=span)
		if kind == "array_type":
			length_node, elem = node.children
			return A.ArrayExpr(length=self._inner_text(length_node, brackets=False), elem=self.type_expr(elem), span=span)
		if kind == "map_type":
			key, elem = node.children
			return A.MapExpr(key=self.type_expr(key), elem=self.type_expr(elem), span=span)
		if kind == "chan_type":
			return A.ChanExpr(elem=self.type_expr(node.children[0]), span=span)
		if kind == "send_chan_type":
			return A.ChanExpr(elem=self.type_expr(node.children[0]), direction="send", span=span)
		if kind == "recv_chan_type":
			return A.ChanExpr(elem=self.type_expr(node.children[0]), direction="recv", span=span)
		if kind == "struct_type":
			return A.StructExpr(fields=[self._field_decl(f) for f in _subtrees(node, "field_decl")], span=span)
		if kind == "interface_type":
			return self._interface(node)
		if kind == "func_type":
			params = _subtree(node, "paren_group")
			assert params is not None
			return self._signature(params, _subtree(node, "func_result"), span)
		raise GoSyntaxError(f"unsupported type expression '{kind}'", file=self.path, line=span.line, column=span.column)

	def _interface(self, node: Tree) -> A.InterfaceExpr:
		out = A.InterfaceExpr(span=self._span(node))
		for child in node.children:
			if not isinstance(child, Tree):
				continue
			if child.data == "iface_method":
				params = _subtree(child, "paren_group")
				assert params is not None
				signature = self._signature(params, _subtree(child, "func_result"), self._span(child))
				out.methods.append(A.InterfaceMethod(name=_tokens(child, "NAME")[0], signature=signature))
				continue
			terms: List[A.TypeExpr] = []
			tilde: List[bool] = []
			pending = False
			for part in child.children:
				if isinstance(part, Token):
					pending = part.type == "TILDE"
					continue
				terms.append(self.type_expr(part))
				tilde.append(pending)
				pending = False
			if len(terms) == 1 and not tilde[0]:
				out.embeds.append(terms[0])
			else:
				out.embeds.append(A.UnionExpr(terms=terms, tilde=tilde, span=self._span(child)))
		return out

	def _field_decl(self, node: Tree) -> A.FieldDecl:
		tag_node = _subtree(node, "tag")
		tag = tag_node.children[0].value if tag_node is not None else None
		span = self._span(node)
		embedded = _subtree(node, "embedded_field")
		if embedded is not None:
			names = _tokens(embedded, "NAME")
			bracket = _subtree(embedded, "bracket_group")
			args = self._type_list(bracket) if bracket is not None else []
			ty: A.TypeExpr = A.TypeName(name=names[-1], package=names[0] if len(names) == 2 else None, args=args, span=span)
			if _tokens(embedded, "STAR"):
				ty = A.PointerExpr(elem=ty, span=span)
			return A.FieldDecl(names=[names[-1]], type_expr=ty, embedded=True, tag=tag, span=span)
		names_node = _subtree(node, "field_names")
		assert names_node is not None
		names = _tokens(names_node, "NAME")
		brackets = _subtree(node, "field_brackets")
		if brackets is None:
			return A.FieldDecl(names=names, type_expr=self.type_expr(node.children[1]), tag=tag, span=span)
		group = brackets.children[0]
		if len(brackets.children) == 2:
			elem = self.type_expr(brackets.children[1])
			length = self._inner_text(group)
			ty = A.SliceExpr(elem=elem, span=span) if not length else A.ArrayExpr(length=length, elem=elem, span=span)
			return A.FieldDecl(names=names, type_expr=ty, tag=tag, span=span)
		# `List[int]` with nothing after the bracket: an embedded instantiation.
		if len(names) != 1:
			raise GoSyntaxError(
				f"{self.path}:{span.line}:{span.column}: missing field type",
				file=self.path,
				line=span.line,
				column=span.column,
			)
		ty = A.TypeName(name=names[0], args=self._type_list(group), span=span)
		return A.FieldDecl(names=names, type_expr=ty, embedded=True, tag=tag, span=span)

	# --- functions ---

	def _func_decl(self, node: Tree) -> A.FuncDecl:
		receiver_node = _subtree(node, "receiver")
		params = _subtree(node, "paren_group")
		assert params is not None
		signature = self._signature(params, _subtree(node, "func_result"), self._span(node))
		return A.FuncDecl(
			name=_tokens(node, "NAME")[0],
			receiver=self._receiver(receiver_node) if receiver_node is not None else None,
			param_count=len(signature.params),
			results=signature.results,
			span=self._span(node),
		)

	def _receiver(self, node: Tree) -> A.Receiver:
		name_node = _subtree(node, "recv_name")
		type_node = _subtree(node, "recv_type")
		assert type_node is not None
		args_node = _subtree(type_node, "recv_type_args")
		return A.Receiver(
			type_name=_tokens(type_node, "NAME")[0],
			name=name_node.children[0].value if name_node is not None else None,
			pointer=bool(_tokens(type_node, "STAR")),
			type_params=_tokens(args_node, "NAME") if args_node is not None else [],
		)

	def _signature(self, params: Tree, result: Optional[Tree], span: Span) -> A.FuncExpr:
		param_types, variadic = self._params(params)
		results: List[A.TypeExpr] = []
		if result is not None:
			child = result.children[0]
			if child.data == "paren_group":
				results, _ = self._params(child)
			else:
				results = [self.type_expr(child)]
		return A.FuncExpr(params=param_types, results=results, variadic=variadic, span=span)

	def _params(self, node: Tree) -> Tuple[List[A.TypeExpr], bool]:
		"""
		Types of a parenthesised parameter or result list, one per entry.

		Go lists are either all named (`a, b int, c string`) or all unnamed
		(`int, string`); names are dropped. A trailing `...T` yields `T` and
		sets the variadic flag.
		"""
		entries = _split_top_level(self._inner_text(node))
		named = any(_named_entry(e) is not None for e in entries)
		texts: List[str] = []
		pending = 0
		for entry in entries:
			if not named:
				texts.append(entry)
				continue
			m = _named_entry(entry)
			if m is None:
				pending += 1
				continue
			texts.extend([m.group(2)] * (pending + 1))
			pending = 0
		if pending:
			span = self._span(node)
			raise GoSyntaxError(
				f"{self.path}:{span.line}:{span.column}: mixed named and unnamed parameters",
				file=self.path,
				line=span.line,
				column=span.column,
			)
		variadic = bool(texts) and texts[-1].startswith("...")
		if variadic:
			texts[-1] = texts[-1][3:]
		return [self._sub_type(text, node) for text in texts], variadic

	def _type_list(self, node: Tree) -> List[A.TypeExpr]:
		return [self._sub_type(text, node) for text in _split_top_level(self._inner_text(node))]

	def _sub_type(self, text: str, node: Tree) -> A.TypeExpr:
		try:
			return parse_type_expr(text)
		except GoSyntaxError as err:
			span = self._span(node)
			raise GoSyntaxError(
				f"{self.path}:{span.line}:{span.column}: bad type '{text}': {err}",
				file=self.path,
				line=span.line,
				column=span.column,
			) from err

	def _inner_text(self, node: Tree, *, brackets: bool = True) -> str:
		"""Source text of a token group, delimiters and comments removed, whitespace collapsed."""
		text = self._text(node)
		if brackets:
			text = text[1:-1]
		return " ".join(_COMMENT_RE.sub(" ", text).split())


def _named_entry(entry: str) -> Optional[re.Match[str]]:
	m = _NAMED_ENTRY_RE.match(entry)
	if m is None or m.group(1) in _TYPE_KEYWORDS:
		return None
	return m


def _split_top_level(text: str) -> List[str]:
	"""Split on commas outside brackets and literals; empty trailing entries are dropped."""
	out: List[str] = []
	depth = 0
	start = 0
	quote: str | None = None
	i = 0
	while i < len(text):
		ch = text[i]
		if quote is not None:
			if ch == "\\" and quote != "`":
				i += 1
			elif ch == quote:
				quote = None
		elif ch in "\"'`":
			quote = ch
		elif ch in "([{":
			depth += 1
		elif ch in ")]}":
			depth -= 1
		elif ch == "," and depth == 0:
			out.append(text[start:i].strip())
			start = i + 1
		i += 1
	out.append(text[start:].strip())
	return [entry for entry in out if entry]


__all__ = ["GoSyntaxError", "TerminatorInserter", "parse_file", "parse_type_expr"]
