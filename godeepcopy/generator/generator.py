# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generation driver.

One batch: locate every target type (all or nothing), validate skip paths,
infer receiver names, synthesize one method per target in request order and
assemble the file. Reuse detection sees the whole batch from the start, so
the order of targets never changes which calls are emitted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO

from godeepcopy.config import GeneratorConfig, validate_skip_lists
from godeepcopy.core.diagnostics import Diagnostic
from godeepcopy.core.errors import TypeNotFoundError
from godeepcopy.core.types_core import Named
from godeepcopy.generator.assembler import assemble
from godeepcopy.generator.bookkeeper import Bookkeeper
from godeepcopy.generator.formatter import BuiltinFormatter, Formatter
from godeepcopy.generator.receivers import ReceiverNameTable, receiver_names
from godeepcopy.generator.reuse import ReuseDetector
from godeepcopy.generator.walker import WalkContext, Walker, needs_deref
from godeepcopy.golang.loader import Package

logger = logging.getLogger(__name__)

DEFAULT_RECEIVER = "o"
SINK = "cp"

# Receiver names that would be shadowed by identifiers the walker emits.
_RESERVED_RECEIVER_RE = re.compile(r"(?:[ikv]\d*|retV|cp\w*)")


@dataclass
class GenerationResult:
	source: str
	diagnostics: List[Diagnostic] = field(default_factory=list)
	# alias -> import path referenced by the generated code.
	imports: Dict[str, str] = field(default_factory=dict)


class Generator:
	def __init__(self, config: GeneratorConfig, *, formatter: Optional[Formatter] = None) -> None:
		self.config = config
		self.formatter: Formatter = formatter if formatter is not None else BuiltinFormatter()

	def generate(self, package: Package) -> GenerationResult:
		config = self.config
		targets = [self._locate(package, name) for name in config.target_types]
		if config.validate_skips:
			validate_skip_lists(config, package.ref, targets)
		names = receiver_names(package)

		books = Bookkeeper(package.ref)
		reuse = ReuseDetector(targets, config.method_name, config.pointer_receiver)
		diagnostics: List[Diagnostic] = []
		functions = []
		for index, target in enumerate(targets):
			ctx = WalkContext(
				package=package.ref,
				root_name=target.name,
				books=books,
				reuse=reuse,
				method_name=config.method_name,
				skips=config.skips_for(index),
				max_depth=config.max_depth,
				diagnostics=diagnostics,
			)
			functions.append(self._function(target, ctx, names))

		source = assemble(
			command=config.generator_command,
			package_name=package.name,
			imports=books.import_lines(),
			functions=functions,
			formatter=self.formatter,
		)
		return GenerationResult(source=source, diagnostics=diagnostics, imports=dict(books.imports))

	def generate_to(self, writer: TextIO, package: Package) -> GenerationResult:
		result = self.generate(package)
		writer.write(result.source)
		return result

	def _locate(self, package: Package, name: str) -> Named:
		found = package.lookup(name)
		if found is None:
			raise TypeNotFoundError(message=f"type '{name}' not found", type_name=name, package=package.path)
		if found.type_params:
			raise TypeNotFoundError(
				message=f"type '{name}' not found",
				type_name=name,
				package=package.path,
				detail="generic types cannot be generation targets",
			)
		return found

	def _function(self, target: Named, ctx: WalkContext, names: ReceiverNameTable) -> str:
		config = self.config
		kind = target.name
		ptr = "*" if config.pointer_receiver else ""
		recv = names.get(kind, DEFAULT_RECEIVER)
		if _RESERVED_RECEIVER_RE.fullmatch(recv):
			logger.debug("receiver name %s for %s clashes with generated identifiers, using %s", recv, kind, DEFAULT_RECEIVER)
			recv = DEFAULT_RECEIVER
		logger.debug("receiver name for %s is %s", kind, recv)

		mark = len(ctx.diagnostics)
		body = self._body(target, ctx, recv)
		if recv in ctx.books.used:
			# The receiver would shadow an imported package inside the method.
			logger.debug("receiver name %s for %s clashes with an import alias, using %s", recv, kind, DEFAULT_RECEIVER)
			del ctx.diagnostics[mark:]
			recv = DEFAULT_RECEIVER
			body = self._body(target, ctx, recv)

		lines = [
			f"// {config.method_name} generates a deep copy of {ptr}{kind}",
			f"func ({recv} {ptr}{kind}) {config.method_name}() {ptr}{kind} {{",
			f"var {SINK} {kind} = {ptr}{recv}",
			*body,
			f"return &{SINK}" if config.pointer_receiver else f"return {SINK}",
			"}",
		]
		return "\n".join(lines)

	def _body(self, target: Named, ctx: WalkContext, recv: str) -> List[str]:
		ctx.books.start_function()
		source = recv
		if self.config.pointer_receiver and needs_deref(target):
			source = f"(*{recv})"
		return Walker(ctx).walk(source, SINK, target)


__all__ = ["GenerationResult", "Generator"]
