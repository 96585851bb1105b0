# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from godeepcopy.config import GeneratorConfig
from godeepcopy.generator.generator import GenerationResult, Generator
from godeepcopy.golang.loader import Package, load_package


class GoModule:
	"""A throwaway Go module rooted in a pytest tmp dir."""

	def __init__(self, root: Path, path: str) -> None:
		self.root = root
		self.path = path
		(root / "go.mod").write_text(f"module {path}\n\ngo 1.21\n", encoding="utf-8")

	def write(self, rel: str, source: str) -> Path:
		target = self.root / rel
		target.parent.mkdir(parents=True, exist_ok=True)
		target.write_text(source, encoding="utf-8")
		return target

	def load(self, rel: str = ".", **kwargs: Any) -> Package:
		return load_package(self.root / rel, **kwargs)

	def generate(self, *types: str, rel: str = ".", **options: Any) -> GenerationResult:
		config = GeneratorConfig(target_types=types, **options)
		return Generator(config).generate(self.load(rel))


@pytest.fixture
def go_module(tmp_path: Path) -> GoModule:
	root = tmp_path / "demo"
	root.mkdir()
	return GoModule(root, "example.com/demo")
