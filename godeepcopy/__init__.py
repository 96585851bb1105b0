# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
godeepcopy: generate Go `DeepCopy` methods from type declarations.

Subpackages:
  - core: type model, diagnostics, errors
  - golang: Go declaration parser + package loader (type resolution)
  - generator: reuse detection, receiver inference, walker, assembler
"""

from godeepcopy.config import GeneratorConfig
from godeepcopy.generator.generator import GenerationResult, Generator
from godeepcopy.golang.loader import load_package

__all__ = ["GeneratorConfig", "GenerationResult", "Generator", "load_package"]
