# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Deep-copy synthesis.

Modules (leaves first):
  - reuse: does a type already have (or is it about to get) a copy method?
  - receivers: receiver variable names used by hand-written methods
  - bookkeeper: import aliases and temporary identifiers
  - walker: recursive type graph walk emitting Go statements
  - skips: skip path validation against the type graph
  - formatter / assembler: file layout and validation
  - generator: batch driver (`Generator`)
"""

__all__ = ["reuse", "receivers", "bookkeeper", "walker", "skips", "formatter", "assembler", "generator"]
