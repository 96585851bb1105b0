"""
godeepcopy.core: shared types/diagnostics/errors used across stages.

Modules:
  - span: source locations
  - diagnostics: Diagnostic record
  - errors: DeepCopyError hierarchy
  - types_core: Go type model, shapes and identity
"""

__all__ = [
    "span",
    "diagnostics",
    "errors",
    "types_core",
]
