"""
Go front-end: declaration parser, package loader and type resolution.
"""

from .loader import Package, PackageLoader, load_package
from .parser import GoSyntaxError, parse_file, parse_type_expr

__all__ = ["Package", "PackageLoader", "load_package", "GoSyntaxError", "parse_file", "parse_type_expr"]
