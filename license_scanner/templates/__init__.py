"""Compilation of license templates into executable patterns.

This module provides:
- TemplateCompiler: Normalizes a template and assembles its regex
- CompiledPattern: Immutable regex, static blocks and capture-group metadata
- get_static_blocks: Literal regions of a normalized template for pre-checks
"""

from .compiler import TemplateCompiler, compile_pattern, get_static_blocks, tokenize
from .exceptions import CompileError, PatternCompileError, TemplateMalformedError
from .models import CompiledPattern, PatternCaptureGroup, PatternKind, StaticBlock

__all__ = [
    "TemplateCompiler",
    "compile_pattern",
    "get_static_blocks",
    "tokenize",
    "CompiledPattern",
    "PatternCaptureGroup",
    "PatternKind",
    "StaticBlock",
    "CompileError",
    "PatternCompileError",
    "TemplateMalformedError",
]
