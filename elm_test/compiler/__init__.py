"""Compiler module - runs elm make to produce interface files."""

from .coordinator import CompilationCoordinator, resolve_compiler

__all__ = ["CompilationCoordinator", "resolve_compiler"]
