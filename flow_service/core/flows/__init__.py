"""
Flow schema models and the Flow JSON compiler.
"""

from .compiler import CompiledDocument, CompilerOptions, FlowCompiler, field_key, option_id
from .models import Component, ComponentKind, FlowSchema, Screen, resolve_kind

__all__ = [
    "CompiledDocument",
    "CompilerOptions",
    "FlowCompiler",
    "field_key",
    "option_id",
    "Component",
    "ComponentKind",
    "FlowSchema",
    "Screen",
    "resolve_kind",
]
