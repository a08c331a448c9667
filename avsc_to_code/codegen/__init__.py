"""
Code generation module.

Renders resolved schemas to C# or Python with jinja2 templates and
writes the result.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .base import CodeBackend
from .csharp_backend import CSharpBackend
from .generator import CodeGenerator, GeneratedType
from .python_backend import PythonBackend
from .writer import ArtifactWriter

__all__ = [
    "AtomicWriter",
    "ArtifactWriter",
    "CodeBackend",
    "CodeGenerator",
    "CSharpBackend",
    "GeneratedType",
    "PythonBackend",
]
