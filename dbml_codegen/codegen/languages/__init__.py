"""
Language-specific code generators.
"""

from .csharp import CSharpGenerator

__all__ = ["CSharpGenerator"]
