"""Concrete implementations of provider interfaces."""

from .filter.command import CommandTextFilter
from .text.lines import ArrayTextSource

__all__ = [
    "ArrayTextSource",
    "CommandTextFilter",
]
