"""Search filter clause compilers, one module per operator family."""

from __future__ import annotations

from .null import compile_null
from .range import compile_range
from .set import compile_set
from .standard import compile_standard

__all__ = [
    "compile_standard",
    "compile_range",
    "compile_set",
    "compile_null",
]
