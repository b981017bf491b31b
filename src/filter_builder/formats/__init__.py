"""Wire formats, one strategy per :class:`OutputMode`."""

from __future__ import annotations

from .base import OutputMode, WireFormat, dumps
from .logic import LogicExpressionFormat
from .search import SearchFilterFormat

_FORMATS: dict[OutputMode, WireFormat] = {
    OutputMode.SEARCH_DSL: SearchFilterFormat(),
    OutputMode.LOGIC_EXPRESSION: LogicExpressionFormat(),
}


def get_format(mode: OutputMode | str) -> WireFormat:
    """Return the strategy serving *mode*."""
    return _FORMATS[OutputMode(mode)]


__all__ = [
    "LogicExpressionFormat",
    "OutputMode",
    "SearchFilterFormat",
    "WireFormat",
    "dumps",
    "get_format",
]
