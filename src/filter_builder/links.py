"""LinkEncoder — tree -> shareable explore deep link (and back)."""

from __future__ import annotations

from urllib.parse import parse_qs, urlencode, urlsplit

from pydantic import ValidationError

from .exceptions import LoadFailedError
from .settings import FilterBuilderSettings
from .tree import FilterTree


class LinkEncoder:
    """Append the tree's JSON form to a fixed base path as a query parameter."""

    def __init__(self, settings: FilterBuilderSettings | None = None) -> None:
        settings = settings or FilterBuilderSettings()
        self._base_path = settings.explore_path
        self._param = settings.link_param

    def encode(self, tree: FilterTree) -> str:
        """Produce the deep link; an empty tree yields the bare base path."""
        if tree.is_empty:
            return self._base_path
        fragment = urlencode({self._param: tree.model_dump_json()})
        separator = "&" if "?" in self._base_path else "?"
        return f"{self._base_path}{separator}{fragment}"

    def decode(self, url: str) -> FilterTree | None:
        """Rebuild the tree from a link produced by :meth:`encode`.

        Returns None when the link carries no filter; raises
        :class:`LoadFailedError` when the filter cannot be parsed.
        """
        values = parse_qs(urlsplit(url).query).get(self._param)
        if not values:
            return None
        try:
            return FilterTree.model_validate_json(values[-1])
        except ValidationError as exc:
            raise LoadFailedError(f"Invalid filter in link: {exc}") from exc
