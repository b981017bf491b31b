"""Configuration for filter builder components."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FilterBuilderSettings(BaseModel):
    """Immutable knobs shared by the estimator, link encoder and controller.

    Hosts normally construct this once per form and pass it to every
    component of the same editing session.
    """

    model_config = ConfigDict(frozen=True)

    debounce_seconds: float = Field(default=0.3, gt=0)
    explore_path: str = "/explore"
    link_param: str = "queryFilter"
    search_index: str = "all"
    include_deleted: bool = False
