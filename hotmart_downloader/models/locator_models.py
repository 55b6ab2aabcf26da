"""Outcomes of the in-page master playlist lookup."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict


class DirectHit(BaseModel):
    """The embed page carried the master playlist URL."""

    model_config = ConfigDict(frozen=True)

    url: str


class NeedsApiFallback(BaseModel):
    """The embed page did not yield a URL; the player API must be asked."""

    model_config = ConfigDict(frozen=True)

    reason: str


LocatorOutcome = Union[DirectHit, NeedsApiFallback]
