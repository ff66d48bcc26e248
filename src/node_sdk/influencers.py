"""Influencer lookup and video provider seams for the generate-video node."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


class InfluencerStatus(str, Enum):
    """Training status of an influencer avatar."""

    PENDING = "pending"
    TRAINING = "training"
    COMPLETED = "completed"
    FAILED = "failed"


class Influencer(BaseModel):
    """Influencer record as stored by the host application."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Influencer ID")
    name: str = Field(default="", description="Display name")
    status: str = Field(default=InfluencerStatus.PENDING.value, description="Training status")
    template_id: Optional[str] = Field(default=None, alias="templateId", description="Video template ID")


class InfluencerNotFoundError(LookupError):
    """No influencer with the requested ID."""


class InfluencerStore(Protocol):
    """Anything that can look up influencers by ID."""

    def get(self, influencer_id: str) -> Influencer:
        """Return the influencer or raise InfluencerNotFoundError."""
        ...


class VideoProvider(Protocol):
    """Anything that can start a video render."""

    def start_render(self, influencer: Influencer, script: str) -> str:
        """Start rendering and return the provider's video ID."""
        ...


class InMemoryInfluencerStore:
    """Dictionary-backed influencer store."""

    def __init__(self, influencers: Optional[Dict[str, Any]] = None):
        self._influencers: Dict[str, Influencer] = {}
        for record in (influencers or {}).values():
            self.add(record)

    def add(self, record: Any) -> Influencer:
        influencer = record if isinstance(record, Influencer) else Influencer.model_validate(record)
        self._influencers[influencer.id] = influencer
        return influencer

    def get(self, influencer_id: str) -> Influencer:
        try:
            return self._influencers[influencer_id]
        except KeyError:
            raise InfluencerNotFoundError("Influencer not found") from None


class SimulatedVideoProvider:
    """Provider that accepts every render and returns a time-based ID."""

    def start_render(self, influencer: Influencer, script: str) -> str:
        return f"video_{int(time.time() * 1000)}"


_influencer_store: Optional[InfluencerStore] = None
_video_provider: Optional[VideoProvider] = None


def get_influencer_store() -> InfluencerStore:
    """Get or create the process-wide influencer store."""
    global _influencer_store
    if _influencer_store is None:
        _influencer_store = InMemoryInfluencerStore()
    return _influencer_store


def set_influencer_store(store: Optional[InfluencerStore]) -> None:
    """Install an influencer store (None resets to an empty in-memory store)."""
    global _influencer_store
    _influencer_store = store


def get_video_provider() -> VideoProvider:
    """Get or create the process-wide video provider."""
    global _video_provider
    if _video_provider is None:
        _video_provider = SimulatedVideoProvider()
    return _video_provider


def set_video_provider(provider: Optional[VideoProvider]) -> None:
    """Install a video provider (None resets to the simulated provider)."""
    global _video_provider
    _video_provider = provider


__all__ = [
    "InMemoryInfluencerStore",
    "Influencer",
    "InfluencerNotFoundError",
    "InfluencerStatus",
    "InfluencerStore",
    "SimulatedVideoProvider",
    "VideoProvider",
    "get_influencer_store",
    "get_video_provider",
    "set_influencer_store",
    "set_video_provider",
]
