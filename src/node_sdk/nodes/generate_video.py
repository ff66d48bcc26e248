"""
Generate Video node.

Resolves a script from one of three sources, checks that the influencer
avatar has finished training, then asks the video provider to start a
render. The provider is never called for an influencer that is not ready.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional

from template_engine import get_nested_value

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError
from ..influencers import (
    InfluencerNotFoundError,
    InfluencerStatus,
    InfluencerStore,
    VideoProvider,
    get_influencer_store,
    get_video_provider,
)


SCRIPT_SOURCES = ("manual", "previous-node", "webhook")


class GenerateVideoNode(BaseNode):
    """Generate an AI influencer video from a script."""

    kind = "generate-video"

    description = {
        "title": "Generate Video",
        "description": "Generate AI influencer video from script",
        "category": NodeCategory.INTEGRATIONS.value,
        "type": "action",
    }

    def __init__(
        self,
        store: Optional[InfluencerStore] = None,
        provider: Optional[VideoProvider] = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._provider = provider

    @property
    def store(self) -> InfluencerStore:
        return self._store or get_influencer_store()

    @property
    def provider(self) -> VideoProvider:
        return self._provider or get_video_provider()

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {
            "influencerId": "",
            "scriptSource": "manual",
            "scriptValue": "",
            "scriptContextKey": "script",
            "saveAs": "videoResult",
        }

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        influencer_id = self.require(config, "influencerId", "Influencer ID is required for video generation")

        try:
            return self._generate(str(influencer_id), config, ctx)
        except NodeOperationError as e:
            raise NodeOperationError(f"Video generation failed: {e.message}", node=self) from e

    def _generate(
        self,
        influencer_id: str,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        script_source = config.get("scriptSource") or "manual"
        script = self._resolve_script(script_source, config, ctx)
        if not script.strip():
            raise NodeOperationError("Script content is required for video generation", node=self)

        try:
            influencer = self.store.get(influencer_id)
        except InfluencerNotFoundError as e:
            raise NodeOperationError(f"Failed to fetch influencer: {e}", node=self) from e

        if influencer.status != InfluencerStatus.COMPLETED.value:
            raise NodeOperationError(
                f"Influencer is not ready for video generation. Status: {influencer.status}",
                node=self,
            )

        self.logger.info(f"Generating video for influencer {influencer.name or influencer.id}")
        video_id = self.provider.start_render(influencer, script)

        video_result = {
            "influencer": {
                "id": influencer.id,
                "name": influencer.name,
                "templateId": influencer.template_id,
            },
            "script": script,
            "scriptSource": script_source,
            "status": "generating",
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "videoId": video_id,
            "estimatedDuration": math.ceil(len(script) / 10),
        }

        self.save_result(ctx, config, "videoResult", video_result)
        return NodeExecutionResult.ok(video_result)

    def _resolve_script(
        self,
        script_source: str,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> str:
        if script_source == "manual":
            value = config.get("scriptValue")
        elif script_source == "previous-node":
            value = get_nested_value(ctx, config.get("scriptContextKey") or "script")
        elif script_source == "webhook":
            webhook_data = ctx.get("webhookData")
            value = webhook_data.get("script") if isinstance(webhook_data, dict) else None
            if not value:
                value = ctx.get("script")
        else:
            raise NodeOperationError(f"Unknown script source: {script_source}", node=self)

        return value if isinstance(value, str) else ""
