"""Tests for the generate-video node."""
import re

import pytest

from node_sdk import NodeOperationError
from node_sdk.influencers import (
    InMemoryInfluencerStore,
    Influencer,
    InfluencerNotFoundError,
    set_influencer_store,
    set_video_provider,
)
from node_sdk.nodes import GenerateVideoNode


class RecordingProvider:
    """Video provider that records render requests."""

    def __init__(self):
        self.renders = []

    def start_render(self, influencer, script):
        self.renders.append((influencer.id, script))
        return "vid_test_1"


@pytest.fixture
def store():
    return InMemoryInfluencerStore({
        "inf_ready": {"id": "inf_ready", "name": "Ava", "status": "completed", "templateId": "tpl_1"},
        "inf_training": {"id": "inf_training", "name": "Max", "status": "training"},
    })


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def node(store, provider):
    return GenerateVideoNode(store=store, provider=provider)


class TestGenerateVideoNode:
    """Test GenerateVideoNode.execute."""

    def test_manual_script(self, node, provider):
        ctx = {}
        config = {"influencerId": "inf_ready", "scriptSource": "manual", "scriptValue": "Hello there, world!"}

        result = node.execute(config, ctx)

        assert result.success is True
        video = ctx["videoResult"]
        assert video["influencer"] == {"id": "inf_ready", "name": "Ava", "templateId": "tpl_1"}
        assert video["script"] == "Hello there, world!"
        assert video["scriptSource"] == "manual"
        assert video["status"] == "generating"
        assert video["videoId"] == "vid_test_1"
        assert video["estimatedDuration"] == 2
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", video["timestamp"])
        assert provider.renders == [("inf_ready", "Hello there, world!")]
        assert result.data == video

    def test_previous_node_script(self, node):
        ctx = {"writer": {"output": {"text": "From an earlier node"}}}
        config = {
            "influencerId": "inf_ready",
            "scriptSource": "previous-node",
            "scriptContextKey": "writer.output.text",
            "saveAs": "clip",
        }

        node.execute(config, ctx)
        assert ctx["clip"]["script"] == "From an earlier node"

    def test_previous_node_default_key(self, node):
        ctx = {"script": "Default key script"}
        node.execute({"influencerId": "inf_ready", "scriptSource": "previous-node"}, ctx)
        assert ctx["videoResult"]["script"] == "Default key script"

    def test_webhook_script(self, node):
        ctx = {"webhookData": {"script": "Webhook script"}, "script": "ignored"}
        node.execute({"influencerId": "inf_ready", "scriptSource": "webhook"}, ctx)
        assert ctx["videoResult"]["script"] == "Webhook script"

    def test_webhook_falls_back_to_script(self, node):
        ctx = {"webhookData": {}, "script": "Top-level script"}
        node.execute({"influencerId": "inf_ready", "scriptSource": "webhook"}, ctx)
        assert ctx["videoResult"]["script"] == "Top-level script"

    def test_influencer_required(self, node):
        with pytest.raises(NodeOperationError) as exc_info:
            node.execute({"scriptValue": "x"}, {})
        assert str(exc_info.value) == "Influencer ID is required for video generation"

    def test_blank_script(self, node, provider):
        with pytest.raises(NodeOperationError) as exc_info:
            node.execute({"influencerId": "inf_ready", "scriptSource": "manual", "scriptValue": "   "}, {})
        assert str(exc_info.value) == "Video generation failed: Script content is required for video generation"
        assert provider.renders == []

    def test_unknown_script_source(self, node):
        with pytest.raises(NodeOperationError, match="Video generation failed: Unknown script source: email"):
            node.execute({"influencerId": "inf_ready", "scriptSource": "email"}, {})

    def test_missing_influencer(self, node, provider):
        with pytest.raises(NodeOperationError) as exc_info:
            node.execute({"influencerId": "inf_nope", "scriptValue": "Hi"}, {})
        assert str(exc_info.value) == "Video generation failed: Failed to fetch influencer: Influencer not found"
        assert provider.renders == []

    def test_not_ready_influencer_never_calls_provider(self, node, provider):
        ctx = {}
        with pytest.raises(NodeOperationError) as exc_info:
            node.execute({"influencerId": "inf_training", "scriptValue": "Hi"}, ctx)

        assert str(exc_info.value) == (
            "Video generation failed: Influencer is not ready for video generation. Status: training"
        )
        assert provider.renders == []
        assert ctx == {}

    def test_uses_installed_backends(self, store, provider):
        set_influencer_store(store)
        set_video_provider(provider)

        GenerateVideoNode().execute({"influencerId": "inf_ready", "scriptValue": "Hi"}, {})
        assert provider.renders == [("inf_ready", "Hi")]


class TestInMemoryInfluencerStore:
    """Test InMemoryInfluencerStore."""

    def test_add_and_get(self):
        store = InMemoryInfluencerStore()
        store.add(Influencer(id="a", name="A", status="completed"))
        assert store.get("a").name == "A"

    def test_missing(self):
        with pytest.raises(InfluencerNotFoundError):
            InMemoryInfluencerStore().get("missing")
