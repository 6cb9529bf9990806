"""Model verification and discovery against a fake Ollama daemon."""

from __future__ import annotations

import httpx
import pytest

from lumen_providers.base.errors import BackendUnreachable, ErrorCode, ProtocolError
from lumen_providers.ollama.client import OllamaProvider
from lumen_providers.tests.utils import FakeOllama


@pytest.mark.asyncio
async def test_missing_model_lists_available_and_multimodal_suggestions(log_events):
    fake = FakeOllama(models=["llava:7b", "mistral:7b"])
    result = await OllamaProvider(transport=fake.transport).verify("nonexistent-model")

    assert result.exists is False  # nosec B101
    assert result.available_models == ["llava:7b", "mistral:7b"]  # nosec B101
    assert result.suggested_models == ["llava:7b"]  # nosec B101
    assert result.error == 'Model "nonexistent-model" is not available on your Ollama server'  # nosec B101
    assert result.error_code == ErrorCode.NOT_FOUND.value  # nosec B101
    assert fake.paths() == ["/api/tags"]  # nosec B101
    assert [e["event"] for e in log_events if e["event"].startswith("verify.")] == [  # nosec B101
        "verify.start",
        "verify.end",
    ]


@pytest.mark.asyncio
async def test_present_multimodal_model():
    fake = FakeOllama(models=["llava:7b", "mistral:7b"])
    fake.show["llava:7b"] = {"details": {"family": "llama", "families": ["llama", "clip"]}}
    result = await OllamaProvider(transport=fake.transport).verify("llava:7b")
    assert result.exists is True and result.is_multimodal is True  # nosec B101
    assert result.needs_pull is False and result.error is None  # nosec B101
    assert fake.paths() == ["/api/tags", "/api/show"]  # nosec B101
    assert fake.requests[-1].url.params["name"] == "llava:7b"  # nosec B101


@pytest.mark.asyncio
async def test_declared_family_wins_over_plain_name():
    fake = FakeOllama(models=["custom-vision:latest", "mistral:7b"])
    fake.show["custom-vision:latest"] = {"details": {"families": ["BakLLaVA"]}}
    fake.show["mistral:7b"] = {"details": {"family": "llama", "families": ["llama"]}}
    provider = OllamaProvider(transport=fake.transport)
    assert (await provider.verify("custom-vision:latest")).is_multimodal is True  # nosec B101
    text_only = await provider.verify("mistral:7b")
    assert text_only.exists is True and text_only.is_multimodal is False  # nosec B101


@pytest.mark.asyncio
async def test_detail_failure_falls_back_to_name():
    fake = FakeOllama(models=["moondream:latest"])
    fake.show_status = 500
    result = await OllamaProvider(transport=fake.transport).verify("moondream:latest")
    assert result.exists is True and result.is_multimodal is True  # nosec B101


@pytest.mark.asyncio
async def test_no_suggestions_without_multimodal_models():
    fake = FakeOllama(models=["mistral:7b", "phi3:mini"])
    result = await OllamaProvider(transport=fake.transport).verify("llava:7b")
    assert result.exists is False and result.suggested_models == []  # nosec B101
    assert result.available_models == ["mistral:7b", "phi3:mini"]  # nosec B101


@pytest.mark.asyncio
async def test_suggestions_capped_at_five_in_discovery_order():
    names = [f"llava:{i}b" for i in range(7)] + ["mistral:7b"]
    fake = FakeOllama(models=names)
    result = await OllamaProvider(transport=fake.transport).verify("absent")
    assert result.suggested_models == names[:5]  # nosec B101


@pytest.mark.asyncio
async def test_unreachable_daemon_is_not_model_not_found():
    fake = FakeOllama()
    fake.connect_error = True
    result = await OllamaProvider(host="http://localhost:11434", transport=fake.transport).verify("llava:7b")
    assert result.exists is False  # nosec B101
    assert result.error_code == ErrorCode.UNAVAILABLE.value  # nosec B101
    assert result.error == "Unable to connect to Ollama. Is Ollama running at http://127.0.0.1:11434?"  # nosec B101
    assert result.available_models is None  # nosec B101


@pytest.mark.asyncio
async def test_listing_timeout_reports_misconfiguration():
    fake = FakeOllama()
    fake.timeout_error = True
    result = await OllamaProvider(transport=fake.transport).verify("llava:7b")
    assert result.exists is False and result.error_code == ErrorCode.TIMEOUT.value  # nosec B101
    assert "did not answer in time" in result.error  # nosec B101


@pytest.mark.asyncio
async def test_tags_error_status():
    fake = FakeOllama()
    fake.tags_status = 503
    result = await OllamaProvider(transport=fake.transport).verify("llava:7b")
    assert result.error == "Failed to get list of models (status 503)"  # nosec B101
    assert result.error_code == ErrorCode.PROTOCOL.value  # nosec B101


@pytest.mark.asyncio
async def test_list_models_and_check_connection():
    fake = FakeOllama(models=["b", "a"])
    provider = OllamaProvider(transport=fake.transport)
    assert await provider.list_models() == ["b", "a"]  # nosec B101
    assert await provider.check_connection() == "0.5.7"  # nosec B101

    fake.connect_error = True
    with pytest.raises(BackendUnreachable):
        await provider.list_models()
    with pytest.raises(BackendUnreachable):
        await provider.check_connection()

    fake.connect_error = False
    fake.tags_status = 500
    with pytest.raises(ProtocolError):
        await provider.list_models()


@pytest.mark.asyncio
async def test_non_list_model_listing_is_a_protocol_value():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"models": 5}))
    provider = OllamaProvider(transport=transport)
    result = await provider.verify("llava:7b")
    assert result.exists is False and result.error_code == ErrorCode.PROTOCOL.value  # nosec B101
    assert result.error == "/api/tags returned no model list"  # nosec B101
    with pytest.raises(ProtocolError):
        await provider.list_models()
