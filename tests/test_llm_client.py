"""
Tests for the structured model invocation adapter
"""
import json
import time
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import openai
import pytest

from models.header_models import HeaderAnalysisRequest, HeaderAnalysisResult
from models.ranking_models import RankingRequest
from services import llm_client
from services.errors import ModelInvocationError, SchemaValidationError
from services.llm_client import build_system_prompt, invoke_structured, render_prompt


def test_render_prompt_embeds_fields_verbatim():
    html = "<h1>{not a placeholder}</h1><script>alert('x')</script>"
    prompt = render_prompt("HTML:\n{htmlContent}\nend", HeaderAnalysisRequest(htmlContent=html))

    assert prompt == f"HTML:\n{html}\nend"


def test_render_prompt_uses_aliases():
    request = RankingRequest(headerType="Title Tag", headerText="Best Boots", mainKeyword="boots")
    prompt = render_prompt("{headerType}|{headerText}|{mainKeyword}", request)

    assert prompt == "Title Tag|Best Boots|boots"


def test_build_system_prompt_declares_schema():
    system_prompt = build_system_prompt(HeaderAnalysisResult)

    assert "JSON Schema" in system_prompt
    for key in ("seoScore", "detectedHeaders", "analysis", "optimizedHtml"):
        assert key in system_prompt


def test_invoke_structured_returns_validated_object(make_completer, header_analysis_payload):
    completer = make_completer(header_analysis_payload)
    request = HeaderAnalysisRequest(htmlContent="<h1>Best Hiking Boots</h1>")

    result = invoke_structured("Analyze: {htmlContent}", request, HeaderAnalysisResult, completer=completer)

    assert result == HeaderAnalysisResult.model_validate(header_analysis_payload)
    system_prompt, user_prompt = completer.calls[0]
    assert "seoScore" in system_prompt
    assert user_prompt == "Analyze: <h1>Best Hiking Boots</h1>"


def test_invoke_structured_accepts_fenced_json(make_completer, header_analysis_payload):
    completer = make_completer("```json\n" + json.dumps(header_analysis_payload) + "\n```")
    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")

    result = invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=completer)

    assert result.seo_score == header_analysis_payload["seoScore"]


@pytest.mark.parametrize(
    "content",
    [
        '{"seoScore": "high", "detectedHeaders": [], "analysis": [], "optimizedHtml": ""}',
        '{"seoScore": 80}',
        "Sure! Here is your analysis.",
        "",
    ],
)
def test_invoke_structured_rejects_malformed_output(make_completer, content):
    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")

    with pytest.raises(SchemaValidationError):
        invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=make_completer(content))


def test_invoke_structured_wraps_completer_errors():
    def broken_completer(system_prompt, user_prompt):
        raise TimeoutError("model took too long")

    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")
    with pytest.raises(ModelInvocationError) as exc_info:
        invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=broken_completer)

    assert not isinstance(exc_info.value, SchemaValidationError)


def test_openai_client_requires_api_key(monkeypatch):
    monkeypatch.setattr(llm_client, "_client", None)
    monkeypatch.setattr(llm_client.settings, "openai_api_key", None)

    with pytest.raises(ModelInvocationError):
        llm_client.get_openai_client()


def _fake_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_openai_json_completion_requests_json_mode(monkeypatch):
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        message = SimpleNamespace(content='{"ok": true}')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)

    monkeypatch.setattr(llm_client, "get_openai_client", lambda: _fake_client(create))

    content = llm_client.openai_json_completion("system text", "user text")

    assert content == '{"ok": true}'
    assert captured["response_format"] == {"type": "json_object"}
    assert captured["model"] == llm_client.settings.openai_model
    assert captured["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]


def test_openai_json_completion_wraps_sdk_errors(monkeypatch):
    def create(**kwargs):
        raise openai.OpenAIError("service unavailable")

    monkeypatch.setattr(llm_client, "get_openai_client", lambda: _fake_client(create))

    with pytest.raises(ModelInvocationError):
        llm_client.openai_json_completion("s", "u")


def test_openai_json_completion_rejects_empty_content(monkeypatch):
    def create(**kwargs):
        message = SimpleNamespace(content=None)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)

    monkeypatch.setattr(llm_client, "get_openai_client", lambda: _fake_client(create))

    with pytest.raises(ModelInvocationError):
        llm_client.openai_json_completion("s", "u")


@pytest.mark.parametrize(
    "field, value",
    [("seoScore", "85"), ("seoScore", 85.0), ("seoScore", True)],
)
def test_invoke_structured_does_not_coerce_scalar_types(make_completer, header_analysis_payload, field, value):
    header_analysis_payload[field] = value
    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")

    with pytest.raises(SchemaValidationError):
        invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=make_completer(header_analysis_payload))


def test_invoke_structured_strict_mode_keeps_tag_normalization(make_completer, header_analysis_payload):
    header_analysis_payload["detectedHeaders"][1]["tag"] = "h3"
    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")

    result = invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=make_completer(header_analysis_payload))

    assert result.detected_headers[1].tag == "H3"


@pytest.mark.parametrize("content", [{"seoScore": 80}, None, b"{}"])
def test_invoke_structured_rejects_non_string_completer_output(content):
    def odd_completer(system_prompt, user_prompt):
        return content

    request = HeaderAnalysisRequest(htmlContent="<h1>x</h1>")
    with pytest.raises(ModelInvocationError) as exc_info:
        invoke_structured("{htmlContent}", request, HeaderAnalysisResult, completer=odd_completer)

    assert exc_info.value.kind == "model_invocation"


def test_openai_client_is_created_once_under_concurrency(monkeypatch):
    created = []

    class SlowOpenAI:
        def __init__(self, **kwargs):
            time.sleep(0.05)
            created.append(kwargs)

    monkeypatch.setattr(llm_client, "_client", None)
    monkeypatch.setattr(llm_client, "OpenAI", SlowOpenAI)
    monkeypatch.setattr(llm_client.settings, "openai_api_key", "sk-test")

    with ThreadPoolExecutor(max_workers=8) as pool:
        clients = list(pool.map(lambda _: llm_client.get_openai_client(), range(8)))

    assert len(created) == 1
    assert created[0]["max_retries"] == 0
    assert all(c is clients[0] for c in clients)
