"""
Pytest configuration and fixtures
"""
import copy
import json

import pytest

HEADER_ANALYSIS_PAYLOAD = {
    "seoScore": 62,
    "detectedHeaders": [
        {"tag": "H1", "content": "Best Hiking Boots"},
        {"tag": "H3", "content": "Waterproof Models"},
    ],
    "analysis": [
        {
            "severity": "Warning",
            "message": "Incorrect heading hierarchy: H3 follows H1.",
            "recommendation": "Use an H2 before introducing H3 subsections.",
        },
        {
            "severity": "Info",
            "message": "H1 could mention the year.",
            "recommendation": "Consider 'Best Hiking Boots of 2026'.",
        },
    ],
    "optimizedHtml": "<h1>Best Hiking Boots</h1><h2>Waterproof Models</h2>",
}

RANKING_PAYLOAD = {
    "rankingPotentialScore": 71,
    "estimatedRankingCategory": "Moderate Potential",
    "rankingAnalysisReport": "## Assessment\n\nThe header contains the keyword.",
    "keywordVariations": [
        {"keyword": "best hiking boots 2026", "volume": "1.2K", "kd": "35%"},
        {"keyword": "waterproof hiking boots", "volume": "N/A", "kd": "Low"},
        {"keyword": "hiking boots for women", "volume": "900", "kd": "28%"},
    ],
    "auditChecklistResults": [
        {"checklistItem": "Keyword Presence", "isMet": True, "reasoning": "Keyword is present."},
        {"checklistItem": "Length Appropriateness", "isMet": False, "reasoning": "Too short."},
    ],
}


class StubCompleter:
    """
    JsonCompleter のスタブ。呼び出しを記録し、固定の本文を返す。
    dict を渡した場合は JSON 文字列にして返す。
    """

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload)


@pytest.fixture
def header_analysis_payload():
    return copy.deepcopy(HEADER_ANALYSIS_PAYLOAD)


@pytest.fixture
def ranking_payload():
    return copy.deepcopy(RANKING_PAYLOAD)


@pytest.fixture
def make_completer():
    """StubCompleter を作るファクトリ"""
    return StubCompleter


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


@pytest.fixture
def fake_get(monkeypatch):
    """
    requests.get を差し替える。
    fake_get(response=...) または fake_get(exc=...) で挙動を決め、
    呼び出し内容は戻り値の list に積まれる。
    """
    import requests

    def _install(response=None, exc=None):
        calls = []

        def _get(url, headers=None, timeout=None, **kwargs):
            calls.append({"url": url, "headers": headers, "timeout": timeout})
            if exc is not None:
                raise exc
            return response

        monkeypatch.setattr(requests, "get", _get)
        return calls

    _install.Response = FakeResponse
    return _install
