"""Tests for the repair assistant graph and its context tool."""

import pytest

from repairflow.agents.assistant import graph as assistant_graph
from repairflow.agents.assistant.prompts import EMPTY_RESPONSE, SYSTEM_PROMPT
from repairflow.agents.assistant.tools import build_context_text
from repairflow.agents.llm_provider import LLMNotConfiguredError, LLMProvider, LLMResult


class FakeLLM(LLMProvider):
    def __init__(self, text="Check the bearing clearance first.", finish_reason="stop"):
        self.text = text
        self.finish_reason = finish_reason
        self.calls = []

    async def complete(self, system, prompt, temperature, max_tokens):
        self.calls.append({"system": system, "prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        return LLMResult(self.text, self.finish_reason)

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        raise AssertionError("assistant never sends images")


# ── build_context_text ───────────────────────────────────────────────

def test_context_text_empty():
    assert build_context_text(None) == ""
    assert build_context_text({}) == ""


def test_context_text_all_fields():
    text = build_context_text({
        "workOrderNumber": "WO-20260101-0001",
        "equipmentModel": "Baldor EM3770T",
        "currentStep": "Measure insulation resistance",
        "measurements": {"IR": 550},
        "findings": [{"severity": "major"}, {"severity": "minor"}],
    })
    assert text.startswith("\n\nCurrent Work Context:")
    assert "- Work Order: WO-20260101-0001" in text
    assert "- Equipment: Baldor EM3770T" in text
    assert "- Current Step: Measure insulation resistance" in text
    assert '"IR": 550' in text
    assert "- Findings: 2 issues identified" in text


def test_context_text_skips_empty_values():
    text = build_context_text({"workOrderNumber": "WO-1", "measurements": {}, "findings": []})
    assert "Work Order" in text
    assert "Measurements" not in text
    assert "Findings" not in text


# ── graph ────────────────────────────────────────────────────────────

async def test_run_assistant(monkeypatch):
    llm = FakeLLM()
    monkeypatch.setattr(assistant_graph, "get_llm_provider", lambda model=None: llm)

    result = await assistant_graph.run_assistant(
        "What causes high vibration?", {"equipmentModel": "Baldor EM3770T"},
    )

    assert result == {"response": "Check the bearing clearance first."}
    call = llm.calls[0]
    assert call["prompt"] == "What causes high vibration?"
    assert call["system"].startswith(SYSTEM_PROMPT)
    assert "- Equipment: Baldor EM3770T" in call["system"]
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 800


async def test_run_assistant_empty_answer(monkeypatch):
    monkeypatch.setattr(assistant_graph, "get_llm_provider", lambda model=None: FakeLLM(text=""))
    result = await assistant_graph.run_assistant("Anything?")
    assert result["response"] == EMPTY_RESPONSE


async def test_run_assistant_without_key(monkeypatch):
    def not_configured(model=None):
        raise LLMNotConfiguredError("no key")

    monkeypatch.setattr(assistant_graph, "get_llm_provider", not_configured)
    with pytest.raises(LLMNotConfiguredError):
        await assistant_graph.run_assistant("Anything?")
