"""Tests for the image analysis graph and its post-processing tools."""

from repairflow.agents.image_analysis import graph as image_graph
from repairflow.agents.image_analysis.prompts import EMPTY_ANALYSIS
from repairflow.agents.image_analysis.tools import (
    build_prompts,
    confidence_from_finish,
    extract_detected_issues,
    normalize_analysis_type,
)
from repairflow.agents.llm_provider import LLMProvider, LLMResult


class FakeVisionLLM(LLMProvider):
    def __init__(self, text, finish_reason="stop"):
        self.text = text
        self.finish_reason = finish_reason
        self.calls = []

    async def complete(self, system, prompt, temperature, max_tokens):
        raise AssertionError("image analysis always sends the image")

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        self.calls.append({"system": system, "prompt": prompt, "image_url": image_url})
        return LLMResult(self.text, self.finish_reason)


# ── tools ────────────────────────────────────────────────────────────

def test_normalize_analysis_type():
    assert normalize_analysis_type("wear") == "wear"
    assert normalize_analysis_type("thermal") == "general"
    assert normalize_analysis_type(None) == "general"


def test_build_prompts_with_component_and_context():
    system, user = build_prompts("damage", "bearing", "Drive end, 20 years in service")
    assert "Additional context: Drive end, 20 years in service" in system
    assert "image of a bearing for any signs of damage" in user


def test_build_prompts_defaults():
    system, user = build_prompts("damage", None, None)
    assert "Additional context" not in system
    assert "image of a component" in user


def test_extract_first_severity_word():
    analysis = "Outer race shows spalling.\nSeverity: MAJOR, though the cage is only minor worn."
    issues = extract_detected_issues(analysis, "wear")
    assert issues == [{
        "type": "wear",
        "severity": "major",
        "description": "Outer race shows spalling.",
    }]


def test_extract_requires_whole_word():
    assert extract_detected_issues("Majority of the surface is clean.", "general") == []


def test_extract_without_severity():
    assert extract_detected_issues("Looks serviceable.", "general") == []


def test_confidence_from_finish():
    assert confidence_from_finish("stop") == "high"
    assert confidence_from_finish("length") == "medium"
    assert confidence_from_finish("other") == "medium"


# ── graph ────────────────────────────────────────────────────────────

async def test_run_image_analysis(monkeypatch):
    llm = FakeVisionLLM("Critical crack in the shaft keyway.\nReplace the shaft.")
    monkeypatch.setattr(image_graph, "get_llm_provider", lambda model=None: llm)

    result = await image_graph.run_image_analysis(
        "https://photos.example.test/shaft.jpg", "damage", "shaft",
    )

    assert result["analysis"].startswith("Critical crack")
    assert result["analysisType"] == "damage"
    assert result["componentType"] == "shaft"
    assert result["confidence"] == "high"
    assert result["detectedIssues"][0]["severity"] == "critical"
    assert result["timestamp"]
    assert llm.calls[0]["image_url"] == "https://photos.example.test/shaft.jpg"


async def test_run_image_analysis_unknown_type_and_truncation(monkeypatch):
    llm = FakeVisionLLM("Surface looks fine", finish_reason="length")
    monkeypatch.setattr(image_graph, "get_llm_provider", lambda model=None: llm)

    result = await image_graph.run_image_analysis("https://x.test/a.jpg", "thermal")

    assert result["analysisType"] == "general"
    assert result["confidence"] == "medium"
    assert result["detectedIssues"] == []


async def test_run_image_analysis_empty_answer(monkeypatch):
    monkeypatch.setattr(image_graph, "get_llm_provider", lambda model=None: FakeVisionLLM(""))
    result = await image_graph.run_image_analysis("https://x.test/a.jpg")
    assert result["analysis"] == EMPTY_ANALYSIS
