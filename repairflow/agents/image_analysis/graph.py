"""Image analysis agent: LangGraph StateGraph implementation.

Graph: build_prompts → analyze_image → extract_issues
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from langgraph.graph import StateGraph, END

from repairflow.agents.image_analysis.prompts import EMPTY_ANALYSIS
from repairflow.agents.image_analysis.tools import (
    build_prompts, extract_detected_issues, confidence_from_finish, normalize_analysis_type,
)
from repairflow.agents.llm_provider import LLMProvider, get_llm_provider
from repairflow.agents.state import ImageAnalysisState
from repairflow.config import get_settings

logger = logging.getLogger(__name__)


# ── Node functions ────────────────────────────────────────

def build_prompts_node(state: ImageAnalysisState) -> dict:
    system, user = build_prompts(state["analysis_type"], state["component_type"], state["context"])
    return {"system_prompt": system, "user_prompt": user}


def _analyze_image_node(llm: LLMProvider):
    async def analyze_image_node(state: ImageAnalysisState) -> dict:
        cfg = state["config"]
        result = await llm.analyze_image_url(
            state["system_prompt"], state["user_prompt"], state["image_url"],
            temperature=cfg["temperature"], max_tokens=cfg["max_tokens"],
        )
        return {"analysis": result.text or EMPTY_ANALYSIS, "finish_reason": result.finish_reason}
    return analyze_image_node


def extract_issues_node(state: ImageAnalysisState) -> dict:
    return {
        "detected_issues": extract_detected_issues(state["analysis"], state["analysis_type"]),
        "confidence": confidence_from_finish(state["finish_reason"]),
    }


# ── Build graph ───────────────────────────────────────────

def build_image_analysis_graph(llm: LLMProvider):
    graph = StateGraph(ImageAnalysisState)

    graph.add_node("build_prompts", build_prompts_node)
    graph.add_node("analyze_image", _analyze_image_node(llm))
    graph.add_node("extract_issues", extract_issues_node)

    graph.set_entry_point("build_prompts")
    graph.add_edge("build_prompts", "analyze_image")
    graph.add_edge("analyze_image", "extract_issues")
    graph.add_edge("extract_issues", END)

    return graph.compile()


# ── Public API ────────────────────────────────────────────

async def run_image_analysis(
    image_url: str,
    analysis_type: str = "general",
    component_type: str | None = None,
    context: str | None = None,
) -> dict:
    """Analyze one photo. Raises LLMNotConfiguredError without a key."""
    settings = get_settings()
    llm = get_llm_provider(settings.llm.vision_model)
    analysis_type = normalize_analysis_type(analysis_type)

    initial_state: ImageAnalysisState = {
        "image_url": image_url,
        "analysis_type": analysis_type,
        "component_type": component_type,
        "context": context,
        "system_prompt": "",
        "user_prompt": "",
        "analysis": "",
        "finish_reason": "",
        "detected_issues": [],
        "confidence": "medium",
        "config": {
            "temperature": settings.llm.image_temperature,
            "max_tokens": settings.llm.image_max_tokens,
        },
    }

    graph = build_image_analysis_graph(llm)
    result = await graph.ainvoke(initial_state)

    return {
        "analysis": result["analysis"],
        "analysisType": analysis_type,
        "componentType": component_type,
        "detectedIssues": result["detected_issues"],
        "confidence": result["confidence"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
