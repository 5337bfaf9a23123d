"""Predictive maintenance agent: LangGraph StateGraph implementation.

Graph: build_prompt → analyze_history → score
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from langgraph.graph import StateGraph, END
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.agents.llm_provider import LLMProvider, get_llm_provider
from repairflow.agents.predictive.prompts import (
    ANALYSIS_PROMPTS, SYSTEM_PROMPT, USER_PROMPT, EMPTY_ANALYSIS,
)
from repairflow.agents.predictive.tools import (
    confidence_for, history_json, load_model_history, load_unit_history, parse_risk_score,
)
from repairflow.agents.state import PredictiveState
from repairflow.config import get_settings

logger = logging.getLogger(__name__)

ANALYSIS_TYPES = tuple(ANALYSIS_PROMPTS)


# ── Node functions ────────────────────────────────────────

def build_prompt_node(state: PredictiveState) -> dict:
    return {
        "user_prompt": USER_PROMPT.format(
            analysis_prompt=ANALYSIS_PROMPTS[state["analysis_type"]],
            history_json=history_json(state["history"]),
        ),
    }


def _analyze_history_node(llm: LLMProvider):
    async def analyze_history_node(state: PredictiveState) -> dict:
        cfg = state["config"]
        result = await llm.complete(
            SYSTEM_PROMPT, state["user_prompt"],
            temperature=cfg["temperature"], max_tokens=cfg["max_tokens"],
        )
        return {"analysis": result.text or EMPTY_ANALYSIS}
    return analyze_history_node


def score_node(state: PredictiveState) -> dict:
    data_points = state["history"].get("totalWorkOrders", 0)
    return {
        "risk_score": parse_risk_score(state["analysis"]),
        "data_points": data_points,
        "confidence": confidence_for(data_points, state["config"]["high_confidence_min"]),
    }


# ── Build graph ───────────────────────────────────────────

def build_predictive_graph(llm: LLMProvider):
    graph = StateGraph(PredictiveState)

    graph.add_node("build_prompt", build_prompt_node)
    graph.add_node("analyze_history", _analyze_history_node(llm))
    graph.add_node("score", score_node)

    graph.set_entry_point("build_prompt")
    graph.add_edge("build_prompt", "analyze_history")
    graph.add_edge("analyze_history", "score")
    graph.add_edge("score", END)

    return graph.compile()


# ── Public API ────────────────────────────────────────────

async def run_predictive_analysis(
    db: AsyncSession,
    analysis_type: str,
    equipment_unit_id: str | None = None,
    equipment_model_id: str | None = None,
) -> dict:
    """Analyze maintenance history for a unit (preferred) or a whole model."""
    if analysis_type not in ANALYSIS_PROMPTS:
        raise ValueError(f"analysisType must be one of {', '.join(ANALYSIS_TYPES)}")

    settings = get_settings()
    if equipment_unit_id:
        history = await load_unit_history(db, equipment_unit_id, settings.workflow.predictive_history_limit)
    elif equipment_model_id:
        history = await load_model_history(db, equipment_model_id)
    else:
        raise ValueError("equipmentUnitId or equipmentModelId is required")

    llm = get_llm_provider(settings.llm.analysis_model)

    initial_state: PredictiveState = {
        "analysis_type": analysis_type,
        "history": history,
        "user_prompt": "",
        "analysis": "",
        "risk_score": None,
        "data_points": 0,
        "confidence": "medium",
        "config": {
            "temperature": settings.llm.predictive_temperature,
            "max_tokens": settings.llm.predictive_max_tokens,
            "high_confidence_min": settings.workflow.high_confidence_min_work_orders,
        },
    }

    graph = build_predictive_graph(llm)
    result = await graph.ainvoke(initial_state)
    logger.info(
        "Predictive %s over %d work orders, risk score %s",
        analysis_type, result["data_points"], result["risk_score"],
    )

    return {
        "analysis": result["analysis"],
        "analysisType": analysis_type,
        "riskScore": result["risk_score"],
        "dataPoints": result["data_points"],
        "confidence": result["confidence"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
