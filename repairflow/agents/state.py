"""LangGraph TypedDict states for the AI agents."""

from __future__ import annotations

from typing import TypedDict, Any


class AssistantState(TypedDict):
    query: str
    context: dict[str, Any]
    system_prompt: str
    response: str
    config: dict  # {model, temperature, max_tokens}


class ImageAnalysisState(TypedDict):
    image_url: str
    analysis_type: str  # damage | wear | measurement | general
    component_type: str | None
    context: str | None
    system_prompt: str
    user_prompt: str
    analysis: str
    finish_reason: str
    detected_issues: list[dict]  # [{type, severity, description}]
    confidence: str  # high | medium
    config: dict


class PredictiveState(TypedDict):
    analysis_type: str  # failure_prediction | maintenance_recommendation | cost_forecast
    history: dict[str, Any]  # {equipmentUnitId|equipmentModelId, totalWorkOrders, recentWorkOrders, ...}
    user_prompt: str
    analysis: str
    risk_score: int | None
    data_points: int
    confidence: str
    config: dict
