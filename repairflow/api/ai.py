"""AI endpoints: repair assistant, photo analysis, predictive maintenance.

These keep the camelCase request/response shape the field clients already
speak, and report failures as ``{"error": ..., "message": ...}``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.agents.llm_provider import LLMNotConfiguredError
from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth
from repairflow.services.auth import AuthContext
from repairflow.schemas import AIInteractionRate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai"])


def _error(status: int, error: str, message: str | None = None) -> JSONResponse:
    content = {"error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status, content=content)


def _not_configured() -> JSONResponse:
    return _error(
        503, "AI service not configured",
        "No AI provider API key is configured on the server. Contact your administrator.",
    )


def _upstream_failed() -> JSONResponse:
    return _error(500, "AI service error", "The AI service could not complete the request. Try again later.")


@router.post("/ai-assistant")
async def ai_assistant(
    body: dict,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    query = body.get("query")
    if not isinstance(query, str) or not query.strip():
        return _error(400, "Query is required")
    context = body.get("context") or {}
    if not isinstance(context, dict):
        return _error(400, "Context must be an object")
    session_id = body.get("workSessionId")

    from repairflow.agents.assistant.graph import run_assistant
    try:
        result = await run_assistant(query, context)
    except LLMNotConfiguredError:
        return _not_configured()
    except Exception:
        logger.exception("AI assistant request failed")
        return _upstream_failed()

    if session_id:
        if not await crud.get_work_session(db, session_id):
            raise HTTPException(404, "Work session not found")
        interaction = await crud.create_ai_interaction(
            db, auth.user_id, query, result["response"],
            context=context, work_session_id=session_id,
        )
        result["interactionId"] = interaction.id
    return result


@router.patch("/ai-interactions/{interaction_id}")
async def rate_ai_interaction(
    interaction_id: str,
    body: AIInteractionRate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    interaction = await crud.get_ai_interaction(db, interaction_id)
    if not interaction:
        raise HTTPException(404, "AI interaction not found")
    if interaction.user_id != auth.user_id:
        raise HTTPException(403, "Only the technician who asked can rate this answer")
    interaction = await crud.rate_ai_interaction(db, interaction, body.helpful, body.feedback)
    return {"id": interaction.id, "helpful": interaction.helpful, "feedback": interaction.feedback}


@router.post("/ai-image-analysis")
async def ai_image_analysis(
    body: dict,
    auth: AuthContext = Depends(require_auth),
):
    image_url = body.get("imageUrl")
    if not isinstance(image_url, str) or not image_url.strip():
        return _error(400, "Image URL is required")
    context = body.get("context")
    if context is not None and not isinstance(context, str):
        context = str(context)

    from repairflow.agents.image_analysis.graph import run_image_analysis
    try:
        return await run_image_analysis(
            image_url,
            analysis_type=body.get("analysisType") or "general",
            component_type=body.get("componentType"),
            context=context,
        )
    except LLMNotConfiguredError:
        return _not_configured()
    except Exception:
        logger.exception("AI image analysis failed")
        return _upstream_failed()


@router.post("/ai-predictive-analysis")
async def ai_predictive_analysis(
    body: dict,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    from repairflow.agents.predictive.graph import ANALYSIS_TYPES, run_predictive_analysis

    unit_id = body.get("equipmentUnitId")
    model_id = body.get("equipmentModelId")
    analysis_type = body.get("analysisType") or "failure_prediction"
    if not unit_id and not model_id:
        return _error(400, "Equipment unit or model ID is required")
    if analysis_type not in ANALYSIS_TYPES:
        return _error(400, f"analysisType must be one of {', '.join(ANALYSIS_TYPES)}")
    if unit_id and not await crud.get_equipment_unit(db, unit_id):
        return _error(404, "Equipment unit not found")
    if not unit_id and not await crud.get_equipment_model(db, model_id):
        return _error(404, "Equipment model not found")

    try:
        return await run_predictive_analysis(
            db, analysis_type, equipment_unit_id=unit_id, equipment_model_id=model_id,
        )
    except LLMNotConfiguredError:
        return _not_configured()
    except Exception:
        logger.exception("AI predictive analysis failed")
        return _upstream_failed()
