"""Repair assistant: LangGraph StateGraph implementation.

Graph: build_prompt → ask_llm
"""

from __future__ import annotations

import logging

from langgraph.graph import StateGraph, END

from repairflow.agents.assistant.prompts import SYSTEM_PROMPT, EMPTY_RESPONSE
from repairflow.agents.assistant.tools import build_context_text
from repairflow.agents.llm_provider import LLMProvider, get_llm_provider
from repairflow.agents.state import AssistantState
from repairflow.config import get_settings

logger = logging.getLogger(__name__)


# ── Node functions ────────────────────────────────────────

def build_prompt_node(state: AssistantState) -> dict:
    return {"system_prompt": SYSTEM_PROMPT + build_context_text(state["context"])}


def _ask_llm_node(llm: LLMProvider):
    async def ask_llm_node(state: AssistantState) -> dict:
        cfg = state["config"]
        result = await llm.complete(
            state["system_prompt"], state["query"],
            temperature=cfg["temperature"], max_tokens=cfg["max_tokens"],
        )
        return {"response": result.text or EMPTY_RESPONSE}
    return ask_llm_node


# ── Build graph ───────────────────────────────────────────

def build_assistant_graph(llm: LLMProvider):
    graph = StateGraph(AssistantState)

    graph.add_node("build_prompt", build_prompt_node)
    graph.add_node("ask_llm", _ask_llm_node(llm))

    graph.set_entry_point("build_prompt")
    graph.add_edge("build_prompt", "ask_llm")
    graph.add_edge("ask_llm", END)

    return graph.compile()


# ── Public API ────────────────────────────────────────────

async def run_assistant(query: str, context: dict | None = None) -> dict:
    """Answer a technician's question. Raises LLMNotConfiguredError without a key."""
    settings = get_settings()
    llm = get_llm_provider(settings.llm.assistant_model)

    initial_state: AssistantState = {
        "query": query,
        "context": context or {},
        "system_prompt": "",
        "response": "",
        "config": {
            "temperature": settings.llm.assistant_temperature,
            "max_tokens": settings.llm.assistant_max_tokens,
        },
    }

    graph = build_assistant_graph(llm)
    result = await graph.ainvoke(initial_state)
    logger.info("Assistant answered %d-char query", len(query))
    return {"response": result["response"]}
