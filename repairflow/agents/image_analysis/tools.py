"""Image analysis tools: prompt selection and response post-processing."""

from __future__ import annotations

import re

from repairflow.agents.image_analysis.prompts import ANALYSIS_PROMPTS, SYSTEM_PROMPT

_SEVERITY_RE = re.compile(r"\b(minor|moderate|major|critical)\b", re.IGNORECASE)


def normalize_analysis_type(analysis_type: str | None) -> str:
    """Unknown or missing types fall back to the general prompt."""
    return analysis_type if analysis_type in ANALYSIS_PROMPTS else "general"


def build_prompts(analysis_type: str, component_type: str | None, context: str | None) -> tuple[str, str]:
    """Return (system_prompt, user_prompt)."""
    system = SYSTEM_PROMPT.format(context_block=f"\nAdditional context: {context}" if context else "")
    user = ANALYSIS_PROMPTS[normalize_analysis_type(analysis_type)].format(
        component=component_type or "component",
    )
    return system, user


def extract_detected_issues(analysis: str, analysis_type: str) -> list[dict]:
    """One issue from the first severity word in the text, described by its first line."""
    match = _SEVERITY_RE.search(analysis)
    if not match:
        return []
    return [{
        "type": analysis_type,
        "severity": match.group(1).lower(),
        "description": analysis.split("\n")[0],
    }]


def confidence_from_finish(finish_reason: str) -> str:
    """'high' when the model finished on its own, otherwise 'medium'."""
    return "high" if finish_reason == "stop" else "medium"
