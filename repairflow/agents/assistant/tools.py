"""Repair assistant tools."""

from __future__ import annotations

import json


def build_context_text(context: dict | None) -> str:
    """Render the current job context as a block appended to the system prompt.

    Keys: workOrderNumber, equipmentModel, currentStep, measurements, findings.
    Missing or empty values are left out.
    """
    if not context:
        return ""

    lines = ["", "", "Current Work Context:"]
    if context.get("workOrderNumber"):
        lines.append(f"- Work Order: {context['workOrderNumber']}")
    if context.get("equipmentModel"):
        lines.append(f"- Equipment: {context['equipmentModel']}")
    if context.get("currentStep"):
        lines.append(f"- Current Step: {context['currentStep']}")
    measurements = context.get("measurements")
    if measurements:
        lines.append(f"- Recent Measurements: {json.dumps(measurements, indent=2)}")
    findings = context.get("findings")
    if findings:
        lines.append(f"- Findings: {len(findings)} issues identified")
    return "\n".join(lines) + "\n"
