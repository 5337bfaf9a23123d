"""Work order phases and the single phase-advancement table.

Every place that needs to know "what comes after this phase" goes through
``next_phase``; the API, the workflow services and the seed data never carry
their own copy of the map.
"""

from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    PENDING_ASSIGNMENT = "pending_assignment"
    INITIAL_TESTING = "initial_testing"
    TEARDOWN = "teardown"
    REPAIR_SCOPE = "repair_scope"
    INSPECTION = "inspection"
    AWAITING_APPROVAL = "awaiting_approval"
    REBUILD = "rebuild"
    FINAL_TESTING = "final_testing"
    QC_REVIEW = "qc_review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


NEXT_PHASE: dict[Phase, Phase] = {
    Phase.PENDING_ASSIGNMENT: Phase.INITIAL_TESTING,
    Phase.INITIAL_TESTING: Phase.TEARDOWN,
    Phase.TEARDOWN: Phase.REPAIR_SCOPE,
    Phase.REPAIR_SCOPE: Phase.REBUILD,
    Phase.INSPECTION: Phase.AWAITING_APPROVAL,
    Phase.AWAITING_APPROVAL: Phase.COMPLETED,
    Phase.REBUILD: Phase.FINAL_TESTING,
    Phase.FINAL_TESTING: Phase.COMPLETED,
    Phase.QC_REVIEW: Phase.COMPLETED,
}

# Leaving these phases needs a manager/admin sign-off.
APPROVAL_GATES: frozenset[Phase] = frozenset({Phase.REPAIR_SCOPE, Phase.AWAITING_APPROVAL})

TERMINAL_PHASES: frozenset[Phase] = frozenset({Phase.COMPLETED, Phase.CANCELLED})

PHASE_LABELS: dict[Phase, str] = {
    Phase.PENDING_ASSIGNMENT: "Pending Assignment",
    Phase.INITIAL_TESTING: "Initial Testing",
    Phase.TEARDOWN: "Teardown and Inspect",
    Phase.REPAIR_SCOPE: "Determine Repair Scope and Parts Required",
    Phase.INSPECTION: "Inspection",
    Phase.AWAITING_APPROVAL: "Awaiting Approval",
    Phase.REBUILD: "Rebuild",
    Phase.FINAL_TESTING: "Final Testing and Quality Verification",
    Phase.QC_REVIEW: "QC Review",
    Phase.COMPLETED: "Completed",
    Phase.CANCELLED: "Cancelled",
}


def parse_phase(value: str | Phase) -> Phase:
    """Coerce a raw string into a Phase, raising ValueError on unknown names."""
    if isinstance(value, Phase):
        return value
    try:
        return Phase(value)
    except ValueError:
        raise ValueError(f"Unknown phase: {value!r}") from None


def next_phase(phase: str | Phase) -> Phase | None:
    return NEXT_PHASE.get(parse_phase(phase))


def previous_phases(phase: str | Phase) -> list[Phase]:
    target = parse_phase(phase)
    return [p for p, n in NEXT_PHASE.items() if n == target]


def is_terminal(phase: str | Phase) -> bool:
    return parse_phase(phase) in TERMINAL_PHASES


def requires_approval(phase: str | Phase) -> bool:
    return parse_phase(phase) in APPROVAL_GATES


def phase_label(phase: str | Phase) -> str:
    return PHASE_LABELS[parse_phase(phase)]


def working_phases() -> list[Phase]:
    """Phases a technician can run a procedure in (non-terminal, past assignment)."""
    return [p for p in Phase if p not in TERMINAL_PHASES and p != Phase.PENDING_ASSIGNMENT]
