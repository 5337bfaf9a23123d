import pytest

from repairflow.services.phases import (
    NEXT_PHASE,
    Phase,
    is_terminal,
    next_phase,
    parse_phase,
    phase_label,
    previous_phases,
    requires_approval,
    working_phases,
)


def test_repair_path():
    path = [Phase.PENDING_ASSIGNMENT]
    while next_phase(path[-1]) is not None:
        path.append(next_phase(path[-1]))
    assert path == [
        Phase.PENDING_ASSIGNMENT,
        Phase.INITIAL_TESTING,
        Phase.TEARDOWN,
        Phase.REPAIR_SCOPE,
        Phase.REBUILD,
        Phase.FINAL_TESTING,
        Phase.COMPLETED,
    ]


def test_inspection_path():
    assert next_phase("inspection") == Phase.AWAITING_APPROVAL
    assert next_phase("awaiting_approval") == Phase.COMPLETED
    assert next_phase("qc_review") == Phase.COMPLETED


def test_terminal_phases_have_no_successor():
    assert next_phase(Phase.COMPLETED) is None
    assert next_phase(Phase.CANCELLED) is None
    assert is_terminal("completed")
    assert is_terminal("cancelled")
    assert not is_terminal("rebuild")


def test_every_successor_is_a_known_phase():
    for source, target in NEXT_PHASE.items():
        assert isinstance(source, Phase)
        assert isinstance(target, Phase)


def test_approval_gates():
    assert requires_approval("repair_scope")
    assert requires_approval("awaiting_approval")
    assert not requires_approval("teardown")
    assert not requires_approval("final_testing")


def test_previous_phases():
    assert previous_phases("teardown") == [Phase.INITIAL_TESTING]
    assert set(previous_phases("completed")) == {
        Phase.AWAITING_APPROVAL, Phase.FINAL_TESTING, Phase.QC_REVIEW,
    }
    assert previous_phases("pending_assignment") == []


def test_parse_phase_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown phase"):
        parse_phase("painting")


def test_parse_phase_passes_enum_through():
    assert parse_phase(Phase.REBUILD) is Phase.REBUILD
    assert parse_phase("rebuild") is Phase.REBUILD


def test_working_phases_exclude_bookends():
    phases = working_phases()
    assert Phase.PENDING_ASSIGNMENT not in phases
    assert Phase.COMPLETED not in phases
    assert Phase.CANCELLED not in phases
    assert Phase.INITIAL_TESTING in phases


def test_phase_labels():
    assert phase_label("teardown") == "Teardown and Inspect"
    assert phase_label(Phase.FINAL_TESTING) == "Final Testing and Quality Verification"
