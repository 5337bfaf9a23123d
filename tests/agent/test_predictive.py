"""Tests for the predictive maintenance graph and history tools."""

import json

import pytest

from repairflow.agents.llm_provider import LLMProvider, LLMResult
from repairflow.agents.predictive import graph as predictive_graph
from repairflow.agents.predictive.tools import (
    confidence_for,
    load_model_history,
    load_unit_history,
    parse_risk_score,
)
from repairflow.db import crud
from repairflow.services.inventory import record_work_order_part


class FakeLLM(LLMProvider):
    def __init__(self, text):
        self.text = text
        self.prompts = []

    async def complete(self, system, prompt, temperature, max_tokens):
        self.prompts.append(prompt)
        return LLMResult(self.text, "stop")

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        raise AssertionError("predictive analysis is text only")


# ── tools ────────────────────────────────────────────────────────────

def test_parse_risk_score():
    assert parse_risk_score("Overall Risk Score: 72 out of 100") == 72
    assert parse_risk_score("risk score 15") == 15
    assert parse_risk_score("No score given") is None


def test_parse_risk_score_takes_first_and_is_unbounded():
    assert parse_risk_score("Risk score: 140. Revised risk score: 60") == 140


def test_confidence_for():
    assert confidence_for(11) == "high"
    assert confidence_for(10) == "medium"
    assert confidence_for(0) == "medium"
    assert confidence_for(4, threshold=3) == "high"


async def test_unit_history(db, shop, work_order):
    history = await load_unit_history(db, shop.unit.id)
    assert history["equipmentUnitId"] == shop.unit.id
    assert history["totalWorkOrders"] == 1
    entry = history["recentWorkOrders"][0]
    assert entry["work_order_number"] == work_order.work_order_number
    assert entry["reported_issue"] == "Motor trips on overload after 10 minutes"
    assert entry["work_sessions"] == []
    assert entry["work_order_parts"] == []


async def test_unit_history_lists_installed_parts(db, shop, stock, work_order):
    await record_work_order_part(db, work_order.id, stock.bearing.id, stock.warehouse.id, 2, shop.tech.id)

    history = await load_unit_history(db, shop.unit.id)

    parts = history["recentWorkOrders"][0]["work_order_parts"]
    assert len(parts) == 1
    assert parts[0]["part_number"] == "6309-2Z"
    assert parts[0]["category"] == "bearings"
    assert parts[0]["quantity_used"] == 2
    assert parts[0]["unit_cost"] == 38.75


async def test_model_history_spans_units(db, shop, work_order):
    other = await crud.create_equipment_unit(db, shop.model.id, "SN-3003")
    await crud.create_work_order(db, other.id, reported_issue="Noisy bearing")

    history = await load_model_history(db, shop.model.id)
    assert history["totalUnits"] == 2
    assert history["totalWorkOrders"] == 2


# ── graph ────────────────────────────────────────────────────────────

async def test_run_predictive_for_unit(db, shop, work_order, monkeypatch):
    llm = FakeLLM("Bearing failures recur every 14 months.\nRisk Score: 65")
    monkeypatch.setattr(predictive_graph, "get_llm_provider", lambda model=None: llm)

    result = await predictive_graph.run_predictive_analysis(
        db, "failure_prediction", equipment_unit_id=shop.unit.id,
    )

    assert result["analysisType"] == "failure_prediction"
    assert result["riskScore"] == 65
    assert result["dataPoints"] == 1
    assert result["confidence"] == "medium"
    prompt = llm.prompts[0]
    assert "Provide a risk score (0-100)" in prompt
    history = json.loads(prompt.split("Historical Data:\n", 1)[1])
    assert history["recentWorkOrders"][0]["work_order_number"] == work_order.work_order_number


async def test_run_predictive_for_model(db, shop, work_order, monkeypatch):
    monkeypatch.setattr(predictive_graph, "get_llm_provider", lambda model=None: FakeLLM("Replace seals yearly."))

    result = await predictive_graph.run_predictive_analysis(
        db, "maintenance_recommendation", equipment_model_id=shop.model.id,
    )

    assert result["riskScore"] is None
    assert result["dataPoints"] == 1


async def test_run_predictive_rejects_bad_input(db, shop):
    with pytest.raises(ValueError, match="analysisType"):
        await predictive_graph.run_predictive_analysis(db, "horoscope", equipment_unit_id=shop.unit.id)
    with pytest.raises(ValueError, match="required"):
        await predictive_graph.run_predictive_analysis(db, "cost_forecast")
