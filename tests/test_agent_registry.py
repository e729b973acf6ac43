from __future__ import annotations

import logging

import pytest

from traction_ai.agents.registry import (
    BRAKE_CONTROL,
    DEFAULT_AGENT_SEEDS,
    SLIP_DETECTION,
    SURFACE_ANALYSIS,
    THROTTLE_MANAGER,
    Agent,
    AgentRegistry,
    AgentStatus,
    AgentUpdate,
    agent_from_mapping,
)


def test_default_seeds_are_listed_in_registration_order() -> None:
    registry = AgentRegistry()

    agents = registry.list()

    assert [agent.id for agent in agents] == [SLIP_DETECTION, BRAKE_CONTROL, THROTTLE_MANAGER, SURFACE_ANALYSIS]
    assert agents[2] == Agent(THROTTLE_MANAGER, "Throttle Manager Agent", AgentStatus.IDLE, "Awaiting input", 100)
    assert agents[3].confidence == 92


def test_update_replaces_mutable_fields_only() -> None:
    registry = AgentRegistry()

    changed = registry.update(BRAKE_CONTROL, "alert", "Increasing brake force", 88)

    agent = registry.get(BRAKE_CONTROL)
    assert changed is True
    assert agent == Agent(BRAKE_CONTROL, "Brake Control Agent", AgentStatus.ALERT, "Increasing brake force", 88)


def test_update_unknown_agent_is_a_silent_no_op(caplog: pytest.LogCaptureFixture) -> None:
    registry = AgentRegistry()
    before = registry.list()

    with caplog.at_level(logging.DEBUG, logger="traction_ai.agents.registry"):
        changed = registry.update("wing-angle", AgentStatus.ALERT, "Adjusting", 50)

    assert changed is False
    assert registry.list() == before
    assert any(getattr(record, "agent_id", None) == "wing-angle" for record in caplog.records)


def test_apply_is_all_or_nothing() -> None:
    registry = AgentRegistry()
    before = registry.list()

    with pytest.raises(ValueError):
        registry.apply(
            (
                AgentUpdate(SLIP_DETECTION, AgentStatus.ALERT, "Detecting excessive slip", 85),
                AgentUpdate(BRAKE_CONTROL, AgentStatus.ALERT, "Increasing brake force", 101),
            )
        )

    assert registry.list() == before


def test_apply_skips_unknown_ids_and_counts_changes() -> None:
    registry = AgentRegistry()

    changed = registry.apply(
        (
            AgentUpdate("ghost", AgentStatus.IDLE, "nothing", 1),
            AgentUpdate(SURFACE_ANALYSIS, AgentStatus.IDLE, "Waiting for grip data", 70),
        )
    )

    assert changed == 1
    assert registry.get(SURFACE_ANALYSIS).status is AgentStatus.IDLE  # type: ignore[union-attr]
    assert "ghost" not in registry


@pytest.mark.parametrize("confidence", [-1, 101, 50.5, True])
def test_update_rejects_invalid_confidence(confidence: object) -> None:
    registry = AgentRegistry()

    with pytest.raises(ValueError):
        registry.update(SLIP_DETECTION, AgentStatus.ACTIVE, "Monitoring", confidence)  # type: ignore[arg-type]


def test_update_rejects_unknown_status() -> None:
    with pytest.raises(ValueError):
        AgentRegistry().update(SLIP_DETECTION, "sleeping", "Monitoring", 50)


def test_duplicate_seed_ids_are_rejected() -> None:
    with pytest.raises(ValueError):
        AgentRegistry(DEFAULT_AGENT_SEEDS + DEFAULT_AGENT_SEEDS[:1])


def test_agent_from_mapping_builds_seed() -> None:
    agent = agent_from_mapping(
        {"id": "aero", "name": "Aero Agent", "status": "idle", "last_action": "Parked", "confidence": 70}
    )

    assert agent == Agent("aero", "Aero Agent", AgentStatus.IDLE, "Parked", 70)
    assert agent.as_dict()["status"] == "idle"

    with pytest.raises(ValueError):
        agent_from_mapping({"name": "Nameless"})
