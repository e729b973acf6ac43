"""Registry of monitored subsystem agents and their mutable status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Mapping, Sequence

__all__ = [
    "Agent",
    "AgentRegistry",
    "AgentStatus",
    "AgentUpdate",
    "BRAKE_CONTROL",
    "DEFAULT_AGENT_SEEDS",
    "SLIP_DETECTION",
    "SURFACE_ANALYSIS",
    "THROTTLE_MANAGER",
    "agent_from_mapping",
]


logger = logging.getLogger(__name__)


SLIP_DETECTION = "slip-detection"
BRAKE_CONTROL = "brake-control"
THROTTLE_MANAGER = "throttle-manager"
SURFACE_ANALYSIS = "surface-analysis"


class AgentStatus(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"
    ALERT = "alert"


@dataclass(frozen=True, slots=True)
class Agent:
    """Immutable view of one agent record."""

    id: str
    name: str
    status: AgentStatus
    last_action: str
    confidence: int

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "last_action": self.last_action,
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class AgentUpdate:
    """Replacement values for the mutable fields of one agent."""

    agent_id: str
    status: AgentStatus
    last_action: str
    confidence: int


DEFAULT_AGENT_SEEDS: tuple[Agent, ...] = (
    Agent(SLIP_DETECTION, "Slip Detection Agent", AgentStatus.ACTIVE, "Monitoring wheel slip", 98),
    Agent(BRAKE_CONTROL, "Brake Control Agent", AgentStatus.ACTIVE, "Optimizing brake force", 95),
    Agent(THROTTLE_MANAGER, "Throttle Manager Agent", AgentStatus.IDLE, "Awaiting input", 100),
    Agent(SURFACE_ANALYSIS, "Surface Analysis Agent", AgentStatus.ACTIVE, "Detecting road conditions", 92),
)


def _coerce_status(value: AgentStatus | str) -> AgentStatus:
    try:
        return AgentStatus(value)
    except ValueError:
        raise ValueError(f"Unknown agent status: {value!r}") from None


def _check_confidence(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Agent confidence must be an integer, got {value!r}")
    if not 0 <= value <= 100:
        raise ValueError(f"Agent confidence must lie in [0, 100], got {value}")
    return value


def agent_from_mapping(payload: Mapping[str, object]) -> Agent:
    """Build a seed :class:`Agent` from a configuration mapping."""

    try:
        agent_id = str(payload["id"])
        name = str(payload["name"])
    except KeyError as exc:
        raise ValueError(f"Agent seed is missing the {exc.args[0]!r} key") from None
    return Agent(
        id=agent_id,
        name=name,
        status=_coerce_status(str(payload.get("status", AgentStatus.IDLE.value))),
        last_action=str(payload.get("last_action", "")),
        confidence=_check_confidence(payload.get("confidence", 100)),  # type: ignore[arg-type]
    )


class AgentRegistry:
    """Fixed set of agents keyed by identity, kept in registration order.

    Agents are seeded once; afterwards only their ``status``,
    ``last_action`` and ``confidence`` change.  The registry does not lock:
    callers serialise access (see :class:`traction_ai.monitor.TractionMonitor`).
    """

    def __init__(self, seeds: Iterable[Agent] = DEFAULT_AGENT_SEEDS) -> None:
        self._agents: dict[str, Agent] = {}
        for seed in seeds:
            if seed.id in self._agents:
                raise ValueError(f"Duplicate agent id: {seed.id!r}")
            _coerce_status(seed.status)
            _check_confidence(seed.confidence)
            self._agents[seed.id] = seed

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def get(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    def list(self) -> tuple[Agent, ...]:
        return tuple(self._agents.values())

    def update(
        self,
        agent_id: str,
        status: AgentStatus | str,
        last_action: str,
        confidence: int,
    ) -> bool:
        """Replace the mutable fields of ``agent_id``.

        Returns ``False`` without touching anything when the id is unknown.
        """

        return self.apply((AgentUpdate(agent_id, _coerce_status(status), last_action, confidence),)) == 1

    def apply(self, updates: Sequence[AgentUpdate]) -> int:
        """Apply ``updates`` all-or-nothing and return how many agents changed.

        Every update is validated before the first one is written, so a bad
        value leaves the registry untouched.
        """

        staged: list[tuple[str, Agent]] = []
        for update in updates:
            status = _coerce_status(update.status)
            confidence = _check_confidence(update.confidence)
            current = self._agents.get(update.agent_id)
            if current is None:
                logger.debug(
                    "Ignoring update for unknown agent",
                    extra={"event": "agents.unknown", "agent_id": update.agent_id},
                )
                continue
            staged.append(
                (
                    update.agent_id,
                    replace(
                        current,
                        status=status,
                        last_action=str(update.last_action),
                        confidence=confidence,
                    ),
                )
            )

        for agent_id, agent in staged:
            self._agents[agent_id] = agent
        return len(staged)
