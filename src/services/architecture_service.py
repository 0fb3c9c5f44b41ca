"""Architecture sandbox: design an Elastic cluster topology for a customer scenario."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from catalog import ARCHITECTURE_SYSTEM_INSTRUCTION
from services.llm_service import _extract_json_object

LOGGER = logging.getLogger("elasticsense.architecture")


class NodeType(enum.Enum):
    MASTER = "master"
    DATA = "data"
    COORDINATING = "coordinating"
    ML = "ml"
    INGEST = "ingest"


ARCHITECTURE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": [t.value for t in NodeType]},
                    "count": {"type": "integer"},
                    "specs": {"type": "string", "description": "e.g., 64GB RAM, 16 vCPU"},
                },
            },
        },
        "shardsPerIndex": {"type": "integer"},
        "replicaCount": {"type": "integer"},
        "ilmPolicy": {"type": "string"},
        "summary": {"type": "string"},
        "costEstimation": {"type": "string"},
    },
}


@dataclass(frozen=True)
class ArchitectureNode:
    type: NodeType
    count: int
    specs: str


@dataclass(frozen=True)
class ArchitectureDesign:
    nodes: tuple[ArchitectureNode, ...]
    shards_per_index: int
    replica_count: int
    ilm_policy: str
    summary: str
    cost_estimation: str

    @property
    def total_nodes(self) -> int:
        return sum(node.count for node in self.nodes)


def build_architecture_prompt(scenario: str) -> str:
    return (
        f'Design an Elastic Cluster for this scenario: "{scenario}".\n'
        "Consider ingestion rate, retention, query load, and redundancy.\n"
        "Follow the sizing rules (20-50GB shards, <32GB Heap) explicitly."
    )


def _coerce_count(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _parse_node(item: Any) -> ArchitectureNode | None:
    if not isinstance(item, dict):
        return None
    try:
        node_type = NodeType(str(item.get("type") or "").strip().lower())
    except ValueError:
        return None
    return ArchitectureNode(
        type=node_type,
        count=_coerce_count(item.get("count")),
        specs=str(item.get("specs") or ""),
    )


def _validate_design(obj: Any) -> ArchitectureDesign | None:
    """Normalize a parsed payload; None when it is not a design at all."""
    if not isinstance(obj, dict) or not isinstance(obj.get("nodes"), list):
        return None
    nodes = tuple(node for node in map(_parse_node, obj["nodes"]) if node is not None)
    return ArchitectureDesign(
        nodes=nodes,
        shards_per_index=_coerce_count(obj.get("shardsPerIndex")),
        replica_count=_coerce_count(obj.get("replicaCount")),
        ilm_policy=str(obj.get("ilmPolicy") or ""),
        summary=str(obj.get("summary") or ""),
        cost_estimation=str(obj.get("costEstimation") or ""),
    )


class ArchitectureService:
    """Generates cluster designs via the model client."""

    def __init__(self, client: Any) -> None:
        self._llm = client

    async def generate_design(self, scenario: str) -> ArchitectureDesign | None:
        """
        Design a cluster for a free-text workload description.

        Args:
            scenario: Customer workload, e.g. "5TB/day of logs, 30 day retention".

        Returns:
            A fresh design, or None for a blank scenario, an API failure or an
            unusable payload.
        """
        if not scenario.strip():
            return None
        try:
            raw = await self._llm.generate_structured(
                build_architecture_prompt(scenario),
                ARCHITECTURE_SCHEMA,
                system_instruction=ARCHITECTURE_SYSTEM_INSTRUCTION,
            )
        except Exception:  # noqa: BLE001
            LOGGER.warning("architecture generation failed", exc_info=True)
            return None
        if not raw:
            return None
        design = _validate_design(_extract_json_object(raw))
        if design is None:
            LOGGER.warning("architecture payload unusable (chars=%d)", len(raw))
        return design
