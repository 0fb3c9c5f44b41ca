"""Tests for architecture design parsing and generation fallbacks."""

from __future__ import annotations

import asyncio
import json

import services.architecture_service as arch_mod

ArchitectureService = arch_mod.ArchitectureService
NodeType = arch_mod.NodeType
_validate_design = arch_mod._validate_design


def _payload(**kwargs) -> dict:
    base = {
        "nodes": [
            {"type": "master", "count": 3, "specs": "8GB RAM, 2 vCPU"},
            {"type": "data", "count": 6, "specs": "64GB RAM, 16 vCPU"},
            {"type": "ingest", "count": 2, "specs": "16GB RAM"},
        ],
        "shardsPerIndex": 3,
        "replicaCount": 1,
        "ilmPolicy": "Hot 7d -> Warm 30d -> Cold 90d",
        "summary": "Dedicated masters, hot/warm data tier.",
        "costEstimation": "~$12k/month",
    }
    base.update(kwargs)
    return base


class TestValidateDesign:
    def test_full_payload(self):
        design = _validate_design(_payload())
        assert [n.type for n in design.nodes] == [NodeType.MASTER, NodeType.DATA, NodeType.INGEST]
        assert design.total_nodes == 11
        assert design.shards_per_index == 3
        assert design.replica_count == 1
        assert design.ilm_policy.startswith("Hot")
        assert design.cost_estimation == "~$12k/month"

    def test_unknown_node_type_dropped(self):
        design = _validate_design(_payload(nodes=[{"type": "kibana", "count": 1}, {"type": "ML", "count": 1}]))
        assert [n.type for n in design.nodes] == [NodeType.ML]

    def test_counts_coerced(self):
        design = _validate_design(
            _payload(nodes=[{"type": "data", "count": "4"}, {"type": "coordinating", "count": -2}],
                     shardsPerIndex="many")
        )
        assert [n.count for n in design.nodes] == [4, 0]
        assert design.shards_per_index == 0

    def test_non_dict_returns_none(self):
        assert _validate_design([1, 2]) is None
        assert _validate_design(None) is None

    def test_missing_nodes_returns_none(self):
        assert _validate_design({"summary": "nothing"}) is None


class TestArchitectureService:
    def test_generates_design(self, fake_client):
        client = fake_client(json.dumps(_payload()))
        design = asyncio.run(ArchitectureService(client).generate_design("5TB/day of logs, 30 day retention"))
        assert design.total_nodes == 11
        call = client.structured_calls[0]
        assert "5TB/day of logs" in call["prompt"]
        assert "Senior Elastic Solutions Architect" in call["system_instruction"]
        assert call["schema"] is arch_mod.ARCHITECTURE_SCHEMA

    def test_blank_scenario_skips_request(self, fake_client):
        client = fake_client(json.dumps(_payload()))
        assert asyncio.run(ArchitectureService(client).generate_design("   ")) is None
        assert client.structured_calls == []

    def test_api_failure_returns_none(self, fake_client):
        client = fake_client(RuntimeError("network"))
        assert asyncio.run(ArchitectureService(client).generate_design("logs")) is None

    def test_garbage_returns_none(self, fake_client):
        assert asyncio.run(ArchitectureService(fake_client("sorry")).generate_design("logs")) is None

    def test_each_request_replaces_design(self, fake_client):
        client = fake_client(json.dumps(_payload()), json.dumps(_payload(nodes=[{"type": "data", "count": 1}])))
        service = ArchitectureService(client)
        first = asyncio.run(service.generate_design("a"))
        second = asyncio.run(service.generate_design("b"))
        assert first.total_nodes == 11
        assert second.total_nodes == 1
