"""Tests for InstantiationCommitter."""

from unittest.mock import AsyncMock

import pytest

from application.services.instantiation_committer import InstantiationCommitter
from domain.errors import InstantiationError, StoreAccessError
from domain.ontology_models import Individual

from conftest import BASE_URL, orgont


class TestCommit:

    @pytest.mark.asyncio
    async def test_commits_node_and_datatype_property(self, committer, backend, pump_individual):
        receipt = await committer.commit(pump_individual)

        assert receipt.individual == orgont("Pump1")
        assert receipt.node["nodes_created"] == 1
        assert backend.labels_of(orgont("Pump1")) == {"Resource", "owl__NamedIndividual", "orgont__Pump"}
        assert backend.properties_of(orgont("Pump1")) == {"orgont__hasStatus": "Running"}

    @pytest.mark.asyncio
    async def test_object_property_creates_labelled_target(self, committer, backend, motor_individual):
        receipt = await committer.commit(motor_individual)

        assert (orgont("Motor1"), "orgont__drives", orgont("Pump9")) in backend.relationships
        assert backend.labels_of(orgont("Pump9")) == {"Resource", "owl__NamedIndividual", "orgont__Pump"}
        assert backend.properties_of(orgont("Motor1")) == {"orgont__hasPower": "15kW"}
        assert len(receipt.properties) == 2

    @pytest.mark.asyncio
    async def test_existing_target_is_linked_not_duplicated(self, committer, backend):
        individual = Individual.model_validate({
            "name": orgont("Motor2"),
            "ontology": f"{BASE_URL}orgont#",
            "class": orgont("Motor"),
            "properties": [{
                "name": orgont("drives"), "value": orgont("Pump0"),
                "range": orgont("Pump"), "type": "ObjectProperty",
            }],
        })
        receipt = await committer.commit(individual)

        assert receipt.properties[0]["nodes_created"] == 0
        assert receipt.properties[0]["relationships_created"] == 1

    @pytest.mark.asyncio
    async def test_property_key_uses_property_ontology_prefix(self, committer, backend, pump_individual):
        pump_individual.properties[0].name = f"{BASE_URL}diagont#lastFault"
        await committer.commit(pump_individual)
        assert backend.properties_of(orgont("Pump1")) == {"diagont__lastFault": "Running"}

    @pytest.mark.asyncio
    async def test_null_object_target_is_skipped(self, committer, backend):
        individual = Individual.model_validate({
            "name": orgont("Motor3"),
            "ontology": f"{BASE_URL}orgont#",
            "class": orgont("Motor"),
            "properties": [{"name": orgont("drives"), "value": None, "range": orgont("Pump"),
                            "type": "ObjectProperty"}],
        })
        receipt = await committer.commit(individual)

        assert receipt.properties == [{"operation": "skipped", "property": orgont("drives")}]
        assert not any(source == orgont("Motor3") for source, _, _ in backend.relationships)

    @pytest.mark.asyncio
    async def test_recommit_is_idempotent(self, committer, backend, motor_individual):
        await committer.commit(motor_individual)
        nodes = dict(backend.nodes)
        relationships = set(backend.relationships)

        receipt = await committer.commit(motor_individual)

        assert receipt.node["nodes_created"] == 0
        assert set(backend.nodes) == set(nodes)
        assert backend.relationships == relationships


class TestCommitFailures:

    @pytest.mark.asyncio
    async def test_node_failure(self, codec, pump_individual):
        store = AsyncMock()
        store.merge_node.side_effect = StoreAccessError("merge_node", "unavailable")

        with pytest.raises(InstantiationError) as exc_info:
            await InstantiationCommitter(store, codec).commit(pump_individual)

        assert exc_info.value.stage == "node creation"
        assert isinstance(exc_info.value.__cause__, StoreAccessError)
        store.set_node_properties.assert_not_called()

    @pytest.mark.asyncio
    async def test_property_failure_leaves_node(self, backend, codec, pump_individual):
        backend.set_node_properties = AsyncMock(side_effect=StoreAccessError("set_node_properties", "timeout"))

        with pytest.raises(InstantiationError) as exc_info:
            await InstantiationCommitter(backend, codec).commit(pump_individual)

        assert exc_info.value.stage == "property instantiation"
        assert exc_info.value.individual == orgont("Pump1")
        assert orgont("Pump1") in backend.nodes

    @pytest.mark.asyncio
    async def test_all_property_writes_finish_before_failing(self, backend, codec):
        individual = Individual.model_validate({
            "name": orgont("Pump4"),
            "ontology": f"{BASE_URL}orgont#",
            "class": orgont("Pump"),
            "properties": [
                {"name": orgont("hasStatus"), "value": "Running", "type": "DatatypeProperty"},
                {"name": orgont("hasLocation"), "value": "Bay 3", "type": "DatatypeProperty"},
            ],
        })
        original = backend.set_node_properties

        async def set_node_properties(uri, properties):
            if "orgont__hasLocation" in properties:
                raise StoreAccessError("set_node_properties", "timeout")
            return await original(uri, properties)

        backend.set_node_properties = set_node_properties

        with pytest.raises(InstantiationError) as exc_info:
            await InstantiationCommitter(backend, codec).commit(individual)

        error = exc_info.value
        assert len(error.failures) == 1
        assert error.failures[0].operation == "set_node_properties"
        assert [r["operation"] for r in error.completed] == ["merge_node", "set_node_properties"]
        assert backend.properties_of(orgont("Pump4")) == {"orgont__hasStatus": "Running"}

    @pytest.mark.asyncio
    async def test_every_property_failure_is_reported(self, backend, codec, motor_individual):
        backend.set_node_properties = AsyncMock(side_effect=StoreAccessError("set_node_properties", "timeout"))
        backend.merge_relationship = AsyncMock(side_effect=StoreAccessError("merge_relationship", "timeout"))

        with pytest.raises(InstantiationError) as exc_info:
            await InstantiationCommitter(backend, codec).commit(motor_individual)

        error = exc_info.value
        assert sorted(f.operation for f in error.failures) == ["merge_relationship", "set_node_properties"]
        assert error.__cause__ is error.failures[0]
        assert "merge_relationship failed" in str(error) and "set_node_properties failed" in str(error)
