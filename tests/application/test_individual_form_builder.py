"""Tests for IndividualFormBuilder."""

from datetime import datetime

import pytest

from application.services.individual_form_builder import IndividualFormBuilder, NewIndividual
from domain.errors import ClassNotFoundError
from domain.identifiers import OWL_URL
from domain.ontology_models import EvaluationContext

from conftest import BASE_URL, XSD_STRING, orgont

NOW = datetime(2024, 3, 7, 9, 5, 2)


@pytest.fixture
def builder(schema, codec):
    return IndividualFormBuilder(schema, codec)


class TestFormBuilder:

    @pytest.mark.asyncio
    async def test_datatype_fields(self, builder):
        built = await builder.build(
            "orgont", "Pump", "Pump2",
            {"hasStatus": "Running", "hasLocation": "", "colour": "red"},
        )
        individual = built.individual

        assert individual.name == orgont("Pump2")
        assert individual.ontology == f"{BASE_URL}orgont#"
        assert individual.class_uri == orgont("Pump")
        assert len(individual.properties) == 1
        assignment = individual.properties[0]
        assert assignment.name == orgont("hasStatus")
        assert assignment.value == "Running"
        assert assignment.domain == orgont("Pump")
        assert assignment.range == XSD_STRING
        assert assignment.type == f"{OWL_URL}#DatatypeProperty"
        assert built.new_individuals == []

    @pytest.mark.asyncio
    async def test_object_field_references_existing_individual(self, builder):
        built = await builder.build("orgont", "Motor", "Motor2", {"drives": "Pump0"})

        assignment = built.individual.properties[0]
        assert assignment.value == orgont("Pump0")
        assert assignment.range == orgont("Pump")
        assert assignment.type == f"{OWL_URL}#ObjectProperty"

    @pytest.mark.asyncio
    async def test_new_marker_generates_fresh_target(self, builder):
        built = await builder.build("orgont", "Motor", "Motor2", {"drives": "__New"}, now=NOW)

        assert built.individual.properties[0].value == orgont("Pump_2024-03-07T09-05-02")
        assert built.new_individuals == [
            NewIndividual(name="Pump_2024-03-07T09-05-02", class_name="Pump", ontology="orgont")
        ]

    @pytest.mark.asyncio
    async def test_unknown_class(self, builder):
        with pytest.raises(ClassNotFoundError):
            await builder.build("orgont", "Valve", "Valve1", {"hasStatus": "Open"})

    @pytest.mark.asyncio
    async def test_built_individual_commits_through_pipeline(self, builder, pipeline, backend):
        built = await builder.build(
            "orgont", "Motor", "Motor2", {"hasPower": "7kW", "drives": "__New"}, now=NOW
        )
        response = await pipeline.validate_and_commit(
            built.individual, EvaluationContext(ontology_name="orgont", individual_name="Motor2")
        )

        assert response.committed
        assert [w.evaluation for w in response.warnings] == ["valueExistence"]
        assert "orgont__Pump" in backend.labels_of(orgont("Pump_2024-03-07T09-05-02"))
        assert backend.properties_of(orgont("Motor2")) == {"orgont__hasPower": "7kW"}
