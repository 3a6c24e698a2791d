"""Tests for SchemaQueryService."""

import pytest

from domain.errors import UnsupportedPropertyTypeError
from domain.ontology_models import PropertyAssignment

from conftest import XSD_STRING, orgont


class TestSchemaQueries:

    @pytest.mark.asyncio
    async def test_class_exists(self, schema):
        assert await schema.class_exists(orgont("Pump"))
        assert not await schema.class_exists(orgont("Valve"))

    @pytest.mark.asyncio
    async def test_properties_of_domain(self, schema):
        assert await schema.properties_of_domain(orgont("Pump")) == {orgont("hasStatus"), orgont("hasLocation")}

    @pytest.mark.asyncio
    async def test_domain_and_range_matches(self, schema):
        assert await schema.property_domain_matches(orgont("hasStatus"), orgont("Pump"))
        assert not await schema.property_domain_matches(orgont("hasStatus"), orgont("Motor"))
        assert await schema.property_range_matches(orgont("drives"), orgont("Pump"))
        assert not await schema.property_range_matches(orgont("drives"), XSD_STRING)

    @pytest.mark.asyncio
    async def test_missing_domain_or_range_never_matches(self, schema):
        assert not await schema.property_domain_matches(orgont("hasStatus"), None)
        assert not await schema.property_range_matches(orgont("hasStatus"), None)

    @pytest.mark.asyncio
    async def test_property_declared(self, schema):
        assert await schema.property_declared(orgont("drives"))
        assert not await schema.property_declared(orgont("hasColour"))

    @pytest.mark.asyncio
    async def test_object_value_needs_existing_target(self, schema):
        existing = PropertyAssignment(name=orgont("drives"), value=orgont("Pump0"), type="ObjectProperty")
        missing = PropertyAssignment(name=orgont("drives"), value=orgont("Pump9"), type="ObjectProperty")
        empty = PropertyAssignment(name=orgont("drives"), value=None, type="ObjectProperty")

        assert await schema.value_resolvable(existing)
        assert not await schema.value_resolvable(missing)
        assert not await schema.value_resolvable(empty)

    @pytest.mark.asyncio
    async def test_datatype_value_needs_a_value(self, schema):
        assert await schema.value_resolvable(
            PropertyAssignment(name=orgont("hasStatus"), value="Running", type="DatatypeProperty")
        )
        assert await schema.value_resolvable(
            PropertyAssignment(name=orgont("hasStatus"), value=0, type="DatatypeProperty")
        )
        assert not await schema.value_resolvable(
            PropertyAssignment(name=orgont("hasStatus"), value=None, type="DatatypeProperty")
        )

    @pytest.mark.asyncio
    async def test_unsupported_kind_raises(self, schema):
        with pytest.raises(UnsupportedPropertyTypeError) as exc_info:
            await schema.value_resolvable(
                PropertyAssignment(name=orgont("label"), value="x", type="AnnotationProperty")
            )
        assert exc_info.value.property_type == "AnnotationProperty"

    @pytest.mark.asyncio
    async def test_class_properties(self, schema):
        properties = await schema.class_properties(orgont("Pump"))
        assert sorted(p.name for p in properties) == [orgont("hasLocation"), orgont("hasStatus")]
        assert await schema.class_properties(orgont("Valve")) is None
