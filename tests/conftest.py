"""Shared fixtures: a small maintenance ontology loaded into the in-memory backend."""

import pytest

from application.services.consistency_evaluator import ConsistencyEvaluator
from application.services.individual_pipeline import IndividualEvaluationPipeline
from application.services.instantiation_committer import InstantiationCommitter
from application.services.schema_queries import SchemaQueryService
from domain.identifiers import XSD_URL, IdentifierCodec
from domain.ontology_models import Individual, PropertyKind
from infrastructure.in_memory_backend import InMemoryGraphBackend

BASE_URL = "http://localhost:3003/api/files/owl/"
XSD_STRING = f"{XSD_URL}#string"


def orgont(name: str) -> str:
    return f"{BASE_URL}orgont#{name}"


@pytest.fixture
def codec():
    return IdentifierCodec(base_url=BASE_URL)


@pytest.fixture
def backend():
    """In-memory store with the orgont schema.

    Pump declares hasStatus and hasLocation. Motor declares hasPower and the
    object property drives (range Pump). Pump0 is an existing individual.
    """
    store = InMemoryGraphBackend()
    store.declare_class(orgont("Pump"))
    store.declare_class(orgont("Motor"))
    store.declare_property(orgont("hasStatus"), orgont("Pump"), XSD_STRING, PropertyKind.DATATYPE)
    store.declare_property(orgont("hasLocation"), orgont("Pump"), XSD_STRING, PropertyKind.DATATYPE)
    store.declare_property(orgont("hasPower"), orgont("Motor"), XSD_STRING, PropertyKind.DATATYPE)
    store.declare_property(orgont("drives"), orgont("Motor"), orgont("Pump"), PropertyKind.OBJECT)
    store.nodes[orgont("Pump0")] = {
        "labels": {"Resource", "owl__NamedIndividual", "orgont__Pump"},
        "properties": {},
    }
    return store


@pytest.fixture
def schema(backend):
    return SchemaQueryService(backend)


@pytest.fixture
def evaluator(schema, codec):
    return ConsistencyEvaluator(schema, codec)


@pytest.fixture
def committer(backend, codec):
    return InstantiationCommitter(backend, codec)


@pytest.fixture
def pipeline(evaluator, committer):
    return IndividualEvaluationPipeline(evaluator, committer)


@pytest.fixture
def pump_individual():
    """Pump1 with a status only; hasLocation is left out."""
    return Individual.model_validate({
        "name": orgont("Pump1"),
        "ontology": f"{BASE_URL}orgont#",
        "class": orgont("Pump"),
        "properties": [{
            "name": orgont("hasStatus"),
            "value": "Running",
            "domain": orgont("Pump"),
            "range": XSD_STRING,
            "type": "DatatypeProperty",
        }],
    })


@pytest.fixture
def motor_individual():
    """Motor1 driving a pump that does not exist yet."""
    return Individual.model_validate({
        "name": orgont("Motor1"),
        "ontology": f"{BASE_URL}orgont#",
        "class": orgont("Motor"),
        "properties": [
            {
                "name": orgont("hasPower"),
                "value": "15kW",
                "domain": orgont("Motor"),
                "range": XSD_STRING,
                "type": "http://www.w3.org/2002/07/owl#DatatypeProperty",
            },
            {
                "name": orgont("drives"),
                "value": orgont("Pump9"),
                "domain": orgont("Motor"),
                "range": orgont("Pump"),
                "type": "http://www.w3.org/2002/07/owl#ObjectProperty",
            },
        ],
    })
