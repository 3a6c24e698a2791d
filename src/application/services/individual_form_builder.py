"""Builds candidate individuals from flat input forms.

Forms map property local names to raw values, e.g.::

    {"hasStatus": "Running", "hasLocation": "Bay3", "hasMotor": "__New"}

Values are matched against the properties the class declares. Object values
carrying the ``__New`` marker become freshly generated individuals of the
property's range class.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.errors import ClassNotFoundError, UnsupportedPropertyTypeError
from domain.identifiers import IdentifierCodec
from domain.ontology_models import Individual, PropertyAssignment, PropertyKind
from application.services.schema_queries import SchemaQueryService

logger = logging.getLogger(__name__)

NEW_INDIVIDUAL_MARKER = "__New"


@dataclass
class NewIndividual:
    """An individual the form asked to create as an object property target."""
    name: str
    class_name: str
    ontology: str


@dataclass
class FormBuildResult:
    individual: Individual
    new_individuals: List[NewIndividual] = field(default_factory=list)


class IndividualFormBuilder:
    """Turns form input into a candidate ``Individual``."""

    def __init__(self, schema: SchemaQueryService, codec: IdentifierCodec):
        self.schema = schema
        self.codec = codec

    async def build(
        self,
        ontology_name: str,
        class_name: str,
        individual_name: str,
        form: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> FormBuildResult:
        """Build a candidate individual of ``class_name`` from ``form``.

        Form keys the class does not declare and empty values are ignored.

        Raises:
            ClassNotFoundError: If the class is not declared
            UnsupportedPropertyTypeError: If a filled-in property has an
                unsupported kind
        """
        class_uri = self.codec.build_uri(ontology_name, class_name)
        class_properties = await self.schema.class_properties(class_uri)
        if class_properties is None:
            raise ClassNotFoundError(f"Class not found: {class_uri}")

        by_name = {self.codec.element_of(p.name): p for p in class_properties}
        assignments: List[PropertyAssignment] = []
        new_individuals: List[NewIndividual] = []

        for key, raw_value in form.items():
            declared = by_name.get(key)
            if declared is None:
                logger.debug(f"Ignoring form field {key!r}: not a property of {class_uri}")
                continue
            if raw_value is None or raw_value == "":
                continue

            if declared.kind is PropertyKind.OBJECT:
                range_ontology = self.codec.ontology_of(declared.range)
                range_class = self.codec.element_of(declared.range)
                if NEW_INDIVIDUAL_MARKER in str(raw_value):
                    value = self.codec.fresh_individual_uri(range_ontology, range_class, now)
                    new_individuals.append(NewIndividual(
                        name=self.codec.element_of(value),
                        class_name=range_class,
                        ontology=range_ontology,
                    ))
                else:
                    value = self.codec.build_uri(range_ontology, str(raw_value))
            elif declared.kind is PropertyKind.DATATYPE:
                value = raw_value
            else:
                raise UnsupportedPropertyTypeError(declared.name, declared.kind.value)

            assignments.append(PropertyAssignment(
                name=declared.name,
                value=value,
                domain=class_uri,
                range=declared.range,
                type=f"{self.codec.owl_url}#{declared.kind.value}",
            ))

        individual = Individual(
            name=self.codec.build_uri(ontology_name, individual_name),
            ontology=self.codec.ontology_uri(ontology_name),
            class_uri=class_uri,
            properties=assignments,
        )
        return FormBuildResult(individual=individual, new_individuals=new_individuals)
