"""Read-only schema lookups used by the consistency evaluator.

Each method issues at most one backend query and has no side effects, so any
of them can be retried independently.
"""

import logging
from typing import List, Optional, Set

from domain.errors import UnsupportedPropertyTypeError
from domain.kg_backends import RDFS_DOMAIN, RDFS_RANGE, OntologyGraphBackend
from domain.ontology_models import ClassProperty, PropertyAssignment, PropertyKind

logger = logging.getLogger(__name__)


class SchemaQueryService:
    """Schema checks against the ontology graph."""

    def __init__(self, backend: OntologyGraphBackend):
        self.backend = backend

    async def class_exists(self, class_uri: str) -> bool:
        return await self.backend.node_exists(class_uri)

    async def properties_of_domain(self, class_uri: str) -> Set[str]:
        """URIs of the properties declared with ``class_uri`` as domain."""
        return set(await self.backend.list_domain_properties(class_uri))

    async def property_domain_matches(self, property_uri: str, domain_uri: Optional[str]) -> bool:
        if domain_uri is None:
            return False
        return await self.backend.relationship_exists(property_uri, RDFS_DOMAIN, domain_uri)

    async def property_range_matches(self, property_uri: str, range_uri: Optional[str]) -> bool:
        if range_uri is None:
            return False
        return await self.backend.relationship_exists(property_uri, RDFS_RANGE, range_uri)

    async def property_declared(self, property_uri: str) -> bool:
        return await self.backend.node_exists(property_uri)

    async def value_resolvable(self, assignment: PropertyAssignment) -> bool:
        """Check that an assignment's value can be instantiated.

        Object properties need the target individual to exist in the store;
        datatype properties only need a value.

        Raises:
            UnsupportedPropertyTypeError: If the assignment kind is neither
        """
        kind = assignment.kind
        if kind is PropertyKind.OBJECT:
            if assignment.value is None:
                return False
            return await self.backend.node_exists(str(assignment.value))
        if kind is PropertyKind.DATATYPE:
            return assignment.value is not None
        raise UnsupportedPropertyTypeError(assignment.name, assignment.type)

    async def class_properties(self, class_uri: str) -> Optional[List[ClassProperty]]:
        """Properties of a class with range and kind, or None if the class is unknown."""
        properties = await self.backend.list_class_properties(class_uri)
        if properties is None:
            logger.debug(f"Class not found: {class_uri}")
        return properties
