"""In-memory ontology graph backend.

Keeps nodes, labels and typed relationships in dictionaries with the same
upsert semantics as the Neo4j backend. Used for local runs without a database
and as the store in tests.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from domain.kg_backends import (
    OWL_CLASS,
    OWL_DATATYPE_PROPERTY,
    OWL_OBJECT_PROPERTY,
    RDFS_DOMAIN,
    RDFS_RANGE,
    RESOURCE,
    OntologyGraphBackend,
    validate_graph_name,
)
from domain.ontology_models import ClassProperty, PropertyKind

logger = logging.getLogger(__name__)

_PROPERTY_LABELS = {
    PropertyKind.OBJECT: OWL_OBJECT_PROPERTY,
    PropertyKind.DATATYPE: OWL_DATATYPE_PROPERTY,
}


class InMemoryGraphBackend(OntologyGraphBackend):
    """Dictionary-backed graph store."""

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.relationships: Set[Tuple[str, str, str]] = set()

    # --- Schema seeding ---

    def declare_class(self, class_uri: str) -> None:
        self._upsert(class_uri, [RESOURCE, OWL_CLASS])

    def declare_property(
        self,
        property_uri: str,
        domain_uri: str,
        range_uri: str,
        kind: PropertyKind,
    ) -> None:
        """Declare a property with its domain class and range.

        The range node is created as a plain resource when it is not a
        declared class (e.g. an XSD datatype).
        """
        self._upsert(property_uri, [RESOURCE, _PROPERTY_LABELS[kind]])
        if domain_uri not in self.nodes:
            self.declare_class(domain_uri)
        self._upsert(range_uri, [RESOURCE])
        self.relationships.add((property_uri, RDFS_DOMAIN, domain_uri))
        self.relationships.add((property_uri, RDFS_RANGE, range_uri))

    # --- Inspection helpers ---

    def labels_of(self, uri: str) -> Set[str]:
        return set(self.nodes[uri]["labels"]) if uri in self.nodes else set()

    def properties_of(self, uri: str) -> Dict[str, Any]:
        return dict(self.nodes[uri]["properties"]) if uri in self.nodes else {}

    def _upsert(self, uri: str, labels: List[str]) -> Tuple[int, int]:
        created = 0
        if uri not in self.nodes:
            self.nodes[uri] = {"labels": set(), "properties": {}}
            created = 1
        node_labels = self.nodes[uri]["labels"]
        added = len(set(labels) - node_labels)
        node_labels.update(labels)
        return created, added

    # --- Reads ---

    async def node_exists(self, uri: str) -> bool:
        await asyncio.sleep(0)
        return uri in self.nodes

    async def relationship_exists(self, source_uri: str, relationship_type: str, target_uri: str) -> bool:
        await asyncio.sleep(0)
        return (source_uri, relationship_type, target_uri) in self.relationships

    async def list_domain_properties(self, class_uri: str) -> List[str]:
        await asyncio.sleep(0)
        if OWL_CLASS not in self.labels_of(class_uri):
            return []
        return sorted(
            source
            for source, rel_type, target in self.relationships
            if rel_type == RDFS_DOMAIN
            and target == class_uri
            and self.labels_of(source) & {OWL_OBJECT_PROPERTY, OWL_DATATYPE_PROPERTY}
        )

    async def list_class_properties(self, class_uri: str) -> Optional[List[ClassProperty]]:
        if OWL_CLASS not in self.labels_of(class_uri):
            await asyncio.sleep(0)
            return None

        properties = []
        for property_uri in await self.list_domain_properties(class_uri):
            labels = self.labels_of(property_uri)
            if OWL_OBJECT_PROPERTY in labels:
                kind = PropertyKind.OBJECT
            else:
                kind = PropertyKind.DATATYPE
            ranges = [
                target
                for source, rel_type, target in self.relationships
                if source == property_uri and rel_type == RDFS_RANGE
            ]
            for range_uri in ranges:
                properties.append(ClassProperty(name=property_uri, range=range_uri, kind=kind))
        return properties

    # --- Writes ---

    async def merge_node(self, uri: str, labels: List[str]) -> Dict[str, Any]:
        for label in labels:
            validate_graph_name(label)
        await asyncio.sleep(0)
        created, added = self._upsert(uri, [RESOURCE, *labels])
        return {
            "operation": "merge_node",
            "matched": 1,
            "nodes_created": created,
            "relationships_created": 0,
            "properties_set": created,
            "labels_added": added,
        }

    async def merge_relationship(
        self,
        source_uri: str,
        relationship_type: str,
        target_uri: str,
        target_labels: List[str],
    ) -> Dict[str, Any]:
        validate_graph_name(relationship_type)
        for label in target_labels:
            validate_graph_name(label)
        await asyncio.sleep(0)

        if source_uri not in self.nodes:
            logger.warning(f"Source node not found for relationship {source_uri} -[{relationship_type}]-> {target_uri}")
            return {
                "operation": "merge_relationship",
                "matched": 0,
                "nodes_created": 0,
                "relationships_created": 0,
                "properties_set": 0,
                "labels_added": 0,
            }

        created, added = self._upsert(target_uri, [RESOURCE, *target_labels])
        edge = (source_uri, relationship_type, target_uri)
        new_edge = edge not in self.relationships
        self.relationships.add(edge)
        return {
            "operation": "merge_relationship",
            "matched": 1,
            "nodes_created": created,
            "relationships_created": int(new_edge),
            "properties_set": created,
            "labels_added": added,
        }

    async def set_node_properties(self, uri: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        await asyncio.sleep(0)

        if uri not in self.nodes:
            logger.warning(f"Node not found for property update: {uri}")
            matched = 0
        else:
            self.nodes[uri]["properties"].update(properties)
            matched = 1
        return {
            "operation": "set_node_properties",
            "matched": matched,
            "nodes_created": 0,
            "relationships_created": 0,
            "properties_set": len(properties) if matched else 0,
            "labels_added": 0,
        }

    async def ping(self) -> bool:
        return True
