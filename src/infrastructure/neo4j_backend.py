"""Neo4j implementation of the ontology graph backend.

The graph follows neosemantics conventions: every resource is a node with a
``uri`` attribute, ontology elements carry ``prefix__name`` labels, and schema
edges are typed ``rdfs__domain`` / ``rdfs__range``.

All URIs and values are bound as query parameters. Labels, relationship
types and attribute keys cannot be parameterized in Cypher, so they are
backtick-quoted with ``quote_graph_name`` before being interpolated.
Attribute keys travel inside the bound ``$properties`` map.
"""

import logging
from typing import Any, Dict, List, Optional

from neo4j import AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from domain.errors import StoreAccessError
from domain.kg_backends import (
    OWL_CLASS,
    OWL_DATATYPE_PROPERTY,
    OWL_OBJECT_PROPERTY,
    RDFS_DOMAIN,
    RDFS_RANGE,
    RESOURCE,
    OntologyGraphBackend,
    quote_graph_name,
)
from domain.ontology_models import ClassProperty, PropertyKind

logger = logging.getLogger(__name__)


def _kind_from_labels(labels: List[str]) -> PropertyKind:
    if OWL_OBJECT_PROPERTY in labels:
        return PropertyKind.OBJECT
    if OWL_DATATYPE_PROPERTY in labels:
        return PropertyKind.DATATYPE
    return PropertyKind.UNSUPPORTED


class Neo4jBackend(OntologyGraphBackend):
    """Neo4j backend for ontology schema reads and individual writes."""

    def __init__(self, uri: str, username: str, password: str, database: str = "neo4j"):
        """Initialize Neo4j backend.

        Args:
            uri: Neo4j connection URI (e.g., "bolt://localhost:7687")
            username: Neo4j username
            password: Neo4j password
            database: Neo4j database name (default: "neo4j")
        """
        self.uri = uri
        self.username = username
        self.password = password
        self.database = database
        self._driver = None

    async def _get_driver(self):
        """Get or create Neo4j driver."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.username, self.password)
            )
        return self._driver

    async def _close_driver(self):
        """Close Neo4j driver."""
        if self._driver:
            await self._driver.close()
            self._driver = None

    async def _read(self, operation: str, query: str, **parameters) -> List[Dict[str, Any]]:
        """Run a read query and return its records as dictionaries."""
        driver = await self._get_driver()
        try:
            async with driver.session(database=self.database) as session:
                result = await session.run(query, **parameters)
                return [dict(record) async for record in result]
        except (Neo4jError, DriverError) as e:
            logger.error(f"Neo4j read '{operation}' failed: {e}", exc_info=True)
            raise StoreAccessError(operation, str(e)) from e

    async def _write(self, operation: str, query: str, **parameters) -> Dict[str, Any]:
        """Run a write query and summarise what it changed."""
        driver = await self._get_driver()
        try:
            async with driver.session(database=self.database) as session:
                result = await session.run(query, **parameters)
                records = [dict(record) async for record in result]
                summary = await result.consume()
        except (Neo4jError, DriverError) as e:
            logger.error(f"Neo4j write '{operation}' failed: {e}", exc_info=True)
            raise StoreAccessError(operation, str(e)) from e

        counters = summary.counters
        return {
            "operation": operation,
            "matched": len(records),
            "nodes_created": counters.nodes_created,
            "relationships_created": counters.relationships_created,
            "properties_set": counters.properties_set,
            "labels_added": counters.labels_added,
        }

    async def node_exists(self, uri: str) -> bool:
        records = await self._read(
            "node_exists",
            "MATCH (n {uri: $uri}) RETURN n.uri AS uri LIMIT 1",
            uri=uri,
        )
        return bool(records)

    async def relationship_exists(self, source_uri: str, relationship_type: str, target_uri: str) -> bool:
        rel_type = quote_graph_name(relationship_type)
        query = f"""
        MATCH (a {{uri: $source_uri}})-[:{rel_type}]->(b {{uri: $target_uri}})
        RETURN a.uri AS source, b.uri AS target
        LIMIT 1
        """
        records = await self._read(
            "relationship_exists", query, source_uri=source_uri, target_uri=target_uri
        )
        return bool(records)

    async def list_domain_properties(self, class_uri: str) -> List[str]:
        query = f"""
        MATCH (c:{OWL_CLASS} {{uri: $class_uri}})<-[:{RDFS_DOMAIN}]-(p)
        WHERE p:{OWL_OBJECT_PROPERTY} OR p:{OWL_DATATYPE_PROPERTY}
        RETURN p.uri AS uri
        """
        records = await self._read("list_domain_properties", query, class_uri=class_uri)
        return [record["uri"] for record in records]

    async def list_class_properties(self, class_uri: str) -> Optional[List[ClassProperty]]:
        query = f"""
        MATCH (c:{OWL_CLASS} {{uri: $class_uri}})
        OPTIONAL MATCH (c)<-[:{RDFS_DOMAIN}]-(p)-[:{RDFS_RANGE}]->(r)
        WHERE p:{OWL_OBJECT_PROPERTY} OR p:{OWL_DATATYPE_PROPERTY}
        RETURN c.uri AS class_uri, labels(p) AS labels, p.uri AS uri, r.uri AS range
        """
        records = await self._read("list_class_properties", query, class_uri=class_uri)
        if not records:
            return None

        return [
            ClassProperty(
                name=record["uri"],
                range=record["range"],
                kind=_kind_from_labels(record["labels"] or []),
            )
            for record in records
            if record["uri"] is not None
        ]

    async def merge_node(self, uri: str, labels: List[str]) -> Dict[str, Any]:
        """Upsert a resource node keyed by URI and add ``labels`` to it."""
        label_str = ":".join(quote_graph_name(label) for label in labels if label != RESOURCE)
        set_clause = f"SET n:{label_str}" if label_str else ""
        query = f"""
        MERGE (n:{RESOURCE} {{uri: $uri}})
        {set_clause}
        RETURN n.uri AS uri
        """
        return await self._write("merge_node", query, uri=uri)

    async def merge_relationship(
        self,
        source_uri: str,
        relationship_type: str,
        target_uri: str,
        target_labels: List[str],
    ) -> Dict[str, Any]:
        """Link source to target, creating the target resource if it is new.

        The source must already exist; if it does not, nothing is written.
        """
        rel_type = quote_graph_name(relationship_type)
        label_str = ":".join(quote_graph_name(label) for label in target_labels if label != RESOURCE)
        set_clause = f"SET b:{label_str}" if label_str else ""
        query = f"""
        MATCH (a {{uri: $source_uri}})
        MERGE (b:{RESOURCE} {{uri: $target_uri}})
        {set_clause}
        MERGE (a)-[r:{rel_type}]->(b)
        RETURN a.uri AS source, type(r) AS type, b.uri AS target
        """
        record = await self._write(
            "merge_relationship", query, source_uri=source_uri, target_uri=target_uri
        )
        if not record["matched"]:
            logger.warning(f"Source node not found for relationship {source_uri} -[{relationship_type}]-> {target_uri}")
        return record

    async def set_node_properties(self, uri: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        query = """
        MATCH (n {uri: $uri})
        SET n += $properties
        RETURN n.uri AS uri
        """
        record = await self._write("set_node_properties", query, uri=uri, properties=properties)
        if not record["matched"]:
            logger.warning(f"Node not found for property update: {uri}")
        return record

    async def ping(self) -> bool:
        records = await self._read("ping", "RETURN 1 AS ok")
        return bool(records) and records[0]["ok"] == 1

    async def ensure_constraints(self) -> List[str]:
        """Create the URI uniqueness constraint neosemantics expects on resources.

        Returns:
            List of created/verified constraint names
        """
        constraints = [
            ("n10s_unique_uri",
             f"CREATE CONSTRAINT n10s_unique_uri IF NOT EXISTS FOR (r:{RESOURCE}) REQUIRE r.uri IS UNIQUE"),
        ]

        created = []
        for name, query in constraints:
            await self._write("ensure_constraints", query)
            created.append(name)
            logger.info(f"Created/verified constraint: {name}")
        return created

    async def close(self):
        """Close the Neo4j connection."""
        await self._close_driver()
