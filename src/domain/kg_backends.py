"""Graph store interface used by the validation and instantiation engine."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from domain.errors import InvalidGraphNameError
from domain.ontology_models import ClassProperty

RDFS_DOMAIN = "rdfs__domain"
RDFS_RANGE = "rdfs__range"
OWL_CLASS = "owl__Class"
OWL_NAMED_INDIVIDUAL = "owl__NamedIndividual"
OWL_OBJECT_PROPERTY = "owl__ObjectProperty"
OWL_DATATYPE_PROPERTY = "owl__DatatypeProperty"
RESOURCE = "Resource"


def validate_graph_name(name: Optional[str]) -> str:
    """Reject a missing or empty label or relationship type."""
    if not name:
        raise InvalidGraphNameError(f"Invalid graph name: {name!r}")
    return name


def quote_graph_name(name: Optional[str]) -> str:
    """Backtick-quote a label or relationship type for use in Cypher.

    Labels and relationship types cannot be bound as parameters. Quoting
    admits any local name (hyphens, accented letters) and embedded
    backticks are doubled.
    """
    return "`" + validate_graph_name(name).replace("`", "``") + "`"


class OntologyGraphBackend(ABC):
    """Read and write operations against an ontology graph.

    Nodes are addressed by their ``uri`` attribute. Schema reads are side
    effect free; writes are upserts so repeating them does not duplicate
    nodes or relationships. Write methods return an opaque record of what
    the store changed.
    """

    @abstractmethod
    async def node_exists(self, uri: str) -> bool:
        """Return True if any node carries ``uri``."""

    @abstractmethod
    async def relationship_exists(self, source_uri: str, relationship_type: str, target_uri: str) -> bool:
        """Return True if ``source -[relationship_type]-> target`` exists."""

    @abstractmethod
    async def list_domain_properties(self, class_uri: str) -> List[str]:
        """Return URIs of datatype and object properties whose domain is ``class_uri``."""

    @abstractmethod
    async def list_class_properties(self, class_uri: str) -> Optional[List[ClassProperty]]:
        """Return declared properties of a class with range and kind.

        Returns None when the class itself does not exist.
        """

    @abstractmethod
    async def merge_node(self, uri: str, labels: List[str]) -> Dict[str, Any]:
        """Create the node with ``uri`` and ``labels`` unless it already exists."""

    @abstractmethod
    async def merge_relationship(
        self,
        source_uri: str,
        relationship_type: str,
        target_uri: str,
        target_labels: List[str],
    ) -> Dict[str, Any]:
        """Upsert the target node, then upsert the typed edge from source to target."""

    @abstractmethod
    async def set_node_properties(self, uri: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Set scalar attributes on a node, overwriting previous values."""

    @abstractmethod
    async def ping(self) -> bool:
        """Round trip to the store."""

    async def close(self) -> None:
        """Release store resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
