"""Instantiation of validated individuals in the ontology graph."""

import asyncio
import logging
from typing import Any, Dict

from domain.errors import InstantiationError, StoreAccessError
from domain.identifiers import IdentifierCodec
from domain.kg_backends import OWL_NAMED_INDIVIDUAL, RESOURCE, OntologyGraphBackend
from domain.ontology_models import CommitReceipt, Individual, PropertyAssignment, PropertyKind

logger = logging.getLogger(__name__)


class InstantiationCommitter:
    """Writes a clean candidate individual and its properties to the store.

    The individual node is created first; property writes then run
    concurrently. There is no transaction around the two steps, so a
    failure after the node is written leaves a partially instantiated
    individual behind.
    """

    def __init__(self, backend: OntologyGraphBackend, codec: IdentifierCodec):
        self.backend = backend
        self.codec = codec

    async def commit(self, individual: Individual) -> CommitReceipt:
        """Instantiate ``individual``. Callers must have validated it first.

        Raises:
            InstantiationError: If a store write fails. All property writes
                run to completion first and successful writes persist.
        """
        labels = [RESOURCE, OWL_NAMED_INDIVIDUAL, self.codec.compact_of(individual.class_uri)]
        try:
            node = await self.backend.merge_node(individual.name, labels)
        except (StoreAccessError, ValueError) as e:
            raise InstantiationError(individual.name, "node creation", e) from e
        logger.info(f"Individual node merged: {individual.name} ({labels[-1]})")

        results = await asyncio.gather(
            *(self._commit_property(individual.name, assignment) for assignment in individual.properties),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, (StoreAccessError, ValueError)):
                raise failure
        properties = [r for r in results if not isinstance(r, BaseException)]

        if failures:
            logger.error(
                f"Property instantiation failed for {individual.name} "
                f"({len(failures)} of {len(results)} writes), node left in place: {failures}"
            )
            raise InstantiationError(
                individual.name, "property instantiation", failures[0],
                failures=failures, completed=[node, *properties],
            ) from failures[0]

        logger.info(f"Instantiated {len(properties)} properties for {individual.name}")
        return CommitReceipt(individual=individual.name, node=node, properties=properties)

    async def _commit_property(self, individual_uri: str, assignment: PropertyAssignment) -> Dict[str, Any]:
        property_key = self.codec.compact_of(assignment.name)
        kind = assignment.kind

        if kind is PropertyKind.OBJECT:
            if assignment.value is None:
                logger.warning(f"Skipping object property {assignment.name} of {individual_uri}: no target")
                return {"operation": "skipped", "property": assignment.name}
            target_labels = [RESOURCE, OWL_NAMED_INDIVIDUAL, self.codec.compact_of(assignment.range)]
            return await self.backend.merge_relationship(
                individual_uri, property_key, str(assignment.value), target_labels
            )

        if kind is PropertyKind.DATATYPE:
            return await self.backend.set_node_properties(individual_uri, {property_key: assignment.value})

        logger.warning(f"Skipping property {assignment.name} of unsupported type {assignment.type!r}")
        return {"operation": "skipped", "property": assignment.name}
