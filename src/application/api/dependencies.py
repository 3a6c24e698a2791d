"""Dependency injection for FastAPI application."""

import logging
from typing import Optional

from composition_root import bootstrap_backend, create_evaluation_pipeline, create_form_builder
from domain.kg_backends import OntologyGraphBackend
from application.services.individual_form_builder import IndividualFormBuilder
from application.services.individual_pipeline import IndividualEvaluationPipeline

logger = logging.getLogger(__name__)

# Global instances to hold state
_backend_instance: Optional[OntologyGraphBackend] = None
_pipeline_instance: Optional[IndividualEvaluationPipeline] = None
_form_builder_instance: Optional[IndividualFormBuilder] = None


async def get_backend() -> OntologyGraphBackend:
    """Dependency to get the ontology graph backend."""
    global _backend_instance
    if _backend_instance is None:
        _backend_instance = bootstrap_backend()
    return _backend_instance


async def get_pipeline() -> IndividualEvaluationPipeline:
    """Dependency to get the individual evaluation pipeline."""
    global _pipeline_instance
    if _pipeline_instance is None:
        _pipeline_instance = create_evaluation_pipeline(await get_backend())
    return _pipeline_instance


async def get_form_builder() -> IndividualFormBuilder:
    """Dependency to get the form-to-individual builder."""
    global _form_builder_instance
    if _form_builder_instance is None:
        _form_builder_instance = create_form_builder(await get_backend())
    return _form_builder_instance


async def shutdown_dependencies() -> None:
    """Close the backend and drop cached services."""
    global _backend_instance, _pipeline_instance, _form_builder_instance
    if _backend_instance is not None:
        await _backend_instance.close()
        logger.info("Ontology graph backend closed")
    _backend_instance = None
    _pipeline_instance = None
    _form_builder_instance = None
