"""Ontology Individuals API Router.

Validation and instantiation endpoints for ontology individuals.

Prefix: /api/ontologies
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException

from domain.errors import (
    ClassNotFoundError,
    InstantiationError,
    StoreAccessError,
    UnsupportedPropertyTypeError,
)
from domain.ontology_models import EvaluationContext, Individual, PipelineResponse
from application.services.individual_form_builder import IndividualFormBuilder
from application.services.individual_pipeline import IndividualEvaluationPipeline
from .dependencies import get_form_builder, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ontologies", tags=["individuals"])


@router.post("/{ontology_name}/individual/{individual_name}/input", response_model_exclude_none=True)
async def input_individual(
    ontology_name: str,
    individual_name: str,
    individual: Individual,
    pipeline: IndividualEvaluationPipeline = Depends(get_pipeline),
) -> PipelineResponse:
    """Validate an individual and instantiate it when no errors are found."""
    ctx = EvaluationContext(ontology_name=ontology_name, individual_name=individual_name)
    try:
        return await pipeline.validate_and_commit(individual, ctx)
    except InstantiationError as e:
        logger.error(f"Instantiation failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/{ontology_name}/individual/{individual_name}/evaluation")
async def evaluate_individual(
    ontology_name: str,
    individual_name: str,
    individual: Individual,
    pipeline: IndividualEvaluationPipeline = Depends(get_pipeline),
) -> Dict[str, List[Dict[str, Any]]]:
    """Evaluate an individual without instantiating it."""
    ctx = EvaluationContext(ontology_name=ontology_name, individual_name=individual_name)
    report = await pipeline.evaluate(individual, ctx)
    return report.to_dict()


@router.post("/{ontology_name}/class/{class_name}/individual/{individual_name}/input/form")
async def input_individual_form(
    ontology_name: str,
    class_name: str,
    individual_name: str,
    form: Dict[str, Any] = Body(...),
    builder: IndividualFormBuilder = Depends(get_form_builder),
    pipeline: IndividualEvaluationPipeline = Depends(get_pipeline),
):
    """Build an individual from a flat form, then validate and instantiate it."""
    try:
        built = await builder.build(ontology_name, class_name, individual_name, form)
    except ClassNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedPropertyTypeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreAccessError as e:
        logger.error(f"Class lookup failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    ctx = EvaluationContext(ontology_name=ontology_name, individual_name=individual_name)
    try:
        response = await pipeline.validate_and_commit(built.individual, ctx)
    except InstantiationError as e:
        logger.error(f"Instantiation failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    result = response.model_dump(exclude_none=True)
    result["individual"] = built.individual.model_dump(by_alias=True)
    result["new_individuals"] = [
        {"name": n.name, "class": n.class_name, "ontology": n.ontology} for n in built.new_individuals
    ]
    return result
