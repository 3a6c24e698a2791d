"""Evaluation pipeline: validate a candidate individual, then commit it if clean."""

import logging

from domain.ontology_models import (
    EvaluationContext,
    EvaluationRecord,
    EvaluationReport,
    Individual,
    PipelineResponse,
)
from application.services.consistency_evaluator import ConsistencyEvaluator
from application.services.instantiation_committer import InstantiationCommitter

logger = logging.getLogger(__name__)


class IndividualEvaluationPipeline:
    """Public entry point for individual validation and instantiation."""

    def __init__(self, evaluator: ConsistencyEvaluator, committer: InstantiationCommitter):
        self.evaluator = evaluator
        self.committer = committer

    async def evaluate(self, candidate: Individual, ctx: EvaluationContext) -> EvaluationReport:
        """Evaluate without writing anything."""
        return await self.evaluator.evaluate(candidate, ctx.ontology_name, ctx.individual_name)

    async def validate_and_commit(self, candidate: Individual, ctx: EvaluationContext) -> PipelineResponse:
        """Evaluate ``candidate`` and instantiate it when no error was found.

        Returns:
            ``warnings`` only when the individual was committed, or
            ``warnings`` and ``errors`` when it was blocked

        Raises:
            InstantiationError: If the commit fails part way
        """
        report = await self.evaluate(candidate, ctx)
        warnings = [EvaluationRecord.from_result(w) for w in report.warnings]

        if not report.is_clean:
            logger.warning(
                f"Individual {candidate.name} blocked by {len(report.errors)} errors: "
                f"{[e.evaluation.value for e in report.errors]}"
            )
            return PipelineResponse(
                warnings=warnings,
                errors=[EvaluationRecord.from_result(e) for e in report.errors],
            )

        receipt = await self.committer.commit(candidate)
        logger.debug(f"Commit receipt for {candidate.name}: {receipt}")
        return PipelineResponse(warnings=warnings)
