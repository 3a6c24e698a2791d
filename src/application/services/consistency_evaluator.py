"""Consistency evaluation of candidate individuals.

Checks a candidate individual against the ontology schema stored in the
graph. Every check runs concurrently and independently:

  Individual level:
    - classExistence       declared class exists in the store
    - ontologyCorrectness  declared ontology matches the request context
    - nameCorrectness      declared name matches the request context
    - propertiesLack       class properties the candidate does not assign
                           (warning only)

  Property level, for every assignment:
    - domainCorrectness    property domain is the declared domain
    - rangeCorrectness     property range is the declared range
    - propertyExistence    property is declared in the store
    - valueExistence       object targets exist (warning if not) and
                           datatype values are present (error if not);
                           unsupported kinds fail with supportedType

A check that cannot run (for example because the store is unreachable) is
reported as an error for its own rule without affecting the others.
Results are aggregated in the order listed above, not completion order.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from domain.identifiers import IdentifierCodec
from domain.ontology_models import (
    EvaluationError,
    EvaluationLevel,
    EvaluationReport,
    EvaluationResult,
    EvaluationRule,
    EvaluationSuccess,
    EvaluationWarning,
    Individual,
    PropertyAssignment,
    PropertyKind,
)
from application.services.isolated_gather import gather_settled
from application.services.schema_queries import SchemaQueryService

logger = logging.getLogger(__name__)

Check = Tuple[Awaitable[EvaluationResult], Callable[[Exception], EvaluationResult], str]


def _verdict(
    passed: bool,
    level: EvaluationLevel,
    name: Optional[str],
    rule: EvaluationRule,
    value: Any,
) -> EvaluationResult:
    if passed:
        return EvaluationSuccess(level, name, rule, value)
    return EvaluationError(level, name, rule, value)


def _failed_check(
    level: EvaluationLevel,
    name: Optional[str],
    rule: EvaluationRule,
    value: Any,
) -> Callable[[Exception], EvaluationResult]:
    def build(error: Exception) -> EvaluationResult:
        return EvaluationError(level, name, rule, value, detail=f"{type(error).__name__}: {error}")
    return build


class ConsistencyEvaluator:
    """Runs all schema checks for one candidate individual."""

    def __init__(self, schema: SchemaQueryService, codec: IdentifierCodec):
        self.schema = schema
        self.codec = codec

    async def evaluate(
        self,
        individual: Individual,
        ontology_name: str,
        individual_name: str,
    ) -> EvaluationReport:
        """Evaluate a candidate individual.

        Args:
            individual: Candidate individual document
            ontology_name: Ontology prefix from the request context
            individual_name: Individual name from the request context

        Returns:
            EvaluationReport with successes, errors and warnings in
            evaluation order
        """
        checks = self._individual_checks(individual, ontology_name, individual_name)

        results = await gather_settled(
            [check for check, _, _ in checks],
            [on_failure for _, on_failure, _ in checks],
            [label for _, _, label in checks],
        )
        report = EvaluationReport.classify(results)

        logger.info(
            f"Evaluated {individual.name}: {len(report.successes)} successes, "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        for error in report.errors:
            logger.debug(f"Evaluation error for {individual.name}: {error.to_dict()}")
        return report

    def _individual_checks(
        self,
        individual: Individual,
        ontology_name: str,
        individual_name: str,
    ) -> List[Check]:
        level = EvaluationLevel.INDIVIDUAL
        name = individual.name
        checks: List[Check] = [(
            self._check_class_existence(individual),
            _failed_check(level, name, EvaluationRule.CLASS_EXISTENCE, individual.class_uri),
            "classExistence",
        )]

        for assignment in individual.properties:
            checks.extend(self._property_checks(assignment))

        checks.append((
            self._check_ontology_name(individual, ontology_name),
            _failed_check(level, name, EvaluationRule.ONTOLOGY_CORRECTNESS, individual.ontology),
            "ontologyCorrectness",
        ))
        checks.append((
            self._check_individual_name(individual, ontology_name, individual_name),
            _failed_check(level, name, EvaluationRule.NAME_CORRECTNESS, individual.name),
            "nameCorrectness",
        ))
        checks.append((
            self._check_properties_lack(individual),
            _failed_check(level, name, EvaluationRule.PROPERTIES_LACK, individual.class_uri),
            "propertiesLack",
        ))
        return checks

    def _property_checks(self, assignment: PropertyAssignment) -> List[Check]:
        level = EvaluationLevel.PROPERTY
        name = assignment.name
        return [
            (
                self._check_domain(assignment),
                _failed_check(level, name, EvaluationRule.DOMAIN_CORRECTNESS, assignment.domain),
                f"domainCorrectness({name})",
            ),
            (
                self._check_range(assignment),
                _failed_check(level, name, EvaluationRule.RANGE_CORRECTNESS, assignment.range),
                f"rangeCorrectness({name})",
            ),
            (
                self._check_property_existence(assignment),
                _failed_check(level, name, EvaluationRule.PROPERTY_EXISTENCE, assignment.name),
                f"propertyExistence({name})",
            ),
            (
                self._check_value(assignment),
                _failed_check(level, name, EvaluationRule.VALUE_EXISTENCE, assignment.value),
                f"valueExistence({name})",
            ),
        ]

    # --- Individual level ---

    async def _check_class_existence(self, individual: Individual) -> EvaluationResult:
        exists = await self.schema.class_exists(individual.class_uri)
        return _verdict(
            exists, EvaluationLevel.INDIVIDUAL, individual.name,
            EvaluationRule.CLASS_EXISTENCE, individual.class_uri,
        )

    async def _check_ontology_name(self, individual: Individual, ontology_name: str) -> EvaluationResult:
        expected = self.codec.ontology_uri(ontology_name)
        return _verdict(
            individual.ontology == expected, EvaluationLevel.INDIVIDUAL, individual.name,
            EvaluationRule.ONTOLOGY_CORRECTNESS, individual.ontology,
        )

    async def _check_individual_name(
        self,
        individual: Individual,
        ontology_name: str,
        individual_name: str,
    ) -> EvaluationResult:
        expected = self.codec.build_uri(ontology_name, individual_name)
        return _verdict(
            individual.name == expected, EvaluationLevel.INDIVIDUAL, individual.name,
            EvaluationRule.NAME_CORRECTNESS, individual.name,
        )

    async def _check_properties_lack(self, individual: Individual) -> EvaluationResult:
        declared = await self.schema.properties_of_domain(individual.class_uri)
        assigned = {assignment.name for assignment in individual.properties}
        missing = sorted(self.codec.element_of(uri) or uri for uri in declared - assigned)

        if missing:
            return EvaluationWarning(
                EvaluationLevel.INDIVIDUAL, individual.name, EvaluationRule.PROPERTIES_LACK, missing
            )
        return EvaluationSuccess(
            EvaluationLevel.INDIVIDUAL, individual.name, EvaluationRule.PROPERTIES_LACK, missing
        )

    # --- Property level ---

    async def _check_domain(self, assignment: PropertyAssignment) -> EvaluationResult:
        matches = await self.schema.property_domain_matches(assignment.name, assignment.domain)
        return _verdict(
            matches, EvaluationLevel.PROPERTY, assignment.name,
            EvaluationRule.DOMAIN_CORRECTNESS, assignment.domain,
        )

    async def _check_range(self, assignment: PropertyAssignment) -> EvaluationResult:
        matches = await self.schema.property_range_matches(assignment.name, assignment.range)
        return _verdict(
            matches, EvaluationLevel.PROPERTY, assignment.name,
            EvaluationRule.RANGE_CORRECTNESS, assignment.range,
        )

    async def _check_property_existence(self, assignment: PropertyAssignment) -> EvaluationResult:
        declared = await self.schema.property_declared(assignment.name)
        return _verdict(
            declared, EvaluationLevel.PROPERTY, assignment.name,
            EvaluationRule.PROPERTY_EXISTENCE, assignment.name,
        )

    async def _check_value(self, assignment: PropertyAssignment) -> EvaluationResult:
        """Apply the value policy for the assignment's kind.

        A missing object target is only a warning because instantiation
        creates it; a missing datatype value is an error.
        """
        level = EvaluationLevel.PROPERTY
        kind = assignment.kind

        if kind is PropertyKind.UNSUPPORTED:
            return EvaluationError(level, assignment.name, EvaluationRule.SUPPORTED_TYPE, assignment.value)

        resolvable = await self.schema.value_resolvable(assignment)
        if resolvable:
            return EvaluationSuccess(level, assignment.name, EvaluationRule.VALUE_EXISTENCE, assignment.value)
        if kind is PropertyKind.OBJECT:
            return EvaluationWarning(level, assignment.name, EvaluationRule.VALUE_EXISTENCE, assignment.value)
        return EvaluationError(level, assignment.name, EvaluationRule.VALUE_EXISTENCE, assignment.value)
