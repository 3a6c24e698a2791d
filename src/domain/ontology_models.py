"""Ontology individual models.

Request documents (candidate individuals and their property assignments) are
pydantic models so they can be parsed straight from client JSON. Both the
plain keys (``name``, ``class``...) and the ``ont``-prefixed keys sent by
older clients (``ontName``, ``ontClass``...) are accepted.

Evaluation outcomes are a closed sum type: every check resolves to exactly one
of ``EvaluationSuccess``, ``EvaluationError`` or ``EvaluationWarning``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

PropertyValue = Optional[Union[str, int, float, bool]]


class PropertyKind(str, Enum):
    """Declared kind of a property."""
    DATATYPE = "DatatypeProperty"   # scalar attribute on the individual
    OBJECT = "ObjectProperty"       # relationship to another individual
    UNSUPPORTED = "Unsupported"

    @classmethod
    def parse(cls, property_type: Optional[str]) -> "PropertyKind":
        """Resolve a type name or OWL URI (``...owl#ObjectProperty``) to a kind."""
        if not property_type:
            return cls.UNSUPPORTED
        element = property_type.split("#")[-1]
        if cls.OBJECT.value in element:
            return cls.OBJECT
        if cls.DATATYPE.value in element:
            return cls.DATATYPE
        return cls.UNSUPPORTED


class PropertyAssignment(BaseModel):
    """A candidate's claim about one property instance."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(validation_alias=AliasChoices("name", "ontName"))
    value: PropertyValue = Field(default=None, validation_alias=AliasChoices("value", "ontValue"))
    domain: Optional[str] = Field(default=None, validation_alias=AliasChoices("domain", "ontDomain"))
    range: Optional[str] = Field(default=None, validation_alias=AliasChoices("range", "ontRange"))
    type: Optional[str] = Field(default=None, validation_alias=AliasChoices("type", "ontType"))

    @property
    def kind(self) -> PropertyKind:
        return PropertyKind.parse(self.type)


class Individual(BaseModel):
    """A candidate individual submitted for validation."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(validation_alias=AliasChoices("name", "ontName"))
    ontology: str = Field(validation_alias=AliasChoices("ontology", "ontOntology"))
    class_uri: str = Field(
        validation_alias=AliasChoices("class_uri", "class", "ontClass"),
        serialization_alias="class",
    )
    properties: List[PropertyAssignment] = Field(
        default_factory=list,
        validation_alias=AliasChoices("properties", "ontProperties"),
    )


class EvaluationLevel(str, Enum):
    INDIVIDUAL = "individual"
    PROPERTY = "property"


class EvaluationRule(str, Enum):
    """Names of the consistency rules reported in evaluation results."""
    CLASS_EXISTENCE = "classExistence"
    DOMAIN_CORRECTNESS = "domainCorrectness"
    RANGE_CORRECTNESS = "rangeCorrectness"
    PROPERTY_EXISTENCE = "propertyExistence"
    VALUE_EXISTENCE = "valueExistence"
    SUPPORTED_TYPE = "supportedType"
    ONTOLOGY_CORRECTNESS = "ontologyCorrectness"
    NAME_CORRECTNESS = "nameCorrectness"
    PROPERTIES_LACK = "propertiesLack"


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of a single consistency check.

    ``detail`` is only set when the check itself could not run (for example
    a store failure) and was degraded to an error.
    """
    level: EvaluationLevel
    name: Optional[str]
    evaluation: EvaluationRule
    value: Any
    detail: Optional[str] = None

    outcome: ClassVar[str] = "result"

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "level": self.level.value,
            "name": self.name,
            "evaluation": self.evaluation.value,
            "value": self.value,
        }
        if self.detail is not None:
            data["detail"] = self.detail
        return data


class EvaluationSuccess(EvaluationResult):
    outcome: ClassVar[str] = "success"


class EvaluationError(EvaluationResult):
    outcome: ClassVar[str] = "error"


class EvaluationWarning(EvaluationResult):
    outcome: ClassVar[str] = "warning"


@dataclass
class EvaluationReport:
    """Evaluation results split by outcome, in evaluation order."""
    successes: List[EvaluationResult] = field(default_factory=list)
    errors: List[EvaluationResult] = field(default_factory=list)
    warnings: List[EvaluationResult] = field(default_factory=list)

    @classmethod
    def classify(cls, results: List[EvaluationResult]) -> "EvaluationReport":
        report = cls()
        for result in results:
            if isinstance(result, EvaluationSuccess):
                report.successes.append(result)
            elif isinstance(result, EvaluationError):
                report.errors.append(result)
            elif isinstance(result, EvaluationWarning):
                report.warnings.append(result)
            else:
                raise TypeError(f"Unclassifiable evaluation result: {result!r}")
        return report

    @property
    def is_clean(self) -> bool:
        """True when no error was found; warnings do not count."""
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successes": [r.to_dict() for r in self.successes],
            "errors": [r.to_dict() for r in self.errors],
            "warnings": [r.to_dict() for r in self.warnings],
        }


@dataclass(frozen=True)
class EvaluationContext:
    """Identity of the individual as given by the caller, outside the payload."""
    ontology_name: str
    individual_name: str


@dataclass(frozen=True)
class ClassProperty:
    """A property declared with a class as its domain."""
    name: str
    range: Optional[str]
    kind: PropertyKind


@dataclass
class CommitReceipt:
    """Store confirmations for an instantiated individual."""
    individual: str
    node: Dict[str, Any]
    properties: List[Dict[str, Any]] = field(default_factory=list)


class EvaluationRecord(BaseModel):
    """Wire form of an evaluation result."""
    level: str
    name: Optional[str] = None
    evaluation: str
    value: Any = None
    detail: Optional[str] = None

    @classmethod
    def from_result(cls, result: EvaluationResult) -> "EvaluationRecord":
        return cls(**result.to_dict())


class PipelineResponse(BaseModel):
    """Response of a validate-and-commit request.

    ``errors`` is only present when the individual was blocked.
    """
    warnings: List[EvaluationRecord] = Field(default_factory=list)
    errors: Optional[List[EvaluationRecord]] = None

    @property
    def committed(self) -> bool:
        return self.errors is None
