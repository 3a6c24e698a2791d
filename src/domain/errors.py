"""Exceptions raised by the individual validation and instantiation engine."""

from typing import Any, Dict, List, Optional


class OntologyEngineError(Exception):
    """Base class for engine errors."""


class StoreAccessError(OntologyEngineError):
    """A graph store query or write could not complete."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class InvalidGraphNameError(OntologyEngineError, ValueError):
    """A label, relationship type or attribute key is not a safe Cypher identifier."""


class UnsupportedPropertyTypeError(OntologyEngineError, ValueError):
    """A property is neither a datatype nor an object property."""

    def __init__(self, property_name: Optional[str], property_type: Optional[str]):
        self.property_name = property_name
        self.property_type = property_type
        super().__init__(f"Property type {property_type!r} of {property_name!r} is not supported")


class ClassNotFoundError(OntologyEngineError, LookupError):
    """The requested class is not declared in the store."""


class InstantiationError(OntologyEngineError):
    """Committing a validated individual failed part way.

    Writes that completed before the failure are not rolled back; their
    receipts are kept in ``completed``. ``failures`` holds every write error
    of the failing stage, ``cause`` the first of them.
    """

    def __init__(
        self,
        individual: str,
        stage: str,
        cause: Exception,
        failures: Optional[List[Exception]] = None,
        completed: Optional[List[Dict[str, Any]]] = None,
    ):
        self.individual = individual
        self.stage = stage
        self.cause = cause
        self.failures = failures or [cause]
        self.completed = completed or []
        detail = "; ".join(str(failure) for failure in self.failures)
        super().__init__(f"Instantiation of {individual} failed during {stage}: {detail}")
