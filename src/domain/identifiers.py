"""Identifier codec.

Translates between global ontology URIs (``<base>/<prefix>#<name>``) and the
neosemantics compact notation used inside the graph (``<prefix>__<name>``).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

OWL_URL = "http://www.w3.org/2002/07/owl"
XSD_URL = "http://www.w3.org/2001/XMLSchema"
DEFAULT_BASE_URL = "http://localhost:3003/api/files/owl/"

COMPACT_SEPARATOR = "__"
OWL_PREFIX = "owl"


@dataclass(frozen=True)
class IdentifierCodec:
    """URI <-> compact name translation for proprietary ontologies.

    Attributes:
        base_url: Base URL of proprietary ontologies, ending with ``/``
        owl_url: Namespace used for the reserved ``owl`` prefix
    """
    base_url: str = DEFAULT_BASE_URL
    owl_url: str = OWL_URL

    @staticmethod
    def element_of(uri: Optional[str]) -> Optional[str]:
        """Return the element name after the first ``#``."""
        if uri is None:
            return None
        parts = uri.split("#")
        return parts[1] if len(parts) > 1 else None

    @staticmethod
    def ontology_of(uri: Optional[str]) -> Optional[str]:
        """Return the ontology prefix: last path segment before ``#``."""
        if uri is None:
            return None
        return uri.split("/")[-1].split("#")[0]

    @staticmethod
    def strip_compact_prefix(prefix: str, compact_name: str) -> Optional[str]:
        """Return the bare name of ``prefix__name`` when the marker matches ``prefix``.

        Names from other ontologies are rejected with ``None`` instead of
        being translated.
        """
        if COMPACT_SEPARATOR not in compact_name:
            return None
        marker, name = compact_name.split(COMPACT_SEPARATOR, 1)
        if marker != prefix:
            return None
        return name

    def to_uri(self, compact_name: str) -> Optional[str]:
        """Expand a compact name into its URI."""
        if COMPACT_SEPARATOR not in compact_name:
            return None
        marker, name = compact_name.split(COMPACT_SEPARATOR, 1)
        if marker == OWL_PREFIX:
            return f"{self.owl_url}#{name}"
        return f"{self.base_url}{marker}#{name}"

    def build_uri(self, prefix: str, name: str) -> str:
        return f"{self.base_url}{prefix}#{name}"

    def ontology_uri(self, prefix: str) -> str:
        return f"{self.base_url}{prefix}#"

    def compact_of(self, uri: str) -> str:
        """Compact ``prefix__name`` form of a URI, used for labels, types and keys."""
        return f"{self.ontology_of(uri)}{COMPACT_SEPARATOR}{self.element_of(uri)}"

    def fresh_individual_uri(
        self,
        prefix: str,
        class_name: str,
        now: Optional[datetime] = None,
    ) -> str:
        """Generate a URI for a new individual of ``class_name``.

        The suffix is a local timestamp with second resolution; two calls for
        the same class within one second return the same URI.
        """
        now = now or datetime.now()
        return self.build_uri(prefix, f"{class_name}_{now.strftime('%Y-%m-%dT%H-%M-%S')}")
