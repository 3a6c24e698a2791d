# src/composition_root.py

import logging
from typing import Optional

from application.services.consistency_evaluator import ConsistencyEvaluator
from application.services.individual_form_builder import IndividualFormBuilder
from application.services.individual_pipeline import IndividualEvaluationPipeline
from application.services.instantiation_committer import InstantiationCommitter
from application.services.schema_queries import SchemaQueryService
from config.engine_config import BackendType, EngineConfig, get_engine_config
from domain.identifiers import IdentifierCodec
from domain.kg_backends import OntologyGraphBackend
from infrastructure.in_memory_backend import InMemoryGraphBackend
from infrastructure.neo4j_backend import Neo4jBackend

logger = logging.getLogger(__name__)


def configure_logging(config: Optional[EngineConfig] = None) -> None:
    """Configure root logging for entry points."""
    config = config or get_engine_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def bootstrap_backend(config: Optional[EngineConfig] = None) -> OntologyGraphBackend:
    """Create the configured graph backend. The caller owns its lifecycle."""
    from dotenv import load_dotenv

    load_dotenv()
    config = config or get_engine_config()

    if config.backend == BackendType.MEMORY:
        logger.info("Using in-memory ontology graph backend")
        return InMemoryGraphBackend()

    logger.info(f"Using Neo4j backend at {config.neo4j.uri} (database: {config.neo4j.database})")
    return Neo4jBackend(
        uri=config.neo4j.uri,
        username=config.neo4j.username,
        password=config.neo4j.password,
        database=config.neo4j.database,
    )


def create_identifier_codec(config: Optional[EngineConfig] = None) -> IdentifierCodec:
    config = config or get_engine_config()
    return IdentifierCodec(base_url=config.ontology.base_url, owl_url=config.ontology.owl_url)


def create_evaluation_pipeline(
    backend: OntologyGraphBackend,
    codec: Optional[IdentifierCodec] = None,
) -> IndividualEvaluationPipeline:
    """Wire evaluator and committer around an injected backend."""
    codec = codec or create_identifier_codec()
    schema = SchemaQueryService(backend)
    return IndividualEvaluationPipeline(
        evaluator=ConsistencyEvaluator(schema, codec),
        committer=InstantiationCommitter(backend, codec),
    )


def create_form_builder(
    backend: OntologyGraphBackend,
    codec: Optional[IdentifierCodec] = None,
) -> IndividualFormBuilder:
    codec = codec or create_identifier_codec()
    return IndividualFormBuilder(SchemaQueryService(backend), codec)
