"""
Engine Configuration

Loads configuration from config/engine.yaml, then applies environment variable
overrides. Provides typed models for the graph store and ontology namespaces.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from domain.identifiers import DEFAULT_BASE_URL, OWL_URL


class BackendType(str, Enum):
    """Graph store implementation."""
    NEO4J = "neo4j"
    MEMORY = "memory"


@dataclass
class Neo4jConfig:
    """Neo4j connection configuration."""
    uri: str = "bolt://localhost:7687"
    username: str = "neo4j"
    password: str = "password"
    database: str = "neo4j"


@dataclass
class OntologyConfig:
    """Ontology namespace configuration."""
    base_url: str = DEFAULT_BASE_URL
    owl_url: str = OWL_URL


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    backend: BackendType = BackendType.NEO4J
    neo4j: Neo4jConfig = field(default_factory=Neo4jConfig)
    ontology: OntologyConfig = field(default_factory=OntologyConfig)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create config from dictionary (parsed YAML)."""
        return cls(
            backend=BackendType(data.get("backend", "neo4j")),
            neo4j=Neo4jConfig(**data.get("neo4j", {})) if data.get("neo4j") else Neo4jConfig(),
            ontology=OntologyConfig(**data.get("ontology", {})) if data.get("ontology") else OntologyConfig(),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "EngineConfig":
        """Load config from YAML file."""
        if path is None:
            path = os.getenv("ENGINE_CONFIG_PATH", "config/engine.yaml")

        config_path = Path(path)
        if not config_path.is_absolute():
            config_path = Path.cwd() / path

        if not config_path.exists():
            # Return default config if file doesn't exist
            return cls()

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Create config from environment variables.

        Environment variables override YAML config.
        """
        config = cls.from_yaml()

        if os.getenv("ONTOLOGY_BACKEND"):
            config.backend = BackendType(os.getenv("ONTOLOGY_BACKEND"))

        if os.getenv("NEO4J_URI"):
            config.neo4j.uri = os.getenv("NEO4J_URI")

        if os.getenv("NEO4J_USERNAME"):
            config.neo4j.username = os.getenv("NEO4J_USERNAME")

        if os.getenv("NEO4J_PASSWORD"):
            config.neo4j.password = os.getenv("NEO4J_PASSWORD")

        if os.getenv("NEO4J_DATABASE"):
            config.neo4j.database = os.getenv("NEO4J_DATABASE")

        if os.getenv("ONTOLOGY_BASE_URL"):
            config.ontology.base_url = os.getenv("ONTOLOGY_BASE_URL")

        if os.getenv("LOG_LEVEL"):
            config.log_level = os.getenv("LOG_LEVEL")

        return config


# Global config instance (lazy loaded)
_config: Optional[EngineConfig] = None


def get_engine_config() -> EngineConfig:
    """Get the global engine configuration (lazy loaded)."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def reload_config(path: Optional[str] = None) -> EngineConfig:
    """Reload configuration from file."""
    global _config
    _config = EngineConfig.from_yaml(path)
    return _config
