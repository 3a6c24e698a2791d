"""Configuration package for the ontology individual engine."""

from .engine_config import EngineConfig, get_engine_config, reload_config

__all__ = ["EngineConfig", "get_engine_config", "reload_config"]
