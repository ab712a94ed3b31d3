"""
Configuration System

Manages configuration for DocGraph with a layered approach.

Configuration Priority (highest to lowest):
    1. Programmatic (passed to KGConfig())
    2. Environment variables (NEO4J_*, DOCGRAPH_*, OPENAI_API_KEY)
    3. Built-in defaults

A TOML file can be loaded with KGConfig.from_file(); its values are passed
as programmatic overrides.
"""

from docgraph_kg.config.settings import KGConfig

__all__ = ["KGConfig"]
