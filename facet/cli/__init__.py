"""
Command-line interface for the facet mastery engine.

Commands:
- analyze: Mastery table, weakness analysis and focus suggestion
- schedule: SM-2 interval/ease progression for a rating sequence
- select: Variant weights and the safety-railed draw for a deck
- dimensions: The six dimensions, their aliases and descriptions
"""

from .main import app, main

__all__ = ["app", "main"]
