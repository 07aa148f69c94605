"""
Entry point for running the facet CLI as a module.

Usage:
    python -m facet.cli analyze profile.json
    python -m facet.cli schedule good good again
    python -m facet.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
