"""
Setup script for facet-mastery.

Facet is an adaptive mastery engine for multi-dimensional spaced
repetition. Each concept is reviewed through several cognitive
dimensions (definition, recognition, cloze, application, comparison,
diagnosis) and the engine tracks mastery per dimension:

1. Mastery Tracking - EWMA accuracy and speed per dimension
2. Weakness Analysis - Severity, fragile confidence and dodging detection
3. Scheduling - Concept-level SM-2 intervals
4. Variant Selection - Weighted draw with session safety rails

The 'facet' command exposes the engine for inspection from a terminal.
"""

from setuptools import find_packages, setup

setup(
    name="facet-mastery",
    version="1.0.0",
    description="Adaptive multi-dimensional mastery engine for spaced repetition",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["facet", "facet.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.12.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "facet=facet.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition mastery education cognitive",
)
