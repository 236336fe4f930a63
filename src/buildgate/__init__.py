"""buildgate - fail-fast build validation pipeline for regulated software."""

__version__ = "0.1.0"
