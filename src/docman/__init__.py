"""DocMan - Document review cycle service.

This package provides the review cycle engine of the DocMan document
management system: review assignment tracking, document-level completion,
recurring review scheduling, and assignment maintenance, exposed over a
FastAPI REST API and a Typer command-line interface.
"""

__version__ = "0.1.0"
