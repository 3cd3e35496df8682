"""
FastAPI Todo service backed by MongoDB.

Exposes the application factory and the module-level app instance for
``uvicorn todo_api:app``.
"""

# Single source of the package version; pyproject.toml reads it from here.
__version__ = "0.1.0"

from .main import app, create_app  # noqa: E402,F401
