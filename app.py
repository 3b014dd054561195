"""
App assembly entry point.

Re-exports the FastAPI `app` from `catalog.api.main` so the service can be
served as ``app:app``.
"""

from catalog.api.main import app  # noqa: F401
