"""
App assembly entry point.

Re-exports the FastAPI `app` from `pulseboard.api.main` so servers can be
started with ``uvicorn app:app`` from the service directory.
"""

from pulseboard.api.main import app  # noqa: F401
