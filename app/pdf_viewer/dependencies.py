"""
FastAPI dependencies resolving the collaborators installed on the application.

The store and agent client are built once by the application factory and kept
on ``app.state``; handlers receive them through these functions instead of
reaching for module globals.
"""

from fastapi import Request

from .config import Settings
from .services.ai import AgentClient
from .store import Store, StoreNotInitializedError


def get_store(request: Request) -> Store:
    """
    Return the installed store.

    Raises:
        StoreNotInitializedError: If the application was started without one.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreNotInitializedError(
            "store not initialized: pass one to create_app() or let the lifespan build it"
        )
    return store


def get_agent_client(request: Request) -> AgentClient:
    """Return the installed agent client."""
    client = getattr(request.app.state, "agent_client", None)
    if client is None:
        raise RuntimeError("agent client not initialized")
    return client


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings
