"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from labyrinth.config import Settings, get_settings
from labyrinth.services.session_service import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    """Get the session registry owned by the running app."""
    return request.app.state.registry


# Type aliases for cleaner route signatures
Registry = Annotated[SessionRegistry, Depends(get_registry)]
AppSettings = Annotated[Settings, Depends(get_settings)]
