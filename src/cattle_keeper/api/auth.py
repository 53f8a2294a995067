"""API key authentication for the versioned API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from cattle_keeper.errors import ForbiddenError, UnauthorizedError

if TYPE_CHECKING:
    from cattle_keeper.containers import AppContainer


def _get_api_key(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_key


async def require_api_key(
    x_api_key: str | None = Header(default=None),
    api_key: str = Depends(_get_api_key),
) -> None:
    """Ensure requests carry the shared API key."""
    if not x_api_key:
        raise UnauthorizedError("API key is required")
    if x_api_key != api_key:
        raise ForbiddenError("Invalid API key")


async def acting_user(x_user: str | None = Header(default=None)) -> str | None:
    """Return the user named by the ``X-User`` header, if any."""
    if x_user is None or not x_user.strip():
        return None
    return x_user.strip()
