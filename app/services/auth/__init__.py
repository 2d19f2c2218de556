"""
Authentication service package.

Provides the shared household PIN login.

Usage:
    from app.services.auth import get_auth_provider
    from app.services.auth.dependencies import require_session

    # In routes:
    @router.get("/protected")
    async def protected_route(_: None = Depends(require_session)):
        ...
"""
from app.services.auth.base import AuthProvider
from app.services.auth.pin_provider import pin_auth_provider


def get_auth_provider() -> AuthProvider:
    """Factory function to get the configured auth provider."""
    return pin_auth_provider


__all__ = [
    "AuthProvider",
    "get_auth_provider",
    "pin_auth_provider",
]
