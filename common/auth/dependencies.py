"""
FastAPI authentication dependencies.

Provides factory functions to create auth dependencies that can be
injected into route handlers. Works with any AuthProvider implementation.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    auth = JWTAuth(secret="your-secret")
    require_user = create_auth_dependency(lambda: auth)

    @router.get("/profile")
    async def get_profile(user: dict = Depends(require_user)):
        return {"user_id": user["id"]}
"""

from typing import Any, Callable, Dict, Optional
from fastapi import Header

from common.auth.base import AuthProvider
from common.utils.exceptions import UnauthorizedException


def _user_from_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce token claims to the user context handed to routes."""
    return {
        "id": claims.get("sub"),
        "email": claims.get("email"),
        "role": claims.get("role"),
    }


def create_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: Callable that returns the AuthProvider instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency function that returns the verified user dict
    """

    async def get_current_user(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Dict[str, Any]:
        """
        Extract and verify the user from the authorization header.

        Raises:
            UnauthorizedException: If token is missing, invalid, or expired
        """
        if not authorization:
            raise UnauthorizedException(
                message="Missing authorization header",
                code="AUTH_REQUIRED",
            )

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            raise UnauthorizedException(
                message=f"Invalid authorization scheme. Expected: {scheme}",
                code="INVALID_AUTH_SCHEME",
            )

        token = authorization[len(prefix):].strip()

        if not token:
            raise UnauthorizedException(message="Token is empty", code="EMPTY_TOKEN")

        auth = get_auth_provider()
        try:
            claims = await auth.verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")

        user = _user_from_claims(claims)
        if not user["id"]:
            raise UnauthorizedException(message="Token missing user ID", code="INVALID_TOKEN")

        return user

    return get_current_user


def create_optional_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create optional auth dependency.

    Unlike create_auth_dependency, this returns None instead of raising
    when no usable token is provided. Useful for catalogue endpoints that
    work for both signed-in and anonymous visitors.

    Returns:
        A FastAPI dependency that returns the user dict or None
    """

    async def get_optional_user(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Optional[Dict[str, Any]]:
        if not authorization:
            return None

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            return None

        token = authorization[len(prefix):].strip()
        if not token:
            return None

        auth = get_auth_provider()
        try:
            claims = await auth.verify_token(token)
        except ValueError:
            return None

        user = _user_from_claims(claims)
        return user if user["id"] else None

    return get_optional_user
