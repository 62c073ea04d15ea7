"""
Abstract authentication provider interface.

Sign-up, sign-in and password flows belong to the hosted identity
service. Backends only need to turn a bearer token into verified claims,
so the contract is a single method.

Example:
    from common.auth import AuthProvider, JWTAuth

    def get_auth_provider(settings) -> AuthProvider:
        return JWTAuth(secret=settings.AUTH_JWT_SECRET)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """
    Abstract authentication provider.

    All methods are async to support both local and remote verification.
    """

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify an access token.

        Args:
            token: The token to verify

        Returns:
            Dictionary containing decoded token claims (at minimum: sub)

        Raises:
            ValueError: If token is invalid or expired
        """
        pass
