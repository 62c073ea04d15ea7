"""
JWT access-token verification.

The hosted auth service signs access tokens with a shared secret (HS256
by default) and an `aud` claim. This provider checks signature, expiry
and audience and returns the claims.

Example:
    auth = JWTAuth(secret="project-jwt-secret", audience="authenticated")

    claims = await auth.verify_token(token)
    print(claims["sub"])  # user id
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from jose import jwt, JWTError

from common.auth.base import AuthProvider


class JWTAuth(AuthProvider):
    """
    Verifies JWT access tokens issued by the hosted auth service.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
    ):
        """
        Initialize JWT auth provider.

        Args:
            secret: Secret key used to sign tokens (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            audience: Expected `aud` claim, or None to skip the check
        """
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode a JWT token."""
        options = {"verify_aud": self.audience is not None}

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")

    def create_token(
        self,
        user_id: str,
        expires_in: timedelta = timedelta(hours=1),
        **claims: Any,
    ) -> str:
        """
        Sign a token the way the hosted service does.

        Used by local tooling and tests; production tokens come from the
        hosted service.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + expires_in,
            **claims,
        }
        if self.audience and "aud" not in payload:
            payload["aud"] = self.audience
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
