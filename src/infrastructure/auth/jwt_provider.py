"""JWT access token validation.

Accepts Supabase-issued access tokens (ES256, verified against the project's
JWKS) and locally signed tokens (HS256 with JWT_SECRET_KEY, used in tests and
local development).

Supabase access token payload:
    {
        "sub": "user-uuid",
        "email": "cook@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": {"username": "cook", "full_name": "A. Cook"},
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, fetched on first use and refetched on an unknown kid
_jwks_by_kid: dict[str, Any] | None = None


async def _fetch_jwks(force: bool = False) -> dict[str, Any]:
    """Return the project's signing keys keyed by kid."""
    global _jwks_by_kid
    if _jwks_by_kid is not None and not force:
        return _jwks_by_kid

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient(timeout=settings.auth_timeout_seconds) as client:
            response = await client.get(jwks_url)
            response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_by_kid = {
        key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
    }
    logger.info("Fetched %d JWKS keys", len(_jwks_by_kid))
    return _jwks_by_kid


class JWTAuthProvider:
    """Validates Supabase (ES256) and local (HS256) access tokens."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token and build the caller from its claims.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        try:
            parsed_id = UUID(user_id)
        except ValueError:
            return None

        metadata = payload.get("user_metadata") or {}
        return TokenUser(
            id=parsed_id,
            email=email,
            username=metadata.get("username"),
            full_name=metadata.get("full_name") or metadata.get("name"),
            role=payload.get("role"),
            user_metadata=metadata,
        )

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _fetch_jwks()).get(kid)
        if not key_data:
            # Signing key rotated since the last fetch
            key_data = (await _fetch_jwks(force=True)).get(kid)
            if not key_data:
                logger.warning("No JWKS key for kid=%s", kid)
                return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Sign an HS256 access token shaped like a Supabase one.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)
        metadata = dict(user.user_metadata)
        if user.username:
            metadata["username"] = user.username
        if user.full_name:
            metadata["full_name"] = user.full_name

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": metadata,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
