"""Bearer token validation.

Tokens are issued by the login service (outside this API) and signed with
a shared HMAC secret. Validation checks the signature and expiry and
extracts the principal, its role and the tenant it belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import TokenValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated token claims.

    Attributes:
        sub: Principal identifier
        tenant_id: Tenant the principal belongs to, None for platform staff
            tokens that carry no tenant
        role: Role name of the principal, if present
        expires_at: Expiry of the token (UTC)
    """

    sub: str
    tenant_id: str | None
    role: str | None
    expires_at: datetime


class InvalidTokenError(Exception):
    """Raised when token validation fails."""

    pass


class TokenValidator:
    """Validates HMAC-signed bearer tokens.

    Validates token signature and expiry and requires the ``sub`` and
    ``exp`` claims.
    """

    def __init__(
        self,
        secret: str,
        probe: TokenValidatorProbe,
        algorithm: str = "HS256",
        tenant_claim: str = "tenant_id",
        role_claim: str = "role",
    ):
        """Initialize the token validator.

        Args:
            secret: Shared HMAC secret.
            probe: Observability probe for logging events.
            algorithm: Accepted signing algorithm (default: HS256).
            tenant_claim: Claim carrying the tenant identifier.
            role_claim: Claim carrying the principal's role.
        """
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._tenant_claim = tenant_claim
        self._role_claim = role_claim

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a token and return its claims.

        Args:
            token: The encoded token string.

        Returns:
            TokenClaims containing the validated claims.

        Raises:
            InvalidTokenError: If token is malformed, expired, or its
                signature does not verify.
        """
        try:
            claims = jwt.decode(
                token=token,
                key=self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_aud": False,
                    "require_exp": True,
                    "require_sub": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                self._probe.token_validation_failed(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        sub = claims.get("sub")
        if not sub:
            self._probe.token_validation_failed(reason="Missing sub claim")
            raise InvalidTokenError("Missing required claim: sub")

        tenant_id = claims.get(self._tenant_claim)
        role = claims.get(self._role_claim)

        self._probe.token_validated(
            user_id=str(sub),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
        )

        return TokenClaims(
            sub=str(sub),
            tenant_id=str(tenant_id) if tenant_id not in (None, "") else None,
            role=str(role) if role is not None else None,
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
