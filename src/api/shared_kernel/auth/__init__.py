"""Authentication shared kernel module."""

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    TokenClaims,
    TokenValidator,
)
from shared_kernel.auth.observability import (
    DefaultTokenValidatorProbe,
    TokenValidatorProbe,
)

__all__ = [
    "DefaultTokenValidatorProbe",
    "InvalidTokenError",
    "TokenClaims",
    "TokenValidator",
    "TokenValidatorProbe",
]
