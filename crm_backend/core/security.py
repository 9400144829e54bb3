"""
core/security.py
----------------
Password hashing and JWT token utilities.

Design decisions:
  - bcrypt work factor comes from settings (12 in production, lower in tests).
    Hashes made with another work factor are upgraded on the next login.
  - The same hashing protects user passwords and password-protected content.
  - JWT payload contains sub (user_id), tenant_id (the user's company, null
    for super admins) and role. Only ``sub`` is trusted: role and company
    are re-read from the database on every request.
  - Tokens are signed with HS256; swap to RS256 for multi-service setups.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from crm_backend.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

_REQUIRED_CLAIMS = ("sub", "role", "exp")


# ── Password Utilities ────────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the plain-text password."""
    return pwd_context.hash(plain)


def verify_and_upgrade(plain: str, hashed: str) -> Tuple[bool, Optional[str]]:
    """
    Verify ``plain`` and, when the stored hash uses outdated parameters,
    return a fresh hash to persist in its place.
    """
    return pwd_context.verify_and_update(plain, hashed)


# ── JWT Utilities ─────────────────────────────────────────────────────────────

def create_access_token(
    subject: str,
    tenant_id: Optional[str],
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a JWT access token.

    Args:
        subject: User UUID (stored in 'sub' claim).
        tenant_id: Company UUID, or None for a super admin.
        role: one of the UserRole values.
        expires_delta: Optional custom expiry; defaults to settings value.
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload: Dict[str, Any] = {
        "sub": subject,
        "tenant_id": tenant_id,
        "role": role,
        "exp": expire,
        "iat": issued_at,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        JWTError: If the token is invalid, expired, tampered with or lacks
            one of the claims this service issues.
    """
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    missing = [name for name in _REQUIRED_CLAIMS if not claims.get(name)]
    if missing:
        raise JWTError(f"Missing claims: {', '.join(missing)}")
    return claims
