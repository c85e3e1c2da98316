import os
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

import bcrypt
import jwt
from fastapi import Header, HTTPException

JWT_ALGORITHM = "HS256"


def _jwt_secret() -> str:
    # read per call so the secret can be rotated (and patched in tests) without a restart
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET not configured on server.")
    return secret


def _expires_minutes() -> int:
    try:
        return int(os.getenv("JWT_EXPIRES_MINUTES", "120"))
    except ValueError:
        return 120


def check_admin_credentials(username: str, password: str) -> bool:
    """
    Compare against ADMIN_USERNAME / ADMIN_PASSWORD_HASH (a bcrypt hash).
    """
    want_user = os.getenv("ADMIN_USERNAME", "")
    want_hash = os.getenv("ADMIN_PASSWORD_HASH", "")
    if not want_user or not want_hash:
        raise HTTPException(status_code=500, detail="Admin credentials not configured on server.")
    if username != want_user:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), want_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in env
        raise HTTPException(status_code=500, detail="ADMIN_PASSWORD_HASH is not a bcrypt hash.")


def create_access_token(username: str) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": username,
        "iat": now,
        "exp": now + timedelta(minutes=_expires_minutes()),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=JWT_ALGORITHM)


def require_admin(
    authorization: Annotated[str | None, Header(alias="authorization")] = None,
) -> dict[str, Any]:
    """
    Bearer-token guard for admin routes. Returns the decoded token claims.
    """
    secret = _jwt_secret()
    if not authorization:
        raise HTTPException(status_code=401, detail="No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        return jwt.decode(token.strip(), secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
