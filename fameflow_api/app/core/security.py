"""
Password hashing and back-office access control.

Passwords for administrators and users are stored as PBKDF2-HMAC-SHA256
digests with a random 16 byte salt, in the form ``salthex$hashhex``.
No sessions or tokens are issued by the service: a successful login
simply returns the administrator record.  The ``/admin`` routes may be
guarded by one static token configured through ``ADMIN_API_TOKEN``.
"""

import hashlib
import hmac
import os

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

PBKDF2_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16 byte random salt is generated for each password, so hashing the
    same password twice gives different strings.

    Parameters
    ----------
    password : str
        The plain text password to hash.

    Returns
    -------
    str
        Salt and hash in hex, joined with ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Check ``plain_password`` against a stored ``salthex$hashhex`` string.

    Malformed or missing stored values never match.  The digests are
    compared in constant time.
    """
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


security = HTTPBearer(auto_error=False)


def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    """Dependency guarding the back-office routes.

    When the application is configured with ``admin_api_token`` the
    request must carry it as a bearer token.  With no token configured
    the routes are open.
    """
    expected = request.app.state.settings.admin_api_token
    if not expected:
        return
    if credentials is None or not hmac.compare_digest(credentials.credentials, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
