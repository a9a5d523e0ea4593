"""Firebase Authentication Service Module

This module verifies Firebase ID tokens and exposes the authenticated user's
UID as a FastAPI dependency. Every conversation and generation route runs
under this identity.

The Firebase app is initialised lazily on first verification from the
credentials file named by FIREBASE_CREDENTIALS_PATH, so importing the module
never requires credentials.

Dependencies:
- firebase_admin: For Firebase ID token verification.
- fastapi: For the request dependency and HTTPException.
- loguru: For logging operations.
- mockinterview.core.config: For the credentials path.

Author: @kcaparas1630
"""

import os
import threading
from typing import Optional, Tuple
import firebase_admin
from firebase_admin import auth, credentials
from fastapi import Request, HTTPException
from loguru import logger
from mockinterview.core.config import get_settings

_init_lock = threading.Lock()


def _ensure_firebase_app() -> None:
    """Initialise the default Firebase app once."""
    if firebase_admin._apps:
        return
    with _init_lock:
        if firebase_admin._apps:
            return
        file_path = get_settings().firebase_credentials_path
        if not file_path or not os.path.exists(file_path):
            logger.error(f"Firebase credentials file not found at {file_path}")
            raise FileNotFoundError(f"Firebase credentials file not found at {file_path}")
        firebase_admin.initialize_app(credentials.Certificate(file_path))
        logger.info("Firebase app initialized")


def verify_id_token(id_token: str) -> Tuple[Optional[dict], Optional[str]]:
    """Verify Firebase ID token and extract user information.

    Args:
        id_token (str): Firebase ID token to verify

    Returns:
        tuple: (decoded_token, uid) if valid, (None, None) if invalid

    Note:
        Checks if token is revoked using check_revoked=True parameter
    """
    _ensure_firebase_app()
    try:
        decoded_token = auth.verify_id_token(id_token, check_revoked=True)
        return decoded_token, decoded_token['uid']
    except (auth.InvalidIdTokenError, auth.UserDisabledError) as e:
        logger.info(f"Rejected ID token: {e}")
        return None, None


def get_current_user_uid(request: Request) -> str:
    """Extract and verify Firebase ID token from request headers.

    This function serves as a FastAPI dependency to authenticate users
    by verifying their Firebase ID token from the Authorization header.

    Args:
        request (Request): FastAPI request object containing headers

    Returns:
        str: Firebase UID of the authenticated user

    Raises:
        HTTPException: 401 if authorization header is missing, invalid, or token is expired

    Example:
        Used as FastAPI dependency:
        @app.get("/protected")
        async def protected_route(uid: str = Depends(get_current_user_uid)):
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")

    token = auth_header.split(" ", 1)[1]
    _, uid = verify_id_token(token)
    if not uid:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return uid
