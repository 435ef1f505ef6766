import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth

from .config import ADMIN_EMAILS
from .store.firestore import init_firebase_app

logger = logging.getLogger(__name__)

security = HTTPBearer()


def verify_firebase_token(token: str) -> dict:
    """Verify a Firebase ID token with the Admin SDK and return its claims"""
    try:
        return firebase_auth.verify_id_token(token, app=init_firebase_app())
    except firebase_auth.ExpiredIdTokenError as e:
        logger.info("ℹ️ Expired admin token presented")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except (firebase_auth.InvalidIdTokenError, ValueError) as e:
        logger.warning(f"⚠️ Invalid admin token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token") from e
    except Exception as e:
        logger.error(f"❌ Token verification failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e


def is_admin(claims: dict) -> bool:
    if claims.get("admin") is True:
        return True
    email = (claims.get("email") or "").lower()
    return bool(email) and email in ADMIN_EMAILS


async def require_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """Dependency guarding admin endpoints; returns the verified token claims"""
    claims = verify_firebase_token(credentials.credentials)
    if not is_admin(claims):
        logger.warning(f"🚫 Non-admin {claims.get('email')} attempted an admin operation")
        raise HTTPException(status_code=403, detail="Admin access required")
    return claims
