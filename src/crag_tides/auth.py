"""JWT verification: FastAPI dependencies for Supabase Auth.

- ``get_current_user``: requires a valid JWT, returns user_id (UUID str).
- ``require_admin``: additionally requires ``profiles.is_admin``.
"""
from __future__ import annotations

import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request

from crag_tides.config import settings
from crag_tides.db import get_supabase

log = logging.getLogger(__name__)


def _extract_token(request: Request) -> Optional[str]:
    """Pull Bearer token from the Authorization header."""
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return None


def _decode_token(token: str) -> dict:
    """Decode and verify a Supabase JWT using HS256."""
    return jwt.decode(
        token,
        settings.supabase_jwt_secret,
        algorithms=["HS256"],
        audience="authenticated",
    )


async def get_current_user(request: Request) -> str:
    """FastAPI dependency: requires a valid JWT. Returns user_id (UUID str)."""
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: no sub claim")
    return user_id


def _is_admin(user_id: str) -> bool:
    sb = get_supabase()
    if sb is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    resp = sb.table("profiles").select("is_admin").eq("id", user_id).limit(1).execute()
    return bool(resp.data and resp.data[0].get("is_admin"))


def require_admin(user_id: str = Depends(get_current_user)) -> str:
    """FastAPI dependency: 403 unless the caller's profile is an admin."""
    if not _is_admin(user_id):
        log.info("Rejected non-admin user %s", user_id)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_id
