# backend/parish_ledger/services/auth_service.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt  # PyJWT

from ..config import settings


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _jwt_secret() -> str:
    secret = (settings.jwt_secret or "").strip()
    if not secret:
        raise RuntimeError("jwt_secret is required for auth_mode=jwt")
    return secret


def create_access_token(*, member_id: int, role: str, minutes: int = 60 * 24) -> str:
    now = _now()
    payload: dict[str, Any] = {
        "sub": str(int(member_id)),
        "role": str(role),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=int(minutes))).timestamp()),
    }
    return jwt.encode(payload, _jwt_secret(), algorithm="HS256")


def decode_access_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, _jwt_secret(), algorithms=["HS256"])
