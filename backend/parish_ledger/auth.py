# backend/parish_ledger/auth.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models import Member
from .services.auth_service import decode_access_token


@dataclass(frozen=True)
class Principal:
    member_id: int
    email: str
    role: str  # member | admin | treasurer | ...

    @property
    def is_staff(self) -> bool:
        return self.role in set(settings.staff_roles)


def _principal_from_member(member: Member) -> Principal:
    # role always comes from the member row, never from the token
    return Principal(member_id=int(member.id), email=str(member.email or ""), role=str(member.role or "member"))


def get_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Auth modes supported (in priority order):
      1) JWT cookie OR Authorization: Bearer <token>  (sub = member id)
      2) dev header spoofing via X-User-Email (ONLY if settings.auth_mode == "dev")
    """
    token = request.cookies.get(settings.jwt_cookie_name) if settings.jwt_cookie_name else None
    if not token and authorization and str(authorization).lower().startswith("bearer "):
        token = str(authorization).split(" ", 1)[1].strip()

    if token:
        try:
            claims = decode_access_token(token)
        except jwt.ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except jwt.InvalidTokenError:
            raise HTTPException(status_code=401, detail="Invalid token")

        sub = str(claims.get("sub") or "")
        if not sub.isdigit():
            raise HTTPException(status_code=401, detail="Token missing sub")

        member = db.scalar(select(Member).where(Member.id == int(sub)))
        if member is None or not member.is_active:
            raise HTTPException(status_code=401, detail="Unknown member")
        return _principal_from_member(member)

    if settings.auth_mode == "dev":
        email = (request.headers.get(settings.dev_header_user_email) or "").strip().lower()
        if not email:
            raise HTTPException(status_code=401, detail="Missing X-User-Email for dev auth")

        member = db.scalar(select(Member).where(Member.email == email))
        if member is None:
            raise HTTPException(status_code=401, detail="Unknown member")
        return _principal_from_member(member)

    raise HTTPException(status_code=401, detail="Not authenticated")
