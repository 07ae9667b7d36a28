"""
Inbound credential extraction

A request carries at most one credential we act on: the web session cookie
when present, otherwise an `Authorization: Bearer` token.
"""

from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Request

from guestfeedback.core.config import get_settings

settings = get_settings()


@dataclass(frozen=True)
class SessionCookie:
    """Opaque id of a server-side web session"""
    session_id: str


@dataclass(frozen=True)
class BearerToken:
    """Signed token sent by mobile clients"""
    token: str


Credential = Union[SessionCookie, BearerToken]


def extract_credential(request: Request) -> Optional[Credential]:
    """Pick the credential to validate, web session first"""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if session_id:
        return SessionCookie(session_id)

    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return BearerToken(token.strip())

    return None
