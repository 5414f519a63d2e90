"""Access credentials for the media (RTC) and messaging (RTM) platforms.

The platform's signing algorithm is hidden behind :class:`CredentialIssuer`.
:class:`JwtCredentialIssuer` signs HS256 JWTs with the app certificate.
"""
from __future__ import annotations

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

import jwt

from huddle_backend.errors import CredentialError, CredentialParamError

UINT32_MAX = 2**32 - 1


class Role(str, Enum):
    PUBLISHER = "publisher"
    SUBSCRIBER = "subscriber"

    @classmethod
    def parse(cls, raw: str) -> "Role":
        # anything that is not explicitly a publisher only gets to subscribe
        return cls.PUBLISHER if raw == cls.PUBLISHER.value else cls.SUBSCRIBER


class TokenKind(str, Enum):
    UID = "uid"
    USER_ACCOUNT = "userAccount"

    @classmethod
    def parse(cls, raw: str) -> "TokenKind":
        try:
            return cls(raw)
        except ValueError:
            raise CredentialError(f"failed to generate RTC token for unknown tokenType: {raw}") from None


def _parse_uint32(raw: str) -> Optional[int]:
    if not isinstance(raw, str) or not raw.isascii() or not raw.isdigit():
        return None
    value = int(raw)
    return value if value <= UINT32_MAX else None


def parse_uid(raw: str) -> int:
    uid = _parse_uint32(raw)
    if uid is None:
        raise CredentialError(f"Failed to parse uidStr: {raw}, to uint")
    return uid


def expiry_timestamp(raw: str, now: Optional[int] = None) -> int:
    """Turn a relative ``expiry`` (seconds) into an absolute unix timestamp."""
    seconds = _parse_uint32(raw)
    if seconds is None:
        raise CredentialParamError(f"failed to parse expireTime: {raw}")
    if now is None:
        now = int(time.time())
    return now + seconds


class CredentialIssuer(ABC):
    @abstractmethod
    def media_token(self, channel_name: str, subject: str, role: Role, token_kind: TokenKind, expires_at: int) -> str:
        """Issues a token that lets subject join channel_name with the given role."""
        ...

    @abstractmethod
    def messaging_token(self, subject: str, expires_at: int) -> str:
        """Issues a token for the messaging service, not bound to a channel."""
        ...


class JwtCredentialIssuer(CredentialIssuer):
    algorithm = "HS256"

    def __init__(self, app_id: str, app_certificate: str):
        self._app_id = app_id
        self._app_certificate = app_certificate

    def media_token(self, channel_name: str, subject: str, role: Role, token_kind: TokenKind, expires_at: int) -> str:
        claims: Dict[str, Any] = {
            "channel": channel_name,
            "role": role.value,
            "kind": token_kind.value,
        }
        if token_kind is TokenKind.UID:
            claims["uid"] = parse_uid(subject)
        return self._sign(subject, expires_at, claims)

    def messaging_token(self, subject: str, expires_at: int) -> str:
        return self._sign(subject, expires_at, {"scope": "rtm"})

    def _sign(self, subject: str, expires_at: int, extra: Dict[str, Any]) -> str:
        if not self._app_id or not self._app_certificate:
            raise CredentialError("app id and app certificate must be configured")
        payload = {
            "iss": self._app_id,
            "sub": subject,
            "iat": int(time.time()),
            "exp": expires_at,
            **extra,
        }
        return jwt.encode(payload, self._app_certificate, algorithm=self.algorithm)
