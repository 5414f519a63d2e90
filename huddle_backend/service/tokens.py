from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from huddle_backend.persistence.huddle_registry import HuddleRegistry
from huddle_backend.service.credentials import (
    CredentialIssuer,
    Role,
    TokenKind,
    expiry_timestamp,
)


@dataclass(frozen=True)
class MediaGrant:
    token: str
    channel_name: str
    huddle_id: str


@dataclass(frozen=True)
class CombinedGrant:
    rtc_token: str
    rtm_token: str
    channel_name: str
    huddle_id: str


class TokenService:
    """Issues credentials and keeps huddle bookkeeping in step with them.

    Asking for a media token for a channel implicitly opens a huddle on that
    channel (if none is active) and records the caller as a participant.
    That bookkeeping happens before the credential is built and never
    fails the request on its own.
    """

    def __init__(self,
                 registry: HuddleRegistry,
                 issuer: CredentialIssuer,
                 app_id: str,
                 default_expiry_seconds: int = 3600):
        self._registry = registry
        self._issuer = issuer
        self.app_id = app_id
        self._default_expiry = default_expiry_seconds

    def issue_media(self, channel_name: str, role: str, token_type: str, uid: str, expiry: Optional[str] = None) -> MediaGrant:
        expires_at = self._expires_at(expiry)
        huddle_id = self._track(channel_name, uid)
        token = self._media_token(channel_name, role, token_type, uid, expires_at)
        return MediaGrant(token=token, channel_name=channel_name, huddle_id=huddle_id)

    def issue_messaging(self, uid: str, expiry: Optional[str] = None) -> str:
        return self._issuer.messaging_token(uid, self._expires_at(expiry))

    def issue_both(self, channel_name: str, role: str, token_type: str, uid: str, expiry: Optional[str] = None) -> CombinedGrant:
        expires_at = self._expires_at(expiry)
        huddle_id = self._track(channel_name, uid)
        rtc_token = self._media_token(channel_name, role, token_type, uid, expires_at)
        rtm_token = self._issuer.messaging_token(uid, expires_at)
        return CombinedGrant(
            rtc_token=rtc_token,
            rtm_token=rtm_token,
            channel_name=channel_name,
            huddle_id=huddle_id,
        )

    # ---- helpers ----
    def _expires_at(self, expiry: Optional[str]) -> int:
        # an absent query value falls back to the default; an empty one is an error
        return expiry_timestamp(str(self._default_expiry) if expiry is None else expiry)

    def _track(self, channel_name: str, uid: str) -> str:
        huddle = self._registry.get_or_create(channel_name, uid)
        self._registry.join_by_channel(channel_name, uid)
        return huddle.id

    def _media_token(self, channel_name: str, role: str, token_type: str, uid: str, expires_at: int) -> str:
        return self._issuer.media_token(
            channel_name,
            uid,
            Role.parse(role),
            TokenKind.parse(token_type),
            expires_at,
        )

