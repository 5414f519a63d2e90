import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from huddle_backend.deps import get_token_service
from huddle_backend.errors import CredentialError, CredentialParamError
from huddle_backend.models.rest import RteTokensOk, RtcTokenOk, RtmTokenOk
from huddle_backend.service.tokens import TokenService

logger = logging.getLogger(__name__)

router = APIRouter()


def token_error(exc: CredentialError, params_prefix: str, token_prefix: str, token_key: str) -> HTTPException:
    # bad request parameters always answer under "message"; builder failures use token_key
    if isinstance(exc, CredentialParamError):
        key, text = "message", f"{params_prefix}: {exc}"
    else:
        key, text = token_key, f"{token_prefix}: {exc}"
    logger.warning("%s", text)
    return HTTPException(status_code=400, detail={"status": 400, key: text})


@router.get("/rtc/{channel_name}/{role}/{token_type}/{uid}", response_model=RtcTokenOk)
def get_rtc_token(
    channel_name: str,
    role: str,
    token_type: str,
    uid: str,
    expiry: Optional[str] = None,
    tokens: TokenService = Depends(get_token_service),
) -> RtcTokenOk:
    try:
        grant = tokens.issue_media(channel_name, role, token_type, uid, expiry)
    except CredentialError as exc:
        raise token_error(exc, "Error Generating RTC token", "Error generating RTC token", "error")
    return RtcTokenOk(
        rtc_token=grant.token,
        channel_name=grant.channel_name,
        huddle_id=grant.huddle_id,
        app_id=tokens.app_id,
    )


@router.get("/rtm/{uid}/", response_model=RtmTokenOk)
def get_rtm_token(
    uid: str,
    expiry: Optional[str] = None,
    tokens: TokenService = Depends(get_token_service),
) -> RtmTokenOk:
    try:
        token = tokens.issue_messaging(uid, expiry)
    except CredentialError as exc:
        raise token_error(exc, "Error Generating RTM token", "Error generating RTM token", "error")
    return RtmTokenOk(rtm_token=token)


@router.get("/rte/{channel_name}/{role}/{token_type}/{uid}/", response_model=RteTokensOk)
def get_rte_tokens(
    channel_name: str,
    role: str,
    token_type: str,
    uid: str,
    expiry: Optional[str] = None,
    tokens: TokenService = Depends(get_token_service),
) -> RteTokensOk:
    try:
        grant = tokens.issue_both(channel_name, role, token_type, uid, expiry)
    except CredentialError as exc:
        raise token_error(exc, "Error Generating RTC token params", "Error generating RTC token", "message")
    return RteTokensOk(
        rtc_token=grant.rtc_token,
        rtm_token=grant.rtm_token,
        channel_name=grant.channel_name,
        huddle_id=grant.huddle_id,
        app_id=tokens.app_id,
    )
