from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from huddle_backend.deps import get_app_settings, get_registry
from huddle_backend.errors import HuddleNotFound
from huddle_backend.models.huddle import Huddle
from huddle_backend.models.rest import (
    CreateHuddle,
    EndHuddle,
    HuddleCreated,
    HuddleList,
    HuddleSummary,
    Membership,
    Message,
)
from huddle_backend.persistence.huddle_registry import HuddleRegistry
from huddle_backend.settings import AppSettings

router = APIRouter()


def isotime(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def summarize(huddle: Huddle) -> HuddleSummary:
    return HuddleSummary(
        huddle_id=huddle.id,
        channel_name=huddle.channel_name,
        created_by=huddle.created_by,
        created_at=isotime(huddle.created_at),
        participant_count=huddle.participant_count,
        participants=list(huddle.participants),
    )


@router.post("/huddle/create", response_model=HuddleCreated, status_code=201)
def create_huddle(
    body: CreateHuddle,
    registry: HuddleRegistry = Depends(get_registry),
    settings: AppSettings = Depends(get_app_settings),
) -> HuddleCreated:
    huddle = registry.create(body.created_by)
    return HuddleCreated(
        huddle_id=huddle.id,
        channel_name=huddle.channel_name,
        created_by=huddle.created_by,
        created_at=isotime(huddle.created_at),
        app_id=settings.app_id,
    )


@router.post("/huddle/join", response_model=Message)
def join_huddle(body: Membership, registry: HuddleRegistry = Depends(get_registry)) -> Message:
    try:
        registry.join(body.huddle_id, body.user_id)
    except HuddleNotFound as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return Message(message="Successfully joined huddle")


@router.post("/huddle/leave", response_model=Message)
def leave_huddle(body: Membership, registry: HuddleRegistry = Depends(get_registry)) -> Message:
    try:
        registry.leave(body.huddle_id, body.user_id)
    except HuddleNotFound as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return Message(message="Successfully left huddle")


@router.post("/huddle/end", response_model=Message)
def end_huddle(body: EndHuddle, registry: HuddleRegistry = Depends(get_registry)) -> Message:
    try:
        registry.end(body.huddle_id)
    except HuddleNotFound as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    return Message(message="Huddle ended successfully")


@router.get("/huddle/list", response_model=HuddleList)
@router.get("/huddles", response_model=HuddleList)
def list_huddles(registry: HuddleRegistry = Depends(get_registry)) -> HuddleList:
    return HuddleList(huddles=[summarize(h) for h in registry.list()])


@router.delete("/huddles/{channel_name}", response_model=Message)
def end_huddle_by_channel(channel_name: str, registry: HuddleRegistry = Depends(get_registry)) -> Message:
    try:
        registry.end_by_channel(channel_name)
    except HuddleNotFound:
        raise HTTPException(status_code=404, detail="Huddle not found")
    return Message(message="Huddle ended successfully")
