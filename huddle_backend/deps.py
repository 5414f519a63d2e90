from __future__ import annotations

from fastapi import Request

from huddle_backend.persistence.huddle_registry import HuddleRegistry
from huddle_backend.service.tokens import TokenService
from huddle_backend.settings import AppSettings


def get_registry(req: Request) -> HuddleRegistry:
    return req.app.state.registry


def get_token_service(req: Request) -> TokenService:
    return req.app.state.token_service


def get_app_settings(req: Request) -> AppSettings:
    return req.app.state.settings
