from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from huddle_backend import __version__
from huddle_backend.persistence.huddle_registry import HuddleRegistry, InMemoryHuddleRegistry
from huddle_backend.routes.health import router as health_router
from huddle_backend.routes.huddles import router as huddles_router
from huddle_backend.routes.tokens import router as tokens_router
from huddle_backend.service.credentials import CredentialIssuer, JwtCredentialIssuer
from huddle_backend.service.tokens import TokenService
from huddle_backend.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


async def http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # token routes hand over a ready-made body; everything else gets {"error": ...}
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def required_body_fields(request: Request) -> List[str]:
    route = request.scope.get("route")
    dependant = getattr(route, "dependant", None)
    fields: List[str] = []
    for param in getattr(dependant, "body_params", []):
        model = param.field_info.annotation
        if isinstance(model, type) and issubclass(model, BaseModel):
            fields.extend(name for name, info in model.model_fields.items() if info.is_required())
        else:
            fields.append(param.name)
    return fields


async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: List[str] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        # malformed JSON reports ("body", <offset>); name the route's own fields instead
        names = [str(loc[-1])] if len(loc) > 1 and isinstance(loc[-1], str) else required_body_fields(request)
        for name in names or ["body"]:
            if name not in fields:
                fields.append(name)
    verb = "is" if len(fields) == 1 else "are"
    return JSONResponse(status_code=400, content={"error": f"{' and '.join(fields)} {verb} required"})


def create_app(settings: Optional[AppSettings] = None,
               registry: Optional[HuddleRegistry] = None,
               issuer: Optional[CredentialIssuer] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    if registry is None:
        registry = InMemoryHuddleRegistry()
    if issuer is None:
        issuer = JwtCredentialIssuer(settings.app_id, settings.app_certificate)

    app = FastAPI(title="Huddle Backend", version=__version__)

    # handlers reach these through huddle_backend.deps
    app.state.settings = settings
    app.state.registry = registry
    app.state.token_service = TokenService(
        registry,
        issuer,
        app_id=settings.app_id,
        default_expiry_seconds=settings.default_token_expiry_seconds,
    )
    logger.info("Initialized in-memory huddle store")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS", "GET", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, validation_error)

    app.include_router(health_router)
    app.include_router(huddles_router)
    app.include_router(tokens_router)
    return app
