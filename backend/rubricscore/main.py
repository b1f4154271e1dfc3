"""FastAPI application entrypoint."""

import os

from fastapi import FastAPI
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response

from rubricscore.ai.openai_client import build_model_client
from rubricscore.routers.grade import router as grade_router
from rubricscore.settings import Settings, settings


app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

_PUBLIC_PATHS = {
    "/health",
    "/health/deep",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/favicon.ico",
    "/favicon.png",
}


@app.middleware("http")
async def enforce_api_key(request: Request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    if request.url.path in _PUBLIC_PATHS:
        return await call_next(request)

    expected_api_key = os.getenv("BACKEND_API_KEY", "").strip()
    if expected_api_key:
        received_api_key = request.headers.get("X-API-Key", "")
        if received_api_key != expected_api_key:
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

    return await call_next(request)

app.include_router(grade_router)


@app.on_event("startup")
def on_startup() -> None:
    app.state.model_client = build_model_client(Settings())


@app.get("/health", tags=["meta"])
def health() -> dict[str, bool]:
    return {"ok": True, "openai_configured": Settings().openai_configured}


@app.get("/health/deep", tags=["meta"])
def deep_health() -> dict[str, bool | str]:
    current = Settings()
    return {
        "ok": True,
        "openai_configured": current.openai_configured,
        "openai_mock": current.openai_mock,
        "structure_model": current.structure_model,
        "evaluation_model": current.evaluation_model,
        "models_configured": bool(current.structure_model and current.evaluation_model),
    }


@app.options("/{path:path}", include_in_schema=False)
async def preflight(path: str) -> Response:
    del path
    return Response(status_code=204)
