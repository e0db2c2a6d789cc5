from __future__ import annotations

import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from server.metrics import BUILD_VERSION, GIT_SHA, MetricsMiddleware, metrics_app

from .routes.calibrations import router as calibrations_router
from .routes.clubs import router as clubs_router
from .routes.visits import router as visits_router

app = FastAPI(title="Hole Yardage Overlay")

allow = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in allow if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

app.include_router(clubs_router)
app.include_router(calibrations_router)
app.include_router(visits_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": BUILD_VERSION, "git": GIT_SHA}


_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
