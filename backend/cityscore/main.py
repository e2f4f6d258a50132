"""City scoring HTTP API.

Run: uvicorn backend.cityscore.main:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import configure_logging, cors_origins
from .schemas import ScoreRequest, ScoringResult, UserPreferences
from .scoring.engine import score_cities

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="City Score API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/preferences/defaults", response_model=UserPreferences, response_model_by_alias=True)
def preference_defaults() -> UserPreferences:
    return UserPreferences()


@app.post("/api/scores", response_model=ScoringResult, response_model_by_alias=True)
def score(request: ScoreRequest) -> ScoringResult:
    """Rank the posted cities against the posted preferences.

    Nothing is persisted; the percentile distributions are rebuilt from the
    request's own city list on every call.
    """
    logger.debug("Scoring request with %d cities", len(request.cities))
    return score_cities(request.cities, request.preferences)
