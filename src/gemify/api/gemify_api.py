"""
FastAPI service for Gemify personalization.
Exposes REST endpoints for refreshing user preference vectors, logging place
interactions, personalized place banners and review classification.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from gemify.classification import classify_text
from gemify.config import ServiceSettings
from gemify.errors import GemifyError, UpstreamError
from gemify.recommendation.cities import default_city
from gemify.recommendation.interactions import record_interaction
from gemify.recommendation.personalization import (
    personalization_message,
    place_to_preferences,
)
from gemify.recommendation.refresh import refresh_user_preferences
from gemify.supabase_client.supabase_service import SupabaseService, get_supabase_service

LOGGER = logging.getLogger(__name__)


# Pydantic models for request/response
class CharacteristicsRequest(BaseModel):
    user_id: Optional[str] = Field(None, description="User whose preferences are recomputed")


class InteractionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="User identifier")
    place_id: int = Field(..., description="Place identifier")
    action: str = Field("view", description="One of view, share, try")


class PlaceAttributes(BaseModel):
    name: Optional[str] = None
    city: Optional[str] = None
    type: Optional[str] = None
    price: Optional[float] = Field(None, ge=0, le=4)
    ambiance: List[str] = Field(default_factory=list)


class PersonalizationRequest(BaseModel):
    place: PlaceAttributes
    user_id: Optional[str] = Field(None, description="Signed-in user, if any")


class PersonalizationResponse(BaseModel):
    message: str
    place_preferences: Dict[str, float]


class ClassifyRequest(BaseModel):
    text: Any = None


class ClassifyResponse(BaseModel):
    success: bool
    score: float


class HealthResponse(BaseModel):
    status: str
    timestamp: str


def get_store() -> SupabaseService:
    return get_supabase_service()


def get_settings() -> ServiceSettings:
    return ServiceSettings.from_env()


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


# Initialize FastAPI app
app = FastAPI(
    title="Gemify Personalization API",
    description="Preference vectors and personalized place recommendations",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GemifyError)
async def gemify_error_handler(request: Request, exc: GemifyError):
    content: Dict[str, Any] = {"error": exc.message}
    if isinstance(exc, UpstreamError):
        content.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint."""
    return {
        "message": "Gemify Personalization API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", timestamp=_utcnow())


@app.post("/api/characteristics", response_model=Dict[str, Any])
def refresh_characteristics(
    request: CharacteristicsRequest,
    store: SupabaseService = Depends(get_store),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Recompute a user's preference vector from their latest interactions.

    Returns ``{"status": "skipped", "reason": ...}`` when the stored vector is
    fresh or the user has no interactions, else ``{"status": "updated",
    "vector": {...}}``.
    """
    result = refresh_user_preferences(
        store, request.user_id, config=settings.personalization
    )
    return result.to_dict()


@app.get("/users/{user_id}/preferences", response_model=Dict[str, Any])
def get_user_preferences(user_id: str, store: SupabaseService = Depends(get_store)):
    """
    Get a user's stored preference vector.
    """
    row = store.get_preferences(user_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"No preferences stored for '{user_id}'")
    return row


@app.post("/interactions", response_model=Dict[str, Any])
def log_interaction(
    request: InteractionRequest,
    store: SupabaseService = Depends(get_store),
    settings: ServiceSettings = Depends(get_settings),
):
    """
    Record a place interaction and refresh the user's preferences.

    The interaction is already stored when the refresh runs, so a refresh
    failure is reported in the body rather than as an error status.
    """
    count = record_interaction(store, request.user_id, request.place_id, request.action)
    try:
        refresh = refresh_user_preferences(
            store, request.user_id, config=settings.personalization
        ).to_dict()
    except GemifyError as exc:
        LOGGER.error("Preference refresh failed for %s: %s", request.user_id, exc.message)
        refresh = {"status": "error", "reason": exc.message}
    return {
        "user_id": request.user_id,
        "place_id": request.place_id,
        "action": request.action.lower(),
        "count": count,
        "refresh": refresh,
    }


@app.post("/places/personalization", response_model=PersonalizationResponse)
def place_personalization(
    request: PersonalizationRequest,
    store: SupabaseService = Depends(get_store),
):
    """
    Personalized one-line pitch for a place.
    """
    place = request.place.model_dump()
    user_preferences = store.get_preferences(request.user_id) if request.user_id else None
    return PersonalizationResponse(
        message=personalization_message(place, user_preferences),
        place_preferences=place_to_preferences(place),
    )


@app.post("/api/classify", response_model=ClassifyResponse)
def classify(request: ClassifyRequest, settings: ServiceSettings = Depends(get_settings)):
    """
    Score whether review text mentions a specific dish.
    """
    score = classify_text(
        request.text,
        api_key=settings.whetdata_api_key,
        settings=settings.classifier,
    )
    return ClassifyResponse(success=True, score=score)


@app.get("/api/geo", response_model=Dict[str, str])
async def geo(request: Request):
    """
    Default city for the visitor, from the edge geolocation header.
    """
    country = request.headers.get("x-vercel-ip-country")
    return {"city": default_city(country)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
