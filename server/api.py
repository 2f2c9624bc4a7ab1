"""FastAPI server exposing outfit suggestion endpoints for deployment."""

import os
from typing import List

import uvicorn
from fastapi import Depends, FastAPI, HTTPException

from closet_app.app import ClosetBuddyApp
from closet_app.logging_config import configure_logging
from logic.validation import ColorRecommendationRequest, SuggestionRequest
from models.outfit import InsufficientWardrobeError, OutfitSuggestion
from server.outfit_service import OutfitService, WardrobeLoadError

configure_logging()

app = FastAPI(title="Closet Buddy", version="0.1.0")
_closet_app: ClosetBuddyApp | None = None


def get_closet_app() -> ClosetBuddyApp:
    """Build the app lazily so importing this module has no side effects on disk."""

    global _closet_app
    if _closet_app is None:
        _closet_app = ClosetBuddyApp()
    return _closet_app


def get_outfit_service(closet_app: ClosetBuddyApp = Depends(get_closet_app)) -> OutfitService:
    return closet_app.outfit_service


def _serialise(suggestions: List[OutfitSuggestion]) -> List[dict]:
    return [suggestion.to_dict() for suggestion in suggestions]


@app.get("/healthz")
async def healthcheck(closet_app: ClosetBuddyApp = Depends(get_closet_app)) -> dict:
    """Lightweight readiness check."""

    return {
        "status": "ok",
        "service": "closet-buddy",
        "environment": closet_app.config.environment or "local",
        "ai_provider": closet_app.config.ai_provider,
        "ai_available": closet_app.ai_client.available,
    }


@app.post("/users/{user_id}/suggestions")
async def suggest_outfits(
    user_id: str, request: SuggestionRequest, service: OutfitService = Depends(get_outfit_service)
) -> dict:
    """Rule-based suggestions ranked by score."""

    try:
        suggestions = await service.generate_outfit_suggestions(user_id, request.to_filters())
    except InsufficientWardrobeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except WardrobeLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"suggestions": _serialise(suggestions)}


@app.post("/users/{user_id}/suggestions/ai")
async def suggest_outfits_with_ai(
    user_id: str, request: SuggestionRequest, service: OutfitService = Depends(get_outfit_service)
) -> dict:
    """AI-ranked suggestions; provider failures degrade to templated descriptions."""

    try:
        suggestions = await service.generate_ai_outfit_suggestions(user_id, request.to_filters(), request.count)
    except InsufficientWardrobeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except WardrobeLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return {"suggestions": _serialise(suggestions)}


@app.get("/users/{user_id}/style-profile")
async def style_profile(user_id: str, service: OutfitService = Depends(get_outfit_service)) -> dict:
    try:
        profile = service.generate_style_profile(user_id)
    except WardrobeLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return profile.to_dict()


@app.get("/users/{user_id}/style-insights")
async def style_insights(user_id: str, service: OutfitService = Depends(get_outfit_service)) -> dict:
    try:
        return service.get_style_insights(user_id)
    except WardrobeLoadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@app.post("/color-recommendations")
async def color_recommendations(
    request: ColorRecommendationRequest, service: OutfitService = Depends(get_outfit_service)
) -> dict:
    """Colours to pair with the given base colours; colour theory fills in when AI cannot."""

    recommendations = await service.get_color_recommendations(request.base_colors, request.occasion)
    return recommendations.to_dict()


def run(host: str | None = None, port: int | None = None) -> None:
    """Serve the API with uvicorn; ``HOST`` and ``PORT`` override the defaults."""

    uvicorn.run(
        "server.api:app",
        host=host or os.getenv("HOST", "0.0.0.0"),
        port=port or int(os.getenv("PORT", "8080")),
        reload=False,
    )


if __name__ == "__main__":
    run()
