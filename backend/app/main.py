"""
Carbon Wallet API
=================
FastAPI application entry point. Mount routers here.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import activities, exercise, food, profile, tracking, travel

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Carbon Wallet API",
    description="Personal carbon footprint tracking — exercise, food and travel",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(exercise.router)
app.include_router(food.router)
app.include_router(travel.router)
app.include_router(tracking.router)
app.include_router(activities.router)
app.include_router(profile.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "carbon-wallet-api"}
