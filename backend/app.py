"""WP Theme Detector - FastAPI backend that identifies a site's WordPress theme and plugins."""

import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator

import config
from detector import ThemeDetector
from models import DetectionResult

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

detector = ThemeDetector()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await detector.wait_for_background()


app = FastAPI(
    title="WP Theme Detector API",
    description="Detects the WordPress theme and plugins a website is running.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DetectRequest(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("URL is required")
        candidate = v if v.lower().startswith(("http://", "https://")) else f"https://{v}"
        if not urlparse(candidate).hostname:
            raise ValueError("Invalid URL")
        return v


class CacheStats(BaseModel):
    size: int
    entries: list[str]


@app.post("/detect", response_model=DetectionResult)
async def detect(request: DetectRequest):
    return await detector.detect_theme(request.url)


@app.get("/cache/stats", response_model=CacheStats)
async def cache_stats():
    return detector.cache_stats()


@app.delete("/cache")
async def clear_cache():
    detector.clear_cache()
    return {"status": "cleared"}


@app.get("/")
async def root():
    return {"status": "ok", "service": "WP Theme Detector API", "version": "1.0.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
