from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .adapters.weather import WeatherAdapter, WeatherAdapterError
from .location.service import LocationResolutionError, list_locations, resolve_location
from .presentation import build_forecast_view
from .service import FETCH_ERROR_MESSAGE, build_weather_adapter, run_forecast_cycle
from .settings import AppSettings, load_settings

LOGGER = logging.getLogger(__name__)


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_adapter(request: Request) -> WeatherAdapter:
    return request.app.state.adapter


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = getattr(application.state, "settings", None) or load_settings()
    adapter = getattr(application.state, "adapter", None) or build_weather_adapter(settings)

    application.state.settings = settings
    application.state.adapter = adapter
    application.state.started_at_utc = datetime.now(timezone.utc)
    yield


app = FastAPI(title="SkyCast", version="0.1.0", lifespan=lifespan)


@app.get("/forecast", response_class=JSONResponse)
def forecast(
    request: Request,
    location: str | None = Query(default=None),
    days: int | None = Query(default=None, ge=1, le=10),
) -> JSONResponse:
    settings = _get_settings(request)
    try:
        resolved = resolve_location(location, settings)
    except LocationResolutionError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    requested_days = days or settings.yaml.weather.days
    try:
        result = run_forecast_cycle(resolved, requested_days, _get_adapter(request))
    except WeatherAdapterError as exc:
        LOGGER.exception("Forecast cycle failed for %s", resolved.name)
        raise HTTPException(status_code=502, detail=FETCH_ERROR_MESSAGE) from exc

    return JSONResponse(build_forecast_view(result))


@app.get("/locations", response_class=JSONResponse)
async def locations(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    return JSONResponse(
        {
            "default": settings.yaml.locations.default,
            "locations": [city.model_dump(mode="json") for city in list_locations(settings)],
        }
    )


@app.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    return JSONResponse(
        {
            "status": "ok",
            "service": "skycast",
            "environment": settings.env.skycast_env,
            "provider": settings.yaml.weather.provider,
            "started_at_utc": request.app.state.started_at_utc.isoformat(),
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )
