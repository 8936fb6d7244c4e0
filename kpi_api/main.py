from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from kpi_api.schemas import ErrorResponse, HealthResponse, KpiResponse
from kpi_board.config import DEFAULT_API_PATH, ConfigError, InvalidServiceKeyError, KpiSettings
from kpi_board.extract import extract_kpi_values
from kpi_board.sources import GridSource, SheetsGridSource


app = FastAPI(title="KPI Board API", version="0.1.0")
logger = logging.getLogger(__name__)


def _cors_headers(request: Request) -> Dict[str, str]:
    origin = request.headers.get("origin") or "*"
    return {
        "Access-Control-Allow-Origin": "*" if origin == "null" else origin,
        "Access-Control-Allow-Methods": "GET,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Cache-Control": "no-store",
    }


def _json(request: Request, data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data), headers=_cors_headers(request))


def _error(request: Request, message: str) -> JSONResponse:
    return _json(request, ErrorResponse(error=message).model_dump(), status_code=500)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    # Routing errors (404, 405) still need the CORS headers.
    headers = {**(exc.headers or {}), **_cors_headers(request)}
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=headers)


def build_grid_source(settings: KpiSettings) -> GridSource:
    return SheetsGridSource.from_settings(settings)


@app.options(DEFAULT_API_PATH)
def kpi_preflight(request: Request):
    return Response(status_code=204, headers=_cors_headers(request))


@app.get(DEFAULT_API_PATH)
def kpi(request: Request):
    try:
        settings = KpiSettings.from_env()
        settings.require_sheet_config()
        rows = build_grid_source(settings).fetch_grid()
        payload = KpiResponse(ok=True, data=extract_kpi_values(rows), rows=rows)
        return _json(request, payload.model_dump())
    except ConfigError:
        logger.error("KPI endpoint is missing SERVICE_ACCOUNT_KEY or SPREADSHEET_ID")
        return _error(request, ConfigError.code)
    except InvalidServiceKeyError:
        logger.error("SERVICE_ACCOUNT_KEY is not a valid JSON payload")
        return _error(request, InvalidServiceKeyError.code)
    except Exception as exc:
        logger.exception("kpi failed")
        return _error(request, str(exc) or type(exc).__name__)


@app.get("/health")
def health(request: Request):
    return _json(request, HealthResponse().model_dump())
