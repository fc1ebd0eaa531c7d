from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import time
import uuid
import logging

from packages.config import APP_VERSION, CORS_ORIGINS
from packages.error_reporting import init_error_reporting
from packages.logging_utils import setup_logging
from packages.request_context import request_id_var
from packages.metrics import inc, observe
from .routes import day as day_routes
from .routes import health as health_routes
from .routes import metrics as metrics_routes
from .routes import month as month_routes
from .routes import year as year_routes


setup_logging()
init_error_reporting("api", enable_fastapi=True)
logger = logging.getLogger("lifelog.api")

app = FastAPI(title="Lifelog Dashboard API", version=APP_VERSION)


def format_error(code: str, message: str, request_id: str | None = None, details: dict | None = None):
    payload = {"error": {"code": code, "message": message, "request_id": request_id}}
    if details:
        payload["error"]["details"] = details
    return payload


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        return response
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.exception("request_error %s %s %.1fms", request.method, request.url.path, duration_ms)
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        status_code = getattr(response, "status_code", "ERR")
        inc("http_requests_total")
        inc(f"http_requests_total{{path=\"{request.url.path}\",status=\"{status_code}\"}}")
        observe("http_request_duration_seconds", duration_ms / 1000.0)
        observe(f"http_request_duration_seconds{{path=\"{request.url.path}\"}}", duration_ms / 1000.0)
        logger.info("%s %s -> %s %.1fms", request.method, request.url.path, status_code, duration_ms)
        request_id_var.reset(token)
        if response is not None:
            response.headers["x-request-id"] = request_id

# Consistent error model
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    req_id = request_id_var.get() or "-"
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    code = f"http_{exc.status_code}"
    details = exc.detail if isinstance(exc.detail, dict) else None
    return JSONResponse(status_code=exc.status_code, content=format_error(code, message, req_id, details))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    req_id = request_id_var.get() or "-"
    details = {"errors": [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()]}
    return JSONResponse(status_code=422, content=format_error("http_422", "Invalid request", req_id, details))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    req_id = request_id_var.get() or "-"
    logger.exception("unhandled_exception %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=format_error("internal_error", "Internal server error", req_id))

# Public routes (unprefixed) + /api + /api/v1
app.include_router(health_routes.router)
app.include_router(metrics_routes.router)

for prefix in ("/api", "/api/v1"):
    app.include_router(health_routes.router, prefix=prefix)
    app.include_router(metrics_routes.router, prefix=prefix)
    app.include_router(day_routes.router, prefix=prefix)
    app.include_router(month_routes.router, prefix=prefix)
    app.include_router(year_routes.router, prefix=prefix)
