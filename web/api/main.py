"""FastAPI auth API - register/login behind an API key gate."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

import config
from store.keys import seed_api_keys
from store.models.base import init_db
from web.api.auth_routes import router as auth_router
from web.auth import ApiKeyGateMiddleware
from web.auth_service import AuthError

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("taiwanfrp.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    await seed_api_keys(config.INITIAL_API_KEYS)
    yield


app = FastAPI(title="TaiwanFRP Auth API", lifespan=lifespan)

app.add_middleware(ApiKeyGateMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)


def _field_errors(exc: RequestValidationError) -> list[dict]:
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        fields.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid")})
    return fields


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = _field_errors(exc)
    logger.info("Rejected %s %s: %d invalid field(s)", request.method, request.url.path, len(fields))
    return JSONResponse({"error": "Invalid request body", "fields": fields}, status_code=400)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Welcome to the TaiwanFRP Auth API!"


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}
