"""FastAPI app for the fest administration backend."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from fest.errors import Conflict, FestError, MissingCredential, NotFound, PartialDeletion, ValidationError
from fest.models.base import init_db

from web.api.auth_routes import router as auth_router
from web.api.dashboard_routes import router as dashboard_router
from web.api.routes import router as api_router

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("fest.web")

_STATUS_CODES = {
    NotFound: 404,
    MissingCredential: 400,
    ValidationError: 400,
    Conflict: 409,
    PartialDeletion: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Fest Administration API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)
app.include_router(dashboard_router)
app.include_router(auth_router)


@app.exception_handler(FestError)
async def fest_error_handler(request: Request, exc: FestError):
    status_code = _STATUS_CODES.get(type(exc), 400)
    body = {"detail": exc.message}
    if isinstance(exc, PartialDeletion) and exc.summary is not None:
        body["summary"] = exc.summary.as_dict()
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=body)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
