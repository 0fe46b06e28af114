import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from league.core.config import settings
from league.core.exceptions import (
    CapacityReached,
    DocumentNotFound,
    DuplicateName,
    LeagueError,
    StoreError,
    TransitionNotAllowed,
    UploadFailed,
    WrongState,
)
from league.core.logging_config import configure_logging
from league.routes import auth_routes, match_routes, player_routes, tournament_routes

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CONFLICT_ERRORS = (DuplicateName, WrongState, TransitionNotAllowed, CapacityReached)

app = FastAPI(title="League Bracket Manager API")

app.include_router(auth_routes.router, prefix="/auth", tags=["Authentication"])
app.include_router(tournament_routes.router, prefix="/api/tournaments", tags=["Tournaments"])
app.include_router(player_routes.router, prefix="/api", tags=["Players"])
app.include_router(match_routes.router, prefix="/api", tags=["Matches"])


def status_code_for(error: LeagueError) -> int:
    if isinstance(error, CONFLICT_ERRORS):
        return 409
    if isinstance(error, UploadFailed):
        return 502
    return 400


@app.exception_handler(LeagueError)
async def league_error_handler(request: Request, exc: LeagueError):
    logger.info("%s %s refused: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code_for(exc), content={"detail": str(exc), "code": exc.code})


@app.exception_handler(DocumentNotFound)
async def not_found_handler(request: Request, exc: DocumentNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage is unavailable, try again."})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)})


@app.get("/")
async def root():
    return {"message": "League Bracket Manager API"}
