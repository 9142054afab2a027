"""Maze routes: wake the agent, move it, survey rooms and end the run."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from labyrinth.api.deps import AppSettings, Registry
from labyrinth.config import Settings
from labyrinth.core import (
    Direction,
    MazeError,
    MazeGenerationError,
    SessionNotFoundError,
    Victory,
)
from labyrinth.schemas.maze import Reply, SessionStats, SurveyModel

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Maze"])


def error_reply(message: str, status_code: int = status.HTTP_409_CONFLICT) -> JSONResponse:
    """Reply with error set, the way a failed move is reported."""
    reply = Reply(error=True, message=message)
    return JSONResponse(status_code=status_code, content=reply.model_dump())


async def awake(
    request: Request,
    response: Response,
    registry: Registry,
    app_settings: AppSettings,
    width: Optional[int] = Query(None, gt=0, description="Override maze width"),
    height: Optional[int] = Query(None, gt=0, description="Override maze height"),
    braid: Optional[float] = Query(None, ge=0.0, le=1.0, description="Override braid probability"),
):
    """Generate a new maze and wake Icarus at its start.

    Returns the survey of the start room. The new session id is sent in
    the X-Session-ID header.
    """
    try:
        session, survey = registry.start_session(
            width or app_settings.width,
            height or app_settings.height,
            app_settings.braid if braid is None else braid,
        )
    except MazeGenerationError as e:
        logger.error(f"Failed to generate maze: {e}")
        return error_reply(str(e), status.HTTP_400_BAD_REQUEST)

    if app_settings.debug:
        logger.debug(f"Maze for {session.session_id}:\n{session.maze.visualize()}")

    response.headers["X-Session-ID"] = session.session_id
    return Reply(survey=SurveyModel.from_survey(survey))


@router.get("/move/{direction}", response_model=Reply)
async def move(
    direction: str,
    registry: Registry,
    app_settings: AppSettings,
    session_id: Optional[str] = Query(None, description="Session to act on"),
):
    """Move Icarus one room up, down, left or right.

    Walls and the maze border reply 409 with error set. Reaching the
    treasure replies with victory set.
    """
    try:
        step = Direction(direction)
    except ValueError:
        return error_reply(
            f"Invalid direction '{direction}'. Must be one of: up, down, left, right",
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        session = registry.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    try:
        survey = registry.move(step, session.session_id)
    except Victory as victory:
        reply = Reply(victory=True, message=f"Victory achieved in {victory.steps} steps")
    except MazeError as e:
        return error_reply(str(e))
    else:
        reply = Reply(survey=SurveyModel.from_survey(survey))

    if app_settings.debug:
        logger.debug(f"Maze for {session.session_id}:\n{session.maze.visualize()}")

    return reply


@router.get("/discover/{x}/{y}", response_model=Reply)
async def discover(
    x: int,
    y: int,
    registry: Registry,
    session_id: Optional[str] = Query(None, description="Session to act on"),
):
    """Survey the walls of any room in the maze."""
    try:
        survey = registry.discover(x, y, session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except MazeError as e:
        return error_reply(str(e))

    return Reply(survey=SurveyModel.from_survey(survey))


@router.get("/done", response_model=SessionStats)
async def done(registry: Registry) -> SessionStats:
    """End the run and report how many mazes were solved and the average steps."""
    count, average = registry.end_session()
    return SessionStats(session_count=count, average_steps=average)


def create_router(settings: Settings) -> tuple[APIRouter, Limiter]:
    """
    Build the maze routes for one app.

    /awake is rate limited to settings.rate_limit_sessions per minute per
    client. Each call gets its own Limiter, so apps never share counters.

    Returns:
        Tuple of (router, limiter). The limiter belongs on app.state.limiter.
    """
    limiter = Limiter(key_func=get_remote_address)

    maze_router = APIRouter()
    maze_router.add_api_route(
        "/awake",
        limiter.limit(f"{settings.rate_limit_sessions}/minute")(awake),
        methods=["GET"],
        response_model=Reply,
        tags=["Maze"],
    )
    maze_router.include_router(router)
    return maze_router, limiter
