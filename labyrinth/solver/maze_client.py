"""
Labyrinth Maze Clients

Icarus talks to a maze through a client with three calls:

    awake()          start a new maze, return the survey of the start room
    move(direction)  step once, return the survey of the new room
    done()           end the run, return (mazes solved, average steps)

move() raises BlockedByWallError or OutOfBoundsError when the step fails
and Victory when it reaches the treasure. MazeClient speaks HTTP to a
Daedalus server; LocalMazeClient runs the same contract in-process.
"""

import logging
import re
from typing import Optional

import requests

from labyrinth.core import (
    BlockedByWallError,
    Direction,
    MazeError,
    MazeGenerator,
    OutOfBoundsError,
    Survey,
    Victory,
)
from labyrinth.schemas.maze import Reply, SessionStats
from labyrinth.services.session_service import SessionRegistry

logger = logging.getLogger(__name__)

_OUT_OF_BOUNDS = re.compile(r"Room \((-?\d+), (-?\d+)\) is outside")


class MazeClientError(MazeError):
    """Base exception for maze client errors."""
    pass


class MazeClient:
    """
    Client for a Daedalus server.

    Example:
        client = MazeClient("http://127.0.0.1:8001")
        survey = client.awake()
        if not survey.right:
            survey = client.move(Direction.EAST)
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        """
        Initialize the maze client.

        Args:
            base_url: Server URL, e.g. http://127.0.0.1:8001
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session_id: Optional[str] = None
        self.steps = 0
        self._http = requests.Session()

    def _request(self, endpoint: str, **kwargs) -> requests.Response:
        """Make an API request."""
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._http.get(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise MazeClientError(f"Request failed: {e}") from e

        # 400 and 409 carry a Reply describing the failure
        if response.status_code not in (400, 409):
            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as e:
                raise MazeClientError(f"API error: {e}") from e
        return response

    def _params(self) -> dict:
        return {"session_id": self.session_id} if self.session_id else {}

    def awake(self) -> Survey:
        """Ask Daedalus for a new maze. Returns the start room's survey."""
        response = self._request("/awake")
        reply = Reply.model_validate(response.json())
        if reply.error:
            raise MazeClientError(reply.message)

        self.session_id = response.headers.get("X-Session-ID")
        self.steps = 0
        return reply.survey.to_survey()

    def move(self, direction: Direction) -> Survey:
        """
        Move one room. COUNTS AS 1 STEP when it succeeds.

        Raises:
            Victory: The move reached the treasure.
            BlockedByWallError: A wall is in the way.
            OutOfBoundsError: The move would leave the maze.
        """
        response = self._request(f"/move/{direction.value}", params=self._params())
        reply = Reply.model_validate(response.json())

        if reply.victory:
            self.steps += 1
            logger.info(reply.message)
            raise Victory(self.steps)
        if reply.error:
            raise self._error_from(reply.message, direction)

        self.steps += 1
        return reply.survey.to_survey()

    def done(self) -> tuple[int, int]:
        """Tell Daedalus the run is over. Returns (solved, average steps)."""
        response = self._request("/done")
        stats = SessionStats.model_validate(response.json())
        return stats.session_count, stats.average_steps

    @staticmethod
    def _error_from(message: str, direction: Direction) -> MazeError:
        """Turn an error Reply back into the matching exception."""
        if message.startswith("Can't walk through walls"):
            return BlockedByWallError(direction.value)
        match = _OUT_OF_BOUNDS.search(message)
        if match:
            return OutOfBoundsError(int(match.group(1)), int(match.group(2)))
        return MazeClientError(message)


class LocalMazeClient:
    """
    In-process client for running Icarus without a server.

    Example:
        client = LocalMazeClient(width=10, height=10, generator=MazeGenerator(seed=7))
        survey = client.awake()
    """

    def __init__(
        self,
        width: int = 15,
        height: int = 10,
        braid: float = 0.0,
        generator: Optional[MazeGenerator] = None,
        registry: Optional[SessionRegistry] = None,
    ):
        if registry is None:
            registry = SessionRegistry(generator or MazeGenerator())
        self.registry = registry
        self.width = width
        self.height = height
        self.braid = braid
        self.session_id: Optional[str] = None

    @property
    def steps(self) -> int:
        return self.registry.get(self.session_id).steps

    def awake(self) -> Survey:
        session, survey = self.registry.start_session(self.width, self.height, self.braid)
        self.session_id = session.session_id
        return survey

    def move(self, direction: Direction) -> Survey:
        return self.registry.move(direction, self.session_id)

    def done(self) -> tuple[int, int]:
        return self.registry.end_session()
