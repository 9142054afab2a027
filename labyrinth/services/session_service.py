"""Session service: one Maze per session, plus the run's score sheet."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from labyrinth.core import (
    Direction,
    Maze,
    MazeGenerator,
    SessionCompletedError,
    SessionNotFoundError,
    Survey,
    Victory,
    avg_scores,
)

logger = logging.getLogger(__name__)


@dataclass
class MazeSession:
    """A single solving session over its own Maze."""

    session_id: str
    maze: Maze
    completed: bool = False

    @property
    def steps(self) -> int:
        return self.maze.steps_taken

    def survey(self) -> Survey:
        """Survey the agent's room. Raises Victory on the treasure."""
        return self.maze.look_around()

    def discover(self, x: int, y: int) -> Survey:
        return self.maze.discover(x, y)

    def move(self, direction: Direction) -> Survey:
        """
        Move the agent and survey the room it lands in.

        Returns:
            Survey of the new room.

        Raises:
            SessionCompletedError: If the session already reached the treasure.
            BlockedByWallError: If a wall is in the way. Nothing changes.
            OutOfBoundsError: If the move leaves the grid. Nothing changes.
            Victory: If the move lands on the treasure.
        """
        if self.completed:
            raise SessionCompletedError(f"Session {self.session_id} already completed")

        self.maze.move(direction)
        try:
            return self.maze.look_around()
        except Victory:
            self.completed = True
            raise


@dataclass
class SessionRegistry:
    """
    Sessions keyed by id, plus the scores of every finished session.

    Only live sessions are kept: starting a session drops the one it
    replaces and any that reached the treasure.

    Example usage:
        registry = SessionRegistry(MazeGenerator(seed=1))
        session, survey = registry.start_session(10, 10)
        registry.move(Direction.EAST, session.session_id)
        stats = registry.end_session()
    """

    generator: MazeGenerator = field(default_factory=MazeGenerator)
    sessions: dict[str, MazeSession] = field(default_factory=dict)
    scores: list[int] = field(default_factory=list)
    current_id: Optional[str] = None

    def start_session(
        self,
        width: int,
        height: int,
        braid: float = 0.0,
        session_id: Optional[str] = None,
    ) -> tuple[MazeSession, Survey]:
        """
        Generate a new maze and wake the agent at its start.

        The new maze replaces the current session unless session_id names
        a session of its own. Completed sessions are dropped as well; their
        scores are already recorded.

        Returns:
            The new session and the survey of the start room.
        """
        replaced = self.current_id if session_id is None else None
        if session_id is None:
            session_id = f"sess_{uuid.uuid4().hex[:12]}"

        maze = self.generator.create_maze(width, height, braid)

        stale = [key for key, s in self.sessions.items() if s.completed or key == replaced]
        for key in stale:
            del self.sessions[key]
        if stale:
            logger.debug(f"Dropped {len(stale)} finished or replaced sessions")

        session = MazeSession(session_id=session_id, maze=maze)
        self.sessions[session_id] = session
        self.current_id = session_id

        logger.info(f"Session {session_id} started on a {width}x{height} maze")
        return session, session.survey()

    def get(self, session_id: Optional[str] = None) -> MazeSession:
        """Get a session by id, or the most recent one.

        Raises:
            SessionNotFoundError: If there is no such session.
        """
        key = session_id if session_id is not None else self.current_id
        session = self.sessions.get(key) if key is not None else None
        if session is None:
            raise SessionNotFoundError(f"Session not found: {key}")
        return session

    def discover(self, x: int, y: int, session_id: Optional[str] = None) -> Survey:
        return self.get(session_id).discover(x, y)

    def move(self, direction: Direction, session_id: Optional[str] = None) -> Survey:
        """Move in a session, recording its score on Victory."""
        session = self.get(session_id)
        try:
            return session.move(direction)
        except Victory as victory:
            self.scores.append(victory.steps)
            logger.info(f"Victory achieved in {victory.steps} steps ({session.session_id})")
            raise

    def average_steps(self) -> int:
        return avg_scores(self.scores)

    def end_session(self) -> tuple[int, int]:
        """
        Close the run.

        Returns:
            Tuple of (sessions solved, average steps to victory).
        """
        count, average = len(self.scores), self.average_steps()
        logger.info(f"Labyrinth solved {count} times with an avg of {average} steps")
        self.sessions.clear()
        self.current_id = None
        return count, average
