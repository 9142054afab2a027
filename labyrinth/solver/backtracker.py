"""
Blind Backtracking Solver

Icarus only sees the walls of the room he stands in. He explores depth
first with a stack of frames, one per room on his current path:

1. From the top frame, pick an open direction not tried yet and not
   leading into a room he already entered
2. If the move succeeds, push a frame for the new room with the way back
   already marked as tried
3. If nothing is left to try, pop the frame and step back the way he came

He keeps track of where he is relative to his waking room by counting his
own steps, so cycles made by braiding never trap him. Every room is
entered once and left once, so a maze with N rooms takes at most
2 * (N - 1) moves.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

from labyrinth.core import (
    BlockedByWallError,
    Coordinate,
    Direction,
    MazeError,
    OutOfBoundsError,
    Survey,
    Victory,
    pick,
)

logger = logging.getLogger(__name__)


class ExhaustedError(MazeError):
    """Raised when every reachable room was explored without finding the treasure."""

    pass


class MazeClientProtocol(Protocol):
    def awake(self) -> Survey: ...

    def move(self, direction: Direction) -> Survey: ...


@dataclass
class Frame:
    """One room on the current path."""
    survey: Survey
    position: Coordinate
    entered_by: Optional[Direction] = None
    tried: set[Direction] = field(default_factory=set)

    def untried(self) -> list[Direction]:
        return [d for d in self.survey.open_directions() if d not in self.tried]


class TraversalStack:
    """Frames from the waking room (bottom) to Icarus's room (top)."""

    def __init__(self, *frames: Frame):
        self._frames: list[Frame] = list(frames)

    def push(self, frame: Frame) -> None:
        self._frames.append(frame)

    def pop(self) -> Frame:
        return self._frames.pop()

    def last(self) -> Optional[Frame]:
        """Top frame, or None when empty."""
        return self._frames[-1] if self._frames else None

    def size(self) -> int:
        return len(self._frames)

    def path(self) -> list[Direction]:
        """Moves leading from the waking room to the top frame."""
        return [f.entered_by for f in self._frames if f.entered_by is not None]

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)


class BacktrackingSolver:
    """
    Depth-first maze solver for a blind agent.

    Example usage:
        solver = BacktrackingSolver(LocalMazeClient(10, 10))
        steps = solver.solve()
    """

    def __init__(self, client: MazeClientProtocol, rng: Optional[random.Random] = None):
        """
        Args:
            client: Maze client providing awake() and move().
            rng: Random source for choosing among open directions.
        """
        self.client = client
        self.rng = rng if rng is not None else random.Random()
        self.stack = TraversalStack()
        self.visited: set[Coordinate] = set()
        self.moves = 0

    def _candidates(self, frame: Frame) -> list[Direction]:
        return [
            d for d in frame.untried()
            if frame.position.step(d) not in self.visited
        ]

    def _victory(self, victory: Victory) -> int:
        """Count the winning move and report the score."""
        self.moves += 1
        logger.debug(f"Treasure found after {self.moves} moves")
        return victory.steps

    def solve(self) -> int:
        """
        Walk until the treasure is found.

        Returns:
            Number of moves taken, victory move included.

        Raises:
            ExhaustedError: If the treasure is unreachable.
        """
        origin = Coordinate(0, 0)
        self.stack = TraversalStack(Frame(survey=self.client.awake(), position=origin))
        self.visited = {origin}
        self.moves = 0

        while self.stack.size():
            frame = self.stack.last()
            candidates = self._candidates(frame)

            if not candidates:
                self.stack.pop()
                if self.stack.size():
                    try:
                        self.client.move(frame.entered_by.opposite)
                    except Victory as victory:
                        return self._victory(victory)
                    self.moves += 1
                continue

            direction = pick(candidates, self.rng)
            frame.tried.add(direction)

            try:
                survey = self.client.move(direction)
            except Victory as victory:
                return self._victory(victory)
            except (BlockedByWallError, OutOfBoundsError) as e:
                logger.warning(f"Survey said {direction.value} was open: {e}")
                continue

            self.moves += 1
            target = frame.position.step(direction)
            self.visited.add(target)
            self.stack.push(Frame(
                survey=survey,
                position=target,
                entered_by=direction,
                tried={direction.opposite},
            ))

        raise ExhaustedError(
            f"Explored {len(self.visited)} rooms in {self.moves} moves without finding the treasure"
        )
