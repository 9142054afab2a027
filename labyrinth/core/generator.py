"""
Labyrinth Maze Generator

Builds mazes in three steps:
1. A fully walled grid
2. A spanning tree of passages carved by the recursive backtracker
3. Optional braiding, which links dead ends to remove them

Start and treasure are then placed on two distinct random rooms. All
randomness goes through one random.Random so a seed reproduces a maze.
"""

import logging
import random
from typing import Optional, Sequence, TypeVar

from .errors import MazeGenerationError
from .grid import Grid, Room
from .maze_engine import Maze

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a shuffled copy of items."""
    shuffled = list(items)
    rng.shuffle(shuffled)
    return shuffled


def pick(items: Sequence[T], rng: random.Random) -> Optional[T]:
    """Pick one item uniformly, or None if there are none."""
    if not items:
        return None
    return items[rng.randrange(len(items))]


class MazeGenerator:
    """
    Random maze generator.

    Example usage:
        generator = MazeGenerator(seed=42)
        maze = generator.create_maze(15, 10, braid=0.5)
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        """
        Args:
            seed: Seed for a private random.Random. Ignored when rng is given.
            rng: Random source to draw from.
        """
        self.rng = rng if rng is not None else random.Random(seed)

    def full_grid(self, width: int, height: int) -> Grid:
        """Grid with every wall present and no links."""
        return Grid(width, height, walled=True)

    def recursive_backtracker(self, width: int, height: int) -> Grid:
        """Carve a spanning tree of passages into a full grid."""
        grid = self.full_grid(width, height)

        start = grid.room(self.rng.randrange(width), self.rng.randrange(height))
        stack: list[Room] = [start]

        while stack:
            current = stack[-1]
            unvisited = [nb for nb in grid.neighbors(current) if not nb.links]

            if not unvisited:
                stack.pop()
                continue

            nb = pick(unvisited, self.rng)
            grid.link(current, nb)
            stack.append(nb)

        return grid

    def braid(self, grid: Grid, p: float) -> None:
        """
        Link dead ends to neighbors, removing them with probability p.

        A dead end prefers a neighbor that is itself a dead end, so two dead
        ends merge into one corridor. Otherwise any unlinked neighbor is used.

        Args:
            grid: Grid to braid in place.
            p: Probability each dead end is braided. p <= 0 does nothing.
        """
        if p <= 0:
            return

        for room in shuffle(grid.rooms, self.rng):
            if len(room.links) != 1 or self.rng.random() > p:
                continue

            candidates = [nb for nb in grid.neighbors(room) if not room.is_linked(nb)]
            if not candidates:
                continue

            best = [nb for nb in candidates if len(nb.links) == 1]
            grid.link(room, pick(best or candidates, self.rng))

    def place_endpoints(self, maze: Maze) -> None:
        """
        Put start and treasure on two distinct random rooms.

        Raises:
            MazeGenerationError: If the maze has fewer than two rooms.
        """
        w, h = maze.width, maze.height
        cells = w * h
        if cells < 2:
            raise MazeGenerationError(
                f"A {w}x{h} maze can't hold distinct start and treasure"
            )

        sx, sy = self.rng.randrange(w), self.rng.randrange(h)
        maze.set_start_point(sx, sy)

        tx, ty = self.rng.randrange(w), self.rng.randrange(h)
        attempts = 1
        while (tx, ty) == (sx, sy):
            if attempts >= cells:
                # Enough retries: choose among the rooms that are left
                rest = [r for r in maze.grid if (r.x, r.y) != (sx, sy)]
                room = pick(rest, self.rng)
                tx, ty = room.x, room.y
                break
            tx, ty = self.rng.randrange(w), self.rng.randrange(h)
            attempts += 1

        maze.set_treasure(tx, ty)

    def create_maze(self, width: int, height: int, braid: float = 0.0) -> Maze:
        """
        Generate a complete maze ready for a session.

        Args:
            width: Number of columns.
            height: Number of rows.
            braid: Dead-end removal probability in [0, 1].

        Returns:
            Maze with start, treasure and the agent at the start.

        Raises:
            MazeGenerationError: If the dimensions can't hold a maze.
        """
        if width < 1 or height < 1 or width * height < 2:
            logger.error(f"Refusing to generate a {width}x{height} maze")
            raise MazeGenerationError(
                f"Maze needs at least two rooms, got {width}x{height}"
            )

        grid = self.recursive_backtracker(width, height)
        self.braid(grid, braid)

        maze = Maze(grid)
        self.place_endpoints(maze)

        logger.debug(
            f"Generated {width}x{height} maze (braid={braid}): "
            f"{grid.link_count()} links, start={maze.start.to_dict()}, "
            f"treasure={maze.goal.to_dict()}"
        )
        return maze
