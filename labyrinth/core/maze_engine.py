"""
Labyrinth Maze Engine

The Maze aggregate owns a Grid plus the start, treasure and agent
coordinates. Surveys and the four move operations are the only way the
rest of the system observes or changes it:

- discover(x, y) surveys any room
- look_around() surveys the agent's room, or raises Victory on the treasure
- move_up/down/left/right() step the agent and count the step

A Maze is single-agent state; callers must not share one between threads.
"""

import logging
from typing import Optional

from .errors import BlockedByWallError, PlacementError, Victory
from .grid import Coordinate, Direction, Grid, Room, Survey

logger = logging.getLogger(__name__)


def avg_scores(scores: list[int]) -> int:
    """Average of scores using integer division. 0 for no scores."""
    if not scores:
        return 0
    return sum(scores) // len(scores)


class Maze:
    """
    Maze with a single agent walking through it.

    Example usage:
        maze = Maze(grid)
        maze.set_start_point(0, 0)
        maze.set_treasure(2, 1)

        survey = maze.look_around()
        if not survey.right:
            maze.move_right()
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.start: Optional[Coordinate] = None
        self.goal: Optional[Coordinate] = None
        self.position: Coordinate = Coordinate(0, 0)
        self.steps_taken: int = 0

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def get_room(self, x: int, y: int) -> Room:
        """Get a room, raising OutOfBoundsError outside the grid."""
        return self.grid.room(x, y)

    def icarus(self) -> Coordinate:
        """Current position of the agent."""
        return self.position

    def set_start_point(self, x: int, y: int) -> None:
        """Mark the room where the agent wakes up and place the agent there.

        Raises:
            OutOfBoundsError: If (x, y) is outside the grid.
            PlacementError: If the room holds the treasure or a start exists.
        """
        room = self.get_room(x, y)
        if room.is_treasure:
            raise PlacementError("Can't start in the treasure")
        if self.start is not None:
            raise PlacementError(f"Start point already set at ({self.start.x}, {self.start.y})")

        room.is_start = True
        self.start = Coordinate(x, y)
        self.position = self.start

    def set_treasure(self, x: int, y: int) -> None:
        """Mark the goal room.

        Raises:
            OutOfBoundsError: If (x, y) is outside the grid.
            PlacementError: If the room is the start or a treasure exists.
        """
        room = self.get_room(x, y)
        if room.is_start:
            raise PlacementError("Can't have the treasure at the start")
        if self.goal is not None:
            raise PlacementError(f"Treasure already set at ({self.goal.x}, {self.goal.y})")

        room.is_treasure = True
        self.goal = Coordinate(x, y)

    def discover(self, x: int, y: int) -> Survey:
        """Survey the walls of the room at (x, y)."""
        return self.get_room(x, y).survey()

    def look_around(self) -> Survey:
        """Survey the agent's room.

        Raises:
            Victory: If the agent stands on the treasure.
        """
        if self.goal is not None and self.position == self.goal:
            raise Victory(self.steps_taken)
        return self.discover(self.position.x, self.position.y)

    def move(self, direction: Direction) -> None:
        """Step the agent one room in direction.

        Raises:
            Victory: If the agent already stands on the treasure.
            BlockedByWallError: If a wall is in the way.
            OutOfBoundsError: If the step leaves the grid.
        """
        survey = self.look_around()
        if survey.has_wall(direction):
            raise BlockedByWallError(direction.value)

        target = self.position.step(direction)
        self.get_room(target.x, target.y)

        self.position = target
        self.steps_taken += 1

    def move_left(self) -> None:
        self.move(Direction.WEST)

    def move_right(self) -> None:
        self.move(Direction.EAST)

    def move_up(self) -> None:
        self.move(Direction.NORTH)

    def move_down(self) -> None:
        self.move(Direction.SOUTH)

    def all_rooms(self) -> list[Room]:
        return list(self.grid)

    def dead_ends(self) -> list[Room]:
        """Rooms with exactly one open passage."""
        return [room for room in self.grid if len(room.links) == 1]

    def visualize(self) -> str:
        """
        Render the maze as box-drawing text.

        Glyphs (walled below / open below):
            treasure ⏅ / ⏃, start ⏂ / ⏀, agent ⏈ / ⏆

        Returns:
            Multi-line string, one line per row plus a header.
        """
        lines = ["_" + "___" * self.width]
        for y in range(self.height):
            line = ""
            for x in range(self.width):
                if x == 0:
                    line += "|"
                room = self.get_room(x, y)
                here = self.position.x == x and self.position.y == y

                if room.has_wall(Direction.SOUTH):
                    if room.is_treasure:
                        line += "⏅_"
                    elif room.is_start:
                        line += "⏂_"
                    elif here:
                        line += "⏈ "
                    else:
                        line += "__"
                else:
                    if room.is_treasure:
                        line += "⏃ "
                    elif room.is_start:
                        line += "⏀ "
                    elif here:
                        line += "⏆ "
                    else:
                        line += "  "

                line += "|" if room.has_wall(Direction.EAST) else "_"
            lines.append(line)

        return "\n".join(lines)
