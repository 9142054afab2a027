"""
Labyrinth Grid Model

Rooms live in a flat, array-backed grid and refer to each other by integer
index. A wall on side D of a room is present exactly when the room has no
link to its neighbor in direction D.

Coordinates:
    x grows to the right, y grows downward. (0, 0) is the top-left room.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .errors import OutOfBoundsError


class Direction(Enum):
    """Movement directions. Values are the words used on the wire."""
    NORTH = "up"
    EAST = "right"
    SOUTH = "down"
    WEST = "left"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction."""
        deltas = {
            Direction.NORTH: (0, -1),
            Direction.EAST: (1, 0),
            Direction.SOUTH: (0, 1),
            Direction.WEST: (-1, 0),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        """Get the direction pointing back."""
        opposites = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }
        return opposites[self]

    @property
    def side(self) -> str:
        """Name of the Survey field facing this direction."""
        sides = {
            Direction.NORTH: "top",
            Direction.EAST: "right",
            Direction.SOUTH: "bottom",
            Direction.WEST: "left",
        }
        return sides[self]


# Clockwise from north; also the order neighbors are registered in.
DIRECTIONS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


@dataclass(frozen=True)
class Coordinate:
    """2D position in the maze."""
    x: int
    y: int

    def step(self, direction: Direction) -> "Coordinate":
        """Return the coordinate one step away in direction."""
        dx, dy = direction.delta
        return Coordinate(self.x + dx, self.y + dy)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Survey:
    """Wall state of a single room as seen from inside. True means wall."""
    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    def has_wall(self, direction: Direction) -> bool:
        return getattr(self, direction.side)

    def open_directions(self) -> list[Direction]:
        """Directions without a wall, clockwise from north."""
        return [d for d in DIRECTIONS if not self.has_wall(d)]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }


@dataclass
class Room:
    """A single grid cell.

    `neighbors` maps neighbor index to the direction it lies in and is
    filled once by the Grid. `links` holds indexes of rooms sharing an
    open passage with this one; use Grid.link to change it.
    """
    index: int
    x: int
    y: int
    walls: dict[Direction, bool] = field(
        default_factory=lambda: {d: False for d in DIRECTIONS}
    )
    neighbors: dict[int, Direction] = field(default_factory=dict)
    links: set[int] = field(default_factory=set)
    is_start: bool = False
    is_treasure: bool = False

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.x, self.y)

    def add_wall(self, direction: Direction) -> None:
        self.walls[direction] = True

    def remove_wall(self, direction: Direction) -> None:
        self.walls[direction] = False

    def has_wall(self, direction: Direction) -> bool:
        return self.walls[direction]

    def is_linked(self, other: "Room") -> bool:
        return other.index in self.links

    def survey(self) -> Survey:
        """Snapshot of the four walls."""
        return Survey(
            top=self.walls[Direction.NORTH],
            right=self.walls[Direction.EAST],
            bottom=self.walls[Direction.SOUTH],
            left=self.walls[Direction.WEST],
        )

    def __repr__(self) -> str:
        return f"<Room ({self.x}, {self.y}) links={len(self.links)}>"


class Grid:
    """
    Rectangular, 4-connected grid of Rooms.

    Example usage:
        grid = Grid(3, 2, walled=True)
        a, b = grid.room(0, 0), grid.room(1, 0)
        grid.link(a, b)
        assert not a.has_wall(Direction.EAST)
        assert not b.has_wall(Direction.WEST)
    """

    def __init__(self, width: int, height: int, walled: bool = False):
        """
        Build the rooms and their neighbor maps.

        Args:
            width: Number of columns, at least 1.
            height: Number of rows, at least 1.
            walled: Start every room with all four walls present.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")

        self.width = width
        self.height = height
        self.rooms: list[Room] = [
            Room(index=y * width + x, x=x, y=y)
            for y in range(height)
            for x in range(width)
        ]

        for room in self.rooms:
            if walled:
                for direction in DIRECTIONS:
                    room.add_wall(direction)
            for direction in DIRECTIONS:
                target = room.coordinate.step(direction)
                if self.contains(target.x, target.y):
                    room.neighbors[self._index(target.x, target.y)] = direction

    def _index(self, x: int, y: int) -> int:
        return y * self.width + x

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def room(self, x: int, y: int) -> Room:
        """Get the room at (x, y).

        Raises:
            OutOfBoundsError: If (x, y) lies outside the grid.
        """
        if not self.contains(x, y):
            raise OutOfBoundsError(x, y)
        return self.rooms[self._index(x, y)]

    def __iter__(self) -> Iterator[Room]:
        return iter(self.rooms)

    def __len__(self) -> int:
        return len(self.rooms)

    def neighbors(self, room: Room) -> list[Room]:
        """All rooms adjacent to room, linked or not."""
        return [self.rooms[i] for i in room.neighbors]

    def links(self, room: Room) -> list[Room]:
        """All rooms sharing an open passage with room."""
        return [self.rooms[i] for i in sorted(room.links)]

    def neighbor(self, room: Room, direction: Direction) -> Optional[Room]:
        """The adjacent room in direction, or None at the border."""
        for index, d in room.neighbors.items():
            if d is direction:
                return self.rooms[index]
        return None

    def link(self, a: Room, b: Room) -> None:
        """Open the passage between two adjacent rooms.

        Both rooms lose the wall facing the other and record the link.
        Linking an already linked pair does nothing.
        """
        if b.index not in a.neighbors:
            raise ValueError(f"{a!r} and {b!r} are not adjacent")
        if a.is_linked(b):
            return

        a.remove_wall(a.neighbors[b.index])
        b.remove_wall(b.neighbors[a.index])
        a.links.add(b.index)
        b.links.add(a.index)

    def is_linked(self, a: Room, b: Room) -> bool:
        return a.is_linked(b)

    def link_count(self) -> int:
        """Number of open passages in the grid."""
        return sum(len(room.links) for room in self.rooms) // 2
