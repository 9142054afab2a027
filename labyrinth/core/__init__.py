# Core module
from .errors import (
    BlockedByWallError,
    MazeError,
    MazeGenerationError,
    OutOfBoundsError,
    PlacementError,
    SessionCompletedError,
    SessionNotFoundError,
    Victory,
)
from .grid import DIRECTIONS, Coordinate, Direction, Grid, Room, Survey
from .maze_engine import Maze, avg_scores
from .generator import MazeGenerator, pick, shuffle

__all__ = [
    "BlockedByWallError",
    "MazeError",
    "MazeGenerationError",
    "OutOfBoundsError",
    "PlacementError",
    "SessionCompletedError",
    "SessionNotFoundError",
    "Victory",
    "DIRECTIONS",
    "Coordinate",
    "Direction",
    "Grid",
    "Room",
    "Survey",
    "Maze",
    "avg_scores",
    "MazeGenerator",
    "pick",
    "shuffle",
]
