"""Errors raised by the maze model and its sessions."""


class MazeError(Exception):
    """Base exception for maze errors reported back to the caller."""

    pass


class OutOfBoundsError(MazeError):
    """Exception raised when a coordinate lies outside the grid."""

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y
        super().__init__(f"Room ({x}, {y}) is outside of maze boundaries")


class BlockedByWallError(MazeError):
    """Exception raised when a move runs into a wall."""

    def __init__(self, direction: str):
        self.direction = direction
        super().__init__(f"Can't walk through walls (moving {direction})")


class PlacementError(MazeError):
    """Exception raised when start or treasure cannot be placed."""

    pass


class MazeGenerationError(MazeError):
    """Exception raised when a maze cannot be generated."""

    pass


class SessionCompletedError(MazeError):
    """Exception raised when moving in a session that already won."""

    pass


class SessionNotFoundError(MazeError):
    """Exception raised when a session id is unknown."""

    pass


class Victory(Exception):
    """Raised when the agent stands on the treasure.

    Not a MazeError: reaching the goal ends a session successfully.
    """

    def __init__(self, steps: int):
        self.steps = steps
        super().__init__(f"Victory achieved in {steps} steps")
