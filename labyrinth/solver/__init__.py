# Solver module
from .backtracker import BacktrackingSolver, ExhaustedError, Frame, TraversalStack
from .maze_client import LocalMazeClient, MazeClient, MazeClientError
from .runner import run_icarus

__all__ = [
    "BacktrackingSolver",
    "ExhaustedError",
    "Frame",
    "TraversalStack",
    "LocalMazeClient",
    "MazeClient",
    "MazeClientError",
    "run_icarus",
]
