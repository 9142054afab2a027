"""Icarus runner: solve several labyrinths in a row and report the scores."""

import logging
import random
from typing import Optional

from labyrinth.core import avg_scores

from .backtracker import BacktrackingSolver, ExhaustedError

logger = logging.getLogger(__name__)


def run_icarus(client, times: int, rng: Optional[random.Random] = None) -> tuple[int, int]:
    """
    Solve `times` mazes, then tell the maze owner the run is done.

    Args:
        client: MazeClient or LocalMazeClient.
        times: Number of mazes to solve.
        rng: Random source shared by every solver run.

    Returns:
        Tuple of (mazes solved, average steps) as reported by done().

    Raises:
        ExhaustedError: If a maze could not be solved. The run stops there.
    """
    logger.info(f"Solving {times} times")
    scores: list[int] = []

    for run in range(1, times + 1):
        solver = BacktrackingSolver(client, rng=rng)
        try:
            steps = solver.solve()
        except ExhaustedError as e:
            logger.error(f"Run {run}: {e}")
            raise
        scores.append(steps)
        logger.info(f"Run {run}: treasure found in {steps} steps")

    count, average = client.done()
    if average != avg_scores(scores):
        logger.warning(f"Server average {average} differs from local average {avg_scores(scores)}")

    logger.info(f"Labyrinth solved {count} times with an avg of {average} steps")
    return count, average
