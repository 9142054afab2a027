"""Pytest configuration and fixtures."""

from collections import deque
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from labyrinth.config import Settings
from labyrinth.core import Coordinate, Direction, Grid, Maze, MazeGenerator
from labyrinth.main import create_app
from labyrinth.services.session_service import SessionRegistry


def find_path(maze: Maze, start: Coordinate, goal: Coordinate) -> Optional[list[Direction]]:
    """Shortest list of moves from start to goal following links, or None."""
    queue = deque([(start, [])])
    seen = {start}
    while queue:
        position, path = queue.popleft()
        if position == goal:
            return path
        room = maze.get_room(position.x, position.y)
        for index, direction in room.neighbors.items():
            if index not in room.links:
                continue
            target = position.step(direction)
            if target not in seen:
                seen.add(target)
                queue.append((target, path + [direction]))
    return None


def open_grid(width: int, height: int) -> Grid:
    """Walled grid with every adjacent pair linked."""
    grid = Grid(width, height, walled=True)
    for room in grid:
        for nb in grid.neighbors(room):
            grid.link(room, nb)
    return grid


@pytest.fixture
def generator() -> MazeGenerator:
    """Seeded generator so failures reproduce."""
    return MazeGenerator(seed=1234)


@pytest.fixture
def registry(generator) -> SessionRegistry:
    return SessionRegistry(generator)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(width=6, height=5, braid=0.0, seed=99)


@pytest_asyncio.fixture(scope="function")
async def client(registry, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client against a fresh app."""
    app = create_app(registry=registry, settings=test_settings)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
