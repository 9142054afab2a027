"""Tests for the blind backtracking solver."""

import random

import pytest

from labyrinth.core import Coordinate, Direction, Grid, Maze, MazeGenerator, Survey, Victory
from labyrinth.services.session_service import MazeSession
from labyrinth.solver import (
    BacktrackingSolver,
    ExhaustedError,
    Frame,
    LocalMazeClient,
    TraversalStack,
    run_icarus,
)

from conftest import open_grid


class SessionClient:
    """Client over a hand-built maze, recording every move."""

    def __init__(self, maze: Maze):
        self.session = MazeSession(session_id="fixed", maze=maze)
        self.moves: list[Direction] = []

    def awake(self) -> Survey:
        return self.session.survey()

    def move(self, direction: Direction) -> Survey:
        self.moves.append(direction)
        return self.session.move(direction)


def build_maze(grid: Grid, start: tuple[int, int], goal: tuple[int, int]) -> Maze:
    maze = Maze(grid)
    maze.set_start_point(*start)
    maze.set_treasure(*goal)
    return maze


class TestTraversalStack:
    """Tests for the frame stack."""

    def test_pop(self):
        frames = [
            Frame(survey=Survey(), position=Coordinate(0, 0), tried={Direction.NORTH}),
            Frame(survey=Survey(), position=Coordinate(0, 1), tried={Direction.SOUTH}),
        ]
        stack = TraversalStack(*frames)

        assert stack.pop() is frames[1]
        assert stack.size() == 1
        assert stack.pop() is frames[0]
        assert stack.size() == 0

    def test_last(self):
        assert TraversalStack().last() is None

        frame = Frame(survey=Survey(), position=Coordinate(0, 0))
        stack = TraversalStack(frame)
        assert stack.last() is frame

    def test_path(self):
        stack = TraversalStack(Frame(survey=Survey(), position=Coordinate(0, 0)))
        stack.push(Frame(survey=Survey(), position=Coordinate(1, 0), entered_by=Direction.EAST))
        stack.push(Frame(survey=Survey(), position=Coordinate(1, 1), entered_by=Direction.SOUTH))

        assert stack.path() == [Direction.EAST, Direction.SOUTH]
        assert len(stack) == 3

    def test_untried(self):
        frame = Frame(
            survey=Survey(top=True, right=False, bottom=False, left=True),
            position=Coordinate(0, 0),
            tried={Direction.SOUTH},
        )
        assert frame.untried() == [Direction.EAST]


class TestBacktrackingSolver:
    """Tests for solving mazes blind."""

    @pytest.mark.parametrize("seed", range(10))
    def test_open_two_by_two(self, seed):
        client = SessionClient(build_maze(open_grid(2, 2), (0, 0), (1, 1)))
        steps = BacktrackingSolver(client, rng=random.Random(seed)).solve()

        assert steps <= 4
        assert steps == client.session.steps
        assert client.session.completed

    def test_corridor(self):
        grid = Grid(4, 1, walled=True)
        for x in range(3):
            grid.link(grid.room(x, 0), grid.room(x + 1, 0))
        client = SessionClient(build_maze(grid, (0, 0), (3, 0)))

        assert BacktrackingSolver(client).solve() == 3
        assert client.moves == [Direction.EAST] * 3

    def test_backtracks_out_of_dead_end(self):
        # Start in the middle of a T; the treasure is down the stem
        #   (0,0) - (1,0) - (2,0)
        #             |
        #           (1,1)
        grid = Grid(3, 2, walled=True)
        grid.link(grid.room(0, 0), grid.room(1, 0))
        grid.link(grid.room(1, 0), grid.room(2, 0))
        grid.link(grid.room(1, 0), grid.room(1, 1))
        client = SessionClient(build_maze(grid, (0, 0), (1, 1)))

        steps = BacktrackingSolver(client, rng=random.Random(0)).solve()

        assert steps in (2, 4)
        assert steps == len(client.moves)
        if steps == 4:
            assert client.moves[:3] == [Direction.EAST, Direction.EAST, Direction.WEST]

    @pytest.mark.parametrize("braid", [0.0, 0.5, 1.0])
    @pytest.mark.parametrize("seed", range(8))
    def test_generated_mazes(self, braid, seed):
        width, height = 12, 9
        maze = MazeGenerator(seed=seed).create_maze(width, height, braid)
        client = SessionClient(maze)

        steps = BacktrackingSolver(client, rng=random.Random(seed)).solve()

        assert client.session.completed
        assert maze.position == maze.goal
        assert steps == maze.steps_taken
        assert steps <= 2 * (width * height - 1)

    def test_exhausted_when_treasure_unreachable(self):
        grid = Grid(3, 1, walled=True)
        grid.link(grid.room(0, 0), grid.room(1, 0))
        client = SessionClient(build_maze(grid, (0, 0), (2, 0)))

        with pytest.raises(ExhaustedError, match="without finding the treasure"):
            BacktrackingSolver(client).solve()
        # Went to (1, 0) and came back
        assert client.moves == [Direction.EAST, Direction.WEST]
        assert client.session.maze.position == Coordinate(0, 0)

    def test_exhausted_when_start_is_sealed(self):
        client = SessionClient(build_maze(Grid(2, 1, walled=True), (0, 0), (1, 0)))
        with pytest.raises(ExhaustedError):
            BacktrackingSolver(client).solve()
        assert client.moves == []


class PathCheckingClient(SessionClient):
    """Checks the solver stack against the moves actually made, before each move."""

    solver: BacktrackingSolver

    def net_path(self) -> list[Direction]:
        path: list[Direction] = []
        for move in self.moves:
            if path and move is path[-1].opposite:
                path.pop()
            else:
                path.append(move)
        return path

    def move(self, direction: Direction) -> Survey:
        net = self.net_path()
        retreat = bool(net) and direction is net[-1].opposite
        maze = self.session.maze

        # A retreat pops the frame before stepping back
        assert self.solver.stack.path() == (net[:-1] if retreat else net)

        top = self.solver.stack.last().position
        expected = maze.position.step(direction) if retreat else maze.position
        assert Coordinate(maze.start.x + top.x, maze.start.y + top.y) == expected

        return super().move(direction)


class ScriptedClient:
    """Replays fixed surveys; the treasure is reached by a step back."""

    def __init__(self):
        self.moves: list[Direction] = []

    def awake(self) -> Survey:
        return Survey(top=True, right=False, bottom=True, left=True)

    def move(self, direction: Direction) -> Survey:
        self.moves.append(direction)
        if direction is Direction.WEST:
            raise Victory(len(self.moves))
        return Survey(top=True, right=True, bottom=True, left=False)


class TestSolverBookkeeping:
    """Tests for the stack and move count during a solve."""

    @pytest.mark.parametrize("braid", [0.0, 0.5, 1.0])
    @pytest.mark.parametrize("seed", range(6))
    def test_stack_matches_path_from_start(self, braid, seed):
        maze = MazeGenerator(seed=seed).create_maze(10, 8, braid)
        client = PathCheckingClient(maze)
        client.solver = BacktrackingSolver(client, rng=random.Random(seed))

        steps = client.solver.solve()

        assert steps == len(client.moves)

    def test_moves_counted_when_retreat_wins(self):
        client = ScriptedClient()
        solver = BacktrackingSolver(client)

        assert solver.solve() == 2
        assert solver.moves == 2
        assert client.moves == [Direction.EAST, Direction.WEST]

    def test_moves_counted_on_forward_win(self):
        grid = Grid(3, 1, walled=True)
        grid.link(grid.room(0, 0), grid.room(1, 0))
        grid.link(grid.room(1, 0), grid.room(2, 0))
        solver = BacktrackingSolver(SessionClient(build_maze(grid, (0, 0), (2, 0))))

        assert solver.solve() == 2
        assert solver.moves == 2


class TestRunIcarus:
    """Tests for solving several mazes in a row."""

    def test_local_run(self):
        client = LocalMazeClient(width=7, height=5, braid=0.3, generator=MazeGenerator(seed=11))
        count, average = run_icarus(client, times=4, rng=random.Random(11))

        assert count == 4
        assert 0 < average <= 2 * (7 * 5 - 1)

    def test_local_client_steps(self):
        client = LocalMazeClient(width=4, height=4, generator=MazeGenerator(seed=3))
        client.awake()
        assert client.steps == 0
