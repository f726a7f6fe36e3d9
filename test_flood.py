"""Tests for the flood relaxation solver."""

import random

import numpy as np

from flood import UNREACHED, FloodState, FloodTermination, flood
from maze_types import Calculated, Direction, Empty, Wall
from test_mazes import default_exit, maze_from_rows, random_maze, reference_cost, seeded


class TestFloodScenarios:
    """Hand-made mazes with known answers."""

    def test_straight_corridor(self) -> None:
        """Three straight steps cost three."""
        maze = seeded(maze_from_rows("0000", "1111", "0000"))
        result = flood(maze, 3, 1)
        assert result.field_at(3, 1) == Calculated(Direction.LEFT, 3)

    def test_single_turn(self) -> None:
        """An L-shaped corridor costs its steps plus one."""
        maze = seeded(maze_from_rows("00000", "11111", "00001", "00001", "00000"))
        result = flood(maze, 4, 3)
        assert result.field_at(4, 3) == Calculated(Direction.UP, 7)

    def test_exit_in_wall(self) -> None:
        """A wall at the exit stays a wall."""
        maze = seeded(maze_from_rows("0000", "1110", "0000"))
        result = flood(maze, 3, 1)
        assert isinstance(result.field_at(3, 1), Wall)

    def test_walled_off_exit(self) -> None:
        """A full partition leaves the exit empty."""
        maze = seeded(maze_from_rows("00000", "11011", "00000"))
        result = flood(maze, 4, 1)
        assert isinstance(result.field_at(4, 1), Empty)
        assert result.field_at(1, 1) == Calculated(Direction.LEFT, 1)

    def test_equal_routes_merge_directions(self) -> None:
        """Two equally cheap arrivals keep both sides for later steps."""
        maze = seeded(maze_from_rows("00000", "11000", "11111", "01000"))
        result = flood(maze, 4, 2)

        assert result.field_at(1, 2) == Calculated(Direction.UP | Direction.LEFT, 3)
        # Both continuations are straight thanks to the merged set
        assert result.field_at(2, 2) == Calculated(Direction.LEFT, 4)
        assert result.field_at(1, 3) == Calculated(Direction.UP, 4)
        assert result.field_at(4, 2) == Calculated(Direction.LEFT, 6)

    def test_turns_only(self) -> None:
        """With free steps only turns are counted."""
        maze = seeded(maze_from_rows("00000", "11111", "00001", "00001", "00000"))
        result = flood(maze, 4, 3, step_cost=0)
        assert result.field_at(4, 3) == Calculated(Direction.UP, 1)

    def test_entry_is_exit(self) -> None:
        """Nothing to do when the exit is the seeded field."""
        maze = seeded(maze_from_rows("000", "111", "000"))
        state = FloodState(maze, 0, 1)
        assert state.is_done()
        assert state.iterations == 0
        assert state.termination_reason == FloodTermination.EXIT_SETTLED


class TestFloodState:
    """Tests for the iteration machinery."""

    def test_one_field_per_iteration_in_corridor(self) -> None:
        """Each iteration pushes the front one field further."""
        maze = seeded(maze_from_rows("0000", "1111", "0000"))
        state = FloodState(maze, 3, 1)

        assert state.step() == 1
        assert state.exit_cost() is None
        assert state.step() == 2
        assert state.step() == 3
        assert state.exit_cost() == 3
        assert state.is_done()
        assert state.iterations == 3
        assert state.termination_reason == FloodTermination.EXIT_SETTLED

    def test_no_changes_terminates(self) -> None:
        """An unreachable exit ends once nothing changes any more."""
        maze = seeded(maze_from_rows("00000", "11011", "00000"))
        state = FloodState(maze, 4, 1)
        while not state.is_done():
            state.step()
        assert state.termination_reason == FloodTermination.NO_CHANGES
        assert state.min_changed is None

    def test_snapshot_not_affected_by_later_iterations(self) -> None:
        """Iterations write into the back buffer, never into a snapshot."""
        maze = seeded(maze_from_rows("0000", "1111", "0000"))
        state = FloodState(maze, 3, 1)
        before = state.costs()
        state.step()
        assert before[1, 1] == UNREACHED
        assert state.costs()[1, 1] == 1

    def test_to_maze_roundtrip_before_any_step(self) -> None:
        """Packing and unpacking keeps every field."""
        maze = seeded(maze_from_rows("0110", "1111", "0100"))
        assert FloodState(maze, 3, 1).to_maze() == maze

    def test_exit_outside_maze(self) -> None:
        """An exit outside the grid is never reached."""
        maze = seeded(maze_from_rows("000", "111", "000"))
        state = FloodState(maze, 5, 5)
        assert state.exit_cost() is None
        result = flood(maze, 5, 5)
        assert isinstance(result.field_at(5, 5), Wall)
        assert result.field_at(2, 1) == Calculated(Direction.LEFT, 2)


class TestFloodProperties:
    """Properties checked over random mazes."""

    def test_costs_never_increase(self) -> None:
        """Once reached, a field only gets cheaper."""
        rng = random.Random(1234)
        for _ in range(30):
            maze = seeded(random_maze(rng))
            state = FloodState(maze, *default_exit(maze))
            previous = state.costs()
            while not state.is_done():
                state.step()
                current = state.costs()
                reached = previous != UNREACHED
                assert np.all(current[reached] <= previous[reached])
                previous = current

    def test_fixed_point_is_idempotent(self) -> None:
        """Flooding a fully flooded maze again changes nothing."""
        rng = random.Random(99)
        for _ in range(20):
            maze = seeded(random_maze(rng))
            # Exit outside the grid, so flooding runs until nothing changes
            converged = flood(maze, -1, -1)
            again = flood(converged.copy(), -1, -1)
            assert again == converged

    def test_matches_reference(self) -> None:
        """The exit cost equals the reference Dijkstra result."""
        rng = random.Random(2024)
        for _ in range(40):
            maze = random_maze(rng)
            exit = default_exit(maze)
            expected = reference_cost(maze, (0, 1), exit)

            result = flood(seeded(maze.copy()), *exit)
            field = result.field_at(*exit)
            if expected is None:
                assert isinstance(field, Empty)
            else:
                assert isinstance(field, Calculated)
                assert field.cost == expected

    def test_costs_beyond_int32(self) -> None:
        """A seed cost past the 32-bit range is not mistaken for an empty field."""
        maze = maze_from_rows("0000", "1111", "0000")
        maze.set_field(0, 1, Calculated(Direction.ANY, 2**31 - 1))
        result = flood(maze, 3, 1)
        assert result.field_at(3, 1) == Calculated(Direction.LEFT, 2**31 + 2)
