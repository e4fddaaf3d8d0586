"""Double-buffered evolution engine for Conway's Game of Life."""

from typing import Deque, Dict, Optional, Tuple, Union
from collections import deque
import numpy as np

from .grid import CellState, Grid, render_cells


def next_state(state: CellState, alive_neighbors: int) -> CellState:
    """Apply Conway's rule to a single cell.

    Args:
        state: Current state of the cell
        alive_neighbors: Number of living neighbors (0-8)

    Returns:
        State of the cell in the next generation

    Raises:
        ValueError: If alive_neighbors is outside 0-8
    """
    if not 0 <= alive_neighbors <= 8:
        raise ValueError(f"Neighbor count must be between 0 and 8, got {alive_neighbors}")

    if alive_neighbors < 2 or alive_neighbors > 3:
        return CellState.DEAD
    if alive_neighbors == 3:
        return CellState.ALIVE
    return CellState(state)


class Species:
    """A population of cells evolving on a toroidal N x N grid.

    All cells evolve simultaneously, so the engine keeps two grids: one for
    the current generation and one the next generation is written into.
    After each step the roles are exchanged by flipping an index; no cell
    data is copied.

    Copying an engine duplicates the current generation only. The copy's
    future grid starts all dead because every step overwrites it completely.

    Example:
        grid = Grid.from_cells(10, [(2, 5), (3, 5), (4, 5)])
        species = Species(grid)
        species.evolve()
        print(species, end="")
    """

    # Generations remembered for cycle detection; older ones are forgotten
    history_limit = 1000

    def __init__(self, initial: Union[Grid, "Species", np.ndarray, list], size: Optional[int] = None) -> None:
        """Initialize the engine.

        Args:
            initial: Initial generation as a Grid or a square 2D array of
                cell states, or another engine to copy
            size: Expected grid extent; checked against the initial grid if given

        Raises:
            ValueError: If the array is not square or size does not match
        """
        if isinstance(initial, Species):
            source = initial._current_grid
            generation = initial.generation
        elif isinstance(initial, Grid):
            source = initial
            generation = 0
        else:
            source = Grid.from_array(initial)
            generation = 0

        if size is not None and source.size != size:
            raise ValueError(f"Initial grid is {source.size}x{source.size}, expected {size}x{size}")

        self._buffers: Tuple[Grid, Grid] = (source.copy(), Grid(source.size))
        self._current = 0
        self._generation = generation

        self._seen_states: Dict[bytes, int] = {}
        self._state_history: Deque[bytes] = deque()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

    @property
    def _current_grid(self) -> Grid:
        return self._buffers[self._current]

    @property
    def _future_grid(self) -> Grid:
        return self._buffers[1 - self._current]

    @property
    def size(self) -> int:
        """Grid extent N."""
        return self._current_grid.size

    @property
    def generation(self) -> int:
        """Number of steps taken to reach the current generation."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self._current_grid.population

    @property
    def cycle_detected(self) -> bool:
        """Whether run_until_stable found a repeated generation."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where the cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def snapshot(self) -> np.ndarray:
        """Get a read-only view of the current generation.

        The view shares memory with the current grid, which becomes the
        future grid on the next step. Copy it to keep a generation around.
        """
        return self._current_grid.read_only_view()

    def cell(self, row: int, column: int) -> CellState:
        """Get the state of a cell in the current generation."""
        return self._current_grid.get_cell(row, column)

    def evolve(self) -> None:
        """Advance every cell by one generation."""
        current = self._current_grid.cells
        neighbor_counts = self._current_grid.count_all_neighbors()

        # Birth or survival on 3, survival of living cells on 2
        alive = (neighbor_counts == 3) | ((current == CellState.ALIVE) & (neighbor_counts == 2))
        self._future_grid.cells[:] = alive

        self._current = 1 - self._current
        self._generation += 1

    def run(self, generations: int) -> int:
        """Evolve a fixed number of generations.

        Returns:
            Generation number after the last step

        Raises:
            ValueError: If generations is negative
        """
        if generations < 0:
            raise ValueError(f"Generations must be non-negative, got {generations}")

        for _ in range(generations):
            self.evolve()
        return self._generation

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Evolve until the population dies out or repeats a generation.

        Only the last history_limit generations are remembered, so cycles
        longer than that run until max_generations.

        Args:
            max_generations: Maximum number of steps to take

        Returns:
            Tuple of (final_generation, reason) where reason is one of
            'cycle', 'extinction', 'max_generations'
        """
        self.clear_cycle_detection()

        for _ in range(max_generations):
            self._record_state()
            self.evolve()

            if self.population == 0:
                return self._generation, "extinction"

            first_occurrence = self._seen_states.get(self._current_grid.cells.tobytes())
            if first_occurrence is not None:
                self._cycle_detected = True
                self._cycle_length = self._generation - first_occurrence
                self._cycle_start_generation = first_occurrence
                return self._generation, "cycle"

        return self._generation, "max_generations"

    def _record_state(self) -> None:
        state = self._current_grid.cells.tobytes()
        if state in self._seen_states:
            return

        # Forget the oldest generation to prevent memory growth
        while len(self._state_history) >= max(self.history_limit, 1):
            del self._seen_states[self._state_history.popleft()]

        self._state_history.append(state)
        self._seen_states[state] = self._generation

    def clear_cycle_detection(self) -> None:
        """Forget remembered generations and any detected cycle.

        Called whenever the current generation is replaced by hand, since
        earlier generations no longer lead to it.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._seen_states.clear()
        self._state_history.clear()

    def copy(self) -> "Species":
        """Return an independent engine holding the same current generation."""
        return Species(self)

    def copy_from(self, other: "Species") -> None:
        """Overwrite the current generation with another engine's.

        Only the current grid is copied; the future grid is left as is
        since the next step rewrites it. Copying from itself is a no-op.

        Raises:
            ValueError: If the engines have different sizes
        """
        if other is self:
            return

        if other.size != self.size:
            raise ValueError(f"Species sizes don't match: {other.size} vs {self.size}")

        self._current_grid.copy_from(other._current_grid)
        self._generation = other.generation
        self.clear_cycle_detection()

    def __copy__(self) -> "Species":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "Species":
        duplicate = self.copy()
        memo[id(self)] = duplicate
        return duplicate

    def __str__(self) -> str:
        """Text snapshot of the current generation."""
        return render_cells(self._current_grid.cells)

    def __repr__(self) -> str:
        return f"Species(size={self.size}, generation={self._generation}, population={self.population})"
