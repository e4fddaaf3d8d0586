"""Grid data structure for the toroidal Game of Life."""

from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union
import numpy as np
import torch
import torch.nn.functional as F


class CellState(IntEnum):
    """State of a single cell."""

    DEAD = 0
    ALIVE = 1


Coordinate = Tuple[int, int]

# Moore neighborhood offsets as (row, column) deltas
NEIGHBOR_OFFSETS: Tuple[Coordinate, ...] = (
    (-1, 0),  # north
    (1, 0),  # south
    (0, -1),  # west
    (0, 1),  # east
    (-1, -1),  # north west
    (-1, 1),  # north east
    (1, -1),  # south west
    (1, 1),  # south east
)


def render_cells(cells: np.ndarray, alive_glyph: str = "#", dead_glyph: str = " ") -> str:
    """Render a 2D cell array as text.

    Args:
        cells: Array of cell states indexed [row, column]
        alive_glyph: Character printed for living cells
        dead_glyph: Character printed for dead cells

    Returns:
        One line per row, each terminated by a newline
    """
    lines = []
    for row in cells:
        lines.append("".join(alive_glyph if cell else dead_glyph for cell in row))
        lines.append("\n")
    return "".join(lines)


class Grid:
    """Square N x N grid of cells.

    Cells are stored row-major in a numpy array. Direct cell access is
    bounds-checked; only neighbor lookups wrap around the edges.
    """

    def __init__(self, size: int) -> None:
        """Initialize an all-dead grid.

        Args:
            size: Number of rows and columns

        Raises:
            ValueError: If size is not a positive integer
        """
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
            raise ValueError(f"Grid size must be a positive integer, got {size!r}")

        self.size = int(size)
        self._cells = np.zeros((self.size, self.size), dtype=np.int8)

        # Neighbor counting runs on the calling thread only
        torch.set_num_threads(1)

        self._torch_input = torch.zeros(1, 1, self.size, self.size, dtype=torch.float32)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @classmethod
    def from_cells(cls, size: int, cells: Sequence[Coordinate]) -> "Grid":
        """Create a grid with the given living cells.

        Args:
            size: Grid extent
            cells: (row, column) coordinates of living cells

        Raises:
            IndexError: If a coordinate lies outside the grid
        """
        grid = cls(size)
        for row, column in cells:
            grid.set_cell(row, column, CellState.ALIVE)
        return grid

    @classmethod
    def from_array(cls, data: Union[np.ndarray, list]) -> "Grid":
        """Create a grid from a square 2D array of cell states.

        Nonzero entries (ALIVE, True, 1) are living cells.

        Raises:
            ValueError: If the data is not a non-empty square 2D array
        """
        arr = np.asarray(data)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1] or arr.shape[0] == 0:
            raise ValueError(f"Initial cells must form a non-empty N x N array, got shape {arr.shape}")

        grid = cls(arr.shape[0])
        grid.from_list(arr)
        return grid

    @classmethod
    def from_text(cls, text: str, alive_glyph: str = "#") -> "Grid":
        """Parse a text snapshot as produced by str(grid).

        Every character equal to alive_glyph is a living cell, anything else
        is dead. The row count fixes the extent; trailing blanks stripped by
        editors are padded back.

        Raises:
            ValueError: If the text is empty or not square
        """
        lines = text.splitlines()
        if not lines:
            raise ValueError("Snapshot text is empty")

        size = len(lines)
        if any(len(line.rstrip()) > size for line in lines):
            widest = max(len(line.rstrip()) for line in lines)
            raise ValueError(f"Snapshot is not square: {size} rows but a row of width {widest}")

        grid = cls(size)
        for row, line in enumerate(lines):
            for column, char in enumerate(line[:size]):
                if char == alive_glyph:
                    grid._cells[row, column] = CellState.ALIVE
        return grid

    @property
    def cells(self) -> np.ndarray:
        """Get the underlying cell array."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, columns)."""
        return (self.size, self.size)

    def _check_bounds(self, row: int, column: int) -> None:
        if not (0 <= row < self.size and 0 <= column < self.size):
            raise IndexError(f"Coordinates ({row}, {column}) out of bounds for {self.size}x{self.size} grid")

    def get_cell(self, row: int, column: int) -> CellState:
        """Get the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        self._check_bounds(row, column)
        return CellState(int(self._cells[row, column]))

    def is_alive(self, row: int, column: int) -> bool:
        """Check whether a cell is alive."""
        return self.get_cell(row, column) is CellState.ALIVE

    def set_cell(self, row: int, column: int, state: Union[CellState, bool]) -> None:
        """Set the state of a cell.

        Args:
            row: Row coordinate
            column: Column coordinate
            state: New state, either a CellState or a bool

        Raises:
            IndexError: If coordinates are out of bounds
        """
        self._check_bounds(row, column)
        self._cells[row, column] = CellState.ALIVE if state else CellState.DEAD

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        self._cells.fill(CellState.DEAD)

    def randomize(self, probability: float = 0.1, rng: Optional[np.random.Generator] = None) -> None:
        """Randomly populate the grid.

        Args:
            probability: Chance each cell will be alive (0.0 to 1.0)
            rng: Optional numpy generator for reproducible layouts
        """
        rng = rng or np.random.default_rng()
        mask = rng.random((self.size, self.size)) < probability
        self._cells[mask] = CellState.ALIVE
        self._cells[~mask] = CellState.DEAD

    def copy_from(self, other: "Grid") -> None:
        """Copy cell states from another grid.

        Raises:
            ValueError: If grids have different dimensions
        """
        if other.shape != self.shape:
            raise ValueError(f"Grid dimensions don't match: {other.shape} vs {self.shape}")

        self._cells[:] = other._cells

    def copy(self) -> "Grid":
        """Return an independent grid with the same cells."""
        duplicate = Grid(self.size)
        duplicate.copy_from(self)
        return duplicate

    def read_only_view(self) -> np.ndarray:
        """Get a non-writeable view of the cell array.

        The view is built on a read-only buffer, so its writeable flag
        cannot be switched back on.
        """
        buffer = memoryview(self._cells).toreadonly()
        return np.frombuffer(buffer, dtype=self._cells.dtype).reshape(self.shape)

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    def living_cells(self) -> List[Coordinate]:
        """Get (row, column) coordinates of all living cells in row-major order."""
        rows, columns = np.nonzero(self._cells)
        return [(int(row), int(column)) for row, column in zip(rows, columns)]

    def neighbor_coordinates(self, row: int, column: int) -> List[Coordinate]:
        """Get the eight toroidally wrapped neighbor coordinates of a cell.

        Each axis wraps independently, so the north-west neighbor of (0, 0)
        is (N-1, N-1).

        Raises:
            IndexError: If the cell itself is out of bounds
        """
        self._check_bounds(row, column)
        return [((row + dr) % self.size, (column + dc) % self.size) for dr, dc in NEIGHBOR_OFFSETS]

    def count_alive_neighbors(self, row: int, column: int) -> int:
        """Count living neighbors of a single cell (0-8)."""
        return sum(int(self._cells[r, c]) for r, c in self.neighbor_coordinates(row, column))

    def count_all_neighbors(self) -> np.ndarray:
        """Count living neighbors for every cell with a circular convolution.

        Returns:
            int8 array indexed [row, column] with counts in 0-8
        """
        self._torch_input[0, 0] = torch.from_numpy(self._cells.astype(np.float32))
        padded = F.pad(self._torch_input, (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, self._torch_kernel)
        return neighbors[0, 0].round().numpy().astype(np.int8)

    def to_list(self) -> list:
        """Convert grid to nested list of 0/1 values."""
        return self._cells.tolist()

    def from_list(self, data: list) -> None:
        """Load grid from nested list.

        Raises:
            ValueError: If data dimensions don't match grid
        """
        arr = np.array(data, dtype=np.int8)
        if arr.shape != self.shape:
            raise ValueError(f"Data shape {arr.shape} doesn't match grid {self.shape}")

        self._cells[:] = (arr != 0).astype(np.int8)

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """Text snapshot: '#' for living cells, ' ' for dead ones."""
        return render_cells(self._cells)

    def __repr__(self) -> str:
        return f"Grid(size={self.size}, population={self.population})"
