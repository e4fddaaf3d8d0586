"""Common Conway's Game of Life patterns for seeding a grid."""

from typing import Dict, List, Optional, Tuple

from .grid import CellState, Coordinate, Grid


class Pattern:
    """Represents a Game of Life pattern."""

    def __init__(self, name: str, cells: List[Coordinate], description: str = "") -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (row, column) coordinates for living cells
            description: Optional description
        """
        self.name = name
        self.cells = cells
        self.description = description

    def apply_to_grid(self, grid: Grid, row: int = 0, column: int = 0, clear: bool = True) -> int:
        """Apply this pattern to a grid.

        Args:
            grid: Target grid
            row: Row offset
            column: Column offset
            clear: Whether to clear the grid first

        Returns:
            Number of cells placed
        """
        if clear:
            grid.clear()

        placed = 0
        for r, c in self.cells:
            try:
                grid.set_cell(r + row, c + column, CellState.ALIVE)
                placed += 1
            except IndexError:
                # Skip cells that fall outside grid bounds
                pass
        return placed

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_row, min_column, max_row, max_column)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        rows, columns = zip(*self.cells)
        return (min(rows), min(columns), max(rows), max(columns))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size as (rows, columns)."""
        min_row, min_column, max_row, max_column = self.get_bounding_box()
        return (max_row - min_row + 1, max_column - min_column + 1)

    def normalize(self) -> "Pattern":
        """Return a new pattern with coordinates shifted to start at (0, 0)."""
        if not self.cells:
            return Pattern(self.name, [], self.description)

        min_row, min_column, _, _ = self.get_bounding_box()
        normalized_cells = [(r - min_row, c - min_column) for r, c in self.cells]
        return Pattern(self.name, normalized_cells, self.description)

    @classmethod
    def from_grid(cls, grid: Grid, name: str, description: str = "") -> "Pattern":
        """Create pattern from the living cells of a grid."""
        return cls(name, grid.living_cells(), description)


class PatternLibrary:
    """Manages a collection of named patterns."""

    CATEGORIES: Dict[str, List[str]] = {
        "Still Life": ["Block", "Beehive", "Loaf"],
        "Oscillators": ["Blinker", "Toad", "Beacon"],
        "Spaceships": ["Glider", "Lightweight Spaceship"],
    }

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        # Still life patterns
        self.add_pattern(Pattern("Block", [(0, 0), (0, 1), (1, 0), (1, 1)], "2x2 still life block"))
        self.add_pattern(
            Pattern("Beehive", [(0, 1), (0, 2), (1, 0), (1, 3), (2, 1), (2, 2)], "Beehive still life")
        )
        self.add_pattern(
            Pattern("Loaf", [(0, 1), (0, 2), (1, 0), (1, 3), (2, 1), (2, 3), (3, 2)], "Loaf still life")
        )

        # Oscillators
        self.add_pattern(Pattern("Blinker", [(0, 0), (1, 0), (2, 0)], "Vertical period-2 oscillator"))
        self.add_pattern(
            Pattern("Toad", [(0, 1), (0, 2), (0, 3), (1, 0), (1, 1), (1, 2)], "Period-2 oscillator")
        )
        self.add_pattern(
            Pattern("Beacon", [(0, 0), (0, 1), (1, 0), (2, 3), (3, 2), (3, 3)], "Period-2 oscillator")
        )

        # Spaceships
        self.add_pattern(
            Pattern("Glider", [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)], "Smallest spaceship, period-4")
        )
        self.add_pattern(
            Pattern(
                "Lightweight Spaceship",
                [(0, 0), (0, 3), (1, 4), (2, 0), (2, 4), (3, 1), (3, 2), (3, 3), (3, 4)],
                "LWSS - Period-4 spaceship",
            )
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern to the library, replacing any with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name, or None if not found."""
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Get patterns organized by category.

        Patterns added at runtime are listed under "Custom".
        """
        categories = {category: list(names) for category, names in self.CATEGORIES.items()}
        builtin = {name for names in self.CATEGORIES.values() for name in names}
        categories["Custom"] = [name for name in self._patterns if name not in builtin]

        # Remove empty categories
        return {category: names for category, names in categories.items() if names}
