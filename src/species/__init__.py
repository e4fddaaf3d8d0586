"""Conway's Game of Life on a toroidal grid with a double-buffered engine."""

__version__ = "0.1.0"

from .core.grid import CellState, Grid
from .core.species import Species, next_state
from .core.patterns import Pattern, PatternLibrary

__all__ = ["CellState", "Grid", "Species", "next_state", "Pattern", "PatternLibrary"]
