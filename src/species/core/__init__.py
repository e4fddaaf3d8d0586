"""Core cellular automaton logic."""

from .grid import CellState, Grid, render_cells
from .species import Species, next_state
from .patterns import Pattern, PatternLibrary

__all__ = ["CellState", "Grid", "render_cells", "Species", "next_state", "Pattern", "PatternLibrary"]
