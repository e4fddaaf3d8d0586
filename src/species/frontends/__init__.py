"""Frontend interfaces for the Game of Life engine."""

from .cli import CLISpecies

__all__ = ["CLISpecies"]
