"""Command-line interface for the toroidal Game of Life."""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

import numpy as np

from ..core.grid import Grid, render_cells
from ..core.patterns import PatternLibrary
from ..core.species import Species


class CLISpecies:
    """Command-line interface for running Game of Life simulations."""

    def __init__(
        self,
        alive_glyph: str = "#",
        dead_glyph: str = " ",
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        """Initialize CLI interface.

        Args:
            alive_glyph: Character rendered for living cells
            dead_glyph: Character rendered for dead cells
            out: Stream for renderings (defaults to stdout)
            err: Stream for progress and summaries (defaults to stderr)
        """
        self.pattern_library = PatternLibrary()
        self.alive_glyph = alive_glyph
        self.dead_glyph = dead_glyph
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def format_species(self, species: Species) -> str:
        """Render the current generation with the configured glyphs."""
        return render_cells(species.snapshot(), self.alive_glyph, self.dead_glyph)

    def show(self, species: Species) -> None:
        """Write the current generation to the output stream."""
        self.out.write(self.format_species(species))

    def build_initial_grid(
        self,
        size: int,
        pattern: Optional[str] = None,
        row: int = 0,
        column: int = 0,
        seed_file: Optional[str] = None,
        random_rate: Optional[float] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> Grid:
        """Create the first generation.

        A seed file wins over a random layout, which wins over a pattern.

        Raises:
            ValueError: If the pattern is unknown or the seed file has the wrong size
        """
        if seed_file:
            text = Path(seed_file).read_text()
            grid = Grid.from_text(text, alive_glyph=self.alive_glyph)
            if grid.size != size:
                raise ValueError(f"Seed file is {grid.size}x{grid.size}, expected {size}x{size}")
            if verbose:
                print(f"Loaded {grid.population} living cells from {seed_file}", file=self.err)
            return grid

        grid = Grid(size)

        if random_rate is not None:
            if verbose:
                print(f"Generating random population (rate: {random_rate:.2%})", file=self.err)
            grid.randomize(random_rate, rng=np.random.default_rng(seed))
            return grid

        if pattern:
            loaded_pattern = self.pattern_library.get_pattern(pattern)
            if loaded_pattern is None:
                available = ", ".join(self.pattern_library.list_patterns())
                raise ValueError(f"Pattern '{pattern}' not found. Available patterns: {available}")

            placed = loaded_pattern.apply_to_grid(grid, row, column)
            if placed < len(loaded_pattern.cells):
                print(
                    f"Warning: {len(loaded_pattern.cells) - placed} cells of '{pattern}' fall outside the grid",
                    file=self.err,
                )
            if verbose:
                print(f"Loading pattern '{pattern}' at ({row}, {column})", file=self.err)

        return grid

    def run_simulation(
        self,
        initial: Grid,
        generations: int,
        until_stable: bool = False,
        show_initial: bool = False,
        verbose: bool = False,
    ) -> Tuple[Species, str]:
        """Evolve a grid and render every generation.

        Args:
            initial: First generation
            generations: Number of steps, or the step cap when until_stable is set
            until_stable: Stop early on extinction or a repeated generation
            show_initial: Also render the first generation
            verbose: Print progress to the error stream

        Returns:
            Tuple of (final engine, finish reason)
        """
        species = Species(initial)
        if verbose:
            print(
                f"Initial population: {species.population} cells on a {species.size}x{species.size} torus",
                file=self.err,
            )

        if show_initial:
            self.show(species)

        start_time = time.time()

        if until_stable:
            _, reason = species.run_until_stable(generations)
            self.show(species)
        else:
            reason = "max_generations"
            for _ in range(generations):
                species.evolve()
                self.show(species)

        duration = time.time() - start_time
        if verbose:
            print(f"Finish reason: {format_finish_reason(reason, species)}", file=self.err)
            print(
                f"Generation {species.generation}, population {species.population}, "
                f"duration {duration:.3f}s",
                file=self.err,
            )

        return species, reason

    def run_demo(self, initial: Grid) -> Tuple[Species, Species, Species]:
        """Walk through evolution, copying and assignment.

        Evolves a first engine once, copies it and evolves the copy, then
        assigns the first engine into a third. The third rendering equals
        the first.
        """
        species_a = Species(initial)
        species_a.evolve()
        self.show(species_a)

        species_b = species_a.copy()
        species_b.evolve()
        self.show(species_b)

        species_c = species_b.copy()
        species_c.copy_from(species_a)
        self.show(species_c)

        return species_a, species_b, species_c

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:", file=self.out)
        for category, names in categories.items():
            print(f"\n{category}:", file=self.out)
            for name in names:
                pattern = self.pattern_library.get_pattern(name)
                rows, columns = pattern.get_size()
                print(f"  {name}: {rows}x{columns}, {len(pattern.cells)} cells", file=self.out)
                if pattern.description:
                    print(f"    {pattern.description}", file=self.out)


def format_finish_reason(reason: str, species: Species) -> str:
    """Format the simulation finish reason for display."""
    if reason == "extinction":
        return "Extinction - all cells died"
    elif reason == "cycle":
        return (
            f"Cycle detected - length {species.cycle_length}, "
            f"started at generation {species.cycle_start_generation}"
        )
    elif reason == "max_generations":
        return f"Generation limit reached ({species.generation})"
    else:
        return f"Unknown reason: {reason}"


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="species-cli",
        description="Evolve Conway's Game of Life on a toroidal N x N grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evolve a vertical blinker at (2, 5) on a 10x10 torus once
  species-cli

  # Glider on a 12x12 torus for 48 generations, printing the seed first
  species-cli -N 12 --pattern Glider --row 0 --column 0 -n 48 --show-initial

  # Random 30x30 soup until it dies out or cycles
  species-cli -N 30 --random 0.3 --seed 7 --until-stable -n 5000 -v

  # Evolve a saved text snapshot and save the result
  species-cli -N 10 --seed-file start.txt -n 10 --snapshot end.txt
        """,
    )

    parser.add_argument("-N", "--size", type=int, default=10, help="Grid extent N (default: 10)")
    parser.add_argument(
        "-n",
        "--generations",
        type=int,
        default=1,
        help="Generations to evolve, or the cap with --until-stable (default: 1)",
    )

    # Seeding
    parser.add_argument("--pattern", type=str, default="Blinker", help="Pattern to seed (default: Blinker)")
    parser.add_argument("--row", type=int, default=2, help="Row offset for the pattern (default: 2)")
    parser.add_argument("--column", type=int, default=5, help="Column offset for the pattern (default: 5)")
    parser.add_argument("--seed-file", type=str, help="Load the first generation from a text snapshot")
    parser.add_argument("--random", type=float, help="Random initial population rate 0.0-1.0")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible --random layouts")

    # Output
    parser.add_argument("--alive-glyph", type=str, default="#", help="Character for living cells (default: '#')")
    parser.add_argument("--dead-glyph", type=str, default=" ", help="Character for dead cells (default: ' ')")
    parser.add_argument("--show-initial", action="store_true", help="Render the first generation too")
    parser.add_argument("--snapshot", type=str, help="Write the final generation to this file")

    # Modes
    parser.add_argument(
        "--until-stable",
        action="store_true",
        help="Stop on extinction or when a generation repeats; render only the final one",
    )
    parser.add_argument("--demo", action="store_true", help="Show evolution, copying and assignment")
    parser.add_argument("--list-patterns", action="store_true", help="List all available patterns and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress to stderr")

    return parser


def validate_args(args: argparse.Namespace) -> List[str]:
    """Validate command-line arguments.

    Returns:
        List of error messages, empty if arguments are valid
    """
    errors = []

    if args.size <= 0:
        errors.append("Size must be positive")

    if args.generations < 0:
        errors.append("Generations must be non-negative")

    if args.random is not None and not 0.0 <= args.random <= 1.0:
        errors.append("Random population rate must be between 0.0 and 1.0")

    if args.row < 0 or args.column < 0:
        errors.append("Pattern offsets must be non-negative")

    for name in ("alive_glyph", "dead_glyph"):
        if len(getattr(args, name)) != 1:
            errors.append(f"--{name.replace('_', '-')} must be a single character")

    if args.alive_glyph == args.dead_glyph:
        errors.append("Alive and dead glyphs must differ")

    if args.seed_file and not Path(args.seed_file).is_file():
        errors.append(f"Seed file not found: {args.seed_file}")

    return errors


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    errors = validate_args(args)
    if errors:
        print("Error: Invalid arguments:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    cli = CLISpecies(alive_glyph=args.alive_glyph, dead_glyph=args.dead_glyph)

    if args.list_patterns:
        cli.list_patterns()
        return 0

    try:
        initial = cli.build_initial_grid(
            size=args.size,
            pattern=args.pattern,
            row=args.row,
            column=args.column,
            seed_file=args.seed_file,
            random_rate=args.random,
            seed=args.seed,
            verbose=args.verbose,
        )

        if args.demo:
            final, _, _ = cli.run_demo(initial)
        else:
            final, _ = cli.run_simulation(
                initial,
                args.generations,
                until_stable=args.until_stable,
                show_initial=args.show_initial,
                verbose=args.verbose,
            )

        if args.snapshot:
            Path(args.snapshot).write_text(cli.format_species(final))
            if args.verbose:
                print(f"Snapshot written to {args.snapshot}", file=sys.stderr)

        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
