"""Tests for the CLI frontend."""

from io import StringIO
from unittest.mock import patch

import pytest
from species.core.grid import Grid
from species.frontends.cli import (
    CLISpecies,
    create_parser,
    format_finish_reason,
    main,
    validate_args,
)

HORIZONTAL = "          \n" * 3 + "    ###   \n" + "          \n" * 6
VERTICAL = "          \n" * 2 + "     #    \n" * 3 + "          \n" * 5


class TestCLISpecies:
    """Test cases for the CLI driver class."""

    def test_initialization(self):
        """Test CLI initialization."""
        cli = CLISpecies()
        assert cli.pattern_library is not None
        assert "Blinker" in cli.pattern_library.list_patterns()

    def test_build_initial_grid_pattern(self):
        """Test seeding from a named pattern."""
        cli = CLISpecies()
        grid = cli.build_initial_grid(10, pattern="Blinker", row=2, column=5)
        assert grid.living_cells() == [(2, 5), (3, 5), (4, 5)]

    def test_build_initial_grid_unknown_pattern(self):
        """Test that an unknown pattern is an error."""
        cli = CLISpecies()
        with pytest.raises(ValueError, match="not found"):
            cli.build_initial_grid(10, pattern="NonExistentPattern")

    def test_build_initial_grid_clipped_pattern_warns(self):
        """Test the warning for a pattern that does not fit."""
        err = StringIO()
        cli = CLISpecies(err=err)
        grid = cli.build_initial_grid(5, pattern="Blinker", row=4, column=0)

        assert grid.population == 1
        assert "Warning:" in err.getvalue()

    def test_build_initial_grid_random(self):
        """Test reproducible random seeding."""
        cli = CLISpecies()
        first = cli.build_initial_grid(10, random_rate=0.5, seed=3)
        second = cli.build_initial_grid(10, random_rate=0.5, seed=3)
        assert first == second
        assert first.population > 0

    def test_build_initial_grid_seed_file(self, tmp_path):
        """Test seeding from a text snapshot."""
        seed_file = tmp_path / "seed.txt"
        seed_file.write_text(VERTICAL)

        cli = CLISpecies()
        grid = cli.build_initial_grid(10, pattern="Glider", seed_file=str(seed_file))
        assert grid.living_cells() == [(2, 5), (3, 5), (4, 5)]

        with pytest.raises(ValueError):
            cli.build_initial_grid(8, seed_file=str(seed_file))

    def test_run_simulation(self):
        """Test that every generation is rendered."""
        out = StringIO()
        cli = CLISpecies(out=out)
        initial = Grid.from_cells(10, [(2, 5), (3, 5), (4, 5)])

        species, reason = cli.run_simulation(initial, 2)

        assert reason == "max_generations"
        assert species.generation == 2
        assert out.getvalue() == HORIZONTAL + VERTICAL

    def test_run_simulation_show_initial(self):
        """Test rendering the seed before evolving."""
        out = StringIO()
        cli = CLISpecies(out=out)
        initial = Grid.from_cells(10, [(2, 5), (3, 5), (4, 5)])

        cli.run_simulation(initial, 1, show_initial=True)

        assert out.getvalue() == VERTICAL + HORIZONTAL

    def test_run_simulation_until_stable(self):
        """Test that only the final generation is rendered."""
        out = StringIO()
        err = StringIO()
        cli = CLISpecies(out=out, err=err)
        initial = Grid.from_cells(10, [(2, 5), (3, 5), (4, 5)])

        species, reason = cli.run_simulation(initial, 100, until_stable=True, verbose=True)

        assert reason == "cycle"
        assert out.getvalue() == VERTICAL
        assert "Cycle detected - length 2" in err.getvalue()

    def test_run_demo(self):
        """Test the evolve, copy, assign walkthrough."""
        out = StringIO()
        cli = CLISpecies(out=out)
        initial = Grid.from_cells(10, [(2, 5), (3, 5), (4, 5)])

        species_a, species_b, species_c = cli.run_demo(initial)

        assert out.getvalue() == HORIZONTAL + VERTICAL + HORIZONTAL
        assert str(species_c) == str(species_a)
        assert str(species_b) == VERTICAL

    def test_custom_glyphs(self):
        """Test rendering with custom glyphs."""
        out = StringIO()
        cli = CLISpecies(alive_glyph="O", dead_glyph=".", out=out)
        cli.run_simulation(Grid.from_cells(3, [(0, 0)]), 0, show_initial=True)
        assert out.getvalue() == "O..\n...\n...\n"

    def test_list_patterns(self):
        """Test pattern listing."""
        out = StringIO()
        cli = CLISpecies(out=out)
        cli.list_patterns()

        output = out.getvalue()
        assert "Available patterns:" in output
        assert "Still Life:" in output
        assert "Oscillators:" in output
        assert "Blinker: 3x1, 3 cells" in output


class TestCLIFunctions:
    """Test cases for CLI utility functions."""

    def test_create_parser_defaults(self):
        """Test parser defaults reproduce the blinker demonstration."""
        args = create_parser().parse_args([])

        assert args.size == 10
        assert args.generations == 1
        assert args.pattern == "Blinker"
        assert (args.row, args.column) == (2, 5)
        assert args.alive_glyph == "#"
        assert args.dead_glyph == " "
        assert not args.demo

    def test_validate_args_valid(self):
        """Test that defaults validate."""
        args = create_parser().parse_args([])
        assert validate_args(args) == []

    def test_validate_args_invalid(self):
        """Test that every error is collected."""
        args = create_parser().parse_args(
            ["-N", "0", "-n", "-1", "--random", "1.5", "--row", "-1", "--alive-glyph", "##"]
        )
        errors = validate_args(args)

        assert "Size must be positive" in errors
        assert "Generations must be non-negative" in errors
        assert "Random population rate must be between 0.0 and 1.0" in errors
        assert "Pattern offsets must be non-negative" in errors
        assert "--alive-glyph must be a single character" in errors

    def test_validate_args_same_glyphs(self):
        """Test that glyphs must be distinguishable."""
        args = create_parser().parse_args(["--dead-glyph", "#"])
        assert "Alive and dead glyphs must differ" in validate_args(args)

    def test_validate_args_missing_seed_file(self, tmp_path):
        """Test a missing seed file."""
        args = create_parser().parse_args(["--seed-file", str(tmp_path / "missing.txt")])
        assert any("Seed file not found" in error for error in validate_args(args))

    def test_format_finish_reason(self):
        """Test finish reason formatting."""
        cli = CLISpecies(out=StringIO())
        species, _ = cli.run_simulation(Grid.from_cells(10, [(5, 5)]), 3)

        assert format_finish_reason("extinction", species) == "Extinction - all cells died"
        assert format_finish_reason("max_generations", species) == "Generation limit reached (3)"
        assert format_finish_reason("other", species) == "Unknown reason: other"


class TestMain:
    """Test cases for the main entry point."""

    @patch("sys.stdout", new_callable=StringIO)
    def test_main_default(self, mock_stdout):
        """Test the default run prints one horizontal blinker."""
        assert main([]) == 0
        assert mock_stdout.getvalue() == HORIZONTAL

    @patch("sys.stdout", new_callable=StringIO)
    def test_main_demo(self, mock_stdout):
        """Test the demo mode output."""
        assert main(["--demo"]) == 0
        assert mock_stdout.getvalue() == HORIZONTAL + VERTICAL + HORIZONTAL

    @patch("sys.stdout", new_callable=StringIO)
    def test_main_list_patterns(self, mock_stdout):
        """Test --list-patterns."""
        assert main(["--list-patterns"]) == 0
        assert "Glider" in mock_stdout.getvalue()

    @patch("sys.stderr", new_callable=StringIO)
    def test_main_invalid_args(self, mock_stderr):
        """Test that invalid arguments fail."""
        assert main(["--size", "0"]) == 1
        assert "Size must be positive" in mock_stderr.getvalue()

    @patch("sys.stderr", new_callable=StringIO)
    @patch("sys.stdout", new_callable=StringIO)
    def test_main_unknown_pattern(self, mock_stdout, mock_stderr):
        """Test that an unknown pattern fails cleanly."""
        assert main(["--pattern", "Nope"]) == 1
        assert "Error: Pattern 'Nope' not found" in mock_stderr.getvalue()
        assert mock_stdout.getvalue() == ""

    @patch("sys.stdout", new_callable=StringIO)
    def test_main_snapshot_round_trip(self, mock_stdout, tmp_path):
        """Test writing a snapshot and continuing from it."""
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"

        assert main(["--snapshot", str(first)]) == 0
        assert first.read_text() == HORIZONTAL

        assert main(["--seed-file", str(first), "--snapshot", str(second)]) == 0
        assert second.read_text() == VERTICAL
