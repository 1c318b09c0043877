"""Tests for the partition-function command line script."""
import argparse
import os

import pytest

from scripts.find_partition_function import main, parse_flags


class TestParseFlags:
    def test_tokens(self):
        assert parse_flags(["0", "1", "true", "F"]) == [False, True, True, False]

    def test_bad_token(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_flags(["maybe"])


class TestMain:
    def test_default_corner(self, capsys):
        assert main([]) == 0
        assert "partition function = x2^2" in capsys.readouterr().out

    def test_preset(self, capsys):
        main(["--preset", "diagonal_2x2"])
        assert "partition function = x1 + x0" in capsys.readouterr().out

    def test_no_configurations(self, capsys):
        main(["--rows", "2", "--columns", "2", "--inputs", "1", "0", "--outputs", "0", "0"])
        out = capsys.readouterr().out
        assert "There were no lattices that satisfy the entered constraints." in out

    def test_enforce_connectivity(self, capsys):
        main(["--preset", "full_2x2", "--enforce-connectivity"])
        assert "There were no lattices" in capsys.readouterr().out

    def test_print_lattices(self, capsys):
        main(["--preset", "corner_3x3", "--print-lattices"])
        out = capsys.readouterr().out
        assert "boltzmann-weight = x2^2" in out
        assert " x2" in out

    def test_print_lattices_labels_rule(self, capsys):
        main(["--preset", "staircase_3x3", "--print-lattices", "--weight-rule", "count"])
        assert "count-weight = 1" in capsys.readouterr().out

    def test_check_conservation(self, capsys):
        main(["--preset", "full_2x2", "--check-conservation"])
        out = capsys.readouterr().out
        assert "conservation violations = 0, exits differing from pairing = 1" in out

    def test_check_conservation_corner(self, capsys):
        main(["--preset", "corner_3x3", "--check-conservation"])
        assert "exits differing from pairing = 0" in capsys.readouterr().out

    def test_large_grid_without_terminals(self, capsys):
        main(["--rows", "9", "--columns", "9",
              "--inputs", *["0"] * 9, "--outputs", *["0"] * 9])
        assert "partition function = 0" in capsys.readouterr().out

    def test_count_rule(self, capsys):
        main(["--preset", "staircase_3x3", "--weight-rule", "count"])
        assert "partition function = 6" in capsys.readouterr().out

    def test_outputs_written(self, tmp_path, capsys):
        fig = tmp_path / "figs" / "corner.png"
        out_dir = tmp_path / "results"
        main(["--preset", "diagonal_2x2", "--figure", str(fig), "--output", str(out_dir)])
        assert fig.exists()
        assert any(name.endswith("_meta.json") for name in os.listdir(out_dir))
