"""Tests for matplotlib configuration figures."""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from sixvertex.lattices.grid import Lattice
from sixvertex.lattices.vertex import VERTEX_SHAPES
from sixvertex.viz.matplotlib_figures import (
    arrow_segments,
    draw_configuration,
    save_configuration_figure,
    site_position,
)

TURN_UP, VERTICAL, HORIZONTAL, TURN_LEFT, EMPTY = VERTEX_SHAPES


def _corner():
    return Lattice.from_vertices([
        [EMPTY, EMPTY, EMPTY],
        [EMPTY, EMPTY, EMPTY],
        [HORIZONTAL, HORIZONTAL, TURN_UP],
    ])


class TestArrowSegments:
    def test_four_per_site(self):
        assert len(arrow_segments(_corner())) == 4 * 9

    def test_path_half_edges(self):
        """Each path site carries exactly two path half-edges."""
        n_path = sum(on for _, _, on in arrow_segments(_corner()))
        assert n_path == 2 * 3

    def test_column_zero_on_the_right(self):
        lat = _corner()
        np.testing.assert_array_equal(site_position(lat, 0, 0), [2.0, 0.0])
        np.testing.assert_array_equal(site_position(lat, 2, 2), [0.0, 2.0])


class TestDrawing:
    def test_draw_on_axes(self):
        fig, ax = plt.subplots()
        draw_configuration(ax, _corner(), title="x2^2")
        assert ax.get_title() == "x2^2"
        plt.close(fig)

    def test_save_grid(self, tmp_path):
        path = str(tmp_path / "configs.png")
        weights = [np.array([1, 0, 0, 2])] * 5
        out = save_configuration_figure([_corner()] * 5, path, weights=weights, ncols=2)
        assert out == path
        assert (tmp_path / "configs.png").exists()
