"""Tests for the backtracking enumerator and the partition-function entry point.

Expected values for small lattices:

  corner_3x3   single path along the top row           Z = x2^2
  diagonal_2x2 path from row 0 to column 1, two routes  Z = x1 + x0
  full_2x2     two nested paths, one configuration      Z = x0
  staircase    path from row 0 to column 2 of a 3x3     6 routes, 6 distinct terms
"""
from collections import Counter

import numpy as np
import pytest

from sixvertex.enumeration.backtracking import (
    EnumerationConfig,
    enumerate_weights,
    find_partition_function,
)
from sixvertex.lattices.grid import Lattice, get_preset
from sixvertex.lattices.vertex import VERTEX_SHAPES
from sixvertex.topology.flow_graph import trace_path_exits, verify_flow_conservation
from sixvertex.weights.polynomial import merge_terms, partition_function_to_string
from sixvertex.weights.rules import BoltzmannWeight


def _as_lists(terms):
    return [list(map(int, t)) for t in terms]


def _run_preset(name, **kwargs):
    rows, columns, boundary = get_preset(name)
    return find_partition_function(rows, columns, boundary.inputs, boundary.outputs, **kwargs)


class TestKnownLattices:
    def test_corner_3x3(self):
        weights = find_partition_function(3, 3, [False, False, True], [False, False, True])
        assert _as_lists(weights) == [[1, 0, 0, 2]]
        assert partition_function_to_string(merge_terms(weights)) == "x2^2"

    def test_diagonal_2x2_discovery_order(self):
        """Going up first is explored before going left."""
        weights = _run_preset("diagonal_2x2")
        assert _as_lists(weights) == [[1, 0, 1], [1, 1, 0]]
        assert partition_function_to_string(merge_terms(weights)) == "x1 + x0"

    def test_full_2x2(self):
        assert _as_lists(_run_preset("full_2x2")) == [[1, 1, 0]]

    def test_single_row(self):
        weights = find_partition_function(1, 2, [True], [False, True])
        assert _as_lists(weights) == [[1, 1]]

    def test_staircase_3x3(self):
        weights = _run_preset("staircase_3x3")
        assert len(weights) == 6
        for w in weights:
            assert w[0] == 1
            assert int(np.sum(w[1:])) == 2
        merged = merge_terms(weights)
        assert len(merged) == 6

    def test_domain_wall_3x3(self):
        assert len(_run_preset("domain_wall_3x3")) == 1


class TestDegenerateBoundaries:
    @pytest.mark.parametrize("rows,columns", [(1, 1), (2, 3), (3, 3), (9, 9), (10, 12)])
    def test_no_terminals_single_configuration(self, rows, columns):
        weights = find_partition_function(rows, columns, [False] * rows, [False] * columns)
        assert len(weights) == 1
        np.testing.assert_array_equal(weights[0], np.zeros(rows + 1))

    @pytest.mark.parametrize("inputs,outputs", [
        ([True, False], [False, False]),
        ([True, True], [False, True]),
        ([False, False], [True, False]),
    ])
    def test_unequal_terminal_counts_empty(self, inputs, outputs):
        assert find_partition_function(2, 2, inputs, outputs) == []

    def test_length_mismatch_empty(self):
        assert find_partition_function(2, 2, [True], [False, True]) == []
        assert find_partition_function(2, 2, [True, False], [True]) == []

    def test_zero_size(self):
        weights = find_partition_function(0, 0, [], [])
        assert _as_lists(weights) == [[0]]


class TestConnectivityMode:
    def test_single_pair_unaffected(self):
        config = EnumerationConfig(enforce_connectivity=True)
        assert len(_run_preset("staircase_3x3", config=config)) == 6
        assert len(_run_preset("corner_3x3", config=config)) == 1

    @pytest.mark.parametrize("name", ["full_2x2", "domain_wall_3x3"])
    def test_nested_pairs_rejected_when_enforced(self, name):
        """k-th input / k-th output pairing disagrees with nested paths."""
        assert len(_run_preset(name)) == 1
        assert _run_preset(name, config=EnumerationConfig(enforce_connectivity=True)) == []


class TestValidatedConfigurations:
    @pytest.mark.parametrize("name", [
        "corner_3x3", "diagonal_2x2", "full_2x2", "staircase_3x3",
        "empty_3x3", "domain_wall_3x3",
    ])
    def test_every_accepted_lattice_obeys_ice_rule(self, name):
        rows, columns, boundary = get_preset(name)
        seen = []

        def on_configuration(lattice, weight):
            seen.append((lattice, weight))

        weights = find_partition_function(
            rows, columns, boundary.inputs, boundary.outputs,
            on_configuration=on_configuration,
        )
        assert len(seen) == len(weights)

        for (lat, w_cb), w in zip(seen, weights):
            np.testing.assert_array_equal(w_cb, w)
            s = lat.states
            assert np.all(s.sum(axis=2) == 2)
            assert not np.any(s[:-1, :, 0] == s[1:, :, 2])
            assert not np.any(s[:, :-1, 3] == s[:, 1:, 1])
            assert verify_flow_conservation(lat)

            exits = trace_path_exits(lat, boundary)
            active_outputs = {c for c, on in enumerate(boundary.outputs) if on}
            assert set(exits.values()) == active_outputs

    def test_callback_receives_copies(self):
        rows, columns, boundary = get_preset("staircase_3x3")
        seen = []
        find_partition_function(
            rows, columns, boundary.inputs, boundary.outputs,
            on_configuration=lambda lat, w: seen.append(lat),
        )
        states = {lat.states.tobytes() for lat in seen}
        assert len(states) == 6


class TestMergeProperties:
    def test_round_trip_coefficients(self):
        """Merged coefficients count the raw configurations per monomial."""

        def total_horizontal(v, row, n):
            w = np.zeros(n + 1, dtype=np.int64)
            if v.west:
                w[1] = 1
            if v.north and not v.east:
                w[0] = 1
            return w

        weights = _run_preset("staircase_3x3", weight_rule=total_horizontal)
        merged = merge_terms(weights)
        assert _as_lists(merged) == [[6, 2, 0, 0]]

        raw_counts = Counter(tuple(w[1:]) for w in weights)
        for term in merged:
            assert term[0] == raw_counts[tuple(term[1:])]

    def test_count_rule(self):
        weights = _run_preset("staircase_3x3", config=EnumerationConfig(weight_rule="count"))
        assert _as_lists(merge_terms(weights)) == [[6, 0, 0, 0]]

    def test_merged_result_idempotent(self):
        merged = merge_terms(_run_preset("diagonal_2x2"))
        assert _as_lists(merge_terms(merged)) == _as_lists(merged)


class TestEnumerateWeights:
    def test_resume_from_prefilled_prefix(self):
        """Fixing the first site to 'go left' keeps only that route."""
        rows, columns, boundary = get_preset("diagonal_2x2")
        lat = Lattice(rows, columns)
        lat[0, 0] = VERTEX_SHAPES[2]
        weights = enumerate_weights(lat, 1, boundary, BoltzmannWeight())
        assert _as_lists(weights) == [[1, 1, 0]]


class TestGuards:
    def test_no_size_limit_by_default(self):
        assert EnumerationConfig().max_cells is None

    def test_max_cells_opt_in(self):
        config = EnumerationConfig(max_cells=64)
        with pytest.raises(ValueError, match="max_cells"):
            find_partition_function(9, 9, [False] * 9, [False] * 9, config=config)

    def test_max_cells_allows_smaller_grids(self):
        config = EnumerationConfig(max_cells=9)
        assert len(find_partition_function(3, 3, [False] * 3, [False] * 3, config=config)) == 1

    def test_unknown_rule(self):
        with pytest.raises(KeyError):
            find_partition_function(2, 2, [True, False], [False, True],
                                    config=EnumerationConfig(weight_rule="nope"))

    def test_bad_rule_length(self):
        with pytest.raises(ValueError):
            find_partition_function(
                3, 3, [False, False, True], [False, False, True],
                weight_rule=lambda v, row, n: np.zeros(2),
            )
