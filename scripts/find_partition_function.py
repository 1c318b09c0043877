#!/usr/bin/env python
"""Compute the six-vertex partition function for one boundary setup.

Usage:
    python -m scripts.find_partition_function --preset corner_3x3
    python -m scripts.find_partition_function --rows 3 --columns 3 --inputs 0 0 1 --outputs 0 0 1
    python -m scripts.find_partition_function --preset full_2x2 --enforce-connectivity
    python -m scripts.find_partition_function --preset staircase_3x3 --print-lattices \
        --figure results/figures/staircase.png --output results/partition
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sixvertex.enumeration.backtracking import EnumerationConfig
from sixvertex.enumeration.partition import compute_partition_function
from sixvertex.io.serialize import save_result
from sixvertex.lattices.grid import BoundarySpec, get_preset, list_presets
from sixvertex.topology.flow_graph import diagnose_configuration
from sixvertex.topology.validation import pair_terminals
from sixvertex.viz.text_render import render_lattice
from sixvertex.weights.polynomial import polynomial_to_string
from sixvertex.weights.rules import list_weight_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "t", "yes", "y"}
_FALSE = {"0", "false", "f", "no", "n"}


def parse_flags(values: List[str]) -> List[bool]:
    """Parse terminal flags given as 0/1 or true/false tokens."""
    flags = []
    for v in values:
        token = v.strip().lower()
        if token in _TRUE:
            flags.append(True)
        elif token in _FALSE:
            flags.append(False)
        else:
            raise argparse.ArgumentTypeError(f"Not a terminal flag: '{v}'")
    return flags


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Enumerate six-vertex configurations and their partition function"
    )
    parser.add_argument("--preset", choices=list_presets(), default=None,
                        help="Named boundary setup (overrides --rows/--columns/--inputs/--outputs)")
    parser.add_argument("--rows", type=int, default=3)
    parser.add_argument("--columns", type=int, default=3)
    parser.add_argument("--inputs", nargs="*", default=["0", "0", "1"],
                        help="Per-row flags, 1 where a path enters (row 0 first)")
    parser.add_argument("--outputs", nargs="*", default=["0", "0", "1"],
                        help="Per-column flags, 1 where a path exits (column 0 first)")
    parser.add_argument("--weight-rule", default="boltzmann", choices=list_weight_rules(),
                        help="Local weight rule (default: boltzmann)")
    parser.add_argument("--enforce-connectivity", action="store_true",
                        help="Reject configurations whose terminal paths do not reach "
                             "their paired output")
    parser.add_argument("--max-cells", type=int, default=0,
                        help="Refuse lattices with more sites (default 0 = no limit)")
    parser.add_argument("--check-conservation", action="store_true",
                        help="Check flow conservation and terminal exits of every "
                             "accepted configuration")
    parser.add_argument("--print-lattices", action="store_true",
                        help="Print every accepted configuration with its weight")
    parser.add_argument("--figure", default=None,
                        help="Save a figure of all accepted configurations to this path")
    parser.add_argument("--output", default=None,
                        help="Directory to save the result (.npz + _meta.json)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.preset is not None:
        rows, columns, boundary = get_preset(args.preset)
        inputs, outputs = list(boundary.inputs), list(boundary.outputs)
        label = args.preset
    else:
        rows, columns = args.rows, args.columns
        inputs, outputs = parse_flags(args.inputs), parse_flags(args.outputs)
        label = "custom"

    config = EnumerationConfig(
        weight_rule=args.weight_rule,
        enforce_connectivity=args.enforce_connectivity,
        max_cells=args.max_cells or None,
    )

    lattices = []
    boundary = BoundarySpec(tuple(inputs), tuple(outputs))
    expected_exits = dict(pair_terminals(boundary.inputs, boundary.outputs))
    diagnostics = {"not_conserved": 0, "exit_mismatch": 0}

    def on_configuration(lattice, weight):
        if args.print_lattices:
            print(render_lattice(lattice))
            print(f"\n{args.weight_rule}-weight = {polynomial_to_string(weight)}\n\n")
        if args.check_conservation:
            diag = diagnose_configuration(lattice, boundary)
            if not diag["conserved"]:
                diagnostics["not_conserved"] += 1
                logger.warning(f"Configuration violates flow conservation:\n{diag['charges']}")
            if diag["exits"] != expected_exits:
                diagnostics["exit_mismatch"] += 1
                logger.debug(
                    f"Traced exits {diag['exits']} differ from pairing {expected_exits}"
                )
        if args.figure:
            lattices.append(lattice)

    result = compute_partition_function(
        rows, columns, inputs, outputs,
        config=config, on_configuration=on_configuration, label=label,
    )

    if result.is_empty:
        print("There were no lattices that satisfy the entered constraints.")
        return 0

    print(f"partition function = {result.polynomial}")
    if args.check_conservation:
        print(
            f"conservation violations = {diagnostics['not_conserved']}, "
            f"exits differing from pairing = {diagnostics['exit_mismatch']}"
        )
    logger.info(
        f"{result.n_configurations} configurations, {len(result.terms)} distinct terms"
    )

    if args.figure:
        from sixvertex.viz.matplotlib_figures import save_configuration_figure
        save_configuration_figure(lattices, args.figure, weights=result.weights)
        logger.info(f"Saved figure to {args.figure}")

    if args.output:
        key = save_result(result, args.output)
        logger.info(f"Saved result to {args.output}/{key}_meta.json")

    return 0


if __name__ == "__main__":
    sys.exit(main())
