"""Bundle a partition-function run into a single result object."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from sixvertex.enumeration.backtracking import (
    ConfigurationCallback,
    EnumerationConfig,
    find_partition_function,
)
from sixvertex.lattices.grid import BoundarySpec, get_preset
from sixvertex.weights.polynomial import merge_terms, partition_function_to_string

logger = logging.getLogger(__name__)


@dataclass
class PartitionResult:
    """Everything computed for one lattice and boundary."""
    rows: int
    columns: int
    boundary: BoundarySpec
    weight_rule: str
    enforce_connectivity: bool = False
    label: str = "custom"

    weights: List[np.ndarray] = field(default_factory=list)  # one per configuration
    terms: List[np.ndarray] = field(default_factory=list)    # merged

    compute_time_seconds: float = 0.0

    @property
    def n_configurations(self) -> int:
        return len(self.weights)

    @property
    def is_empty(self) -> bool:
        return not self.weights

    @property
    def polynomial(self) -> str:
        return partition_function_to_string(self.terms)

    def coefficient_total(self) -> int:
        """Sum of merged coefficients."""
        return int(sum(int(t[0]) for t in self.terms))


def compute_partition_function(
    rows: int,
    columns: int,
    inputs: Sequence[bool],
    outputs: Sequence[bool],
    config: Optional[EnumerationConfig] = None,
    on_configuration: Optional[ConfigurationCallback] = None,
    label: str = "custom",
) -> PartitionResult:
    """Enumerate, merge and package the partition function of one setup."""
    if config is None:
        config = EnumerationConfig()

    t0 = time.time()
    weights = find_partition_function(
        rows, columns, inputs, outputs,
        config=config, on_configuration=on_configuration,
    )
    terms = merge_terms(weights)

    return PartitionResult(
        rows=rows,
        columns=columns,
        boundary=BoundarySpec(tuple(inputs), tuple(outputs)),
        weight_rule=config.weight_rule,
        enforce_connectivity=config.enforce_connectivity,
        label=label,
        weights=weights,
        terms=terms,
        compute_time_seconds=time.time() - t0,
    )


def run_presets(
    names: Sequence[str],
    config: Optional[EnumerationConfig] = None,
) -> Dict[str, PartitionResult]:
    """Compute the partition function of each named boundary preset."""
    results = {}
    for name in names:
        rows, columns, boundary = get_preset(name)
        result = compute_partition_function(
            rows, columns, boundary.inputs, boundary.outputs,
            config=config, label=name,
        )
        logger.info(
            f"{name}: {result.n_configurations} configurations, "
            f"Z = {result.polynomial or '(none)'}"
        )
        results[name] = result
    return results
