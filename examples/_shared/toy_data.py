"""
Toy population helpers for examples.
"""
from typing import Any, List, Optional, Tuple
import numpy as np

def build_population(
    n_clients: int,
    values: List[Any],
    num_cohorts: int,
    weights: Optional[List[float]] = None,
    rng: Optional[np.random.Generator] = None
) -> List[Tuple[str, int, Any]]:
    """
    Generate (client, cohort, value) rows.
    
    Args:
        n_clients: Number of simulated clients.
        values: Possible reported values.
        num_cohorts: Cohorts are assigned uniformly in [0, num_cohorts).
        weights: Probability weights for each value (sums to 1).
        rng: Random number generator.
    """
    if rng is None:
        rng = np.random.default_rng()
    chosen = rng.choice(len(values), size=n_clients, p=weights)
    cohorts = rng.integers(0, num_cohorts, size=n_clients)
    return [(f"client-{i}", int(cohorts[i]), values[int(chosen[i])]) for i in range(n_clients)]
