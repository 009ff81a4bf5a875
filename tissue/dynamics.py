"""
Flux and rates of change, evaluated for every cell and membrane of one snapshot at once.

    J(i,j)     = gamma_d_i (a_j - a_i) + gamma_a_i (a_i p_ij - a_j p_ji)
    da/dt(i)   = alpha_a_i - beta_a_i a_i + (1/V_i) sum_j S_ij J(i,j)
    h(x)       = x^2 / (1 + x^2)
    dp/dt(i,j) = lam_i P_i h(J(i,j)) - mu_i p_ij
    dP/dt(i)   = alpha_p_i - beta_p_i P_i - (1/V_i) sum_j S_ij dp/dt(i,j)

Edge arrays are indexed by membrane; per-cell sums over outgoing membranes use bincount
on the source index. Nothing here mutates its inputs.
"""

import numpy as np

from tissue.state import Snapshot, Tissue


def gate(x):
    """Saturating gate in [0, 1): 0 at x = 0, 1/2 at |x| = 1, even in x."""
    x2 = np.square(x)
    return x2 / (1.0 + x2)


def flux(tissue: Tissue, snapshot: Snapshot) -> np.ndarray:
    """J per membrane (shape n_edges). Rate constants are those of the membrane's own cell."""
    g = tissue.graph
    p = tissue.params
    a = snapshot.auxin
    pij = snapshot.membrane_pins
    pji = pij[g.edge_reverse]
    ai = a[g.edge_src]
    aj = a[g.edge_dst]
    return p["gamma_d"][g.edge_src] * (aj - ai) + p["gamma_a"][g.edge_src] * (ai * pij - aj * pji)


def _sum_outgoing(tissue: Tissue, per_edge: np.ndarray) -> np.ndarray:
    """Sum S_ij * x_ij over outgoing membranes of each cell. Isolated cells get 0."""
    g = tissue.graph
    return np.bincount(g.edge_src, weights=tissue.conductance * per_edge, minlength=g.n_cells)


def auxin_rate(tissue: Tissue, snapshot: Snapshot, j: np.ndarray | None = None) -> np.ndarray:
    p = tissue.params
    if j is None:
        j = flux(tissue, snapshot)
    transfer = _sum_outgoing(tissue, j)
    return p["alpha_a"] - p["beta_a"] * snapshot.auxin + transfer / p["volume"]


def membrane_pins_rate(tissue: Tissue, snapshot: Snapshot, j: np.ndarray | None = None) -> np.ndarray:
    g = tissue.graph
    p = tissue.params
    if j is None:
        j = flux(tissue, snapshot)
    cytoplasmic = snapshot.pins[g.edge_src]
    return p["lam"][g.edge_src] * cytoplasmic * gate(j) - p["mu"][g.edge_src] * snapshot.membrane_pins


def cytoplasmic_pins_rate(
    tissue: Tissue, snapshot: Snapshot, dp: np.ndarray | None = None
) -> np.ndarray:
    p = tissue.params
    if dp is None:
        dp = membrane_pins_rate(tissue, snapshot)
    allocated = _sum_outgoing(tissue, dp)
    return p["alpha_p"] - p["beta_p"] * snapshot.pins - allocated / p["volume"]


def rates(tissue: Tissue, snapshot: Snapshot) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """(da/dt per cell, dP/dt per cell, dp/dt per membrane) from one flux evaluation."""
    j = flux(tissue, snapshot)
    da = auxin_rate(tissue, snapshot, j)
    dp = membrane_pins_rate(tissue, snapshot, j)
    dP = cytoplasmic_pins_rate(tissue, snapshot, dp)
    return da, dP, dp
