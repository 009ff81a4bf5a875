import numpy as np
import pytest

from tissue import (
    CellParameters,
    Tissue,
    auxin_rate,
    build_graph,
    cytoplasmic_pins_rate,
    flux,
    gate,
    membrane_pins_rate,
    rates,
    step,
)

PAIR = [[-1, -1]]


def two_cells(**defaults) -> Tissue:
    return Tissue(build_graph(PAIR), defaults=CellParameters(**defaults))


def test_diffusion_worked_example():
    t = two_cells(gamma_a=0.0)
    t.set_cell_state(1, 10.0, 0.0)
    snap = t.snapshot()
    g = t.graph

    j = flux(t, snap)
    assert j[g.edge_index(1, 2)] == pytest.approx(-10.0)
    assert j[g.edge_index(2, 1)] == pytest.approx(10.0)
    assert auxin_rate(t, snap) == pytest.approx([-10.0, 10.0])

    nxt = step(t, snap, 0.1)
    assert nxt.auxin_of(1) == pytest.approx(9.0)
    assert nxt.auxin_of(2) == pytest.approx(1.0)
    # input untouched
    assert snap.auxin_of(1) == 10.0


def test_gate_values():
    assert gate(0.0) == 0.0
    assert gate(1.0) == 0.5
    assert gate(1e8) == pytest.approx(1.0)
    assert gate(1e3) < 1.0
    x = np.linspace(-20, 20, 81)
    assert np.array_equal(gate(x), gate(-x))
    assert np.all((gate(x) >= 0) & (gate(x) < 1))
    assert np.all(np.diff(gate(np.linspace(0, 20, 41))) > 0)


def test_active_transport_uses_membrane_asymmetry():
    t = two_cells(gamma_d=0.0, gamma_a=1.0)
    t.set_cell_state(1, 2.0, 0.0)
    t.set_cell_state(2, 1.0, 0.0)
    t.set_edge_state(1, 2, 1.0)
    snap = t.snapshot()
    j = flux(t, snap)
    # J(1,2) = a1 p12 - a2 p21 = 2; J(2,1) = a2 p21 - a1 p12 = -2
    assert j[t.graph.edge_index(1, 2)] == pytest.approx(2.0)
    assert j[t.graph.edge_index(2, 1)] == pytest.approx(-2.0)


def test_flux_uses_own_rate_constants():
    t = two_cells(gamma_a=0.0)
    t.override_role(2, "normal", {"gamma_a": 0.0, "gamma_d": 3.0})
    t.set_cell_state(1, 1.0, 0.0)
    j = flux(t, t.snapshot())
    assert j[t.graph.edge_index(1, 2)] == pytest.approx(-1.0)
    assert j[t.graph.edge_index(2, 1)] == pytest.approx(3.0)


def test_pins_rates():
    t = two_cells(gamma_d=0.0, volume=2.0)
    t.set_cell_state(1, 2.0, 4.0)
    t.set_cell_state(2, 1.0, 0.0)
    t.set_edge_state(1, 2, 1.0)
    snap = t.snapshot()
    e12 = t.graph.edge_index(1, 2)
    e21 = t.graph.edge_index(2, 1)

    dp = membrane_pins_rate(t, snap)
    # lam P1 h(2) - mu p12 = 4 * 0.8 - 1
    assert dp[e12] == pytest.approx(2.2)
    # P2 = 0 so only removal: -mu p21 = 0
    assert dp[e21] == pytest.approx(0.0)

    dP = cytoplasmic_pins_rate(t, snap)
    assert dP[0] == pytest.approx(-2.2 / 2.0)
    assert dP[1] == pytest.approx(0.0)

    da = auxin_rate(t, snap)
    assert da == pytest.approx([2.0 / 2.0, -2.0 / 2.0])


def test_conductance_scales_transfer():
    t = two_cells(gamma_a=0.0)
    t.set_cell_state(1, 10.0, 0.0)
    t.set_conductance(1, 2, 0.5)
    da = auxin_rate(t, t.snapshot())
    assert da == pytest.approx([-5.0, 10.0])


def test_isolated_cell():
    t = Tissue(build_graph([[-1]]), defaults=CellParameters(alpha_a=2.0, beta_a=0.5, alpha_p=1.0, beta_p=0.25))
    t.set_cell_state(1, 3.0, 2.0)
    snap = t.snapshot()
    assert auxin_rate(t, snap)[0] == 2.0 - 0.5 * 3.0
    assert cytoplasmic_pins_rate(t, snap)[0] == 1.0 - 0.25 * 2.0
    assert flux(t, snap).shape == (0,)


def test_rates_matches_individual_functions():
    t = Tissue(build_graph([[-1, -1, 0], [-1, -1, -1]]), initial_pins=1.0)
    t.override_role(1, "source")
    t.override_role(5, "sink")
    for k, (i, j) in enumerate(t.graph.edges()):
        t.set_edge_state(i, j, 0.1 * k)
    snap = t.snapshot()
    da, dP, dp = rates(t, snap)
    assert np.array_equal(da, auxin_rate(t, snap))
    assert np.array_equal(dP, cytoplasmic_pins_rate(t, snap))
    assert np.array_equal(dp, membrane_pins_rate(t, snap))
