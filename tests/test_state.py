import numpy as np
import pytest

from tissue import CellParameters, Role, SetupError, Tissue, UnknownEdgeError, build_graph

LINE = [[-1, -1, -1]]


@pytest.fixture
def tissue():
    return Tissue(build_graph(LINE))


def test_initial_state(tissue):
    for i in tissue.graph.cell_ids():
        assert tissue.get_cell_state(i) == (0.0, 0.0)
        assert tissue.parameters(i) == CellParameters()
        assert tissue.role(i) is Role.NORMAL
    for i, j in tissue.graph.edges():
        assert tissue.get_edge_state(i, j) == 0.0
    assert np.all(tissue.conductance == 1.0)
    assert tissue.source is None and tissue.sink is None


def test_configured_baseline():
    t = Tissue(build_graph(LINE), defaults=CellParameters(gamma_a=0.0), initial_auxin=2.0, initial_pins=0.5)
    assert t.get_cell_state(2) == (2.0, 0.5)
    assert t.parameters(3).gamma_a == 0.0


def test_reference_defaults():
    p = CellParameters()
    assert (p.alpha_a, p.beta_a, p.gamma_d, p.gamma_a) == (0.0, 0.0, 1.0, 1.0)
    assert (p.alpha_p, p.beta_p, p.volume, p.mu, p.lam) == (0.0, 0.0, 1.0, 1.0, 1.0)


def test_role_defaults(tissue):
    tissue.override_role(1, Role.SOURCE)
    tissue.override_role(3, "sink")
    assert tissue.source == 1
    assert tissue.sink == 3
    assert tissue.parameters(1).alpha_a == 10.0
    assert tissue.parameters(3).beta_a == 10.0
    assert tissue.parameters(2) == CellParameters()


def test_role_overrides_apply_on_defaults():
    t = Tissue(build_graph(LINE), defaults=CellParameters(gamma_d=0.5))
    params = t.override_role(2, Role.SOURCE, {"alpha_a": 3})
    assert params == CellParameters(gamma_d=0.5, alpha_a=3.0)
    assert t.parameters(2) == params


def test_role_with_full_parameter_set(tissue):
    full = CellParameters(alpha_a=1.0, volume=2.0)
    tissue.override_role(2, Role.SINK, full)
    assert tissue.parameters(2) == full
    assert tissue.role(2) is Role.SINK


def test_unknown_parameter_name(tissue):
    with pytest.raises(SetupError):
        tissue.override_role(1, Role.SOURCE, {"alpha": 1.0})


def test_single_source(tissue):
    tissue.override_role(1, Role.SOURCE)
    tissue.override_role(1, Role.SOURCE, {"alpha_a": 5.0})
    with pytest.raises(SetupError):
        tissue.override_role(2, Role.SOURCE)
    tissue.override_role(1, Role.NORMAL)
    tissue.override_role(2, Role.SOURCE)
    assert tissue.source == 2
    assert tissue.parameters(1) == CellParameters()


def test_cell_and_edge_state(tissue):
    tissue.set_cell_state(2, 4.0, 1.5)
    tissue.set_edge_state(2, 3, 0.25)
    assert tissue.get_cell_state(2) == (4.0, 1.5)
    assert tissue.get_edge_state(2, 3) == 0.25
    assert tissue.get_edge_state(3, 2) == 0.0


def test_unknown_edge(tissue):
    with pytest.raises(UnknownEdgeError):
        tissue.get_edge_state(1, 3)
    with pytest.raises(UnknownEdgeError):
        tissue.set_edge_state(1, 1, 1.0)
    with pytest.raises(UnknownEdgeError):
        tissue.set_conductance(3, 1, 2.0)


def test_unknown_cell(tissue):
    with pytest.raises(KeyError):
        tissue.get_cell_state(4)
    with pytest.raises(KeyError):
        tissue.override_role(0, Role.SOURCE)


def test_freeze_ends_setup(tissue):
    tissue.freeze()
    assert tissue.frozen
    with pytest.raises(SetupError):
        tissue.override_role(1, Role.SOURCE)
    with pytest.raises(SetupError):
        tissue.set_cell_state(1, 1.0, 1.0)
    with pytest.raises(SetupError):
        tissue.set_edge_state(1, 2, 1.0)
    with pytest.raises(SetupError):
        tissue.set_conductance(1, 2, 2.0)
    with pytest.raises(SetupError):
        tissue.initialize()
    with pytest.raises(ValueError):
        tissue.params["alpha_a"][0] = 1.0
    with pytest.raises(ValueError):
        tissue.conductance[0] = 2.0
    # reads still work
    assert tissue.get_cell_state(1) == (0.0, 0.0)


def test_snapshot_is_frozen_copy(tissue):
    tissue.set_cell_state(1, 3.0, 0.0)
    snap = tissue.snapshot()
    tissue.set_cell_state(1, 5.0, 0.0)
    assert snap.auxin_of(1) == 3.0
    with pytest.raises(ValueError):
        snap.auxin[0] = 1.0
    assert snap.membrane_pins_of(tissue.graph, 1, 2) == 0.0


def test_snapshot_equality():
    a = Tissue(build_graph(LINE)).snapshot()
    b = Tissue(build_graph(LINE)).snapshot()
    c = Tissue(build_graph(LINE), initial_auxin=1.0).snapshot()
    assert a == b
    assert a != c
