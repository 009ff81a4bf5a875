"""
Per-cell parameters and roles, per-membrane conductance, and the dynamic state.
Parameters are stored struct-of-arrays (one float64 array per constant) so the dynamics
can be evaluated for all cells at once. Setup mutates the Tissue; freeze() ends setup.
"""

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Mapping

import numpy as np

from tissue.constants import (
    DEFAULT_CONDUCTANCE,
    DEFAULT_INITIAL_AUXIN,
    DEFAULT_INITIAL_PINS,
    SINK_OVERRIDES,
    SOURCE_OVERRIDES,
)
from tissue.errors import SetupError
from tissue.graph import CellGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellParameters:
    alpha_a: float = 0.0  # auxin production
    beta_a: float = 0.0  # auxin degradation
    gamma_d: float = 1.0  # auxin diffusion rate
    gamma_a: float = 1.0  # auxin active transport rate
    alpha_p: float = 0.0  # PINS production
    beta_p: float = 0.0  # PINS degradation
    volume: float = 1.0
    mu: float = 1.0  # PINS removal rate
    lam: float = 1.0  # PINS insertion rate

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_overrides(self, overrides: Mapping[str, float]) -> "CellParameters":
        unknown = set(overrides) - set(self.field_names())
        if unknown:
            raise SetupError(f"unknown cell parameters: {sorted(unknown)}")
        return replace(self, **{k: float(v) for k, v in overrides.items()})


class Role(Enum):
    NORMAL = "normal"
    SOURCE = "source"
    SINK = "sink"


ROLE_OVERRIDES = {Role.NORMAL: {}, Role.SOURCE: SOURCE_OVERRIDES, Role.SINK: SINK_OVERRIDES}


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Dynamic state at one step: auxin and cytoplasmic PINS per cell, PINS per membrane."""

    auxin: np.ndarray
    pins: np.ndarray
    membrane_pins: np.ndarray

    @classmethod
    def frozen_copy(cls, auxin: np.ndarray, pins: np.ndarray, membrane_pins: np.ndarray) -> "Snapshot":
        arrays = [np.array(a, dtype=np.float64, copy=True) for a in (auxin, pins, membrane_pins)]
        for a in arrays:
            a.flags.writeable = False
        return cls(*arrays)

    def auxin_of(self, cell_id: int) -> float:
        return float(self.auxin[cell_id - 1])

    def pins_of(self, cell_id: int) -> float:
        return float(self.pins[cell_id - 1])

    def membrane_pins_of(self, graph: CellGraph, i: int, j: int) -> float:
        return float(self.membrane_pins[graph.edge_index(i, j)])

    def total_auxin(self) -> float:
        return float(np.sum(self.auxin))

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.auxin))
            and np.all(np.isfinite(self.pins))
            and np.all(np.isfinite(self.membrane_pins))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (
            np.array_equal(self.auxin, other.auxin, equal_nan=True)
            and np.array_equal(self.pins, other.pins, equal_nan=True)
            and np.array_equal(self.membrane_pins, other.membrane_pins, equal_nan=True)
        )


class Tissue:
    """Cells and membranes over a CellGraph. Setters work during setup only; afterwards the state advances through an Integrator."""

    def __init__(
        self,
        graph: CellGraph,
        defaults: CellParameters | None = None,
        initial_auxin: float = DEFAULT_INITIAL_AUXIN,
        initial_pins: float = DEFAULT_INITIAL_PINS,
    ) -> None:
        self.graph = graph
        self.defaults = defaults if defaults is not None else CellParameters()
        self._frozen = False
        self.initialize(initial_auxin, initial_pins)

    def initialize(
        self,
        initial_auxin: float = DEFAULT_INITIAL_AUXIN,
        initial_pins: float = DEFAULT_INITIAL_PINS,
    ) -> None:
        """Baseline state: uniform auxin/PINS, default parameters, pij = 0, S_ij = 1."""
        self._require_setup("initialize")
        n, e = self.graph.n_cells, self.graph.n_edges
        self.params = {
            name: np.full(n, getattr(self.defaults, name), dtype=np.float64)
            for name in CellParameters.field_names()
        }
        self.roles = [Role.NORMAL] * n
        self.conductance = np.full(e, DEFAULT_CONDUCTANCE, dtype=np.float64)
        self._auxin = np.full(n, initial_auxin, dtype=np.float64)
        self._pins = np.full(n, initial_pins, dtype=np.float64)
        self._membrane_pins = np.zeros(e, dtype=np.float64)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _require_setup(self, what: str) -> None:
        if self._frozen:
            raise SetupError(f"{what} is only allowed before integration starts")

    def _index(self, cell_id: int) -> int:
        if not 1 <= cell_id <= self.graph.n_cells:
            raise KeyError(f"no cell with id {cell_id}")
        return cell_id - 1

    def freeze(self) -> None:
        """End setup. Parameters, roles and conductances become read-only."""
        if self._frozen:
            return
        for arr in self.params.values():
            arr.flags.writeable = False
        self.conductance.flags.writeable = False
        self.roles = tuple(self.roles)
        self._frozen = True
        logger.debug("Tissue frozen (source=%s, sink=%s)", self.source, self.sink)

    # --- roles and parameters ---

    def parameters(self, cell_id: int) -> CellParameters:
        k = self._index(cell_id)
        return CellParameters(**{name: float(arr[k]) for name, arr in self.params.items()})

    def role(self, cell_id: int) -> Role:
        return self.roles[self._index(cell_id)]

    def _cell_with_role(self, role: Role) -> int | None:
        for k, r in enumerate(self.roles):
            if r is role:
                return k + 1
        return None

    @property
    def source(self) -> int | None:
        return self._cell_with_role(Role.SOURCE)

    @property
    def sink(self) -> int | None:
        return self._cell_with_role(Role.SINK)

    def override_role(
        self,
        cell_id: int,
        role: Role,
        parameter_overrides: CellParameters | Mapping[str, float] | None = None,
    ) -> CellParameters:
        """Tag a cell and replace its parameter set. Mappings apply on top of the defaults."""
        self._require_setup("override_role")
        k = self._index(cell_id)
        role = Role(role)
        if role is not Role.NORMAL:
            holder = self._cell_with_role(role)
            if holder is not None and holder != cell_id:
                raise SetupError(f"cell {holder} is already the {role.value}")
        if isinstance(parameter_overrides, CellParameters):
            params = parameter_overrides
        else:
            overrides = ROLE_OVERRIDES[role] if parameter_overrides is None else parameter_overrides
            params = self.defaults.with_overrides(overrides)
        for name, arr in self.params.items():
            arr[k] = getattr(params, name)
        self.roles[k] = role
        logger.info("Cell %d at %s set to %s", cell_id, self.graph.position(cell_id), role.value)
        return params

    def set_conductance(self, i: int, j: int, value: float) -> None:
        self._require_setup("set_conductance")
        self.conductance[self.graph.edge_index(i, j)] = value

    # --- dynamic state ---
    # Setters write the initial condition. Once integration starts, the integrator
    # commits every step here, so getters return the latest state.

    def get_cell_state(self, cell_id: int) -> tuple[float, float]:
        k = self._index(cell_id)
        return float(self._auxin[k]), float(self._pins[k])

    def set_cell_state(self, cell_id: int, auxin: float, pins: float) -> None:
        self._require_setup("set_cell_state")
        k = self._index(cell_id)
        self._auxin[k] = auxin
        self._pins[k] = pins

    def get_edge_state(self, i: int, j: int) -> float:
        return float(self._membrane_pins[self.graph.edge_index(i, j)])

    def set_edge_state(self, i: int, j: int, pij: float) -> None:
        self._require_setup("set_edge_state")
        self._membrane_pins[self.graph.edge_index(i, j)] = pij

    def snapshot(self) -> Snapshot:
        """Frozen copy of the current state (the initial condition until integration starts)."""
        return Snapshot.frozen_copy(self._auxin, self._pins, self._membrane_pins)

    def _commit(self, snapshot: Snapshot) -> None:
        """Integrator only: overwrite the dynamic state with the latest step."""
        np.copyto(self._auxin, snapshot.auxin)
        np.copyto(self._pins, snapshot.pins)
        np.copyto(self._membrane_pins, snapshot.membrane_pins)

    # --- renderer accessors ---

    def position(self, cell_id: int) -> tuple[int, int]:
        return self.graph.position(cell_id)

    @property
    def shape(self) -> tuple[int, int]:
        return self.graph.shape
