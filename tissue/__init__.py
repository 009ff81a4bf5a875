"""Tissue: maze cell graph, auxin/PINS state, dynamics and Euler integration."""

from tissue.graph import CellGraph, build_graph
from tissue.state import CellParameters, Role, Snapshot, Tissue
from tissue.dynamics import auxin_rate, cytoplasmic_pins_rate, flux, gate, membrane_pins_rate, rates
from tissue.integrator import Integrator, Status, step
from tissue.trajectory import Frame, Trajectory
from tissue.errors import DivergenceWarning, InvalidGridError, SetupError, TissueError, UnknownEdgeError

__all__ = [
    "CellGraph", "build_graph",
    "CellParameters", "Role", "Snapshot", "Tissue",
    "auxin_rate", "cytoplasmic_pins_rate", "flux", "gate", "membrane_pins_rate", "rates",
    "Integrator", "Status", "step",
    "Frame", "Trajectory",
    "DivergenceWarning", "InvalidGridError", "SetupError", "TissueError", "UnknownEdgeError",
]
