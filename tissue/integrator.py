"""
Fixed-step explicit Euler integration.

Step 0 is the initial snapshot; steps 1..n_steps are updates. Every update evaluates all
rates against the previous snapshot, then writes the whole next state into a second
buffer; the buffers swap afterwards. A snapshot is retained when step % save_each == 0,
so a run retains n_steps // save_each + 1 frames. The frame labelled step k holds the state
after k updates; the initial condition is labelled 0, not 1.

The Tissue is the state store: each step is committed back into it, so its getters and
snapshot() follow the run.

No clamping and no overflow trapping: negative or non-finite values propagate.
check_finite only reports the first non-finite step.
"""

import logging
import warnings
from enum import Enum
from typing import Iterator

import numpy as np

from tissue.constants import DEFAULT_DT, DEFAULT_N_STEPS, DEFAULT_SAVE_EACH
from tissue.dynamics import rates
from tissue.errors import DivergenceWarning
from tissue.state import Snapshot, Tissue
from tissue.trajectory import Trajectory

logger = logging.getLogger(__name__)


class Status(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


def _euler_into(tissue: Tissue, src: Snapshot, dst: Snapshot, dt: float) -> None:
    da, dP, dp = rates(tissue, src)
    np.add(src.auxin, dt * da, out=dst.auxin)
    np.add(src.pins, dt * dP, out=dst.pins)
    np.add(src.membrane_pins, dt * dp, out=dst.membrane_pins)


def _empty_like(snapshot: Snapshot) -> Snapshot:
    return Snapshot(
        np.empty_like(snapshot.auxin), np.empty_like(snapshot.pins), np.empty_like(snapshot.membrane_pins)
    )


def _writable_copy(snapshot: Snapshot) -> Snapshot:
    return Snapshot(snapshot.auxin.copy(), snapshot.pins.copy(), snapshot.membrane_pins.copy())


def step(tissue: Tissue, snapshot: Snapshot, dt: float) -> Snapshot:
    """One synchronous Euler update; returns the next snapshot, input untouched."""
    out = _empty_like(snapshot)
    with np.errstate(all="ignore"):
        _euler_into(tissue, snapshot, out, dt)
    return Snapshot.frozen_copy(out.auxin, out.pins, out.membrane_pins)


class Integrator:
    """Runs a Tissue for n_steps of size dt, keeping every save_each-th snapshot."""

    def __init__(
        self,
        tissue: Tissue,
        dt: float = DEFAULT_DT,
        n_steps: int = DEFAULT_N_STEPS,
        save_each: int = DEFAULT_SAVE_EACH,
        check_finite: bool = False,
    ) -> None:
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt}")
        if int(n_steps) != n_steps or n_steps < 0:
            raise ValueError(f"n_steps must be a non-negative integer, got {n_steps}")
        if int(save_each) != save_each or save_each < 1:
            raise ValueError(f"save_each must be a positive integer, got {save_each}")
        self.tissue = tissue
        self.dt = float(dt)
        self.n_steps = int(n_steps)
        self.save_each = int(save_each)
        self.check_finite = check_finite
        self.status = Status.IDLE
        self.step_count = 0
        self.diverged_at: int | None = None
        self.trajectory = Trajectory()
        self._front: Snapshot | None = None
        self._back: Snapshot | None = None

    @property
    def done(self) -> bool:
        return self.status is Status.DONE

    @property
    def current(self) -> Snapshot:
        """Read-only view of the latest state. Overwritten by later steps; copy to keep."""
        if self._front is None:
            return self.tissue.snapshot()
        views = []
        for a in (self._front.auxin, self._front.pins, self._front.membrane_pins):
            v = a.view()
            v.flags.writeable = False
            views.append(v)
        return Snapshot(*views)

    def _start(self) -> None:
        self.tissue.freeze()
        initial = self.tissue.snapshot()
        self.trajectory.append(0, initial)
        self._front = _writable_copy(initial)
        self._back = _empty_like(initial)
        self.status = Status.RUNNING if self.n_steps > 0 else Status.DONE
        logger.info(
            "Integrating %d cells / %d membranes: dt=%g, n_steps=%d, save_each=%d",
            self.tissue.graph.n_cells, self.tissue.graph.n_edges, self.dt, self.n_steps, self.save_each,
        )

    def _advance_one(self) -> None:
        with np.errstate(all="ignore"):
            _euler_into(self.tissue, self._front, self._back, self.dt)
        self._front, self._back = self._back, self._front
        self.tissue._commit(self._front)
        self.step_count += 1
        s = self.step_count
        if self.check_finite and self.diverged_at is None and not self._front.is_finite():
            self.diverged_at = s
            logger.warning("Non-finite state at step %d", s)
            warnings.warn(f"non-finite auxin/PINS values at step {s}", DivergenceWarning, stacklevel=3)
        if s % self.save_each == 0:
            f = self._front
            self.trajectory.append(s, Snapshot.frozen_copy(f.auxin, f.pins, f.membrane_pins))
            logger.debug("Retained step %d", s)
        if s >= self.n_steps:
            self.status = Status.DONE
            logger.info("Integration finished after %d steps, %d frames retained", s, len(self.trajectory))

    def iter_steps(self) -> Iterator[tuple[int, Snapshot]]:
        """Yield (step, current) after each update. Stopping the iteration cancels between steps.

        current is a read-only view that the next step overwrites; copy it to keep it.
        """
        if self.status is Status.IDLE:
            self._start()
        while self.status is Status.RUNNING:
            self._advance_one()
            yield self.step_count, self.current

    def advance(self, k: int) -> int:
        """Run up to k more steps; returns how many were done."""
        if self.status is Status.IDLE:
            self._start()
        done = 0
        while done < k and self.status is Status.RUNNING:
            self._advance_one()
            done += 1
        return done

    def run(self) -> Trajectory:
        for _ in self.iter_steps():
            pass
        return self.trajectory
