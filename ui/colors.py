"""
Display-only color maps. Auxin uses a davos-like ramp read backwards (t = 1 - a / max_auxin):
no auxin is near white, max_auxin and above is deep navy. Membrane PINS fade from the cell
color to orange with density. Values outside the scale (negative, inf) are clipped; NaN
draws as NAN_COLOR.
"""

import numpy as np

# davos-like: deep navy → blue → slate → sage → cream → white
_DAVOS_STOPS = np.array([
    [0.17, 0.10, 0.30], [0.16, 0.28, 0.55], [0.33, 0.46, 0.62], [0.51, 0.59, 0.63],
    [0.70, 0.76, 0.64], [0.92, 0.93, 0.82], [1.0, 1.0, 1.0],
], dtype=np.float64)
_DAVOS_T = np.array([0.0, 0.15, 0.35, 0.55, 0.72, 0.88, 1.0], dtype=np.float64)

PINS_COLOR = np.array([1.0, 0.55, 0.1], dtype=np.float64)
NAN_COLOR = (255, 0, 255)
WALL_COLOR = (255, 255, 255)
SOURCE_OUTLINE = (220, 40, 40)
SINK_OUTLINE = (40, 160, 60)


def _apply_gradient(t: np.ndarray, stops: np.ndarray, t_vals: np.ndarray) -> np.ndarray:
    """Map t in [0,1] to RGB via piecewise-linear stops. t 1D, returns (n, 3)."""
    t = np.clip(np.asarray(t, dtype=np.float64).reshape(-1), 0.0, 1.0)
    out = np.zeros((t.size, 3), dtype=np.float64)
    for i in range(len(t_vals) - 1):
        t0, t1 = t_vals[i], t_vals[i + 1]
        mask = (t >= t0) & (t < t1) if i < len(t_vals) - 2 else (t >= t0)
        s = np.where(mask, (t - t0) / max(1e-9, t1 - t0), 0.0)
        s1 = s[mask].reshape(-1, 1)
        out[mask] = s1 * stops[i + 1] + (1.0 - s1) * stops[i]
    return out


def auxin_to_rgb(auxin: np.ndarray, max_auxin: float = 10.0) -> np.ndarray:
    """(n,) auxin -> (n, 3) uint8 RGB."""
    a = np.asarray(auxin, dtype=np.float64).reshape(-1)
    scale = max_auxin if max_auxin > 1e-12 else 1e-12
    with np.errstate(invalid="ignore", over="ignore"):
        t = 1.0 - a / scale
    nan = np.isnan(t)
    rgb = (_apply_gradient(np.where(nan, 0.0, t), _DAVOS_STOPS, _DAVOS_T) * 255).astype(np.uint8)
    rgb[nan] = NAN_COLOR
    return rgb


def membrane_to_rgb(membrane_pins: np.ndarray, cell_rgb: np.ndarray, max_pins: float | None = None) -> np.ndarray:
    """(e,) PINS densities blended over their own cell's (e, 3) color; scale = max density if not given."""
    p = np.nan_to_num(np.asarray(membrane_pins, dtype=np.float64).reshape(-1), nan=0.0, posinf=0.0, neginf=0.0)
    if max_pins is None:
        max_pins = float(np.max(p)) if p.size else 0.0
    w = np.clip(p / max_pins, 0.0, 1.0) if max_pins > 1e-12 else np.zeros_like(p)
    base = np.asarray(cell_rgb, dtype=np.float64) / 255.0
    rgb = (1.0 - w)[:, np.newaxis] * base + w[:, np.newaxis] * PINS_COLOR
    return (np.clip(rgb, 0, 1) * 255).astype(np.uint8)
