"""Load/save run parameters. Configs live in configs/ as {name}.json; missing keys fall back to defaults."""

import json
import logging
import re
from dataclasses import asdict
from pathlib import Path

from tissue import CellParameters, Integrator, Role, Tissue, build_graph
from tissue.constants import (
    DEFAULT_DT,
    DEFAULT_INITIAL_AUXIN,
    DEFAULT_INITIAL_PINS,
    DEFAULT_N_STEPS,
    DEFAULT_SAVE_EACH,
    SOURCE_OVERRIDES,
)

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
LAST_FILE = CONFIG_DIR / "last.txt"

# In-memory index of saved config names so the panel avoids disk access.
_CONFIG_INDEX: set[str] = set()


def refresh_index() -> None:
    """Rebuild _CONFIG_INDEX from disk. Call at startup and after external changes."""
    global _CONFIG_INDEX
    _CONFIG_INDEX = set()
    if not CONFIG_DIR.exists():
        return
    for f in CONFIG_DIR.glob("*.json"):
        _CONFIG_INDEX.add(f.stem)


def _sanitize_name(name: str) -> str:
    s = (name or "").strip()
    s = re.sub(r"[^\w\s-]", "", s)
    s = re.sub(r"[\s-]+", "_", s).strip("_")
    return s[:64] or "unnamed"


def config_path(name: str) -> Path:
    return CONFIG_DIR / f"{_sanitize_name(name)}.json"


def list_configs() -> list[str]:
    return sorted(_CONFIG_INDEX, key=str.lower)


def get_last_config() -> str | None:
    if not LAST_FILE.exists():
        return None
    try:
        raw = LAST_FILE.read_text().strip()
    except OSError:
        return None
    return raw or None


def set_last_config(name: str) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    LAST_FILE.write_text(_sanitize_name(name))


def load_config(path: Path | str | None = None) -> dict:
    """Config at path, else the last saved one, else defaults. Unknown keys are dropped."""
    if path is None:
        last = get_last_config()
        if last is None:
            return _default_config()
        path = config_path(last)
    p = Path(path)
    if not p.exists():
        logger.info("No config at %s, using defaults", p)
        return _default_config()
    with open(p, "r") as f:
        return _merge_defaults(json.load(f))


def save_config(cfg: dict, name: str) -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    path = config_path(name)
    with open(path, "w") as f:
        json.dump(_merge_defaults(cfg), f, indent=2)
    set_last_config(name)
    _CONFIG_INDEX.add(_sanitize_name(name))
    logger.info("Saved config %s", path)
    return path


def delete_config(name: str) -> None:
    key = _sanitize_name(name)
    _CONFIG_INDEX.discard(key)
    config_path(name).unlink(missing_ok=True)
    if get_last_config() == key:
        LAST_FILE.unlink(missing_ok=True)


def _default_config() -> dict:
    return {
        "maze": "maze.csv",
        "dt": DEFAULT_DT,
        "n_steps": DEFAULT_N_STEPS,
        "save_each": DEFAULT_SAVE_EACH,
        "initial_auxin": DEFAULT_INITIAL_AUXIN,
        "initial_pins": DEFAULT_INITIAL_PINS,
        "cell": asdict(CellParameters()),
        "source": {"cell": 1, "overrides": dict(SOURCE_OVERRIDES)},
        "sink": None,
        "check_finite": False,
        "steps_per_frame": 20,
        "max_auxin": 10.0,
        "show_membranes": True,
    }


def _merge_defaults(data: dict) -> dict:
    d = _default_config()
    if isinstance(data.get("cell"), dict):
        d["cell"] = {**d["cell"], **data["cell"]}
    for k in (
        "maze", "dt", "n_steps", "save_each", "initial_auxin", "initial_pins",
        "source", "sink", "check_finite", "steps_per_frame", "max_auxin", "show_membranes",
    ):
        if k in data:
            d[k] = data[k]
    return d


def _role_entry(entry) -> tuple[int, dict | None] | None:
    """{"cell": id, "overrides": {...}} or a bare cell id; None disables the role.
    Missing or null overrides use the role's reference overrides."""
    if entry is None:
        return None
    if isinstance(entry, dict):
        overrides = entry.get("overrides")
        return int(entry["cell"]), dict(overrides) if overrides is not None else None
    return int(entry), None


def tissue_from_config(maze, cfg: dict) -> Tissue:
    """Build the cell graph for maze and a Tissue set up per cfg (defaults, source, sink)."""
    cfg = _merge_defaults(cfg)
    graph = build_graph(maze)
    tissue = Tissue(
        graph,
        defaults=CellParameters().with_overrides(cfg["cell"]),
        initial_auxin=cfg["initial_auxin"],
        initial_pins=cfg["initial_pins"],
    )
    for key, role in (("source", Role.SOURCE), ("sink", Role.SINK)):
        entry = _role_entry(cfg[key])
        if entry is None:
            continue
        cell_id, overrides = entry
        if cell_id < 0:
            # counted from the end, e.g. -1 = last cell in scan order
            cell_id = graph.n_cells + 1 + cell_id
        tissue.override_role(cell_id, role, overrides)
    return tissue


def integrator_from_config(tissue: Tissue, cfg: dict) -> Integrator:
    cfg = _merge_defaults(cfg)
    return Integrator(
        tissue,
        dt=cfg["dt"],
        n_steps=cfg["n_steps"],
        save_each=cfg["save_each"],
        check_finite=cfg["check_finite"],
    )
