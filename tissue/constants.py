"""Model constants. Wall tile = 0; every other tile id is an open cell."""

WALL = 0
# Neighbor offsets (drow, dcol): down, right, up, left. No diagonals.
CARDINAL_OFFSETS = [(1, 0), (0, 1), (-1, 0), (0, -1)]

DEFAULT_INITIAL_AUXIN = 0.0
DEFAULT_INITIAL_PINS = 0.0
DEFAULT_CONDUCTANCE = 1.0

DEFAULT_DT = 0.1
DEFAULT_N_STEPS = 1000
DEFAULT_SAVE_EACH = 10

# Parameter overrides applied when a role is set without explicit overrides.
SOURCE_OVERRIDES = {"alpha_a": 10.0}
SINK_OVERRIDES = {"beta_a": 10.0}
