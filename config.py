"""
config.py — Defaults & Environment Overrides
=============================================
Every knob the host uses lives here as a class-level default.  Any of
them can be overridden with an environment variable named ASTAR_<NAME>,
e.g. ASTAR_LOG_LEVEL=DEBUG or ASTAR_RANDOM_VERTICES=20.
"""

import os
from typing import Mapping, Optional


_TRUE = {"1", "true", "yes", "on"}


class SearchConfig:
    # search
    default_heuristic: str   = "euclidean"

    # graph generation
    random_vertices:   int   = 12
    random_radius:     float = 200.0
    canvas_width:      float = 800.0
    canvas_height:     float = 500.0
    grid_rows:         int   = 5
    grid_cols:         int   = 7
    grid_spacing:      float = 80.0

    # host
    log_level:         str   = "INFO"
    debug:             bool  = False
    host:              str   = "127.0.0.1"
    port:              int   = 5000
    max_runs:          int   = 256     # live searches kept across sessions

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SearchConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        for name, kind in cls.__annotations__.items():
            raw = env.get(f"ASTAR_{name.upper()}")
            if raw is None:
                continue
            if kind is bool:
                value = raw.strip().lower() in _TRUE
            else:
                try:
                    value = kind(raw)
                except ValueError:
                    raise ValueError(f"ASTAR_{name.upper()}={raw!r} is not a valid {kind.__name__}") from None
            setattr(cfg, name, value)
        return cfg

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in type(self).__annotations__}
