from __future__ import annotations

import time
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .tiles import CORRIDOR_LAYOUTS, DUNGEON_LAYOUTS, ROOM_LAYOUTS


class OptionsError(ValueError):
    """Raised when user-supplied generation options cannot be parsed."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


@dataclass
class DungeonOptions:
    seed: Optional[int] = None
    n_rows: int = 39
    n_cols: int = 39
    dungeon_layout: str = "None"
    room_min: int = 3
    room_max: int = 9
    room_layout: str = "Scattered"
    corridor_layout: str = "Bent"
    remove_deadends: int = 50
    add_stairs: int = 2
    cell_size: int = 18
    floors: int = 1

    def normalized(self) -> "DungeonOptions":
        """Return a copy with the seed resolved and both dimensions forced odd."""
        seed = self.seed if self.seed is not None else int(time.time() * 1000)
        n_rows = self.n_rows + 1 if self.n_rows % 2 == 0 else self.n_rows
        n_cols = self.n_cols + 1 if self.n_cols % 2 == 0 else self.n_cols
        return replace(self, seed=seed, n_rows=n_rows, n_cols=n_cols)

    def for_floor(self, floor_number: int) -> "DungeonOptions":
        """Options for a later floor: same shape, seed offset by 1000 per floor."""
        return replace(self, seed=self.seed + floor_number * 1000)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DungeonOptions":
        """Build options from loosely-typed input (query strings, JSON, CLI).

        Unknown keys are ignored; missing keys fall back to defaults. Raises
        OptionsError for values that are not integers, out of range, or not one
        of the recognised layout names.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, raw in data.items():
            if key not in known or raw is None or raw == "":
                continue
            if key in _ENUMS:
                kwargs[key] = _parse_enum(key, raw)
            else:
                kwargs[key] = _parse_int(key, raw)
        opts = cls(**kwargs)
        opts.validate()
        return opts

    def validate(self) -> None:
        for key, (lo, hi) in _RANGES.items():
            value = getattr(self, key)
            if value is None:
                continue
            if value < lo or (hi is not None and value > hi):
                bound = f"between {lo} and {hi}" if hi is not None else f">= {lo}"
                raise OptionsError(key, f"must be {bound} (got {value})")
        total = self.n_rows * self.n_cols * self.floors
        if total > MAX_TOTAL_CELLS:
            raise OptionsError("floors", f"n_rows x n_cols x floors must be <= {MAX_TOTAL_CELLS} (got {total})")
        if self.room_max < self.room_min:
            raise OptionsError("room_max", f"must be >= room_min ({self.room_min})")
        for key, allowed in _ENUMS.items():
            if getattr(self, key) not in allowed:
                raise OptionsError(key, f"must be one of {', '.join(allowed)}")


_ENUMS = {
    "dungeon_layout": DUNGEON_LAYOUTS,
    "room_layout": ROOM_LAYOUTS,
    "corridor_layout": tuple(CORRIDOR_LAYOUTS),
}

# Upper bound on cells generated by one request, summed over floors
MAX_TOTAL_CELLS = 2_000_000

_RANGES = {
    "n_rows": (5, 999),
    "n_cols": (5, 999),
    "room_min": (1, None),
    "room_max": (1, None),
    "remove_deadends": (0, 100),
    "add_stairs": (0, None),
    "cell_size": (1, None),
    "floors": (1, 64),
}


def _parse_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise OptionsError(key, "expected an integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise OptionsError(key, f"expected an integer (got {raw!r})") from None


def _parse_enum(key: str, raw: Any) -> str:
    s = str(raw).strip()
    for name in _ENUMS[key]:
        if name.lower() == s.lower():
            return name
    raise OptionsError(key, f"must be one of {', '.join(_ENUMS[key])} (got {raw!r})")


def option_choices() -> Dict[str, Any]:
    """Defaults and allowed enum values, for API discovery."""
    return {
        "defaults": DungeonOptions().to_dict(),
        "choices": {k: list(v) for k, v in _ENUMS.items()},
    }


__all__ = ["DungeonOptions", "OptionsError", "option_choices", "MAX_TOTAL_CELLS"]
