"""Named five-colour palettes.

Slot conventions used by the scene assembler:

* circles: slot of their tier (0, 1, 2 by default),
* paths: slot of the circle containing the seed, else slot 3,
* grid cells: :class:`~patterngen.lattice.SizeClass` value,
* chords: slots 0 and 1.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

logger = logging.getLogger(__name__)

PALETTE_SIZE = 5
DEFAULT_PALETTE = "sunset"

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class Palette:
    name: str
    colors: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.colors) != PALETTE_SIZE:
            raise ValueError(f"palette '{self.name}' must define {PALETTE_SIZE} colors")
        for color in self.colors:
            if not _HEX_COLOR.match(color):
                raise ValueError(f"palette '{self.name}' has invalid color '{color}'")

    def __getitem__(self, slot: int) -> str:
        return self.colors[slot % PALETTE_SIZE]


class PaletteTable:
    """Lookup table of palettes passed explicitly to generators."""

    def __init__(self, default: str = DEFAULT_PALETTE) -> None:
        self._palettes: Dict[str, Palette] = {}
        self.default = default

    def register(self, palette: Palette) -> None:
        if palette.name in self._palettes:
            raise ValueError(f"palette '{palette.name}' already registered")
        self._palettes[palette.name] = palette

    def register_many(self, palettes: Iterable[Palette]) -> None:
        for palette in palettes:
            self.register(palette)

    def get(self, name: str) -> Palette:
        try:
            return self._palettes[name]
        except KeyError as exc:
            raise KeyError(f"palette '{name}' not found") from exc

    def resolve(self, name: str | None) -> Palette:
        """Return ``name`` or the default palette when ``name`` is unknown."""

        if name is not None and name in self._palettes:
            return self._palettes[name]
        if name is not None:
            logger.warning("unknown palette '%s', using '%s'", name, self.default)
        return self.get(self.default)

    def names(self) -> List[str]:
        return sorted(self._palettes)

    def __contains__(self, name: object) -> bool:
        return name in self._palettes


def build_default_palettes() -> PaletteTable:
    table = PaletteTable(default=DEFAULT_PALETTE)
    table.register_many(
        [
            Palette("sunset", ("#E4572E", "#F3A712", "#A8C686", "#669BBC", "#29335C")),
            Palette("ocean", ("#03045E", "#0077B6", "#00B4D8", "#90E0EF", "#CAF0F8")),
            Palette("forest", ("#2D6A4F", "#40916C", "#74C69D", "#B7E4C7", "#081C15")),
            Palette("mono", ("#111111", "#444444", "#777777", "#AAAAAA", "#DDDDDD")),
            Palette("candy", ("#FF595E", "#FFCA3A", "#8AC926", "#1982C4", "#6A4C93")),
        ]
    )
    return table


__all__ = ["PALETTE_SIZE", "DEFAULT_PALETTE", "Palette", "PaletteTable", "build_default_palettes"]
