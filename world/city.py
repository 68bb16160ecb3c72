"""Generated city: buildings, roads and the bounding box around them."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from core.buildings.building import Building
from core.types import Cell, CellType

# Margin kept around the outermost buildings
CITY_BOUNDS_OFFSET = 20

# Bounds of a city with no buildings; folding any building into them yields its own box
EMPTY_MIN = 2**31 - 1
EMPTY_MAX = -(2**31)


@dataclass
class City:
    """Result of a generation run.

    Buildings are keyed by their anchor (top-left corner). ``important_buildings``
    lists the anchors of important buildings in placement order, and ``roads``
    holds one polyline per routing attempt (empty when no route was found).
    """

    buildings: dict[Cell, Building] = field(default_factory=dict)
    important_buildings: list[Cell] = field(default_factory=list)
    roads: list[list[Cell]] = field(default_factory=list)
    min_x: int = EMPTY_MIN
    min_y: int = EMPTY_MIN
    max_x: int = EMPTY_MAX
    max_y: int = EMPTY_MAX
    occupancy: Mapping[Cell, CellType] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )

    def add_building(self, building: Building) -> None:
        """Insert a building under its anchor and fold it into the bounds."""
        self.buildings[building.anchor] = building
        if building.is_important:
            self.important_buildings.append(building.anchor)
        self.update_borders_from_new_building(building)

    def update_borders(self) -> None:
        """Recompute the bounding box from every building."""
        if not self.buildings:
            return

        rects = np.array(
            [(b.x, b.y, b.x + b.width, b.y + b.height) for b in self.buildings.values()],
            dtype=np.int64,
        )
        self.min_x = int(rects[:, 0].min()) - CITY_BOUNDS_OFFSET
        self.min_y = int(rects[:, 1].min()) - CITY_BOUNDS_OFFSET
        self.max_x = int(rects[:, 2].max()) + CITY_BOUNDS_OFFSET
        self.max_y = int(rects[:, 3].max()) + CITY_BOUNDS_OFFSET

    def update_borders_from_new_building(self, building: Building) -> None:
        """Grow the bounding box to include a newly placed building."""
        self.min_x = min(self.min_x, building.x - CITY_BOUNDS_OFFSET)
        self.min_y = min(self.min_y, building.y - CITY_BOUNDS_OFFSET)
        self.max_x = max(self.max_x, building.x + building.width + CITY_BOUNDS_OFFSET)
        self.max_y = max(self.max_y, building.y + building.height + CITY_BOUNDS_OFFSET)

    def in_bounds(self, cell: Cell) -> bool:
        """Check if a cell lies inside the half-open bounding box."""
        x, y = cell
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y

    def doors(self) -> dict[Cell, Building]:
        """Map each door cell to the building it belongs to."""
        return {building.door: building for building in self.buildings.values()}

    def sorted_buildings(self) -> list[Building]:
        """Buildings ordered by x, then y."""
        return sorted(self.buildings.values(), key=lambda b: (b.x, b.y))
