"""Rectangular building with a single door on its boundary."""

import random
from collections.abc import Iterator
from dataclasses import dataclass, replace

from core.types import BuildingID, Cell


@dataclass
class Building:
    """Axis-aligned rectangle anchored at its top-left corner.

    Walls are inclusive: a building spans ``x..=x + width`` and ``y..=y + height``.
    The door is a single cell on one of the four walls.
    """

    door: Cell
    x: int
    y: int
    width: int
    height: int
    is_important: bool = False
    id: BuildingID = BuildingID(0)

    def __post_init__(self) -> None:
        """Validate the rectangle and its door."""
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Building at {self.anchor} has negative size")
        if not self.is_on_boundary(self.door):
            raise ValueError(f"Door {self.door} is not on the walls of building at {self.anchor}")

    @classmethod
    def with_random_door(
        cls,
        rng: random.Random,
        x: int,
        y: int,
        width: int,
        height: int,
        building_id: int,
    ) -> "Building":
        """Create a non-important building with its door on a random wall.

        Args:
            rng: Random source owned by the caller
            x: Left edge
            y: Top edge
            width: Horizontal extent
            height: Vertical extent
            building_id: Identifier stored on the building

        Returns:
            Building whose door lies on the chosen wall
        """
        if rng.random() < 0.5:
            # North or south wall
            door_y = y if rng.random() < 0.5 else y + height
            door_x = rng.randrange(x, x + width)
        else:
            # East or west wall
            door_x = x + width if rng.random() < 0.5 else x
            door_y = rng.randrange(y, y + height)
        return cls(
            door=(door_x, door_y),
            x=x,
            y=y,
            width=width,
            height=height,
            is_important=False,
            id=BuildingID(building_id),
        )

    def make_important(self) -> "Building":
        """Return a copy of this building flagged as important."""
        return replace(self, is_important=True)

    @property
    def anchor(self) -> Cell:
        return (self.x, self.y)

    def overlaps(self, other: "Building", offset: int) -> bool:
        """Check whether two buildings come closer than ``offset`` cells."""
        return (
            self.x - offset < other.x + other.width
            and self.x + self.width + offset > other.x
            and self.y - offset < other.y + other.height
            and self.y + self.height + offset > other.y
        )

    def contains(self, cell: Cell) -> bool:
        """Check if a cell is inside the building, walls included."""
        x, y = cell
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def is_on_boundary(self, cell: Cell) -> bool:
        """Check if a cell lies on one of the four walls."""
        x, y = cell
        if not self.contains(cell):
            return False
        return x in (self.x, self.x + self.width) or y in (self.y, self.y + self.height)

    def footprint(self) -> Iterator[Cell]:
        """Yield every cell covered by the building, walls included."""
        for x in range(self.x, self.x + self.width + 1):
            for y in range(self.y, self.y + self.height + 1):
                yield (x, y)

    def silhouette(self) -> Iterator[Cell]:
        """Yield the cells of the four walls.

        Corner cells are yielded more than once.
        """
        for x in range(self.x, self.x + self.width + 1):
            yield (x, self.y)
            yield (x, self.y + self.height)
        for y in range(self.y, self.y + self.height + 1):
            yield (self.x, y)
            yield (self.x + self.width, y)

    def scale(self, factor: int) -> None:
        """Multiply position, size and door by ``factor`` in place."""
        self.x *= factor
        self.y *= factor
        self.width *= factor
        self.height *= factor
        self.door = (self.door[0] * factor, self.door[1] * factor)
