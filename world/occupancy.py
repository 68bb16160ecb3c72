"""Sparse grid occupancy index shared by placement checks and routing."""

from collections.abc import Collection, Iterable, Mapping
from types import MappingProxyType

from core.buildings.building import Building
from core.types import Cell, CellType


class OccupancyIndex:
    """Maps grid cells to what occupies them.

    Cells that are absent are free. Door cells are never stored so that
    roads can always enter a building through its door.
    """

    def __init__(self) -> None:
        self._cells: dict[Cell, CellType] = {}

    def mark(self, cell: Cell, tag: CellType) -> None:
        """Record ``tag`` for a cell, replacing any previous tag."""
        self._cells[cell] = tag

    def unmark(self, cell: Cell) -> None:
        """Free a cell. Freeing an already free cell is a no-op."""
        self._cells.pop(cell, None)

    def tag_of(self, cell: Cell) -> CellType | None:
        """Return the tag of a cell, or None if it is free."""
        return self._cells.get(cell)

    def is_free(self, cell: Cell) -> bool:
        return cell not in self._cells

    def mark_building(self, building: Building) -> None:
        """Mark the building footprint, leaving its door free."""
        for cell in building.footprint():
            self._cells[cell] = CellType.BUILDING
        self._cells.pop(building.door, None)

    def mark_road(self, road: Iterable[Cell], doors: Collection[Cell] = ()) -> None:
        """Mark every road cell that is not a door."""
        for cell in road:
            if cell not in doors:
                self._cells[cell] = CellType.ROAD

    def clear(self) -> None:
        self._cells.clear()

    def snapshot(self) -> Mapping[Cell, CellType]:
        """Return a read-only copy of the current cells."""
        return MappingProxyType(dict(self._cells))

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def __len__(self) -> int:
        return len(self._cells)
