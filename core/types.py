from enum import Enum
from typing import NewType

# IDs
BuildingID = NewType("BuildingID", int)

# Grid
Cell = tuple[int, int]


class CellType(str, Enum):
    """What occupies a grid cell in the occupancy index."""

    BUILDING = "BUILDING"
    ROAD = "ROAD"
