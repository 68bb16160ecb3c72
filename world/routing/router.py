"""A* road routing over the occupancy grid."""

import heapq
import math
from collections.abc import Mapping

from core.buildings.building import Building
from core.types import Cell, CellType
from world.city import City
from world.occupancy import OccupancyIndex

# Cost of a step onto a road cell or through a door
STEP_COST = 10
# Multiplier for stepping onto a free cell, so existing roads are preferred
EMPTY_CELL_PENALTY = 5

NEIGHBOR_OFFSETS: tuple[Cell, ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))


class RoadRouter:
    """Routes roads from a building door towards another building.

    A road ends as soon as it touches the destination building or merges
    into an existing road, so later roads reuse the network already built.
    """

    def __init__(self, occupancy: OccupancyIndex) -> None:
        self.occupancy = occupancy

    def find_road(
        self, city: City, start: Building, end: Building
    ) -> tuple[list[Cell], int] | None:
        """Find the cheapest road from ``start``'s door to ``end`` or any road.

        Args:
            city: City whose bounding box limits the search
            start: Building the road leaves from (through its door)
            end: Destination building

        Returns:
            Tuple of (cells from the door to the terminal cell inclusive, total cost),
            or None if the search space is exhausted without reaching the goal.

        Notes:
            - Moves are 4-directional and never leave the city bounding box
            - Step cost: 10 onto a road or a door, 50 onto a free cell
            - Heuristic: sqrt(10 * Manhattan distance to end's bottom-right corner)
        """
        origin = start.door
        doors = city.doors()
        target = (end.x + end.width, end.y + end.height)

        def heuristic(cell: Cell) -> int:
            distance = abs(cell[0] - target[0]) + abs(cell[1] - target[1])
            return math.isqrt(distance * STEP_COST)

        # Priority queue: (f_score, counter, cell)
        counter = 0
        open_set: list[tuple[int, int, Cell]] = [(heuristic(origin), counter, origin)]
        counter += 1

        g_score: dict[Cell, int] = {origin: 0}
        came_from: dict[Cell, Cell] = {}
        closed: set[Cell] = set()

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if current in closed:
                continue
            closed.add(current)

            if self._is_goal(current, end):
                path = [current]
                while current in came_from:
                    current = came_from[current]
                    path.append(current)
                path.reverse()
                return path, g_score[path[-1]]

            current_g = g_score[current]
            for neighbor, step_cost in self.successors(city, current, doors):
                if neighbor in closed:
                    continue
                tentative_g = current_g + step_cost
                if neighbor not in g_score or tentative_g < g_score[neighbor]:
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    heapq.heappush(open_set, (tentative_g + heuristic(neighbor), counter, neighbor))
                    counter += 1

        return None

    def successors(
        self, city: City, cell: Cell, doors: Mapping[Cell, Building]
    ) -> list[tuple[Cell, int]]:
        """List the admissible neighbors of a cell with their step costs."""
        x, y = cell
        result: list[tuple[Cell, int]] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = (x + dx, y + dy)
            if not city.in_bounds(neighbor):
                continue

            tag = self.occupancy.tag_of(neighbor)
            if tag is None:
                result.append((neighbor, STEP_COST * EMPTY_CELL_PENALTY))
            elif tag is CellType.ROAD:
                result.append((neighbor, STEP_COST))
            elif tag is CellType.BUILDING:
                # Walls are solid; only a door lets the road through
                if neighbor in doors:
                    result.append((neighbor, STEP_COST))
        return result

    def _is_goal(self, cell: Cell, end: Building) -> bool:
        return self.occupancy.tag_of(cell) is CellType.ROAD or end.contains(cell)
