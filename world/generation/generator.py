"""Seeded city layout generation: important buildings, ordinary buildings and roads."""

import logging
import random
import time

import numpy as np

from core.buildings.building import Building
from core.types import Cell
from world.city import City
from world.generation.params import GenerationParams
from world.occupancy import OccupancyIndex
from world.routing.router import RoadRouter

# Minimum clearance between important buildings
IMPORTANT_CLEARANCE = 3
# Minimum clearance between an ordinary building and any other building
BUILDING_CLEARANCE = 8


class PlacementExhaustedError(RuntimeError):
    """Raised when no valid position is found within the retry budget."""

    def __init__(self, phase: str, attempts: int) -> None:
        super().__init__(f"Could not place {phase} building after {attempts} attempts")
        self.phase = phase
        self.attempts = attempts


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class CityGenerator:
    """Grows a city from a few important buildings outwards.

    Important buildings are placed first and connected pairwise by roads.
    Ordinary buildings then spawn around existing ones, each connected by a
    road to its closest important building. Generation is deterministic for
    a given set of parameters.
    """

    def __init__(self, params: GenerationParams, logger: logging.Logger | None = None) -> None:
        """Initialize the city generator.

        Args:
            params: Generation parameters (Pydantic model, validates on instantiation)
            logger: Logger for progress messages, defaults to the module logger
        """
        self.params = params
        self.rng = random.Random(params.seed)
        self.logger = logger or logging.getLogger(__name__)

        # Single source of truth for which cells are taken
        self.occupancy = OccupancyIndex()
        self.router = RoadRouter(self.occupancy)
        self._doors: set[Cell] = set()

    @property
    def seed(self) -> int:
        return self.params.seed

    def generate(
        self, normal_buildings: int, important_buildings: int, important_scale: int = 1
    ) -> City:
        """Generate a complete city.

        Args:
            normal_buildings: Number of ordinary buildings to grow
            important_buildings: Number of important buildings to seed the city with
            important_scale: Integer factor the important layout is generated
                shrunk by and then scaled back up with

        Returns:
            The generated City, with its bounding box recomputed and a
            read-only snapshot of the occupancy index attached

        Raises:
            ValueError: If the counts or scale cannot produce a city
            PlacementExhaustedError: If a building cannot be placed within the retry budget
        """
        if normal_buildings < 0 or important_buildings < 0:
            raise ValueError("Building counts must be non-negative")
        if important_scale < 1:
            raise ValueError("Important building scale must be at least 1")
        if self.params.important_max_distance // (important_scale * 2) < 1:
            raise ValueError(
                f"important_max_distance={self.params.important_max_distance} leaves no room "
                f"for important buildings at scale {important_scale}"
            )
        if normal_buildings > 0 and important_buildings == 0:
            raise ValueError("Ordinary buildings need at least one important building")

        # Each run builds its own city from an empty grid
        self.occupancy.clear()
        self._doors.clear()

        self.logger.info("Generating important buildings")
        started = time.perf_counter()
        city = self.generate_important_buildings(important_buildings, important_scale)
        self.logger.info(
            f"Generated {important_buildings} important buildings "
            f"in {time.perf_counter() - started:.3f}s"
        )

        self.logger.info("Generating normal buildings")
        started = time.perf_counter()
        self.generate_buildings(city, normal_buildings)
        self.logger.info(
            f"Generated {normal_buildings} buildings in {time.perf_counter() - started:.3f}s"
        )

        city.update_borders()
        city.occupancy = self.occupancy.snapshot()
        self.logger.info(f"Seed is {self.seed}")
        return city

    def generate_important_buildings(self, n: int, scale: int = 1) -> City:
        """Place, connect and rescale the important buildings of a new city."""
        city = self.place_important_buildings(n, scale)
        self.connect_important_buildings(city)
        if scale > 1:
            self.rescale(city, scale)
        return city

    def place_important_buildings(self, n: int, scale: int = 1) -> City:
        """Create a city holding ``n`` important buildings shrunk by ``scale``."""
        city = City()
        for _ in range(n):
            building = self._random_important_building(city, scale)
            self._register_building(city, building)
        return city

    def connect_important_buildings(self, city: City) -> None:
        """Route a road for every ordered pair of buildings in the city."""
        buildings = city.sorted_buildings()
        for start in buildings:
            for end in buildings:
                if start is end:
                    continue
                city.roads.append(self._build_road(city, start, end))

    def rescale(self, city: City, scale: int) -> None:
        """Scale every building and road by ``scale`` and rebuild the occupancy index.

        Roads are re-interpolated cell by cell so they stay contiguous at the
        new resolution. Anchors used as keys are re-derived from the scaled
        buildings.
        """
        self.logger.debug(f"Rescaling {len(city.buildings)} buildings by {scale}")
        self.occupancy.clear()

        city.min_x *= scale
        city.min_y *= scale
        city.max_x *= scale
        city.max_y *= scale

        buildings = list(city.buildings.values())
        for building in buildings:
            building.scale(scale)
        city.buildings = {building.anchor: building for building in buildings}
        city.important_buildings = [(x * scale, y * scale) for x, y in city.important_buildings]
        self._doors = {building.door for building in buildings}

        for building in buildings:
            self.occupancy.mark_building(building)

        city.roads = [self._scale_road(road, scale) for road in city.roads]
        for road in city.roads:
            self.occupancy.mark_road(road, self._doors)

    def generate_buildings(self, city: City, n: int) -> None:
        """Grow ``n`` ordinary buildings around the existing ones.

        Spawn distance shrinks linearly from the max to the min of the
        distance range as the remaining count goes down, so the city gets
        denser as it grows.
        """
        initial = n
        min_distance, max_distance = self.params.distance_range
        rejected = 0

        while n > 0:
            anchor = self.rng.choice(city.sorted_buildings())
            x_center = anchor.x + anchor.width // 2
            y_center = anchor.y + anchor.height // 2

            distance = int((max_distance - min_distance) * n / initial) + min_distance
            spawn_x = x_center + distance if self.rng.random() < 0.5 else x_center - distance
            spawn_y = y_center + distance if self.rng.random() < 0.5 else y_center - distance

            width = self.rng.randrange(*self.params.width_range)
            height = self.rng.randrange(*self.params.height_range)
            candidate = Building.with_random_door(self.rng, spawn_x, spawn_y, width, height, n)

            if self._collides(city, candidate):
                rejected += 1
                self.logger.debug(f"Rejected building at ({spawn_x}, {spawn_y})")
                if rejected >= self.params.max_placement_attempts:
                    raise PlacementExhaustedError("ordinary", rejected)
                continue

            rejected = 0
            self._register_building(city, candidate)
            target = self._closest_important_building(city, candidate)
            city.roads.append(self._build_road(city, candidate, target))
            n -= 1

    def _random_important_building(self, city: City, scale: int) -> Building:
        """Sample important buildings until one keeps its clearance."""
        half_window = self.params.important_max_distance // (scale * 2)
        for attempt in range(1, self.params.max_placement_attempts + 1):
            x = self.rng.randrange(-half_window, half_window)
            y = self.rng.randrange(-half_window, half_window)
            width = (self.rng.randrange(*self.params.width_range) + scale) // scale
            height = (self.rng.randrange(*self.params.height_range) + scale) // scale

            building = Building.with_random_door(
                self.rng, x, y, width, height, 0
            ).make_important()
            if not any(
                other.overlaps(building, IMPORTANT_CLEARANCE) for other in city.buildings.values()
            ):
                return building
            self.logger.debug(f"Rejected important building at ({x}, {y}), attempt {attempt}")

        raise PlacementExhaustedError("important", self.params.max_placement_attempts)

    def _collides(self, city: City, candidate: Building) -> bool:
        # Walls are enough: nothing can be inside without crossing one
        if any(b.overlaps(candidate, BUILDING_CLEARANCE) for b in city.buildings.values()):
            return True
        return not all(self.occupancy.is_free(cell) for cell in candidate.silhouette())

    def _register_building(self, city: City, building: Building) -> None:
        self.occupancy.mark_building(building)
        self._doors.add(building.door)
        city.add_building(building)

    def _closest_important_building(self, city: City, building: Building) -> Building:
        """Closest important building by Manhattan distance between anchors."""
        anchors = np.array(city.important_buildings, dtype=np.int64)
        distances = np.abs(anchors - np.array(building.anchor, dtype=np.int64)).sum(axis=1)
        return city.buildings[city.important_buildings[int(distances.argmin())]]

    def _build_road(self, city: City, start: Building, end: Building) -> list[Cell]:
        """Route a road and register its cells, or return an empty road."""
        result = self.router.find_road(city, start, end)
        if result is None:
            self.logger.warning(f"No road found between {end.anchor} and {start.anchor}")
            return []

        road, _cost = result
        self.occupancy.mark_road(road, self._doors)
        return road

    @staticmethod
    def _scale_road(road: list[Cell], scale: int) -> list[Cell]:
        """Emit ``scale`` unit steps for every segment of the road."""
        scaled: list[Cell] = []
        for (x0, y0), (x1, y1) in zip(road, road[1:]):
            dx, dy = _sign(x1 - x0), _sign(y1 - y0)
            x, y = x0 * scale, y0 * scale
            for _ in range(scale):
                scaled.append((x, y))
                x, y = x + dx, y + dy
        return scaled
