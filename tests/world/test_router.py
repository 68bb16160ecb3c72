"""Tests for A* road routing over the occupancy grid."""

from core.buildings.building import Building
from core.types import Cell, CellType
from world.city import City
from world.occupancy import OccupancyIndex
from world.routing.router import EMPTY_CELL_PENALTY, STEP_COST, RoadRouter


def create_two_building_city() -> tuple[City, OccupancyIndex, Building, Building]:
    """Create a city with two buildings facing each other.

    Start has its door on the east wall at (10, 5), end on the west wall at (30, 5).
    """
    city = City()
    occupancy = OccupancyIndex()
    start = Building(door=(10, 5), x=0, y=0, width=10, height=10)
    end = Building(door=(30, 5), x=30, y=0, width=10, height=10)
    for building in (start, end):
        occupancy.mark_building(building)
        city.add_building(building)
    return city, occupancy, start, end


def assert_four_connected(road: list[Cell]) -> None:
    for (x0, y0), (x1, y1) in zip(road, road[1:]):
        assert abs(x1 - x0) + abs(y1 - y0) == 1


def test_straight_road_between_doors() -> None:
    """Test the road runs straight from door to door over free cells."""
    city, occupancy, start, end = create_two_building_city()
    router = RoadRouter(occupancy)

    result = router.find_road(city, start, end)

    assert result is not None
    road, cost = result
    assert road == [(x, 5) for x in range(10, 31)]
    assert cost == 20 * STEP_COST * EMPTY_CELL_PENALTY


def test_road_merges_into_existing_road() -> None:
    """Test the search stops as soon as it reaches an existing road."""
    city, occupancy, start, end = create_two_building_city()
    for y in range(-15, 25):
        occupancy.mark((20, y), CellType.ROAD)
    router = RoadRouter(occupancy)

    result = router.find_road(city, start, end)

    assert result is not None
    road, cost = result
    assert road[0] == start.door
    assert road[-1] == (20, 5)
    assert cost == 9 * STEP_COST * EMPTY_CELL_PENALTY + STEP_COST


def test_road_goes_around_walls() -> None:
    """Test a door facing away forces the road around the building."""
    city = City()
    occupancy = OccupancyIndex()
    start = Building(door=(0, 5), x=0, y=0, width=10, height=10)
    end = Building(door=(30, 5), x=30, y=0, width=10, height=10)
    for building in (start, end):
        occupancy.mark_building(building)
        city.add_building(building)
    router = RoadRouter(occupancy)

    result = router.find_road(city, start, end)

    assert result is not None
    road, _ = result
    assert road[0] == start.door
    assert road[-1] == end.door
    assert_four_connected(road)
    for cell in road[1:]:
        assert not start.contains(cell)


def test_enclosed_door_has_no_route() -> None:
    """Test the router reports failure when the door is walled in."""
    city, occupancy, start, end = create_two_building_city()
    for x in range(-1, 12):
        occupancy.mark((x, -1), CellType.BUILDING)
        occupancy.mark((x, 11), CellType.BUILDING)
    for y in range(-1, 12):
        occupancy.mark((-1, y), CellType.BUILDING)
        occupancy.mark((11, y), CellType.BUILDING)
    router = RoadRouter(occupancy)

    assert router.find_road(city, start, end) is None


def test_successors_costs_and_walls() -> None:
    """Test walls are blocked and free cells cost more than roads."""
    city, occupancy, _, _ = create_two_building_city()
    occupancy.mark((12, 6), CellType.ROAD)
    router = RoadRouter(occupancy)
    doors = city.doors()

    # From the door only the outside cell is reachable
    assert router.successors(city, (10, 5), doors) == [((11, 5), 50)]

    successors = dict(router.successors(city, (12, 5), doors))
    assert successors == {(11, 5): 50, (12, 4): 50, (12, 6): 10, (13, 5): 50}


def test_successors_respect_bounds() -> None:
    """Test the search never leaves the city bounding box."""
    city, occupancy, _, _ = create_two_building_city()
    router = RoadRouter(occupancy)

    successors = dict(router.successors(city, (city.max_x - 1, city.min_y), city.doors()))

    assert successors == {(city.max_x - 2, city.min_y): 50, (city.max_x - 1, city.min_y + 1): 50}


def test_building_cell_passable_only_at_door() -> None:
    """Test a building-tagged door cell is still enterable."""
    city, occupancy, _, _ = create_two_building_city()
    occupancy.mark((10, 5), CellType.BUILDING)
    router = RoadRouter(occupancy)

    successors = dict(router.successors(city, (11, 5), city.doors()))

    assert successors[(10, 5)] == STEP_COST
    assert (10, 4) not in dict(router.successors(city, (11, 4), city.doors()))
