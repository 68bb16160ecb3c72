from core.buildings.building import Building

__all__ = ["Building"]
