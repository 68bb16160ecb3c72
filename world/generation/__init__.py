"""Procedural city generation module."""

from .generator import CityGenerator, PlacementExhaustedError
from .params import GenerationParams

__all__ = ["CityGenerator", "GenerationParams", "PlacementExhaustedError"]
