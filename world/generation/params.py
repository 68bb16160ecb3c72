"""Pydantic models for city generation parameters."""

from pydantic import BaseModel, Field, field_validator


class GenerationParams(BaseModel):
    """Parameters for seeded city layout generation.

    Ranges are half-open ``[min, max)`` pairs, sampled uniformly.
    """

    # Generation seed
    seed: int = Field(ge=0, description="Random seed used for generation")

    # Building size
    width_range: tuple[int, int] = Field(
        default=(8, 30), description="[min, max) width of buildings"
    )
    height_range: tuple[int, int] = Field(
        default=(8, 30), description="[min, max) height of buildings"
    )

    # Spacing
    distance_range: tuple[int, int] = Field(
        default=(20, 100),
        description="[min, max) spawn distance of ordinary buildings from their anchor",
    )
    important_max_distance: int = Field(
        default=500, gt=0, description="Side of the square important buildings are placed in"
    )

    # Retry budget per building before giving up
    max_placement_attempts: int = Field(
        default=10_000, ge=1, description="Consecutive rejected placements allowed per building"
    )

    @field_validator("width_range", "height_range")
    @classmethod
    def validate_size_range(cls, v: tuple[int, int]) -> tuple[int, int]:
        """Validate that building size ranges are non-empty and positive."""
        if v[0] < 1:
            raise ValueError("Building size min must be at least 1")
        if v[0] >= v[1]:
            raise ValueError("Building size min must be < max")
        return v

    @field_validator("distance_range")
    @classmethod
    def validate_distance_range(cls, v: tuple[int, int]) -> tuple[int, int]:
        """Validate that the spawn distance range is a valid [min, max) pair."""
        if v[0] < 0:
            raise ValueError("Distance min must be non-negative")
        if v[0] >= v[1]:
            raise ValueError("Distance min must be < max")
        return v
