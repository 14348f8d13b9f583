"""Normalized food domain models."""

from dataclasses import dataclass
from enum import StrEnum


class FoodType(StrEnum):
    """Classification of a food by brand presence."""

    GENERIC = "Generic"
    BRANDED = "Branded"


@dataclass(frozen=True)
class ServingInfo:
    """Serving size parsed from a vendor description."""

    size: float
    unit: str
    text: str


@dataclass(frozen=True)
class ServingOption:
    """One serving choice offered by the vendor for a food."""

    description: str
    grams_equivalent: float | None


@dataclass(frozen=True)
class NormalizedFood:
    """Stable food record returned to API clients."""

    id: str
    name: str
    description: str | None
    food_type: FoodType
    brand_name: str | None
    calories: int
    protein: float
    carbs: float
    fat: float
    serving_size: float
    serving_unit: str
    serving_text: str
    servings: tuple[ServingOption, ...] | None = None
