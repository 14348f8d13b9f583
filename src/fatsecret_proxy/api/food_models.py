"""Pydantic response models for the food API."""

from pydantic import BaseModel, ConfigDict, Field

from fatsecret_proxy.domain.foods import FoodType, NormalizedFood


class ServingOptionResponse(BaseModel):
    """One serving choice for a food."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    grams_equivalent: float | None = Field(alias="gramsEquivalent")


class FoodResponse(BaseModel):
    """Normalized food record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    food_type: FoodType = Field(alias="foodType")
    brand_name: str | None = Field(default=None, alias="brandName")
    calories: int = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    serving_size: float = Field(gt=0, alias="servingSize")
    serving_unit: str = Field(alias="servingUnit")
    serving_text: str = Field(alias="servingText")
    servings: list[ServingOptionResponse] | None = None

    @classmethod
    def from_domain(cls, food: NormalizedFood) -> "FoodResponse":
        """Build a response model from a normalized food."""
        servings = (
            [
                ServingOptionResponse(
                    description=option.description,
                    grams_equivalent=option.grams_equivalent,
                )
                for option in food.servings
            ]
            if food.servings is not None
            else None
        )
        return cls(
            id=food.id,
            name=food.name,
            description=food.description,
            food_type=food.food_type,
            brand_name=food.brand_name,
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            serving_size=food.serving_size,
            serving_unit=food.serving_unit,
            serving_text=food.serving_text,
            servings=servings,
        )


class StatusResponse(BaseModel):
    """Liveness payload."""

    status: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Error payload returned for failed requests."""

    error: str
    details: object | None = None
