"""Map FatSecret payloads onto normalized food records."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from fatsecret_proxy.domain.foods import FoodType, NormalizedFood, ServingOption
from fatsecret_proxy.errors import (
    NoServingData,
    NotFound,
    TransformError,
    UpstreamError,
)
from fatsecret_proxy.services.description_parser import (
    GRAMS_PER_OUNCE,
    canonical_unit,
    extract_calories,
    extract_nutrient,
    extract_serving_info,
)

_NOT_FOUND_CODES = {106, 211}
_NOT_FOUND_PHRASES = ("not found", "no matches found")
_MASS_UNITS = {"g", "oz"}


def as_list(value: object) -> list[dict[str, object]]:
    """Normalize the vendor's object-or-array encoding into a list."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def raise_for_vendor_error(payload: object) -> None:
    """Raise when a 200 response carries a FatSecret error envelope."""
    if not isinstance(payload, dict):
        raise TransformError("Unexpected response from FatSecret")
    error = payload.get("error")
    if not isinstance(error, dict):
        return
    message = str(error.get("message", "FatSecret error"))
    code = _to_int(error.get("code"))
    if code in _NOT_FOUND_CODES or any(
        phrase in message.lower() for phrase in _NOT_FOUND_PHRASES
    ):
        raise NotFound(message, details={"code": code})
    raise UpstreamError(message, details={"code": code})


def food_type_for(brand_name: object) -> FoodType:
    """Return Branded when a non-empty brand name is present."""
    if isinstance(brand_name, str) and brand_name.strip():
        return FoodType.BRANDED
    return FoodType.GENERIC


def transform_search_food(item: dict[str, object]) -> NormalizedFood:
    """Build a food record from a ``foods.search`` entry."""
    description = str(item.get("food_description") or "")
    serving = extract_serving_info(description)
    serving_size, serving_unit = canonical_unit(serving.size, serving.unit)
    food_type = food_type_for(item.get("brand_name"))
    return NormalizedFood(
        id=_required_id(item),
        name=str(item.get("food_name") or ""),
        description=description or None,
        food_type=food_type,
        brand_name=_brand(item, food_type),
        calories=extract_calories(description),
        protein=extract_nutrient(description, "Protein"),
        carbs=extract_nutrient(description, "Carbs"),
        fat=extract_nutrient(description, "Fat"),
        serving_size=serving_size,
        serving_unit=serving_unit,
        serving_text=serving.text,
    )


def transform_search_results(payload: dict[str, object]) -> list[NormalizedFood]:
    """Build food records from a ``foods.search`` response."""
    foods = payload.get("foods")
    if not isinstance(foods, dict):
        return []
    return [transform_search_food(item) for item in as_list(foods.get("food"))]


def transform_food_detail(food: dict[str, object]) -> NormalizedFood:
    """Build a food record from a ``food.get.v2`` food, scaled to 100 g.

    Vendor nutrients are reported per the first serving's metric amount and
    are rescaled with ``100 / grams`` so different foods stay comparable.
    """
    servings = food.get("servings")
    entries = as_list(servings.get("serving")) if isinstance(servings, dict) else []
    if not entries:
        raise NoServingData(
            "No serving information available",
            details={"food_id": food.get("food_id")},
        )
    serving = entries[0]

    metric_amount = _to_float(serving.get("metric_serving_amount")) or 100.0
    metric_unit = str(serving.get("metric_serving_unit") or "g").strip().lower()
    grams = _grams(metric_amount, metric_unit) or metric_amount
    scale = 100 / grams
    serving_size, serving_unit = canonical_unit(metric_amount, metric_unit)
    serving_description = str(
        serving.get("serving_description")
        or f"{metric_amount:g} {serving.get('metric_serving_unit') or 'g'}"
    )
    food_type = food_type_for(food.get("brand_name"))

    return NormalizedFood(
        id=_required_id(food),
        name=str(food.get("food_name") or ""),
        description=serving_description,
        food_type=food_type,
        brand_name=_brand(food, food_type),
        calories=int(_round_half_up(_to_int(serving.get("calories")) * scale, "1")),
        protein=_scaled_grams(serving.get("protein"), scale),
        carbs=_scaled_grams(serving.get("carbohydrate"), scale),
        fat=_scaled_grams(serving.get("fat"), scale),
        serving_size=serving_size,
        serving_unit=serving_unit,
        serving_text=serving_description,
        servings=tuple(_serving_option(entry) for entry in entries),
    )


def food_id_from_barcode(payload: dict[str, object]) -> str | None:
    """Return the food id from a ``food.find_id_for_barcode`` response."""
    value = payload.get("food_id")
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, int | float) and not isinstance(value, bool):
        value = str(int(value))
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == "0":
        return None
    return value


def _serving_option(entry: dict[str, object]) -> ServingOption:
    amount = _to_float(entry.get("metric_serving_amount"))
    unit = str(entry.get("metric_serving_unit") or "").strip().lower()
    grams = _grams(amount, unit)
    return ServingOption(
        description=str(entry.get("serving_description") or ""),
        grams_equivalent=grams,
    )


def _grams(amount: float, unit: str) -> float | None:
    if unit not in _MASS_UNITS or amount <= 0:
        return None
    return amount * GRAMS_PER_OUNCE if unit == "oz" else amount


def _scaled_grams(value: object, scale: float) -> float:
    return float(_round_half_up(_to_float(value) * scale, "0.1"))


def _round_half_up(value: float, quantum: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(quantum), rounding=ROUND_HALF_UP)


def _required_id(item: dict[str, object]) -> str:
    food_id = item.get("food_id")
    if food_id is None or food_id == "":
        raise TransformError("Food entry has no food_id")
    return str(food_id)


def _brand(item: dict[str, object], food_type: FoodType) -> str | None:
    if food_type is FoodType.GENERIC:
        return None
    return str(item.get("brand_name")).strip()


def _to_float(value: object) -> float:
    """Parse a vendor numeric string; anything unusable reads as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return 0.0
    if not number.is_finite() or number < 0:
        return 0.0
    return float(number)


def _to_int(value: object) -> int:
    return int(_to_float(value))
