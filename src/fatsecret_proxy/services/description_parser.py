"""Extract nutrients and serving sizes from FatSecret food descriptions.

Search results only carry a free-text summary such as
``"Per 100g - Calories: 22kcal | Fat: 0.34g | Carbs: 3.28g | Protein: 3.09g"``.
Missing values read as zero and an unknown serving falls back to 100 g, so
every food gets a usable record.
"""

import re
from collections.abc import Callable

from fatsecret_proxy.domain.foods import ServingInfo

GRAMS_PER_OUNCE = 28.3495

DEFAULT_SERVING = ServingInfo(size=100.0, unit="g", text="100 g")

_CALORIES_PATTERN = re.compile(r"Calories:\s*(\d+)", re.IGNORECASE)
_NUTRIENT_PATTERNS = {
    kind: re.compile(rf"{kind}:\s*(\d+(?:\.\d+)?)\s*g", re.IGNORECASE)
    for kind in ("Protein", "Carbs", "Fat")
}

_PER_GRAMS = re.compile(r"\bPer\s+(\d+(?:\.\d+)?)\s*g\b", re.IGNORECASE)
_PER_UNIT = re.compile(r"\bPer\s+(\d+(?:\.\d+)?)\s*([a-zA-Z]+)", re.IGNORECASE)
_PER_PHRASE = re.compile(r"\bPer\s+([^-]+)", re.IGNORECASE)

_MIXED_NUMBER = re.compile(r"(\d+)\s+(\d+)\s*/\s*(\d+)")
_FRACTION = re.compile(r"(\d+)\s*/\s*(\d+)")
_LEADING_NUMBER = re.compile(r"^(\d+(?:\.\d+)?)")

_UNIT_ALIASES = {
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "cup": "cup",
    "cups": "cup",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "piece": "piece",
    "pieces": "piece",
    "cookie": "piece",
    "cookies": "piece",
    "serving": "piece",
    "servings": "piece",
}


def extract_calories(text: str | None) -> int:
    """Return the kcal value of a ``Calories: N`` token, or 0."""
    if not text:
        return 0
    match = _CALORIES_PATTERN.search(text)
    return int(match.group(1)) if match else 0


def extract_nutrient(text: str | None, kind: str) -> float:
    """Return grams for ``Protein``, ``Carbs`` or ``Fat``, or 0."""
    if not text:
        return 0.0
    pattern = _NUTRIENT_PATTERNS.get(kind.strip().capitalize())
    if pattern is None:
        return 0.0
    match = pattern.search(text)
    return float(match.group(1)) if match else 0.0


def extract_serving_info(text: str | None) -> ServingInfo:
    """Return the serving described by the first matching ``Per ...`` rule."""
    if not text:
        return DEFAULT_SERVING
    for pattern, extractor in _SERVING_RULES:
        match = pattern.search(text)
        if match is None:
            continue
        serving = extractor(match)
        if serving is not None and serving.size > 0:
            return serving
    return DEFAULT_SERVING


def canonical_unit(size: float, unit: str) -> tuple[float, str]:
    """Map unit aliases to canonical units, converting ounces to grams."""
    canonical = _UNIT_ALIASES.get(unit.strip().lower(), unit.strip().lower())
    if canonical == "oz":
        return size * GRAMS_PER_OUNCE, "g"
    return size, canonical


def _grams_rule(match: re.Match[str]) -> ServingInfo:
    size = float(match.group(1))
    return ServingInfo(size=size, unit="g", text=f"{match.group(1)} g")


def _unit_rule(match: re.Match[str]) -> ServingInfo:
    size = float(match.group(1))
    unit = match.group(2)
    return ServingInfo(size=size, unit=unit, text=f"{match.group(1)} {unit}")


def _cup_size(phrase: str) -> float:
    mixed = _MIXED_NUMBER.search(phrase)
    if mixed and int(mixed.group(3)):
        whole, numerator, denominator = (int(part) for part in mixed.groups())
        return whole + numerator / denominator
    fraction = _FRACTION.search(phrase)
    if fraction and int(fraction.group(2)):
        return int(fraction.group(1)) / int(fraction.group(2))
    return _leading_size(phrase)


def _leading_size(phrase: str) -> float:
    match = _LEADING_NUMBER.match(phrase)
    return float(match.group(1)) if match else 1.0


# Checked in order; the first keyword group contained in the phrase wins.
_PHRASE_KEYWORDS: list[tuple[tuple[str, ...], str, Callable[[str], float]]] = [
    (("cup",), "cup", _cup_size),
    (("oz", "ounce"), "oz", _leading_size),
    (("tbsp", "tablespoon"), "tbsp", _leading_size),
    (("piece", "cookie", "serving"), "piece", _leading_size),
]


def _phrase_rule(match: re.Match[str]) -> ServingInfo | None:
    phrase = match.group(1).strip()
    lowered = phrase.lower()
    for keywords, unit, size_of in _PHRASE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return ServingInfo(size=size_of(phrase), unit=unit, text=phrase)
    return None


_SERVING_RULES: list[
    tuple[re.Pattern[str], Callable[[re.Match[str]], ServingInfo | None]]
] = [
    (_PER_GRAMS, _grams_rule),
    (_PER_UNIT, _unit_rule),
    (_PER_PHRASE, _phrase_rule),
]
