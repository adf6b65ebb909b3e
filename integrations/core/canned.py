"""Offline farming guidance used when the advice provider is unavailable.

Lookup is a case-insensitive match of keywords against the starts of words in
the prompt ("irrigat" matches "irrigation", "heat" does not match "wheat").
Topics are checked in order; the first topic with a matching keyword wins.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


TOPICS: Tuple[Tuple[str, Tuple[str, ...], str], ...] = (
    (
        "soil",
        ("soil", "acidic", "alkaline", "ph ", "compost", "clay", "sandy"),
        "For soil health, start with a soil test to check pH and nutrient levels. "
        "Most crops prefer a pH between 6.0 and 7.0; add agricultural lime to raise "
        "pH on acidic soil or elemental sulfur to lower it. Working in compost every "
        "season improves structure, drainage and water holding.",
    ),
    (
        "pest",
        ("pest", "insect", "aphid", "bug", "worm", "caterpillar", "beetle", "locust"),
        "For pest problems, scout fields weekly and identify the pest before treating. "
        "Encourage natural predators, rotate crops to break pest cycles, and use "
        "neem oil or insecticidal soap for light infestations. Reserve chemical "
        "sprays for outbreaks above the economic threshold.",
    ),
    (
        "water",
        ("water", "irrigat", "drought", "rain", "moisture", "drip"),
        "For water management, irrigate early in the morning to reduce evaporation "
        "and water deeply but less often to encourage deep roots. Drip irrigation "
        "and mulching can cut water use substantially. Check soil moisture a few "
        "centimetres down before watering.",
    ),
    (
        "fertilizer",
        ("fertiliz", "fertilis", "nitrogen", "manure", "npk", "nutrient"),
        "For fertilizing, base rates on a soil test rather than guesswork. Split "
        "nitrogen applications across the season, and use well-rotted manure or "
        "compost to feed soil biology. Over-fertilizing wastes money and can burn "
        "roots or pollute nearby water.",
    ),
    (
        "weather",
        ("weather", "frost", "heat", "storm", "temperature", "climate"),
        "For weather risks, follow local forecasts and plan field work around them. "
        "Row covers protect against light frost, shade cloth helps in heat waves, "
        "and good drainage limits storm damage. Keep records so you can time "
        "planting better next season.",
    ),
    (
        "seed",
        ("seed", "germinat", "sowing", "seedling", "plant spacing"),
        "For seeds, buy certified seed suited to your region and store it cool and "
        "dry. Sow at the depth on the packet, keep the seedbed evenly moist until "
        "germination, and thin seedlings to the recommended spacing.",
    ),
    (
        "harvest",
        ("harvest", "yield", "stor", "grain", "market"),
        "For harvest, pick at the right maturity stage and in the cool part of the "
        "day. Handle produce gently, cool it quickly, and store it in clean, "
        "ventilated containers to reduce post-harvest losses.",
    ),
    (
        "crop",
        ("crop", "rotation", "plant", "grow", "variety", "wheat", "maize", "corn", "rice"),
        "For crop planning, rotate crop families each season to reduce disease and "
        "pest build-up, and pick varieties suited to your local climate and soil. "
        "Cover crops between seasons protect the soil and add organic matter.",
    ),
)

GENERIC_RESPONSE = (
    "Thanks for sharing with the community! A local agricultural extension office "
    "can give advice specific to your farm. Meanwhile, keep notes on what you "
    "observe so neighbours here can help with more detail."
)


def match_topic(prompt: str) -> Optional[str]:
    text = f" {prompt.lower()} "
    for topic, keywords, _ in TOPICS:
        if any(re.search(rf"\b{re.escape(keyword)}", text) for keyword in keywords):
            return topic
    return None


def canned_advice(prompt: str) -> str:
    topic = match_topic(prompt or "")
    for name, _, response in TOPICS:
        if name == topic:
            return response
    return GENERIC_RESPONSE
