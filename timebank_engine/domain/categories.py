"""Service category reference data and the market-rate registry"""

import math
import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from timebank_engine.domain.exceptions import InvalidMultiplierError, UnknownCategoryError
from timebank_engine.domain.models import BusinessClass, ServiceCategory

B2B = BusinessClass.B2B
B2C = BusinessClass.B2C

# Nigerian market catalogue: (id, name, base rate, demand, supply, popular, common needs, class)
# Demand/supply: high-demand scarce skills (legal, generator repair) are above 1.0 / below 1.0
_CATALOGUE: Tuple[ServiceCategory, ...] = (
    ServiceCategory("legal", "Legal & Business Registration", 10, 1.5, 0.8, True,
                    ("tech", "creative", "marketing", "accounting"), B2B),
    ServiceCategory("tech", "Technology & Digital", 8, 1.4, 1.0, True,
                    ("legal", "creative", "marketing", "accounting"), B2B),
    ServiceCategory("accounting", "Accounting & Financial Services", 7, 1.3, 0.9, True,
                    ("tech", "legal", "marketing", "creative"), B2B),
    ServiceCategory("marketing", "Marketing & Social Media", 6, 1.2, 1.1, True,
                    ("creative", "tech", "photography", "legal"), B2B),
    ServiceCategory("creative", "Creative & Design", 5, 1.2, 1.1, True,
                    ("tech", "marketing", "photography", "legal"), B2B),
    ServiceCategory("photography", "Photography & Video", 5, 1.1, 1.2, True,
                    ("marketing", "creative", "tech", "event_planning")),
    ServiceCategory("fashion", "Fashion & Tailoring", 4, 1.0, 1.2, False,
                    ("photography", "marketing", "legal", "creative"), B2C),
    ServiceCategory("event_planning", "Event Planning & Management", 4, 1.0, 1.1, False,
                    ("photography", "food", "creative", "marketing")),
    ServiceCategory("food", "Food & Catering", 3, 0.9, 1.3, False,
                    ("event_planning", "marketing", "transportation", "accounting"), B2C),
    ServiceCategory("tutoring", "Education & Tutoring", 4, 1.0, 1.3, False,
                    ("tech", "marketing", "creative", "accounting"), B2C),
    ServiceCategory("generator_repair", "Generator & Equipment Repair", 6, 1.4, 0.7, True,
                    ("transportation", "accounting", "marketing", "legal")),
    ServiceCategory("transportation", "Transportation & Delivery", 2, 0.7, 1.5, False,
                    ("accounting", "tech", "legal", "marketing"), B2C),
    ServiceCategory("beauty_wellness", "Beauty & Wellness", 4, 1.0, 1.0, False,
                    ("photography", "marketing", "creative", "accounting"), B2C),
    ServiceCategory("construction", "Construction & Renovation", 5, 1.0, 1.0, False,
                    ("accounting", "legal", "transportation", "generator_repair")),
    ServiceCategory("agriculture", "Agriculture & Farming", 3, 1.0, 1.0, False,
                    ("transportation", "accounting", "tech", "marketing")),
    ServiceCategory("cleaning", "Cleaning & Maintenance", 2, 1.0, 1.0, False,
                    ("transportation", "accounting", "marketing", "tech"), B2C),
)

# Pairs that trade well together, used for the category-demand bonus
COMPLEMENTARY_PAIRS: Dict[str, Tuple[str, ...]] = {
    "legal": ("tech", "creative", "marketing", "accounting"),
    "tech": ("legal", "creative", "marketing"),
    "creative": ("tech", "marketing", "legal"),
    "marketing": ("creative", "tech", "photography"),
    "accounting": ("legal", "tech", "marketing"),
    "generator_repair": ("transportation", "construction"),
    "photography": ("marketing", "event_planning", "creative"),
}

# Display names stored by older clients
LEGACY_ALIASES: Dict[str, str] = {
    "professional": "accounting",
    "tailoring": "fashion",
}


def normalize_category_id(value: str) -> str:
    """'Event Planning' -> 'event_planning', 'Professional' -> 'accounting'"""
    key = "_".join(value.strip().lower().split())
    return LEGACY_ALIASES.get(key, key)


def is_complementary(category_a: str, category_b: str) -> bool:
    return category_b in COMPLEMENTARY_PAIRS.get(category_a, ()) or category_a in COMPLEMENTARY_PAIRS.get(
        category_b, ()
    )


class CategoryRateTable:
    """Immutable lookup of service categories by id"""

    def __init__(self, categories: Iterable[ServiceCategory] = _CATALOGUE):
        self._categories: Dict[str, ServiceCategory] = {c.id: c for c in categories}

    def get(self, category_id: Optional[str]) -> Optional[ServiceCategory]:
        if not category_id:
            return None
        return self._categories.get(normalize_category_id(category_id))

    def __contains__(self, category_id: str) -> bool:
        return self.get(category_id) is not None

    def __iter__(self):
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)

    def ids(self) -> List[str]:
        return list(self._categories)

    def popular(self) -> List[ServiceCategory]:
        return [c for c in self._categories.values() if c.popular]

    def business_class(self, category_id: str) -> BusinessClass:
        category = self.get(category_id)
        return category.business_class if category else BusinessClass.UNCLASSIFIED

    def with_market_rates(self, category_id: str, demand: float, supply: float) -> "CategoryRateTable":
        """Return a new table with one category's multipliers replaced"""
        category = self.get(category_id)
        if category is None:
            raise UnknownCategoryError(f"Unknown category: {category_id}")
        updated = replace(category, demand=demand, supply=supply)
        return CategoryRateTable(updated if c.id == category.id else c for c in self._categories.values())


def clamp_multiplier(value: float, floor: float = 0.5, ceiling: float = 2.0) -> float:
    """
    Validate an admin-supplied market multiplier.

    Non-positive and non-finite values are rejected outright; the rest are
    clamped to [floor, ceiling] so the calculator never divides by zero.
    """
    if value is None or not math.isfinite(value) or value <= 0:
        raise InvalidMultiplierError(f"Market multiplier must be a positive number, got {value!r}")
    return max(floor, min(ceiling, value))


class CategoryRateRegistry:
    """
    Holds the current rate table for the process.

    Readers call snapshot() and keep the returned table for the whole
    calculation. Updates build a complete new table and swap the reference
    under a lock, so a reader sees either the old or the new table.
    """

    def __init__(self, table: Optional[CategoryRateTable] = None, floor: float = 0.5, ceiling: float = 2.0):
        self._table = table or CategoryRateTable()
        self._floor = floor
        self._ceiling = ceiling
        self._write_lock = threading.Lock()

    def snapshot(self) -> CategoryRateTable:
        return self._table

    def update_market_rates(self, category_id: str, demand: float, supply: float) -> ServiceCategory:
        demand = clamp_multiplier(demand, self._floor, self._ceiling)
        supply = clamp_multiplier(supply, self._floor, self._ceiling)
        with self._write_lock:
            self._table = self._table.with_market_rates(category_id, demand, supply)
            return self._table.get(category_id)
