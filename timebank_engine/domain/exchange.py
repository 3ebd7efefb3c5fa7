"""Time-credit valuation and hour-for-hour exchange rates between categories"""

import logging
from typing import Callable, Dict, Optional

from timebank_engine.domain.categories import CategoryRateTable
from timebank_engine.domain.models import ExchangeQuote, TradeExchange
from timebank_engine.utils.rounding import round_half_up

DEFAULT_CREDIT_RATE = 5.0
WEEKS_PER_MONTH = 4


class ExchangeRateCalculator:
    """
    Converts hours of work into time credits using market-adjusted rates.

    credits = hours * base_rate * demand / supply, rounded to 2 places.

    Categories missing from the table are valued at a flat default rate and
    logged; the calculator never raises for them. Multipliers are validated
    where the table is updated, so supply is always positive here.
    """

    def __init__(
        self,
        table: CategoryRateTable,
        default_rate: float = DEFAULT_CREDIT_RATE,
        on_unknown_category: Optional[Callable[[str], None]] = None,
    ):
        self.table = table
        self.default_rate = default_rate
        self._on_unknown_category = on_unknown_category

    def hourly_rate(self, category: str) -> float:
        entry = self.table.get(category)
        if entry is None:
            logging.warning(
                f"Unknown category: {category}. Using default rate.",
                extra={"category": category, "default_rate": self.default_rate},
            )
            if self._on_unknown_category is not None:
                self._on_unknown_category(category)
            return self.default_rate
        return entry.market_rate

    def credits_for(self, hours: float, category: str) -> float:
        """Credit value of `hours` of work in `category`"""
        return round_half_up(hours * self.hourly_rate(category), 2)

    def exchange_rate(self, from_category: str, to_category: str) -> float:
        """How many hours of `to_category` equal one hour of `from_category`"""
        from_credits = self.credits_for(1, from_category)
        to_credits = self.credits_for(1, to_category)
        return round_half_up(from_credits / to_credits, 2)

    def trade_exchange(self, hours_a: float, category_a: str, category_b: str) -> TradeExchange:
        """Hours of category_b owed for hours_a of category_a, with credits on both sides"""
        credits_a = self.credits_for(hours_a, category_a)
        rate = self.exchange_rate(category_a, category_b)
        hours_b = round_half_up(hours_a * rate, 2)
        credits_b = self.credits_for(hours_b, category_b)

        return TradeExchange(hours_b=hours_b, exchange_rate=rate, credits_a=credits_a, credits_b=credits_b)

    def compute_exchange(self, hours: float, from_category: str, to_category: str) -> ExchangeQuote:
        trade = self.trade_exchange(hours, from_category, to_category)
        return ExchangeQuote(hours=trade.hours_b, credits=trade.credits_a, rate=trade.exchange_rate)

    def all_category_rates(self) -> Dict[str, float]:
        """One-hour credit value of every category in the table"""
        return {category.id: self.credits_for(1, category.id) for category in self.table}

    def potential_earnings(self, category: str, hours_per_week: float = 10) -> Dict[str, float]:
        category_rate = self.credits_for(1, category)
        weekly = category_rate * hours_per_week

        return {
            "weekly_credits": round_half_up(weekly, 2),
            "monthly_credits": round_half_up(weekly * WEEKS_PER_MONTH, 2),
            "category_rate": category_rate,
        }
