"""Historical subscription price tiers and cost reconciliation (GBP basis)"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

@dataclass(frozen=True)
class PricingPeriod:
    """Monthly Premium Individual price over [start_year, end_year)"""
    start_year: int
    end_year: int
    monthly_price: float
    region: str = ""

    def contains(self, year: int) -> bool:
        return self.start_year <= year < self.end_year

# Contiguous and non-overlapping from the service launch onwards
PRICING_HISTORY = (
    PricingPeriod(2009, 2011, 9.99, 'UK/EU'),
    PricingPeriod(2011, 2021, 9.99, 'US/Global'),
    PricingPeriod(2021, 2023, 9.99, 'Most markets'),
    PricingPeriod(2023, 2024, 10.99, 'US/UK'),
    PricingPeriod(2024, 2025, 11.99, 'US/UK'),
)

@dataclass
class YearCharge:
    """Subscription charge for one calendar year; unpriced years carry no monthly price"""
    year: int
    monthly_price: Optional[float]
    months: int
    yearly_total: float
    partial: bool = False

    @property
    def priced(self) -> bool:
        return self.monthly_price is not None

@dataclass
class PricePeriodTotal:
    """Consecutive years charged at the same monthly price"""
    start_year: int
    end_year: int
    monthly_price: Optional[float]
    total: float

    @property
    def priced(self) -> bool:
        return self.monthly_price is not None

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year}"

@dataclass
class SubscriptionCost:
    """Total paid over a year range with per-year and per-period breakdowns"""
    start_year: int
    end_year: int
    total_paid: float = 0.0
    breakdown: List[YearCharge] = field(default_factory=list)
    periods: List[PricePeriodTotal] = field(default_factory=list)

    @property
    def years(self) -> int:
        return self.end_year - self.start_year

    @property
    def unpriced_years(self) -> List[int]:
        return [charge.year for charge in self.breakdown if not charge.priced]

def price_for_year(year: int, history: Sequence[PricingPeriod] = PRICING_HISTORY) -> Optional[PricingPeriod]:
    """Return the pricing period covering a year, or None when no price is on record"""
    for period in history:
        if period.contains(year):
            return period
    return None

def _charge(year: int, months: int, history: Sequence[PricingPeriod], partial: bool = False) -> YearCharge:
    period = price_for_year(year, history)
    if period is None:
        return YearCharge(year=year, monthly_price=None, months=months, yearly_total=0.0, partial=partial)
    return YearCharge(
        year=year,
        monthly_price=period.monthly_price,
        months=months,
        yearly_total=period.monthly_price * months,
        partial=partial
    )

def collapse_periods(breakdown: Sequence[YearCharge]) -> List[PricePeriodTotal]:
    """Merge consecutive years with the same monthly price into display periods"""
    periods: List[PricePeriodTotal] = []
    for charge in breakdown:
        last = periods[-1] if periods else None
        if last is not None and last.monthly_price == charge.monthly_price and last.end_year == charge.year - 1:
            last.end_year = charge.year
            last.total += charge.yearly_total
        else:
            periods.append(PricePeriodTotal(
                start_year=charge.year,
                end_year=charge.year,
                monthly_price=charge.monthly_price,
                total=charge.yearly_total
            ))
    return periods

def reconcile_subscription(start_year: int, end_year: int, today: Optional[date] = None,
                           history: Sequence[PricingPeriod] = PRICING_HISTORY) -> SubscriptionCost:
    """
    Reconcile a year range against the price history.

    Every full year in [start_year, end_year) up to the current year is charged
    twelve months at its period price. If end_year runs past the current year,
    the current year is charged for the months elapsed so far instead. Years
    with no price on record appear in the breakdown as unpriced charges of zero.
    """
    today = today or date.today()
    cost = SubscriptionCost(start_year=start_year, end_year=end_year)

    for year in range(start_year, min(end_year, today.year)):
        cost.breakdown.append(_charge(year, 12, history))

    if end_year > today.year and start_year <= today.year:
        cost.breakdown.append(_charge(today.year, today.month, history, partial=True))

    cost.total_paid = sum(charge.yearly_total for charge in cost.breakdown)
    cost.periods = collapse_periods(cost.breakdown)
    return cost
