"""
Equipment amortization: how long until a printer pays for itself.

    monthly_profit            = prints_per_month × avg_profit_per_print
    months_to_break_even      = acquisition_cost / monthly_profit
    yearly_profit_projection  = monthly_profit × 12

When the asset earns nothing (or loses money) per month there is no
break-even point. That case comes back as BreakEven.NOT_APPLICABLE instead
of a float infinity, so callers have to branch on it and can show
"cannot amortize at current profit rate".
"""

import enum
from dataclasses import dataclass
from typing import Any, Optional, Union

from .line_items import parse_amount

MONTHS_PER_YEAR = 12


class BreakEven(str, enum.Enum):
    NOT_APPLICABLE = "not_applicable"


@dataclass
class AmortizationAsset:
    id: Optional[str] = None
    name: str = ""
    acquisition_cost: Any = 0
    prints_per_month: Any = 0
    avg_profit_per_print: Any = 0


@dataclass(frozen=True)
class AmortizationResult:
    monthly_profit: float
    months_to_break_even: Union[float, BreakEven]
    yearly_profit_projection: float

    @property
    def can_amortize(self) -> bool:
        return self.months_to_break_even is not BreakEven.NOT_APPLICABLE

    def to_dict(self) -> dict:
        months = self.months_to_break_even
        return {
            "monthly_profit": self.monthly_profit,
            "months_to_break_even": months.value if isinstance(months, BreakEven) else months,
            "yearly_profit_projection": self.yearly_profit_projection,
            "can_amortize": self.can_amortize,
        }


def amortize(asset: AmortizationAsset) -> AmortizationResult:
    acquisition_cost = parse_amount(asset.acquisition_cost)
    prints_per_month = parse_amount(asset.prints_per_month)
    # A print can lose money, so this one keeps its sign
    avg_profit = parse_amount(asset.avg_profit_per_print, allow_negative=True)

    monthly_profit = prints_per_month * avg_profit
    if monthly_profit > 0:
        months = acquisition_cost / monthly_profit
    else:
        months = BreakEven.NOT_APPLICABLE

    return AmortizationResult(
        monthly_profit=monthly_profit,
        months_to_break_even=months,
        yearly_profit_projection=monthly_profit * MONTHS_PER_YEAR,
    )
