from levsim.pricing.period import Period, PeriodUnit, TRADING_DAYS_PER_YEAR
from levsim.pricing.leverage import Leverage
from levsim.pricing.expense_ratio import ExpenseRatio
from levsim.pricing.price_change import (
    PriceChange, DailyPriceChange, TotalPriceChange, AnnualizedPriceChange
)
from levsim.pricing.price_history import (
    PriceHistory, PriceHistoryModifier, LeverageModifier, ExpenseRatioModifier,
    leverage_modifier, expense_ratio_modifier
)
from levsim.pricing.variants import (
    PriceHistoryDescriptor, PriceHistoryVariants, expense_ratio_for_leverage
)
