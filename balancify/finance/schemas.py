from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Adjustments:
    income_increase_pct: float = 0.0
    expense_reduction_pct: float = 0.0
    investment_boost_pct: float = 0.0
    # absolute replacements applied after the percentage changes
    overrides: Dict[str, float] = field(default_factory=dict)
