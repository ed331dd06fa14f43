from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional

from app.core.config import settings
from app.models.base import Base
from app.models.membership import Membership, MembershipType


@dataclass(frozen=True)
class MembershipPlan:
    months: int
    discount_rate: float

    @property
    def base_price(self) -> float:
        return settings.MEMBERSHIP_MONTHLY_PRICE * self.months

    @property
    def price(self) -> float:
        return round(self.base_price * self.discount_rate, 2)

    def period(self, start: date) -> tuple:
        return start, start + timedelta(days=30 * self.months)


MEMBERSHIP_PLANS: Dict[MembershipType, MembershipPlan] = {
    MembershipType.MONTHLY: MembershipPlan(months=1, discount_rate=1.0),
    MembershipType.QUARTERLY: MembershipPlan(months=3, discount_rate=0.9),
    MembershipType.YEARLY: MembershipPlan(months=12, discount_rate=0.8),
}


def build_membership(company_sid: str, membership_type: MembershipType, today: Optional[date] = None) -> Membership:
    plan = MEMBERSHIP_PLANS[membership_type]
    start_date, end_date = plan.period(today or date.today())
    return Membership(
        sid=Base.generate_sid(),
        company_sid=company_sid,
        membership_type=membership_type,
        price=plan.price,
        start_date=start_date,
        end_date=end_date,
    )
