from datetime import date, timedelta

from app.core.config import settings
from app.models.membership import MembershipType
from app.services.membership import MEMBERSHIP_PLANS, build_membership


def test_price_is_base_price_times_discount():
    for membership_type, plan in MEMBERSHIP_PLANS.items():
        membership = build_membership("company-sid", membership_type, today=date(2026, 1, 1))
        expected = round(settings.MEMBERSHIP_MONTHLY_PRICE * plan.months * plan.discount_rate, 2)
        assert membership.price == expected


def test_yearly_plan_is_discounted():
    monthly = build_membership("c", MembershipType.MONTHLY)
    yearly = build_membership("c", MembershipType.YEARLY)
    assert yearly.price < monthly.price * 12


def test_dates_come_from_the_plan():
    start = date(2026, 3, 15)
    membership = build_membership("company-sid", MembershipType.QUARTERLY, today=start)

    assert membership.company_sid == "company-sid"
    assert membership.start_date == start
    assert membership.end_date == start + timedelta(days=90)
    assert len(membership.sid) == 22
