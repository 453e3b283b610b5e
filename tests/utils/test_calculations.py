from datetime import date, datetime, timedelta, timezone
import pytest
from clientdesk.utils.calculations import (
    calculate_days_until_deadline,
    calculate_payment_progress,
    get_deadline_status,
    is_payment_completed,
    should_revert_project_status,
    sum_payments,
)
from clientdesk.schemas.payment import Payment

NOW = datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)
TODAY = NOW.date()

class TestPaymentProgress:
    @pytest.mark.parametrize("total_paid, budget, expected", [
        (0, 10000, 0),
        (2500, 10000, 25),
        (10000, 10000, 100),
        (15000, 10000, 100),
        (1, 3, 100 / 3),
    ])
    def test_progress_is_capped_percentage(self, total_paid, budget, expected):
        assert calculate_payment_progress(total_paid, budget) == pytest.approx(expected)

    def test_zero_budget_gives_zero(self):
        assert calculate_payment_progress(500, 0) == 0

class TestCompletion:
    def test_completed_when_paid_reaches_budget(self):
        assert is_payment_completed(10000, 10000)
        assert is_payment_completed(12000, 10000)

    def test_not_completed_below_budget(self):
        assert not is_payment_completed(9999.99, 10000)

    def test_revert_only_finished_projects_below_budget(self):
        assert should_revert_project_status("Finished", 5000, 10000)
        assert not should_revert_project_status("Finished", 10000, 10000)
        assert not should_revert_project_status("Started", 5000, 10000)

class TestDeadlineStatus:
    def test_ten_days_ahead_is_normal(self):
        status = get_deadline_status(TODAY + timedelta(days=10), NOW)
        assert status.is_overdue is False
        assert status.days == 10
        assert status.status == "normal"
        assert status.message == "10 days remaining"

    def test_three_days_ahead_is_warning(self):
        status = get_deadline_status(TODAY + timedelta(days=3), NOW)
        assert status.status == "warning"
        assert status.days == 3

    def test_seven_days_is_still_warning(self):
        assert get_deadline_status(TODAY + timedelta(days=7), NOW).status == "warning"

    def test_two_days_past_is_overdue(self):
        status = get_deadline_status(TODAY - timedelta(days=2), NOW)
        assert status.is_overdue is True
        assert status.days == 2
        assert status.status == "overdue"
        assert status.message == "2 days overdue"

    def test_days_round_up(self):
        # Deadline at midnight tomorrow is under a day away but counts as one
        assert calculate_days_until_deadline(TODAY + timedelta(days=1), NOW) == 1

    def test_naive_now_is_treated_as_utc(self):
        naive = NOW.replace(tzinfo=None)
        assert calculate_days_until_deadline(date(2026, 10, 29), naive) == 10

def test_sum_payments():
    payments = [
        Payment(id=1, project_id=1, amount=2500, payment_date="2026-10-01",
                payment_method="Cash", created_at="2026-10-01T00:00:00+00:00"),
        Payment(id=2, project_id=1, amount=1250.5, payment_date="2026-10-02",
                payment_method="Check", created_at="2026-10-02T00:00:00+00:00"),
    ]
    assert sum_payments(payments) == 3750.5
    assert sum_payments([]) == 0
