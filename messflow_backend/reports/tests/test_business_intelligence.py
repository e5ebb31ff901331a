from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from reports.services.business_intelligence import (
    ExpenseRow,
    PaymentRow,
    compute_alerts,
    compute_variance,
)

TODAY = date(2025, 4, 15)


def _expense(category, amount, d, description="x"):
    return ExpenseRow(category=category, amount=Decimal(amount), date=d, description=description)


def _history(category, amount):
    """Same spend in each of the three months before April 2025."""
    return [
        _expense(category, amount, date(2025, 1, 10)),
        _expense(category, amount, date(2025, 2, 10)),
        _expense(category, amount, date(2025, 3, 10)),
    ]


class SpendingSpikeTests(SimpleTestCase):
    """
    GUARANTEES:
    - Spike iff avg3 > 0 and current > avg3 * 1.15
    - percentage_over is rounded half-up
    - No history means no spike, whatever the current spend
    """

    def test_116_over_average_100_fires_16_percent(self):
        expenses = _history("groceries", "100") + [_expense("groceries", "116", date(2025, 4, 2))]
        alerts = compute_alerts(expenses=expenses, payments=[], today=TODAY)

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]["id"], "spending-groceries")
        self.assertEqual(alerts[0]["type"], "spending_spike")
        self.assertEqual(alerts[0]["severity"], "warning")
        self.assertEqual(alerts[0]["percentage_over"], 16)

    def test_114_over_average_100_is_quiet(self):
        expenses = _history("groceries", "100") + [_expense("groceries", "114", date(2025, 4, 2))]
        self.assertEqual(compute_alerts(expenses=expenses, payments=[], today=TODAY), [])

    def test_no_history_no_spike(self):
        expenses = [_expense("utilities", "5000", date(2025, 4, 1))]
        self.assertEqual(compute_alerts(expenses=expenses, payments=[], today=TODAY), [])

    def test_half_percent_rounds_up(self):
        # avg 200, current 261 -> 30.5% -> 31
        expenses = _history("rent", "200") + [_expense("rent", "261", date(2025, 4, 1))]
        alerts = compute_alerts(expenses=expenses, payments=[], today=TODAY)
        self.assertEqual(alerts[0]["percentage_over"], 31)


class RepairAndUnnecessaryTests(SimpleTestCase):
    def test_four_recent_repairs_fire(self):
        expenses = [_expense("maintenance", "20", date(2025, 4, d)) for d in (8, 10, 12, 14)]
        ids = [a["id"] for a in compute_alerts(expenses=expenses, payments=[], today=TODAY)]
        self.assertIn("frequent-repairs", ids)

    def test_old_repairs_do_not_count(self):
        expenses = [_expense("maintenance", "20", date(2025, 4, d)) for d in (1, 10, 12, 14)]
        ids = [a["id"] for a in compute_alerts(expenses=expenses, payments=[], today=TODAY)]
        self.assertNotIn("frequent-repairs", ids)

    def test_unnecessary_expense_share_of_revenue(self):
        payments = [PaymentRow(amount=Decimal("1000"), date=date(2025, 4, 3))]
        expenses = [
            _expense("groceries", "30", date(2025, 4, 4), "Evening snacks"),
            _expense("other", "40", date(2025, 4, 5), "Decorations"),
        ]
        alerts = compute_alerts(expenses=expenses, payments=payments, today=TODAY)

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0]["id"], "unnecessary-expenses")
        self.assertEqual(alerts[0]["severity"], "info")
        self.assertEqual(alerts[0]["percentage_over"], 7)

    def test_no_revenue_no_unnecessary_alert(self):
        expenses = [_expense("other", "400", date(2025, 4, 5))]
        self.assertEqual(compute_alerts(expenses=expenses, payments=[], today=TODAY), [])


class VarianceTests(SimpleTestCase):
    def test_variance_rows(self):
        expenses = _history("groceries", "100") + [_expense("groceries", "150", date(2025, 4, 2))]
        rows = compute_variance(expenses=expenses, today=TODAY)

        self.assertEqual(
            rows,
            [{"category": "Groceries", "current": Decimal("150.00"), "average": 100, "variance": 50}],
        )

    def test_current_only_category_has_zero_variance(self):
        rows = compute_variance(expenses=[_expense("rent", "900", date(2025, 4, 1))], today=TODAY)
        self.assertEqual(rows[0]["variance"], 0)
        self.assertEqual(rows[0]["average"], 0)
