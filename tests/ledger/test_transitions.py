from decimal import Decimal

import pytest

from ledger.errors import CategoryNotFoundError
from ledger.transitions import (
    DEFAULT_CATEGORIES,
    changed_months,
    compute_month,
    refresh_months,
    set_assigned,
)
from models.account import CREDIT
from models.budget import CREDIT_CARD_PAYMENTS, MONTHLY, Target
from tests.helpers import make_account, make_item, make_month, tx


def _snapshot(months):
    return {token: m.to_dict() for token, m in months.items()}


class TestComputeMonthSeeding:
    """Tests for creating months that do not exist yet."""

    def test_forward_month_carries_available(self):
        prev = {
            "2024-12": make_month(
                "2024-12", {"Bills": [make_item("Electricity", 100, -40, 60)]}
            )
        }

        months = compute_month(prev, [], "2025-01", "forward")

        jan = months["2025-01"]
        assert [g.name for g in jan.groups] == ["Bills"]
        electricity = jan.groups[0].items[0]
        assert electricity.name == "Electricity"
        assert electricity.assigned == Decimal("0")
        assert electricity.activity == Decimal("0")
        assert electricity.available == Decimal("60")

    def test_cash_overspending_resets_next_month(self):
        prev = {
            "2024-12": make_month(
                "2024-12", {"Bills": [make_item("Electricity", 0, -40, -40)]}
            )
        }
        accounts = [make_account(transactions=[tx("2024-12-15", "Electricity", -40)])]

        months = compute_month(prev, accounts, "2025-01", "forward")

        assert months["2025-01"].find_item("Electricity").available == Decimal("0")
        assert months["2025-01"].ready_to_assign == Decimal("-40")

    def test_forward_keeps_targets(self):
        target = Target(type=MONTHLY, amount=Decimal("75"))
        prev = {
            "2025-01": make_month(
                "2025-01", {"Bills": [make_item("Water", target=target)]}
            )
        }

        months = compute_month(prev, [], "2025-02", "forward")

        water = months["2025-02"].find_item("Water")
        assert water.target.amount_needed == Decimal("75")

    def test_backward_month_is_zeroed_without_targets(self):
        target = Target(type=MONTHLY, amount=Decimal("75"))
        prev = {
            "2025-03": make_month(
                "2025-03", {"Bills": [make_item("Water", 75, -20, 55, target=target)]}
            )
        }

        months = compute_month(prev, [], "2025-01", "backward")

        water = months["2025-01"].find_item("Water")
        assert water.assigned == Decimal("0")
        assert water.available == Decimal("0")
        assert water.target is None
        assert months["2025-03"].find_item("Water").assigned == Decimal("75")

    def test_forward_without_earlier_month_clones_latest(self):
        prev = {"2025-05": make_month("2025-05", {"Bills": [make_item("Rent", 900)]})}

        months = compute_month(prev, [], "2025-03", "forward")

        rent = months["2025-03"].find_item("Rent")
        assert rent is not None
        assert rent.assigned == Decimal("0")

    def test_empty_budget_gets_default_categories(self):
        months = compute_month({}, [], "2025-01")

        names = [g.name for g in months["2025-01"].groups]
        assert names == list(DEFAULT_CATEGORIES)
        bills = months["2025-01"].find_group("Bills")
        assert [i.name for i in bills.items] == ["Rent", "Electricity", "Water"]

    def test_empty_budget_without_defaults(self):
        months = compute_month({}, [], "2025-01", seed_defaults=False)

        assert months["2025-01"].groups == []

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            compute_month({}, [], "2025-01", "sideways")


class TestComputeMonthRevisit:
    """Tests for visiting months that already exist."""

    def test_patches_missing_groups_and_items(self):
        prev = {
            "2025-01": make_month("2025-01", {"Bills": [make_item("Rent", 900)]}),
            "2025-02": make_month(
                "2025-02",
                {
                    "Bills": [make_item("Rent"), make_item("Water", 30)],
                    "Fun": [make_item("Games", 15)],
                },
            ),
        }

        months = compute_month(prev, [], "2025-01")

        jan = months["2025-01"]
        assert jan.find_item("Rent").assigned == Decimal("900")
        assert jan.find_item("Water").assigned == Decimal("0")
        assert jan.group_of("Games").name == "Fun"
        assert jan.find_item("Games").assigned == Decimal("0")

    def test_revisit_is_idempotent(self):
        prev = {
            "2025-01": make_month(
                "2025-01",
                {"Bills": [make_item("Rent", 900), make_item("Water", 40)]},
            ),
        }
        accounts = [
            make_account(
                transactions=[
                    tx("2025-01-01", "Ready to Assign", 2000),
                    tx("2025-01-03", "Rent", -900),
                    tx("2025-01-09", "Water", -55),
                ]
            ),
            make_account(
                "Visa", kind=CREDIT, id=2, transactions=[tx("2025-01-12", "Water", -5)]
            ),
        ]

        once = compute_month(prev, accounts, "2025-01")
        twice = compute_month(once, accounts, "2025-01")

        assert _snapshot(once) == _snapshot(twice)
        assert changed_months(once, twice) == []

    def test_input_is_not_modified(self):
        prev = {"2025-01": make_month("2025-01", {"Bills": [make_item("Rent", 900)]})}
        accounts = [make_account(transactions=[tx("2025-01-02", "Rent", -900)])]
        before = _snapshot(prev)

        compute_month(prev, accounts, "2025-02")

        assert _snapshot(prev) == before

    def test_activity_recomputed_from_transactions(self):
        prev = {"2025-01": make_month("2025-01", {"Bills": [make_item("Rent", 900)]})}
        accounts = [
            make_account(
                transactions=[
                    tx("2025-01-01", "Ready to Assign", 1000),
                    tx("2025-01-03", "Rent", -850),
                ]
            )
        ]

        months = compute_month(prev, accounts, "2025-01")

        rent = months["2025-01"].find_item("Rent")
        assert rent.activity == Decimal("-850")
        assert rent.available == Decimal("50")
        assert months["2025-01"].assignable_money == Decimal("1000")
        assert months["2025-01"].ready_to_assign == Decimal("100")


class TestCreditCardItems:
    """Tests for credit card payment items during month computation."""

    def test_payment_item_tracks_funded_card_spending(self):
        prev = {
            "2025-01": make_month("2025-01", {"Food": [make_item("Groceries", 50)]})
        }
        accounts = [
            make_account(transactions=[tx("2025-01-01", "Ready to Assign", 500)]),
            make_account(
                "Visa", kind=CREDIT, id=2, transactions=[tx("2025-01-10", "Groceries", -50)]
            ),
        ]

        months = compute_month(prev, accounts, "2025-01")

        jan = months["2025-01"]
        visa = jan.find_group(CREDIT_CARD_PAYMENTS).find_item("Visa")
        assert visa.activity == Decimal("50")
        assert visa.available == Decimal("50")
        assert jan.find_item("Groceries").available == Decimal("0")
        # Card spending does not change Ready to Assign
        assert jan.ready_to_assign == Decimal("450")

    def test_payment_item_carries_prior_available(self):
        prev = {
            "2025-01": make_month("2025-01", {"Food": [make_item("Groceries", 50)]})
        }
        accounts = [
            make_account(transactions=[tx("2025-01-01", "Ready to Assign", 500)]),
            make_account(
                "Visa",
                kind=CREDIT,
                id=2,
                transactions=[
                    tx("2025-01-10", "Groceries", -50),
                    tx("2025-02-05", "Visa", 30),
                ],
            ),
        ]

        months = compute_month(prev, accounts, "2025-01")
        months = compute_month(months, accounts, "2025-02", "forward")

        visa = months["2025-02"].find_item("Visa")
        assert visa.activity == Decimal("-30")
        assert visa.available == Decimal("20")


class TestSetAssigned:
    """Tests for changing an assignment."""

    def _budget(self):
        return {
            "2025-01": make_month("2025-01", {"Bills": [make_item("Rent", 100, 0, 100)]}),
            "2025-02": make_month("2025-02", {"Bills": [make_item("Rent", 0, 0, 100)]}),
        }

    def _accounts(self):
        return [make_account(transactions=[tx("2025-01-01", "Ready to Assign", 1000)])]

    def test_change_ripples_to_later_months(self):
        months = set_assigned(self._budget(), self._accounts(), "2025-01", "Rent", "150")

        assert months["2025-01"].find_item("Rent").available == Decimal("150")
        assert months["2025-02"].find_item("Rent").available == Decimal("150")
        assert months["2025-01"].ready_to_assign == Decimal("850")
        assert months["2025-02"].ready_to_assign == Decimal("850")

    def test_carryover_moves_by_the_same_delta(self):
        base = refresh_months(self._budget(), self._accounts())
        bumped = set_assigned(base, self._accounts(), "2025-01", "Rent", "125")

        before = base["2025-02"].find_item("Rent").available
        after = bumped["2025-02"].find_item("Rent").available
        assert after - before == Decimal("25")

    def test_non_numeric_amount_is_zero(self):
        months = set_assigned(self._budget(), self._accounts(), "2025-01", "Rent", "abc")

        assert months["2025-01"].find_item("Rent").assigned == Decimal("0")

    def test_unknown_item(self):
        with pytest.raises(CategoryNotFoundError):
            set_assigned(self._budget(), self._accounts(), "2025-01", "Nope", 10)

    def test_unknown_month(self):
        with pytest.raises(CategoryNotFoundError):
            set_assigned(self._budget(), self._accounts(), "2025-06", "Rent", 10)


class TestRefreshMonths:
    def test_new_transactions_flow_into_every_month(self):
        months = {
            "2025-01": make_month("2025-01", {"Bills": [make_item("Rent", 100)]}),
            "2025-02": make_month("2025-02", {"Bills": [make_item("Rent")]}),
        }
        accounts = [
            make_account(
                transactions=[
                    tx("2025-01-01", "Ready to Assign", 1000),
                    tx("2025-01-05", "Rent", -60),
                ]
            )
        ]

        refreshed = refresh_months(months, accounts)

        assert refreshed["2025-01"].find_item("Rent").available == Decimal("40")
        assert refreshed["2025-02"].find_item("Rent").available == Decimal("40")
        assert changed_months(months, refreshed) == ["2025-01", "2025-02"]
