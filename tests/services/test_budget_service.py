import pytest
from datetime import date
from decimal import Decimal

from ledger.errors import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    UnsafeDeletionError,
)
from ledger.targets import make_target
from models.budget import CREDIT_CARD_PAYMENTS
from models.transaction import Transaction
from services.budget import BudgetService


def _add(services, account, when, category, amount, group=""):
    return services.transactions.create(
        Transaction(
            id=None,
            account_id=account.id,
            date=date.fromisoformat(when),
            payee="",
            category=category,
            category_group=group,
            amount=Decimal(amount),
        )
    )


@pytest.fixture
def paycheck(services, checking):
    """January income of 1000 into Checking."""
    return _add(services, checking, "2025-01-01", "Ready to Assign", "1000")


class TestOpenMonth:
    """Tests for navigating to months through the service."""

    def test_first_month_gets_default_categories(self, services):
        month = services.budget.open_month("2025-01")

        assert month.find_item_by_name("Rent") is not None
        stored = services.budget_months.find("2025-01")
        assert stored.to_dict() == month.to_dict()

    def test_defaults_can_be_disabled(self, db_manager_with_schema):
        budget = BudgetService(db_manager_with_schema, seed_default_categories=False)

        month = budget.open_month("2025-01")

        assert month.groups == []

    def test_next_month_carries_forward(self, services, paycheck):
        services.budget.open_month("2025-01")
        services.budget.assign("2025-01", "Rent", "800")

        feb = services.budget.open_month("2025-02", "forward")

        rent = feb.find_item_by_name("Rent")
        assert rent.assigned == Decimal("0")
        assert rent.available == Decimal("800")
        assert feb.ready_to_assign == Decimal("200")

    def test_credit_account_gets_payment_item(self, services, visa):
        month = services.budget.open_month("2025-01")

        group = month.find_group(CREDIT_CARD_PAYMENTS)
        assert [item.name for item in group.items] == ["Visa"]

    def test_accepts_dates(self, services):
        month = services.budget.open_month("2025-01-20")

        assert month.month == "2025-01"


class TestAssign:
    def test_assign_updates_ready_to_assign(self, services, paycheck):
        services.budget.open_month("2025-01")

        month = services.budget.assign("2025-01", "Rent", "800")

        assert month.find_item_by_name("Rent").available == Decimal("800")
        assert month.ready_to_assign == Decimal("200")
        assert services.budget.ready_to_assign("2025-01") == Decimal("200")
        stored = services.budget_months.find("2025-01")
        assert stored.find_item_by_name("Rent").assigned == Decimal("800")

    def test_assign_unknown_category(self, services):
        services.budget.open_month("2025-01")

        with pytest.raises(CategoryNotFoundError):
            services.budget.assign("2025-01", "Yachts", "10")

    def test_refresh_picks_up_new_transactions(self, services, checking, paycheck):
        services.budget.open_month("2025-01")
        services.budget.assign("2025-01", "Rent", "800")
        _add(services, checking, "2025-01-03", "Rent", "-750", "Bills")

        months = services.budget.refresh()

        rent = months["2025-01"].find_item_by_name("Rent")
        assert rent.activity == Decimal("-750")
        assert rent.available == Decimal("50")


class TestTargets:
    def test_set_and_clear_target(self, services):
        services.budget.open_month("2025-01")
        target = make_target("Custom", "300", "2025-03")

        month = services.budget.set_target("2025-01", "Water", target)

        assert month.find_item_by_name("Water").target.amount_needed == Decimal("100.00")
        stored = services.budget_months.find("2025-01").find_item_by_name("Water")
        assert stored.target.type == "Custom"

        cleared = services.budget.set_target("2025-01", "Water", None)
        assert cleared.find_item_by_name("Water").target is None


class TestCategoryLifecycle:
    """Tests for category changes through the service."""

    def test_add_group_and_item(self, services):
        services.budget.open_month("2025-01")
        services.budget.add_group("2025-01", "Savings")

        month = services.budget.add_item("2025-01", "Savings", "Emergency Fund")

        assert month.find_group("Savings").find_item("Emergency Fund") is not None

    def test_rename_item_retags_stored_transactions(self, services, checking):
        services.budget.open_month("2025-01")
        spent = _add(services, checking, "2025-01-03", "Rent", "-750", "Bills")

        services.budget.rename_item("Rent", "Housing")

        assert services.transactions.find(spent.id).category == "Housing"
        stored = services.budget_months.find("2025-01")
        assert stored.find_item_by_name("Housing") is not None
        assert stored.find_item_by_name("Rent") is None

    def test_rename_item_to_account_name_is_rejected(self, services, checking):
        services.budget.open_month("2025-01")

        with pytest.raises(DuplicateCategoryError):
            services.budget.rename_item("Rent", "Checking")

        assert services.budget_months.find("2025-01").find_item_by_name("Rent")

    def test_rename_group_retags_stored_transactions(self, services, checking):
        services.budget.open_month("2025-01")
        spent = _add(services, checking, "2025-01-03", "Rent", "-750", "Bills")

        services.budget.rename_group("Bills", "Housing")

        assert services.transactions.find(spent.id).category_group == "Housing"

    def test_delete_item_with_money_is_rejected(self, services, paycheck):
        services.budget.open_month("2025-01")
        services.budget.assign("2025-01", "Spotify", "10")
        before = services.budget_months.find("2025-01").to_dict()

        with pytest.raises(UnsafeDeletionError):
            services.budget.delete_item("Subscriptions", "Spotify")

        assert services.budget_months.find("2025-01").to_dict() == before

    def test_delete_item_merges_and_retags(self, services, checking, paycheck):
        services.budget.open_month("2025-01")
        services.budget.assign("2025-01", "Spotify", "10")
        services.budget.assign("2025-01", "Netflix", "15")
        spent = _add(services, checking, "2025-01-05", "Spotify", "-10", "Subscriptions")
        services.budget.refresh()

        months = services.budget.delete_item("Subscriptions", "Spotify", "Netflix")

        netflix = months["2025-01"].find_item_by_name("Netflix")
        assert netflix.assigned == Decimal("25")
        assert netflix.activity == Decimal("-10")
        assert netflix.available == Decimal("15")
        assert months["2025-01"].find_item_by_name("Spotify") is None
        assert services.transactions.find(spent.id).category == "Netflix"
        assert services.budget.ready_to_assign("2025-01") == Decimal("975")

    def test_delete_item_updates_stored_card_payment(self, services, visa, paycheck):
        services.budget.open_month("2025-01")
        services.budget.assign("2025-01", "Rent", "100")
        services.budget.assign("2025-01", "Water", "50")
        _add(services, visa, "2025-01-05", "Rent", "-120", "Bills")
        services.budget.refresh()
        stored = services.budget_months.find("2025-01")
        assert stored.find_item_by_name("Visa").activity == Decimal("100")

        services.budget.delete_item("Bills", "Water", "Rent")

        stored = services.budget_months.find("2025-01")
        assert stored.find_item_by_name("Visa").activity == Decimal("120")
        assert stored.find_item_by_name("Rent").available == Decimal("30")

    def test_delete_group(self, services):
        services.budget.open_month("2025-01")
        services.budget.add_group("2025-01", "Savings")

        months = services.budget.delete_group("Savings")

        assert months["2025-01"].find_group("Savings") is None
        assert services.budget_months.find("2025-01").find_group("Savings") is None
