"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    The record services are shared with the budget service, so every command
    sees one set of service objects over one database manager.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, it is
            used instead of one built from config.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.budget import BudgetService

        self.budget = BudgetService(
            self.db_manager,
            seed_default_categories=config.seed_default_categories,
        )
        self.accounts = self.budget.accounts
        self.transactions = self.budget.transactions
        self.budget_months = self.budget.months
