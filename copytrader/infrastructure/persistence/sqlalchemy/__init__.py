"""SQLAlchemy persistence layer."""

from .models import Base, CopyTradingModel, WalletModel
from .repositories import SQLAlchemyCopyTradeSessionRepository, SQLAlchemyWalletRepository
from .unit_of_work import SQLAlchemyUnitOfWork, create_unit_of_work

__all__ = [
    # ORM Models
    "Base",
    "CopyTradingModel",
    "WalletModel",
    # Repositories
    "SQLAlchemyCopyTradeSessionRepository",
    "SQLAlchemyWalletRepository",
    # Unit of Work
    "SQLAlchemyUnitOfWork",
    "create_unit_of_work",
]
