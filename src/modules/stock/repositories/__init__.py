"""Stock ledger repositories package."""

from modules.stock.repositories.django_repository import StockMovementDjangoRepository
from modules.stock.repositories.interfaces import IStockMovementRepository

__all__ = ["IStockMovementRepository", "StockMovementDjangoRepository"]
