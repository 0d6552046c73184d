"""Order service layer (Use Cases).

Orchestrates order creation, customer cancellation and admin status
changes.  Every command runs inside one unit of work: any exception raised
part-way discards all stock decrements, ledger entries and order rows
written during the call.

Business rules enforced:
- Requests are validated before any stock is touched (``OrderValidator``).
- Duplicate product lines are merged; every product must exist before the
  first decrement.
- Stock is reserved with a conditional UPDATE per product, in product id
  order; a lost race is reported as ``InsufficientStock``.
- Every stock change appends a balanced ``StockMovement``.
- Status changes go through the transition table; PENDING -> CANCELLED
  returns every line's stock exactly once.  Setting the current status
  again is a no-op for admins and an error for customer cancellation.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
import uuid6

from modules.core.unit_of_work import DjangoUnitOfWork
from modules.orders.constants import (
    ADMIN_ACTOR,
    ADMIN_CANCEL_NOTE,
    CUSTOMER_CANCEL_NOTE,
    OrderStatus,
)
from modules.orders.dtos import GuestOrderer, OrderStatsDTO, RegisteredOrderer
from modules.orders.exceptions import (
    CategoryInactive,
    InsufficientStock,
    InvalidTransition,
    OrderNotFound,
    ProductInactive,
    ProductNotFound,
    Unauthorized,
)
from modules.orders.pricing import PricingCalculator
from modules.orders.state_machine import evaluate, initial_status
from modules.orders.validators import OrderValidator
from modules.stock.constants import REFERENCE_ORDER, StockMovementType

if TYPE_CHECKING:
    from datetime import datetime

    from django.db.models import QuerySet

    from modules.catalog.repositories.interfaces import ICatalogRepository
    from modules.core.identity import Identity
    from modules.core.unit_of_work import IUnitOfWork
    from modules.orders.dtos import CreateOrderDTO, Orderer
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.stock.services import StockLedgerService
    from modules.store_settings.services import ISettingsProvider

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Collaborators are injected through the constructor.  ``unit_of_work``
    is a factory returning a fresh transaction scope per command.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog: ICatalogRepository,
        ledger: StockLedgerService,
        settings_provider: ISettingsProvider,
        unit_of_work: Callable[[], IUnitOfWork] = DjangoUnitOfWork,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog = catalog
        self._ledger = ledger
        self._unit_of_work = unit_of_work
        self._validator = OrderValidator(settings_provider, clock=clock)
        self._pricing = PricingCalculator(settings_provider)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO, identity: Identity) -> Order:
        """Validate, reserve stock, price and persist a new order.

        Raises:
            InvalidOrderRequest, StoreClosed, PaymentMethodRejected: the
                request breaks a store rule.
            ProductNotFound: a requested product does not exist.
            ProductInactive, CategoryInactive: a product cannot be sold.
            InsufficientStock: the conditional decrement matched no row.
            BelowMinimumOrder: the subtotal is below the configured minimum.
        """
        log = logger.bind(
            customer_id=str(identity.id) if identity else None,
            guest=identity is None,
        )
        log.info("order.creation_started", line_count=len(dto.items))

        self._validator.validate(dto, identity)
        lines = merge_lines(dto)
        orderer = build_orderer(dto, identity)
        order_id = uuid6.uuid7()

        with self._unit_of_work():
            self._ensure_products_exist(list(lines))

            # Sorted by product id to keep lock order stable across orders.
            items: List[Dict[str, Any]] = []
            for product_id in sorted(lines, key=str):
                items.append(
                    self._reserve(order_id, product_id, lines[product_id], log)
                )
            items.sort(key=lambda item: item["position"])

            quote = self._pricing.quote(
                (item["unit_price"], item["quantity"]) for item in items
            )
            order = self._order_repo.create(
                {
                    "id": order_id,
                    **_orderer_columns(orderer),
                    "contact_phone": (dto.contact_phone or "").strip(),
                    "status": initial_status(),
                    "payment_method": dto.payment_method.strip().upper(),
                    "subtotal_amount": quote.subtotal,
                    "delivery_fee": quote.delivery_fee,
                    "total_amount": quote.total,
                    "delivery_address": dto.delivery_address,
                    "note": dto.note,
                    "items": items,
                }
            )

        log.info(
            "order.created",
            order_id=str(order.id),
            subtotal=str(quote.subtotal),
            delivery_fee=str(quote.delivery_fee),
            total=str(quote.total),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    def cancel_order(self, order_id: UUID, identity: Identity) -> Order:
        """Customer cancellation of their own order.

        Raises:
            OrderNotFound: order does not exist.
            Unauthorized: the caller is a guest or does not own the order.
            InvalidTransition: the order is no longer PENDING (cancelling an
                already cancelled order included).
        """
        with self._unit_of_work():
            order = self._lock(order_id)
            if identity is None or not order.is_owned_by(identity.id):
                logger.warning(
                    "order.cancel_unauthorized",
                    order_id=str(order_id),
                    caller_id=str(identity.id) if identity else None,
                )
                raise Unauthorized("You can only cancel your own orders.")
            self._transition(
                order,
                OrderStatus.CANCELLED,
                actor=identity.email or str(identity.id),
                note=CUSTOMER_CANCEL_NOTE,
                allow_noop=False,
            )
        return self._order_repo.get_by_id(str(order_id)) or order

    def update_status(
        self,
        order_id: UUID,
        new_status: str,
        actor: Optional[str] = None,
    ) -> Order:
        """Admin status change (any legal transition).

        Setting the current status again is a no-op.

        Raises:
            OrderNotFound: order does not exist.
            InvalidTransition: transition is not allowed.
        """
        with self._unit_of_work():
            order = self._lock(order_id)
            self._transition(
                order,
                new_status,
                actor=actor or ADMIN_ACTOR,
                note=ADMIN_CANCEL_NOTE,
            )
        return self._order_repo.get_by_id(str(order_id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_customer_orders(self, identity: Identity) -> QuerySet[Order]:
        if identity is None:
            raise Unauthorized("Sign in to see your orders.")
        return self._order_repo.list_for_customer(identity.id)

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet[Order]:
        return self._order_repo.list(filters)

    def order_stats(self) -> OrderStatsDTO:
        counts = self._order_repo.count_by_status()
        by_status = {status: counts.get(status, 0) for status in OrderStatus.values}
        return OrderStatsDTO(total=sum(by_status.values()), by_status=by_status)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_products_exist(self, product_ids: List[UUID]) -> None:
        found = {product.id for product in self._catalog.find_all_by_ids(product_ids)}
        for product_id in product_ids:
            if product_id not in found:
                raise ProductNotFound(product_id)

    def _reserve(
        self,
        order_id: UUID,
        product_id: UUID,
        line: Tuple[int, int],
        log: Any,
    ) -> Dict[str, Any]:
        """Decrement stock for one merged line and log the movement."""
        quantity, position = line
        product = self._catalog.find_by_id_with_category(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        if not product.is_active:
            raise ProductInactive(product_id)
        if product.category is not None and not product.category.is_active:
            raise CategoryInactive(product_id, product.category_id)

        if self._catalog.decrease_stock_if_available(product_id, quantity) == 0:
            log.warning(
                "order.stock_unavailable",
                product_id=str(product_id),
                quantity=quantity,
            )
            raise InsufficientStock(product_id)

        # The decremented row stays locked by this transaction until commit.
        after = self._catalog.current_stock(product_id)
        self._ledger.append(
            product_id=product_id,
            type=StockMovementType.ORDER_CREATE,
            delta=-quantity,
            before_stock=after + quantity,
            after_stock=after,
            reference_type=REFERENCE_ORDER,
            reference_id=order_id,
        )
        log.info(
            "order.stock_reserved",
            product_id=str(product_id),
            quantity=quantity,
            remaining=after,
        )
        return {
            "product_id": product_id,
            "product_name": product.name,
            "quantity": quantity,
            "unit_price": product.price,
            "position": position,
        }

    def _lock(self, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _transition(
        self,
        order: Order,
        target: str,
        actor: str,
        note: str,
        allow_noop: bool = True,
    ) -> None:
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=target,
        )
        transition = evaluate(order.status, target, allow_noop=allow_noop)
        if not transition.allowed:
            log.warning("order.invalid_transition")
            raise InvalidTransition(order.status, target)
        if transition.is_noop:
            log.info("order.status_unchanged")
            return

        if transition.reverses_stock:
            self._reverse_stock(order, actor=actor, note=note, log=log)

        self._order_repo.update_status(order, target)
        log.info("order.status_updated", actor=actor)

    def _reverse_stock(self, order: Order, actor: str, note: str, log: Any) -> None:
        """Return every line's quantity to stock, once per order and product."""
        for item in sorted(order.items.all(), key=lambda i: str(i.product_id)):
            if self._ledger.has_reversal(order.id, item.product_id):
                log.info("order.stock_already_released", product_id=str(item.product_id))
                continue
            self._catalog.increase_stock(item.product_id, item.quantity)
            after = self._catalog.current_stock(item.product_id)
            self._ledger.append(
                product_id=item.product_id,
                type=StockMovementType.ORDER_CANCEL,
                delta=item.quantity,
                before_stock=after - item.quantity,
                after_stock=after,
                reference_type=REFERENCE_ORDER,
                reference_id=order.id,
                note=note,
                actor=actor,
            )
            log.info(
                "order.stock_released",
                product_id=str(item.product_id),
                quantity=item.quantity,
                restored_stock=after,
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def merge_lines(dto: CreateOrderDTO) -> "OrderedDict[UUID, Tuple[int, int]]":
    """Merge duplicate products into ``{product_id: (quantity, position)}``.

    ``position`` is the index of the product's first appearance.
    """
    merged: "OrderedDict[UUID, Tuple[int, int]]" = OrderedDict()
    for item in dto.items:
        quantity, position = merged.get(item.product_id, (0, len(merged)))
        merged[item.product_id] = (quantity + item.quantity, position)
    return merged


def build_orderer(dto: CreateOrderDTO, identity: Identity) -> Orderer:
    if identity is not None:
        return RegisteredOrderer(user_id=identity.id)
    return GuestOrderer(
        name=dto.guest_name.strip(),
        email=dto.guest_email.strip(),
        phone=dto.contact_phone.strip(),
    )


def _orderer_columns(orderer: Orderer) -> Dict[str, Any]:
    if isinstance(orderer, RegisteredOrderer):
        return {"customer_id": orderer.user_id, "guest_name": "", "guest_email": ""}
    return {
        "customer_id": None,
        "guest_name": orderer.name,
        "guest_email": orderer.email,
    }