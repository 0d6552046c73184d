"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  They are the
contracts between the API layer (DRF serializers) and ``OrderService``.
DTOs are immutable (``frozen=True``).

Creation DTOs are deliberately permissive: missing guest or item fields are
reported by ``OrderValidator`` as business errors, in a fixed order, rather
than as shape errors.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """One requested line: product and quantity.

    ``unit_price`` is never taken from the client; the service snapshots it
    from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID] = None
    quantity: Optional[int] = None


class CreateOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO] = Field(default_factory=list)
    payment_method: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    contact_phone: Optional[str] = None
    delivery_address: str = ""
    note: str = ""


# ---------------------------------------------------------------------------
# Orderer (who placed the order)
# ---------------------------------------------------------------------------


class RegisteredOrderer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["registered"] = "registered"
    user_id: Any


class GuestOrderer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["guest"] = "guest"
    name: str
    email: str
    phone: str


Orderer = Annotated[Union[RegisteredOrderer, GuestOrderer], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderStatsDTO(BaseModel):
    """Order counts per status."""

    model_config = ConfigDict(frozen=True)

    total: int
    by_status: Dict[str, int]
