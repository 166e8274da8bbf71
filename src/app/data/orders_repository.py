"""Order and line-item lookups backed by Supabase."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from supabase import AsyncClient

from ..models.domain import AddressRecord, OrderItem, OrderRecord, SellerRecord

logger = logging.getLogger(__name__)

ORDER_SELECT = """
    id,
    delivery_address_id,
    addresses!delivery_address_id(
        street_address,
        city,
        state,
        zip_code
    )
"""

ORDER_ITEMS_SELECT = """
    product:products(
        seller:sellers(
            id,
            business_name,
            business_address
        )
    )
"""

_ADDRESS_FIELDS = ("street_address", "city", "state", "zip_code")


class OrderRepository(Protocol):
    async def get_order(self, order_id: str) -> OrderRecord | None: ...

    async def get_order_items(self, order_id: str) -> list[OrderItem]: ...

    async def list_active_order_ids(self, statuses: Sequence[str]) -> list[str]: ...


def _parse_address(raw: Any) -> AddressRecord | None:
    # PostgREST returns a list for ambiguous embeds
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if not isinstance(raw, dict):
        return None
    values = {name: str(raw.get(name) or "").strip() for name in _ADDRESS_FIELDS}
    if not all(values.values()):
        return None
    return AddressRecord(**values)


def _parse_seller(item: Any) -> SellerRecord | None:
    product = item.get("product") if isinstance(item, dict) else None
    seller = product.get("seller") if isinstance(product, dict) else None
    if not isinstance(seller, dict) or seller.get("id") is None:
        return None
    address = str(seller.get("business_address") or "").strip()
    if not address:
        return None
    name = seller.get("business_name")
    return SellerRecord(
        seller_id=str(seller["id"]),
        name=str(name) if name is not None else None,
        address=address,
    )


class SupabaseOrderRepository:
    """Reads orders, their delivery addresses and their sellers from Supabase tables."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def get_order(self, order_id: str) -> OrderRecord | None:
        response = await self.client.table("orders").select(ORDER_SELECT).eq("id", order_id).limit(1).execute()
        rows = response.data or []
        if not rows:
            logger.info(f"Order {order_id} not found")
            return None
        row = rows[0]
        return OrderRecord(
            order_id=str(row.get("id", order_id)),
            delivery_address=_parse_address(row.get("addresses")),
        )

    async def get_order_items(self, order_id: str) -> list[OrderItem]:
        response = await self.client.table("order_items").select(ORDER_ITEMS_SELECT).eq("order_id", order_id).execute()
        return [OrderItem(seller=_parse_seller(item)) for item in (response.data or [])]

    async def list_active_order_ids(self, statuses: Sequence[str]) -> list[str]:
        if not statuses:
            return []
        response = await self.client.table("orders").select("id").in_("status", list(statuses)).execute()
        return [str(row["id"]) for row in (response.data or []) if row.get("id") is not None]
