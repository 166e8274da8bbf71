"""Gathers the pickup and delivery stops a driver must visit for a set of orders."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Sequence

from ...data.orders_repository import OrderRepository
from ...models.domain import (
    Coordinates,
    OrderItem,
    Resolved,
    ResolveResult,
    SellerRecord,
    Stop,
    StopCollection,
)
from .resolver import LocationResolver

logger = logging.getLogger(__name__)


class StopCollector:
    """Collects stops for orders.

    Orders are processed one after another; sellers are deduplicated across all
    orders so a farm shared by several orders is visited once. Stops whose
    address cannot be resolved are left out.
    """

    def __init__(
        self,
        orders: OrderRepository,
        resolver: LocationResolver,
        max_concurrent_lookups: int = 5,
    ) -> None:
        self.orders = orders
        self.resolver = resolver
        self.max_concurrent_lookups = max_concurrent_lookups

    async def _delivery_stop(self, order_id: str) -> Stop | None:
        try:
            order = await self.orders.get_order(order_id)
        except Exception as e:
            logger.warning(f"Failed to load order {order_id}: {e}")
            return None

        if order is None or order.delivery_address is None:
            logger.info(f"Order {order_id} has no delivery address")
            return None

        address = order.delivery_address.format()
        result = await self.resolver.resolve(address)
        if not isinstance(result, Resolved):
            logger.info(f"Dropping delivery for order {order_id}: {result.reason}")
            return None
        return Stop.delivery(order.order_id, address, result.coordinates)

    async def _order_items(self, order_id: str) -> list[OrderItem]:
        try:
            return await self.orders.get_order_items(order_id)
        except Exception as e:
            logger.warning(f"Failed to load items for order {order_id}: {e}")
            return []

    async def _pickup_stops(self, sellers: dict[str, SellerRecord], item_counts: Counter) -> list[Stop]:
        semaphore = asyncio.Semaphore(self.max_concurrent_lookups)

        async def resolve(address: str) -> ResolveResult:
            async with semaphore:
                return await self.resolver.resolve(address)

        results = await asyncio.gather(*(resolve(seller.address) for seller in sellers.values()))
        pickups: list[Stop] = []
        for seller, result in zip(sellers.values(), results):
            if isinstance(result, Resolved):
                pickups.append(Stop.pickup(seller, result.coordinates, item_counts[seller.seller_id]))
            else:
                logger.info(f"Dropping pickup for seller {seller.seller_id}: {result.reason}")
        return pickups

    async def collect(
        self,
        order_ids: Sequence[str],
        driver_location: Coordinates | None = None,
    ) -> StopCollection:
        collection = StopCollection()
        if driver_location is not None:
            collection.stops.append(Stop.driver_start(driver_location))

        deliveries: list[Stop] = []
        sellers: dict[str, SellerRecord] = {}
        item_counts: Counter = Counter()

        for order_id in dict.fromkeys(order_ids):
            delivery, items = await asyncio.gather(self._delivery_stop(order_id), self._order_items(order_id))
            if delivery is None:
                collection.unresolved_order_ids.append(order_id)
            else:
                deliveries.append(delivery)

            for item in items:
                if item.seller is None:
                    continue
                sellers.setdefault(item.seller.seller_id, item.seller)
                item_counts[item.seller.seller_id] += 1

        pickups = await self._pickup_stops(sellers, item_counts)
        collection.stops.extend(deliveries)
        collection.stops.extend(pickups)

        logger.info(
            f"Collected {len(deliveries)} deliveries and {len(pickups)} pickups "
            f"for {len(collection.unresolved_order_ids) + len(deliveries)} orders"
        )
        return collection

    async def collect_stops(
        self,
        order_ids: Sequence[str],
        driver_location: Coordinates | None = None,
    ) -> list[Stop]:
        collection = await self.collect(order_ids, driver_location)
        return collection.stops
