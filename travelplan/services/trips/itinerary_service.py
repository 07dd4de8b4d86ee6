from datetime import datetime
from typing import Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from travelplan.core.exceptions import store_failure
from travelplan.core.logger import logger
from travelplan.models.trips.itinerary_item import ROUTE_TYPES, ItineraryItem, ItemType
from travelplan.models.user.user import User
from travelplan.schemas.trip.cost import CostOut
from travelplan.schemas.trip.itinerary import (
    CreatedItemResponse,
    ItemCreate,
    ItemListResponse,
    ItemOut,
    ItemResponse,
    ItemUpdate,
)
from travelplan.services.trips.trip_access import get_accessible_trip
from travelplan.stores.trip_records import CostStore, ItineraryStore

ITEM_FIELDS = (
    "type", "title", "description", "start_date", "end_date", "location",
    "start_location", "end_location", "confirmation_code", "notes",
)


def place_fields(item_type: ItemType, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Flights and transport keep start/end locations; every other item keeps one location."""
    if item_type in ROUTE_TYPES:
        fields["location"] = None
    else:
        fields["start_location"] = None
        fields["end_location"] = None
    return fields


async def _get_item(db: AsyncSession, trip_id: int, item_id: int) -> ItineraryItem:
    item = await ItineraryStore.find_in_trip(db, trip_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


async def list_items(db: AsyncSession, trip_id: int, current_user: User) -> ItemListResponse:
    """A trip's itinerary in chronological order; undated items come last."""
    async with store_failure("Failed to fetch itinerary items", db):
        await get_accessible_trip(db, trip_id, current_user)
        items = await ItineraryStore.list_for_trip(db, trip_id)
    return ItemListResponse(items=[ItemOut.model_validate(item) for item in items])


async def get_item(db: AsyncSession, trip_id: int, item_id: int, current_user: User) -> ItemResponse:
    async with store_failure("Failed to fetch itinerary item", db):
        await get_accessible_trip(db, trip_id, current_user)
        item = await _get_item(db, trip_id, item_id)
    return ItemResponse(item=ItemOut.model_validate(item))


async def create_item(
    db: AsyncSession, trip_id: int, item_data: ItemCreate, current_user: User
) -> CreatedItemResponse:
    """
    Add an itinerary item. With `has_cost` and a positive `cost_amount` a cost
    titled after the item is recorded too, paid by the caller, in the same
    commit.
    """
    async with store_failure("Failed to create itinerary item", db):
        await get_accessible_trip(db, trip_id, current_user)

        now = datetime.utcnow()
        fields = place_fields(item_data.type, item_data.model_dump(include=set(ITEM_FIELDS)))
        item = await ItineraryStore.create(
            db, trip_id=trip_id, created_by_id=current_user.id, created_at=now, updated_at=now, **fields
        )

        cost = None
        if item_data.has_cost and item_data.cost_amount and item_data.cost_amount > 0:
            cost = await CostStore.create(
                db,
                trip_id=trip_id,
                amount=item_data.cost_amount,
                currency=item_data.cost_currency.upper(),
                description=item_data.title,
                category=item_data.cost_category,
                date=item_data.cost_date or now,
                paid_by_id=current_user.id,
                created_at=now,
            )
        await db.commit()

        item = await ItineraryStore.find_in_trip(db, trip_id, item.id)
        if cost is not None:
            cost = await CostStore.find_in_trip(db, trip_id, cost.id)

    logger.info(f"Itinerary item {item.id} added to trip {trip_id} by user {current_user.id}")
    return CreatedItemResponse(
        item=ItemOut.model_validate(item),
        cost=CostOut.model_validate(cost) if cost is not None else None,
    )


async def update_item(
    db: AsyncSession, trip_id: int, item_id: int, item_data: ItemUpdate, current_user: User
) -> ItemResponse:
    async with store_failure("Failed to update itinerary item", db):
        await get_accessible_trip(db, trip_id, current_user)
        item = await _get_item(db, trip_id, item_id)

        changes = item_data.changes()
        start = changes.get("start_date", item.start_date)
        end = changes.get("end_date", item.end_date)
        if start and end and end < start:
            raise HTTPException(status_code=400, detail="end_date cannot be before start_date")

        changes = place_fields(changes.get("type", item.type), changes)
        changes["updated_at"] = datetime.utcnow()
        await ItineraryStore.update(db, item, changes)
        await db.commit()
        item = await ItineraryStore.find_in_trip(db, trip_id, item_id)

    logger.info(f"Itinerary item {item_id} on trip {trip_id} updated by user {current_user.id}")
    return ItemResponse(item=ItemOut.model_validate(item))


async def delete_item(db: AsyncSession, trip_id: int, item_id: int, current_user: User) -> dict:
    async with store_failure("Failed to delete itinerary item", db):
        await get_accessible_trip(db, trip_id, current_user)
        item = await _get_item(db, trip_id, item_id)

        await ItineraryStore.delete(db, item.id)
        await db.commit()

    logger.info(f"Itinerary item {item_id} on trip {trip_id} deleted by user {current_user.id}")
    return {"message": "Item deleted successfully"}
