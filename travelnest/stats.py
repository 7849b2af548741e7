from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import datetime

from travelnest.crud import booking_crud, room_crud, user_crud
from travelnest.schemas import AdminStats

CHART_HEADER = ["Day", "Sale"]


def _day_label(value) -> str | None:
    """`day/month` of a booking date, e.g. 7/3 for 7 March."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if not isinstance(value, datetime):
        return str(value)
    return f"{value.day}/{value.month}"


def compute_stats(
    bookings: Iterable[dict], user_count: int, room_count: int
) -> AdminStats:
    """
    Revenue summary in booking-scan order. Prices are summed as stored,
    no rounding is applied.
    """
    total_sale = 0
    chart_data: list[list] = [list(CHART_HEADER)]
    for booking in bookings:
        price = booking.get("price") or 0
        total_sale += price
        chart_data.append([_day_label(booking.get("date")), price])

    return AdminStats(
        total_sale=total_sale,
        booking_count=len(chart_data) - 1,
        user_count=user_count,
        room_count=room_count,
        chart_data=chart_data,
    )


async def collect_admin_stats() -> AdminStats:
    async def _sales() -> list[dict]:
        return [b async for b in booking_crud.iter_sales()]

    bookings, user_count, room_count = await asyncio.gather(
        _sales(), user_crud.count(), room_crud.count()
    )
    return compute_stats(bookings, user_count, room_count)
