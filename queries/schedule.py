"""Wedding-day schedule."""

from __future__ import annotations

from models import ScheduleItem
from notifications import Toast
from query_cache import make_key
from schemas import ScheduleItemRequest, ScheduleItemUpdate, ensure_valid
from site_client import SiteClient

SCHEDULE_KEY = make_key("/api/schedule")


async def get_schedule(client: SiteClient) -> list[ScheduleItem]:
    """All schedule items, ordered by ``order_index``."""

    async def _load() -> list[ScheduleItem]:
        items = [ScheduleItem.from_api(i) for i in await client.http.query("/api/schedule") or []]
        return sorted(items, key=lambda i: i.order_index)

    return await client.cache.fetch(SCHEDULE_KEY, _load)


async def create_schedule_item(client: SiteClient, request: ScheduleItemRequest) -> ScheduleItem:
    payload = ensure_valid(request)

    async def _send() -> ScheduleItem:
        return ScheduleItem.from_api(await client.http.request("POST", "/api/schedule", payload))

    return await client.mutate(
        _send,
        invalidates=[SCHEDULE_KEY],
        success_toast=Toast(
            "Položka harmonogramu přidána",
            "Nová položka byla úspěšně přidána do harmonogramu",
        ),
        error_title="Chyba při přidávání",
    )


async def update_schedule_item(
    client: SiteClient, item_id: int, request: ScheduleItemUpdate
) -> ScheduleItem:
    payload = ensure_valid(request)

    async def _send() -> ScheduleItem:
        return ScheduleItem.from_api(await client.http.request("PATCH", f"/api/schedule/{item_id}", payload))

    return await client.mutate(
        _send,
        invalidates=[SCHEDULE_KEY],
        success_toast=Toast("Harmonogram aktualizován", "Položka harmonogramu byla úspěšně aktualizována"),
        error_title="Chyba při aktualizaci",
    )


async def delete_schedule_item(client: SiteClient, item_id: int) -> None:
    async def _send() -> None:
        await client.http.request("DELETE", f"/api/schedule/{item_id}")

    await client.mutate(
        _send,
        invalidates=[SCHEDULE_KEY],
        success_toast=Toast("Položka smazána", "Položka harmonogramu byla úspěšně smazána"),
        error_title="Chyba při mazání",
    )
