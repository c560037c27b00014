"""Ready-for-pickup signal ingestion.

Households flag themselves as ready in Supabase. Each flagged household becomes
a ``SignalPoint`` candidate that the route optimizer treats as maximally
urgent. Records without a usable location are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from ..db.supabase import get_supabase_client
from ..models.domain import SignalPoint
from .location_codec import decode_location

logger = logging.getLogger(__name__)

SIGNAL_ID_PREFIX = "household_"
ACTIVE_SIGNAL_STATUSES = ("pending", "acknowledged")
HOUSEHOLD_COLUMNS = (
    "id, user_id, nickname, ward_number, waste_ready, location, "
    "manual_address, geocoded_address, signals (id, waste_types, status, created_at)"
)


@dataclass(frozen=True, slots=True)
class ReadyRecord:
    """One household that is waiting for pickup, as stored upstream."""

    source_id: str
    location: Any
    nickname: Optional[str] = None
    ward_number: Optional[int] = None
    waste_types: tuple[str, ...] = field(default_factory=tuple)


def signal_id(source_id: str) -> str:
    return f"{SIGNAL_ID_PREFIX}{source_id}"


def is_signal_id(candidate_id: str) -> bool:
    return candidate_id.startswith(SIGNAL_ID_PREFIX)


def _active_waste_types(signals: Any) -> tuple[str, ...]:
    if not isinstance(signals, list):
        return tuple()
    for signal in signals:
        if isinstance(signal, dict) and signal.get("status") in ACTIVE_SIGNAL_STATUSES:
            waste_types = signal.get("waste_types") or ()
            if isinstance(waste_types, str):
                return (waste_types,)
            return tuple(str(item) for item in waste_types)
    return tuple()


def _ward_number(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def records_from_households(rows: Iterable[dict]) -> list[ReadyRecord]:
    """Convert ``households`` rows (with nested ``signals``) into ready records."""

    records: list[ReadyRecord] = []
    for row in rows:
        if not row.get("id"):
            continue
        records.append(
            ReadyRecord(
                source_id=str(row["id"]),
                location=row.get("location"),
                nickname=row.get("nickname") or None,
                ward_number=_ward_number(row.get("ward_number")),
                waste_types=_active_waste_types(row.get("signals")),
            )
        )
    return records


def to_signal_candidates(records: Iterable[ReadyRecord]) -> list[SignalPoint]:
    candidates: list[SignalPoint] = []
    for record in records:
        coords = decode_location(record.location)
        if coords is None or coords.is_origin:
            logger.debug("Dropping ready record %s without a usable location", record.source_id)
            continue
        candidates.append(
            SignalPoint(
                id=signal_id(record.source_id),
                source_id=record.source_id,
                name=record.nickname or "Household Pickup",
                lat=coords.lat,
                lon=coords.lng,
                ward_number=record.ward_number,
                waste_types=record.waste_types,
            )
        )
    return candidates


class SignalSource(Protocol):
    async def fetch_ready(self) -> list[ReadyRecord]:
        ...


class NullSignalSource:
    """Used when no upstream store is configured."""

    async def fetch_ready(self) -> list[ReadyRecord]:
        return []


class SupabaseSignalSource:
    """Reads ``waste_ready`` households from Supabase."""

    def __init__(self, client_factory: Callable[[], Any] = get_supabase_client) -> None:
        self._client_factory = client_factory

    def _query(self) -> list[ReadyRecord]:
        client = self._client_factory()
        if client is None:
            return []
        response = client.table("households").select(HOUSEHOLD_COLUMNS).eq("waste_ready", True).execute()
        return records_from_households(response.data or [])

    async def fetch_ready(self) -> list[ReadyRecord]:
        # supabase-py is synchronous; keep the event loop free while it runs.
        return await run_in_threadpool(self._query)
