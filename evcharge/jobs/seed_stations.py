"""
Seed stations and chargers from the public EV charger feed.

Runs once at startup when the station table is empty. Can also be run by hand:
    python -m evcharge.jobs.seed_stations
"""
import asyncio
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..config import settings
from ..db import SessionLocal, init_db, unit_of_work
from ..integrations.ev_charger_client import EvChargerApiClient, FeedItem
from ..models import Charger, ChargerStatus, ChargerType, ChargingStation, ConnectorType
from ..utils.log import log_event, setup_logging

logger = logging.getLogger(__name__)

# Feed chgerType code -> (charger type, connector)
CHARGER_TYPE_CODES: Dict[str, Tuple[ChargerType, ConnectorType]] = {
    "01": (ChargerType.DC_FAST, ConnectorType.CHADEMO),
    "02": (ChargerType.AC_SLOW, ConnectorType.AC_TYPE_1),
    "03": (ChargerType.DC_COMBO, ConnectorType.CCS1),
}
DEFAULT_TYPE = (ChargerType.AC_SLOW, ConnectorType.AC_TYPE_1)


def map_charger_type(code: Optional[str]) -> ChargerType:
    return CHARGER_TYPE_CODES.get((code or "").strip(), DEFAULT_TYPE)[0]


def map_connector_type(code: Optional[str]) -> ConnectorType:
    return CHARGER_TYPE_CODES.get((code or "").strip(), DEFAULT_TYPE)[1]


def parse_float(value: Optional[str]) -> Optional[float]:
    """Feed numbers are strings and sometimes blank or junk."""
    if value is None:
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def group_by_station(items: List[FeedItem]) -> "OrderedDict[str, List[FeedItem]]":
    grouped: "OrderedDict[str, List[FeedItem]]" = OrderedDict()
    for item in items:
        grouped.setdefault(item.stat_id, []).append(item)
    return grouped


def build_station(stat_id: str, rows: List[FeedItem]) -> ChargingStation:
    first = rows[0]
    station = ChargingStation(
        station_code=stat_id,
        name=first.stat_nm or stat_id,
        address=first.addr or "",
        latitude=parse_float(first.lat),
        longitude=parse_float(first.lng),
        operator_name=first.busi_nm,
        contact_number=first.busi_call,
        operating_hours=first.use_time,
    )
    return station


def build_charger(station_id: int, row: FeedItem) -> Charger:
    return Charger(
        station_id=station_id,
        charger_code=row.chger_id,
        type=map_charger_type(row.chger_type),
        status=ChargerStatus.AVAILABLE,
        power_kw=parse_float(row.output),
        connector_type=map_connector_type(row.chger_type),
    )


async def seed_stations(db: Session, client: Optional[EvChargerApiClient] = None) -> int:
    """
    Import feed stations into an empty database.

    Returns:
        Number of stations created (0 when skipped)
    """
    if db.query(ChargingStation.id).first() is not None:
        logger.info("[Seed] Stations already present, skipping seed")
        return 0

    client = client or EvChargerApiClient()
    if not client.enabled:
        logger.info("[Seed] OPENAPI_SERVICE_KEY not set, skipping seed")
        return 0

    items = await client.fetch_chargers(
        page_size=settings.seed_page_size,
        max_pages=settings.seed_max_pages,
    )
    if not items:
        logger.warning("[Seed] Feed returned no rows, nothing to seed")
        return 0

    grouped = group_by_station(items)
    charger_count = 0
    with unit_of_work(db):
        for stat_id, rows in grouped.items():
            station = build_station(stat_id, rows)
            db.add(station)
            db.flush()
            for row in rows:
                db.add(build_charger(station.id, row))
                charger_count += 1

    log_event("stations_seeded", {"stations": len(grouped), "chargers": charger_count})
    return len(grouped)


def main() -> None:
    setup_logging(settings.log_level)
    init_db()
    db = SessionLocal()
    try:
        created = asyncio.run(seed_stations(db))
        print(f"Seeded {created} stations")
    finally:
        db.close()


if __name__ == "__main__":
    main()
