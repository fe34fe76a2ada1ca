"""
Event store client
Writes parsed events and poll-cycle records through SQLAlchemy
"""
import hashlib
import logging
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from domain import Event
from models import WeatherEvent, IngestionLog

logger = logging.getLogger(__name__)


def report_hash(raw_line: str) -> str:
    return hashlib.sha256(raw_line.encode('utf-8')).hexdigest()


def now_micros() -> int:
    return int(time.time() * 1_000_000)


class EventStore:
    """Persists events one at a time so a single bad row never rolls back its neighbours"""

    def __init__(self, db):
        self.db = db

    def put_event(self, event: Event, raw_line: Optional[str] = None) -> bool:
        """
        Store one event. Returns False when an event with the same report hash
        is already stored; other database errors propagate.
        """
        event.ingest_ts = now_micros()

        report = event.report
        point = event.location.point if event.location else None
        hash_source = raw_line if raw_line is not None else f"{event.event_ts}|{event.title}|{event.text}"

        row = WeatherEvent(
            event_ts=event.event_ts,
            ingest_ts=event.ingest_ts,
            event_type=event.event_type.value,
            title=event.title,
            text=event.text,
            hazard_type=report.hazard.name if report else 'Unknown',
            hazard_kind=report.hazard.kind if report else None,
            reporter=report.reporter if report else None,
            magnitude=report.magnitude if report else None,
            units=report.units.value if report and report.units else None,
            was_measured=report.was_measured if report else None,
            latitude=point.lat if point else None,
            longitude=point.lon if point else None,
            payload=event.to_dict(),
            raw_line=raw_line,
            report_hash=report_hash(hash_source),
        )

        try:
            self.db.session.add(row)
            self.db.session.commit()
        except IntegrityError as ie:
            self.db.session.rollback()
            if 'uq_weather_event_hash' in str(ie) or 'UNIQUE constraint failed' in str(ie) \
                    or 'duplicate key value violates unique constraint' in str(ie):
                logger.debug(f"Duplicate event skipped: {row.report_hash[:16]}...")
                return False
            raise

        logger.debug(f"Stored event {row.id}: {row.title}")
        return True

    def put_fetch_failure(self, error_message: str, http_status_code: Optional[int] = None) -> IngestionLog:
        """Record a poll cycle that never got a feed body"""
        log = IngestionLog(
            started_at=datetime.utcnow(),
            completed_at=datetime.utcnow(),
            success=False,
            http_status_code=http_status_code,
            error_message=error_message,
        )
        self.db.session.add(log)
        self.db.session.commit()
        return log

    def count_events(self) -> int:
        return WeatherEvent.query.count()
