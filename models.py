from app import db
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy import Column, String, Text, DateTime, Boolean, BigInteger, JSON, func, Index, UniqueConstraint

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class WeatherEvent(db.Model):
    """
    Stored Spotter Network event
    One row per accepted report, keyed by the hash of its normalized feed line
    """
    __tablename__ = "weather_events"

    id = Column(db.Integer, primary_key=True)
    event_ts = Column(BigInteger, nullable=False, index=True)   # UTC microseconds
    ingest_ts = Column(BigInteger, nullable=False)              # UTC microseconds
    event_type = Column(String(20), nullable=False)             # "SnReport"
    title = Column(String(100), nullable=False)
    text = Column(Text)

    # Report fields
    hazard_type = Column(String(20), nullable=False, index=True)  # broad type, e.g. "Flood"
    hazard_kind = Column(String(50))                              # sub-kind label for "Other"
    reporter = Column(String(200))
    magnitude = Column(db.Float)
    units = Column(String(10))                                    # "mph" or "inches"
    was_measured = Column(Boolean)

    latitude = Column(db.Float)
    longitude = Column(db.Float)

    # Full event record as handed to the store
    payload = Column(JSONType)

    # Tracking fields
    raw_line = Column(Text)                        # normalized feed line for audit
    report_hash = Column(String(64), nullable=False)  # SHA256 of raw_line
    ingested_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index('idx_event_hazard_ts', 'hazard_type', 'event_ts'),
        Index('idx_event_coords', 'latitude', 'longitude'),
        UniqueConstraint('report_hash', name='uq_weather_event_hash'),
    )

    def __repr__(self):
        return f'<WeatherEvent {self.hazard_type} {self.event_ts} {self.reporter}>'

    def to_dict(self):
        """Convert stored event to dictionary"""
        return {
            'id': self.id,
            'event_ts': self.event_ts,
            'ingest_ts': self.ingest_ts,
            'event_type': self.event_type,
            'title': self.title,
            'text': self.text,
            'hazard_type': self.hazard_type,
            'hazard_kind': self.hazard_kind,
            'reporter': self.reporter,
            'magnitude': self.magnitude,
            'units': self.units,
            'was_measured': self.was_measured,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'ingested_at': self.ingested_at.isoformat() if self.ingested_at else None
        }


class IngestionLog(db.Model):
    """
    Log of poll cycles for monitoring and debugging
    A failed fetch is recorded here with success=False
    """
    __tablename__ = "ingestion_logs"

    id = Column(db.Integer, primary_key=True)
    started_at = Column(DateTime, server_default=func.now())
    completed_at = Column(DateTime)
    success = Column(Boolean, default=False)
    http_status_code = Column(db.Integer)
    reports_in_feed = Column(db.Integer, default=0)
    new_reports = Column(db.Integer, default=0)
    events_stored = Column(db.Integer, default=0)
    suppressed = Column(db.Integer, default=0)
    malformed = Column(db.Integer, default=0)
    duplicates = Column(db.Integer, default=0)
    error_message = Column(Text)

    def __repr__(self):
        return f'<IngestionLog {self.id}: {self.success}>'

    def to_dict(self):
        return {
            'id': self.id,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'success': self.success,
            'http_status_code': self.http_status_code,
            'reports_in_feed': self.reports_in_feed,
            'new_reports': self.new_reports,
            'events_stored': self.events_stored,
            'suppressed': self.suppressed,
            'malformed': self.malformed,
            'duplicates': self.duplicates,
            'error_message': self.error_message
        }
