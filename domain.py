"""
Weather event record types
Shape of the records handed to the event store
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, List, Dict, Any


class Units(Enum):
    MPH = "mph"
    INCHES = "inches"


class EventType(Enum):
    SN_REPORT = "SnReport"


@dataclass(frozen=True)
class HazardType:
    """Broad hazard type used by storage; kind is only set for Other"""
    name: str
    kind: Optional[str] = None


@dataclass
class Coordinates:
    lat: float
    lon: float


@dataclass
class Location:
    point: Optional[Coordinates] = None
    county: Optional[str] = None
    wfo: Optional[str] = None
    poly: Optional[List[Coordinates]] = None


@dataclass
class Report:
    hazard: HazardType
    reporter: str
    magnitude: Optional[float] = None
    units: Optional[Units] = None
    was_measured: Optional[bool] = None
    report_ts: Optional[int] = None  # not set for spotter reports


@dataclass
class Event:
    """Structured weather event; timestamps are UTC microseconds since epoch"""
    event_ts: int
    event_type: EventType
    title: str
    text: Optional[str] = None
    location: Optional[Location] = None
    report: Optional[Report] = None
    ingest_ts: int = 0  # set when storing
    expires_ts: Optional[int] = None
    fetch_status: Optional[str] = None
    image_uri: Optional[str] = None
    md: Optional[Dict[str, Any]] = None
    outlook: Optional[Dict[str, Any]] = None
    valid_ts: Optional[int] = None
    warning: Optional[Dict[str, Any]] = None
    watch: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to a JSON-serializable dictionary"""
        data = asdict(self)
        data['event_type'] = self.event_type.value
        if self.report and self.report.units:
            data['report']['units'] = self.report.units.value
        return data
