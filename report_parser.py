"""
Spotter Network report parser
Turns one raw feed line into a structured weather event
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from domain import Coordinates, Event, EventType, Location, Report, Units
from hazards import Hazard, UnknownHazardCode, resolve

logger = logging.getLogger(__name__)

REPORT_PATTERN = (
    r"Icon: (?P<lat>\d{2}\.\d{6}),(?P<lon>-\d{2,3}\.\d{6}),000,\d,(?P<hazard_code>\d{1,2}),"
    r".Reported By: (?P<reporter>.+)\\n.+\\nTime: (?P<ts>.+) UTC"
    r"(?:\\nSize: (?P<size>\d{1,2}\.\d{2}).+?)*"
    r"(?:\\n(?P<mph>\d{1,3}) mph)*"
    r"(?P<measured> \[Measured\])*"
    r".+otes: (?P<notes>.+).$"
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
EMPTY_NOTES = "None"


class MalformedReport(Exception):
    """Raised when a report line cannot be turned into a well-formed event"""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class ReportParser:
    """
    Single-pattern parser for Spotter Network report lines.
    parse() returns an Event, returns None for a suppressed Other/None report,
    or raises MalformedReport.
    """

    def __init__(self):
        self.compiled_regex = re.compile(REPORT_PATTERN)

    def parse(self, report: str) -> Optional[Event]:
        captures = self.compiled_regex.search(report)

        if captures is None:
            raise MalformedReport("invalid spotter network report format")

        try:
            hazard = resolve(captures.group('hazard_code'))
        except UnknownHazardCode as e:
            raise MalformedReport(str(e)) from e

        notes = captures.group('notes')
        reporter = captures.group('reporter')

        # Other/None reports carry nothing actionable
        if hazard == Hazard.OTHER and notes == EMPTY_NOTES:
            return None

        parsed_report = Report(hazard=hazard.to_hazard_type(), reporter=reporter)

        if captures.group('measured') is not None:
            parsed_report.was_measured = True

        mph = captures.group('mph')
        size = captures.group('size')

        if mph is not None:
            parsed_report.magnitude = self._parse_float(mph, 'mph')
            parsed_report.units = Units.MPH
        elif size is not None:
            parsed_report.magnitude = self._parse_float(size, 'size')
            parsed_report.units = Units.INCHES

        location = Location(
            point=Coordinates(
                lat=self._parse_float(captures.group('lat'), 'lat'),
                lon=self._parse_float(captures.group('lon'), 'lon'),
            )
        )

        event_ts = self._parse_event_ts(captures.group('ts'))

        if notes == EMPTY_NOTES:
            text = f"{hazard.display_name} reported by {reporter}"
        else:
            text = f"{hazard.display_name} reported by {reporter}. {notes}"
        title = f"Report: {hazard.display_name}"

        return Event(
            event_ts=event_ts,
            event_type=EventType.SN_REPORT,
            title=title,
            text=text,
            location=location,
            report=parsed_report,
        )

    @staticmethod
    def _parse_float(value: str, field: str) -> float:
        try:
            return float(value)
        except ValueError as e:
            raise MalformedReport(f"invalid {field} value: {value}") from e

    @staticmethod
    def _parse_event_ts(value: str) -> int:
        """Report time is UTC; returns microseconds since epoch"""
        try:
            parsed = datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise MalformedReport(f"invalid report time: {value}") from e
        return int(parsed.timestamp()) * 1_000_000
