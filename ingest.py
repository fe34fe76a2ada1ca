import logging
import requests
from datetime import datetime
from typing import Dict, Optional, Set, Tuple

from change_detection import get_comparison
from config import Config
from models import IngestionLog
from report_parser import ReportParser, MalformedReport
from store import EventStore

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when the feed cannot be retrieved"""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class SpotterIngestService:
    """
    Spotter Network Report Ingestion Service
    Handles polling, change detection, parsing and storage
    """

    def __init__(self, db, parser: Optional[ReportParser] = None, store: Optional[EventStore] = None):
        self.db = db
        self.config = Config()
        self.parser = parser or ReportParser()
        self.store = store or EventStore(db)

        # Normalized lines seen as of the last successful poll
        self.seen: Set[str] = set()

    def fetch_reports(self) -> Tuple[int, str]:
        """Download the feed body; returns (status_code, body)"""
        headers = {
            'User-Agent': self.config.USER_AGENT,
            'Accept': 'text/plain,*/*'
        }

        try:
            response = requests.get(
                self.config.SPOTTER_FEED_URL, headers=headers, timeout=self.config.REQUEST_TIMEOUT
            )
        except requests.RequestException as e:
            raise FetchError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise FetchError(f"Unexpected status code: {response.status_code}", response.status_code)

        return response.status_code, response.text

    def poll_spotter_reports(self) -> Dict:
        """
        Main ingestion method - polls the feed and stores new reports
        Returns a summary of the cycle
        """
        started_at = datetime.utcnow()

        try:
            status_code, body = self.fetch_reports()
        except FetchError as e:
            logger.warning(f"fetch_reports failed: {e}")
            self.store.put_fetch_failure(str(e), http_status_code=e.status_code)
            return {
                'status': 'fetch_failed',
                'error': str(e),
                'http_status_code': e.status_code
            }

        comparison = get_comparison(body, self.seen)
        self.seen = comparison.latest_set

        stored = suppressed = malformed = duplicates = store_errors = 0

        for line in comparison.new:
            try:
                event = self.parser.parse(line)
            except MalformedReport as e:
                malformed += 1
                logger.warning(f"parse failed: {e.reason}: {line[:100]}")
                continue

            if event is None:
                suppressed += 1
                logger.debug(f"Suppressed report: {line[:100]}")
                continue

            try:
                if self.store.put_event(event, raw_line=line):
                    stored += 1
                    logger.info(f"stored event: {event.title} at {event.event_ts}")
                else:
                    duplicates += 1
            except Exception as e:
                store_errors += 1
                self.db.session.rollback()
                logger.error(f"unable to store event: {e}")

        log = IngestionLog(
            started_at=started_at,
            completed_at=datetime.utcnow(),
            success=True,
            http_status_code=status_code,
            reports_in_feed=len(comparison.latest_set),
            new_reports=len(comparison.new),
            events_stored=stored,
            suppressed=suppressed,
            malformed=malformed,
            duplicates=duplicates,
            error_message=f"{store_errors} events failed to store" if store_errors else None
        )
        self.db.session.add(log)
        self.db.session.commit()

        logger.info(
            f"Ingestion complete: {len(comparison.latest_set)} in feed, {len(comparison.new)} new, "
            f"{stored} stored, {suppressed} suppressed, {malformed} malformed, {duplicates} duplicates"
        )

        return {
            'status': 'success',
            'reports_in_feed': len(comparison.latest_set),
            'new_reports': len(comparison.new),
            'stored': stored,
            'suppressed': suppressed,
            'malformed': malformed,
            'duplicates': duplicates,
            'store_errors': store_errors
        }
