"""
Autonomous Scheduler for the Spotter Network loader
Runs the poll cycle on a fixed interval with overlap prevention
"""
import threading
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from config import Config

logger = logging.getLogger(__name__)

POLL_JOB_ID = 'spotter_poll'


class AutonomousScheduler:
    """
    Self-running scheduler that keeps the poll loop going forever
    Fetch failures and cycle errors are logged; the next tick simply tries again
    """

    def __init__(self, ingest_service, app=None, interval_seconds: Optional[int] = None):
        self.ingest_service = ingest_service
        self.app = app
        self.interval_seconds = interval_seconds or Config.POLLING_INTERVAL_SECONDS

        self.scheduler = None
        self.running = False

        self.last_poll = None
        self.poll_count = 0
        self.last_operation_result = None

        # Prevents overlapping cycles from manual triggers
        self.poll_lock = threading.Lock()

    def start(self):
        """Start the autonomous scheduler"""
        if self.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler(daemon=True)
        self.scheduler.add_job(
            func=self.run_poll,
            trigger="interval",
            seconds=self.interval_seconds,
            id=POLL_JOB_ID,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now()
        )
        self.scheduler.start()
        self.running = True
        logger.info(f"Autonomous scheduler started - polling every {self.interval_seconds} seconds")

    def stop(self):
        """Stop the autonomous scheduler"""
        if self.scheduler and self.running:
            self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Autonomous scheduler stopped")

    def run_poll(self) -> Optional[dict]:
        """Execute one poll cycle; returns None if a cycle is already running"""
        if not self.poll_lock.acquire(blocking=False):
            logger.warning("Spotter polling already in progress, skipping")
            return None

        try:
            if self.app is not None:
                with self.app.app_context():
                    result = self.ingest_service.poll_spotter_reports()
            else:
                result = self.ingest_service.poll_spotter_reports()

            self.last_poll = datetime.utcnow()
            self.poll_count += 1
            self.last_operation_result = {
                'operation': 'spotter_poll',
                'success': result.get('status') == 'success',
                'message': self._describe(result),
                'timestamp': self.last_poll.isoformat()
            }
            return result

        except Exception as e:
            logger.error(f"Spotter polling failed: {e}")
            self.last_operation_result = {
                'operation': 'spotter_poll',
                'success': False,
                'message': f'Spotter polling failed: {str(e)}',
                'timestamp': datetime.utcnow().isoformat()
            }
            return {'status': 'error', 'error': str(e)}
        finally:
            self.poll_lock.release()

    @staticmethod
    def _describe(result: dict) -> str:
        if result.get('status') != 'success':
            return f"Fetch failed: {result.get('error')}"
        return f"{result['stored']} stored / {result['new_reports']} new / {result['reports_in_feed']} in feed"

    def get_status(self) -> dict:
        """Get scheduler status for diagnostics"""
        next_run = None
        if self.scheduler and self.running:
            job = self.scheduler.get_job(POLL_JOB_ID)
            if job and job.next_run_time:
                next_run = job.next_run_time.isoformat()

        return {
            'running': self.running,
            'interval_seconds': self.interval_seconds,
            'last_poll': self.last_poll.isoformat() if self.last_poll else None,
            'next_poll': next_run,
            'poll_count': self.poll_count,
            'seen_reports': len(self.ingest_service.seen),
            'last_operation_result': self.last_operation_result
        }


# Global scheduler instance
autonomous_scheduler = None


def init_scheduler(ingest_service, app=None):
    """Initialize the global scheduler instance"""
    global autonomous_scheduler
    autonomous_scheduler = AutonomousScheduler(ingest_service, app)
    return autonomous_scheduler


def start_scheduler():
    """Start the global scheduler"""
    if autonomous_scheduler:
        autonomous_scheduler.start()


def stop_scheduler():
    """Stop the global scheduler"""
    if autonomous_scheduler:
        autonomous_scheduler.stop()


def get_scheduler_status():
    """Get scheduler status"""
    if autonomous_scheduler:
        return autonomous_scheduler.get_status()
    return {'running': False}
