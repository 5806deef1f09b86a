from datetime import datetime

from apscheduler.schedulers.blocking import BlockingScheduler

from xclient.client import XClient

from .config import Config
from .logger import logger
from .sync import sync_liked_tweets


class SyncScheduler:
    """Runs the liked-tweets sync on a fixed interval inside one process."""

    def __init__(self, config: Config, client: XClient, scheduler=None):
        self.config = config
        self.client = client
        self.scheduler = scheduler or BlockingScheduler()
        self._stopping = False

    def add_jobs(self):
        # First run fires as soon as the scheduler starts, then every interval
        self.scheduler.add_job(
            self.sync_job,
            'interval',
            minutes=max(self.config.SYNC_INTERVAL_MINUTES, 1),
            id='sync_liked_tweets',
            next_run_time=datetime.now(),
            max_instances=1,
            coalesce=True,
            misfire_grace_time=300
        )

    def start(self):
        if self._stopping:
            logger.info('Shutdown requested before start, not starting scheduler')
            return
        self.add_jobs()
        logger.info('Scheduler started (every %s minutes)', self.config.SYNC_INTERVAL_MINUTES)
        self.scheduler.start()

    def sync_job(self):
        try:
            sync_liked_tweets(self.config, self.client)
        except Exception:
            logger.exception('Error in sync_job')

    def shutdown(self):
        self._stopping = True
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
