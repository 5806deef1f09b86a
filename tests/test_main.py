"""Tests for the CLI and the interval scheduler."""
import logging
import threading
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from blogsync.config import Config
from blogsync.main import apply_overrides, main, parse_args, run
from blogsync.scheduler import SyncScheduler
from xclient.errors import XApiError


def test_default_command_is_likes():
    """No subcommand means a one-off liked-tweets sync."""
    args = parse_args([])
    assert args.command == "likes"
    assert args.dry_run is False


def test_overrides_apply_to_config(tmp_path):
    """CLI flags take precedence over environment settings."""
    args = parse_args(["bookmarks", "--dry-run", "--max", "5", "--username", "@octo", "--root", str(tmp_path)])
    config = apply_overrides(Config.from_env({}), args)
    assert args.command == "bookmarks"
    assert config.DRY_RUN is True
    assert config.MAX_BOOKMARKS == 5
    assert config.X_USERNAME == "octo"
    assert config.BLOG_ROOT == tmp_path


def test_likes_without_credentials_fails():
    """Missing OAuth 1.0a variables exit with status 1."""
    assert run(Config.from_env({}), "likes") == 1


def test_bookmarks_without_token_fails():
    """Bookmarks need an OAuth 2.0 token."""
    assert run(Config.from_env({}), "bookmarks") == 1


def test_scheduler_registers_interval_job():
    """The watch job runs on the configured interval, one instance at a time."""
    config = Config.from_env({"SYNC_INTERVAL_MINUTES": "15"})
    sched = SyncScheduler(config, client=None, scheduler=BackgroundScheduler())
    sched.add_jobs()

    jobs = sched.scheduler.get_jobs()
    assert [job.id for job in jobs] == ["sync_liked_tweets"]
    assert jobs[0].trigger.interval == timedelta(minutes=15)
    assert jobs[0].max_instances == 1
    assert jobs[0].coalesce is True


def test_scheduler_job_logs_failures(caplog):
    """A failed run is logged and does not escape the job."""

    class FailingClient:
        def get_user_id(self, username):
            raise XApiError(503, {"title": "Service Unavailable"})

    sched = SyncScheduler(Config.from_env({}), FailingClient(), scheduler=BackgroundScheduler())
    with caplog.at_level(logging.ERROR, logger="blogsync"):
        sched.sync_job()
    assert "Error in sync_job" in caplog.text


def test_max_zero_overrides_config():
    """--max 0 is an explicit value, not a missing flag."""
    config = apply_overrides(Config.from_env({}), parse_args(["likes", "--max", "0"]))
    assert config.MAX_BOOKMARKS == 0


def test_invalid_integer_setting_exits_with_error(monkeypatch, caplog):
    """A non-numeric MAX_BOOKMARKS is reported and exits with status 1."""
    monkeypatch.setenv("MAX_BOOKMARKS", "abc")
    with caplog.at_level(logging.ERROR, logger="blogsync"):
        assert main(["likes"]) == 1
    assert "MAX_BOOKMARKS must be an integer" in caplog.text


def test_first_sync_runs_inside_scheduler():
    """The first run is a scheduled job, so it fires as soon as the scheduler starts."""
    sched = SyncScheduler(Config.from_env({}), client=None, scheduler=BackgroundScheduler())
    sched.add_jobs()
    assert sched.scheduler.get_jobs()[0].next_run_time is not None


def test_shutdown_during_first_sync_stops_watch():
    """A shutdown requested while the first sync is running ends start()."""

    class StoppingClient:
        def get_user_id(self, username):
            sched.shutdown()
            raise XApiError(503, {"title": "Service Unavailable"})

    sched = SyncScheduler(Config.from_env({}), StoppingClient(), scheduler=BlockingScheduler())
    thread = threading.Thread(target=sched.start, daemon=True)
    thread.start()
    thread.join(5)

    assert not thread.is_alive()


def test_shutdown_before_start_returns_immediately():
    """start() does not block once shutdown() has been called."""
    sched = SyncScheduler(Config.from_env({}), client=None, scheduler=BlockingScheduler())
    sched.shutdown()
    sched.start()
    assert sched.scheduler.get_jobs() == []
