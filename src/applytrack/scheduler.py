"""Scheduled reminder digest."""

import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.supabase_api import AuthenticationError
from .config import Config, load_config
from .ports.application_store import StoreError
from .workflows import get_completions, get_email_notifier, get_store, send_reminder_digest

logger = logging.getLogger(__name__)


def run_digest(config: Config) -> None:
    """Send the reminder digest once. Errors are logged so the scheduler keeps running."""
    email = get_email_notifier(config)
    if email is None:
        logger.info("Email notifications disabled, skipping digest")
        return

    try:
        store = get_store(config)
        recipient = config.notification_email or store.session.email
        sent = send_reminder_digest(
            store, store.scope, get_completions(config), email, recipient
        )
        logger.info(f"Reminder digest sent with {sent} reminders")
    except (AuthenticationError, StoreError) as e:
        logger.error(f"Reminder digest failed: {e}")


def setup_scheduler(config: Config | None = None) -> BlockingScheduler:
    """Set up the daily digest job."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.timezone or "America/Toronto")

    if config.reminder_digest_time:
        try:
            hour, minute = map(int, config.reminder_digest_time.split(":"))
            scheduler.add_job(
                run_digest,
                CronTrigger(hour=hour, minute=minute),
                args=[config],
                id="reminder_digest",
            )
            logger.info(f"Scheduled reminder digest at {hour:02d}:{minute:02d}")
        except ValueError:
            logger.warning(f"Invalid reminder digest time format: {config.reminder_digest_time}")

    return scheduler


def run_daemon() -> None:
    """Run the scheduler until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    scheduler = setup_scheduler()
    logger.info("Starting ApplyTrack scheduler...")
    scheduler.start()
