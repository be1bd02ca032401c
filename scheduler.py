import time
import threading
import logging
import schedule
from datetime import datetime, timedelta
from database import db
from matching import refresh_matches
from models import Notification

logger = logging.getLogger(__name__)

JOB_TAG = 'geomatchx'

def purge_read_notifications(retention_days):
    """Delete read notifications older than retention_days; returns the number removed.

    Needs an application context.
    """
    cutoff_date = datetime.utcnow() - timedelta(days=retention_days)
    query = Notification.query.filter(Notification.read.is_(True), Notification.created_at < cutoff_date)

    count = query.count()
    query.delete(synchronize_session=False)
    db.session.commit()

    logger.info(f"Cleaned up {count} read notifications older than {retention_days} days")
    return count

def refresh_matches_job(app):
    """Periodic match refresh"""
    with app.app_context():
        try:
            return refresh_matches()
        except Exception as e:
            logger.error(f"Error refreshing matches: {e}")
            db.session.rollback()
            return None

def cleanup_notifications_job(app):
    """Weekly cleanup of old read notifications"""
    with app.app_context():
        try:
            return purge_read_notifications(app.config['NOTIFICATION_RETENTION_DAYS'])
        except Exception as e:
            logger.error(f"Error cleaning up notifications: {e}")
            db.session.rollback()
            return None

def schedule_tasks(app):
    """Schedule all background tasks"""
    schedule.clear(JOB_TAG)

    # Match refresh on a fixed interval
    schedule.every(app.config['MATCH_REFRESH_MINUTES']).minutes.do(refresh_matches_job, app).tag(JOB_TAG)

    # Notification cleanup every Sunday at 2 AM
    schedule.every().sunday.at("02:00").do(cleanup_notifications_job, app).tag(JOB_TAG)

    logger.info("Scheduled tasks configured")

def run_scheduler(poll_seconds=60):
    """Run the scheduler loop"""
    logger.info("Starting scheduler...")

    while True:
        try:
            schedule.run_pending()
            time.sleep(poll_seconds)
        except KeyboardInterrupt:
            logger.info("Scheduler stopped")
            break
        except Exception as e:
            logger.error(f"Scheduler error: {e}")
            time.sleep(300)  # Wait 5 minutes before retrying

def start_background_services(app):
    """Schedule tasks and start the scheduler in a daemon thread"""
    logger.info("Starting background services...")

    schedule_tasks(app)

    scheduler_thread = threading.Thread(target=run_scheduler, daemon=True)
    scheduler_thread.start()
    logger.info("Scheduler started")

    return scheduler_thread
