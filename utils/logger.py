"""
Logging utilities for the Weekly Event Scheduler
"""
import logging
import sys


class SchedulerLogger:
    """Logging setup and run reporting for the scheduler"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Setup root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))

        # Clear existing handlers
        root_logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # File handler (if specified)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Suppress some noisy loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('googleapiclient').setLevel(logging.WARNING)
        logging.getLogger('google.auth').setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_run_summary(report):
        """Log a summary of one scheduling run"""
        logger = logging.getLogger(__name__)

        week = report.week_start.date().isoformat() if report.week_start else "N/A"
        logger.info("📋 WEEKLY SCHEDULE SUMMARY")
        logger.info(f"   📅 Week of: {week}")
        logger.info(f"   🗑️  Deleted: {report.deleted}")
        logger.info(f"   ✅ Scheduled: {len(report.created)}")
        logger.info(f"   🎌 Skipped for holidays: {len(report.skipped)}")

        if report.has_failures:
            logger.error(f"   ❌ Failed: {len(report.failed_creates)} creates, "
                         f"{report.failed_deletes} deletes")
            for instance in report.failed_creates:
                logger.error(f"      - {instance.title} on {instance.iso_date}")
        logger.info(f"   🏁 Final state: {report.state.value}")
