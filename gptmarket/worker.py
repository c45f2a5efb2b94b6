"""Background worker for processing queued validation jobs."""

import logging
import random
import time
from typing import Optional

from sqlalchemy.orm import Session

from gptmarket.config import settings
from gptmarket.database import SessionLocal
from gptmarket.models.job import ValidationJob
from gptmarket.services.validator import SubmissionNotFound, request_validation

logger = logging.getLogger(__name__)


class Worker:
    """Background worker for processing validation jobs."""

    def __init__(self, session_factory=SessionLocal, rng: Optional[random.Random] = None):
        """Initialize worker."""
        self.session_factory = session_factory
        self.rng = rng
        self.poll_interval = settings.WORKER_POLL_INTERVAL
        self.max_retries = settings.MAX_JOB_RETRIES

    def run(self, stop_event=None):
        """Main worker loop.

        Args:
            stop_event: Optional threading.Event to signal worker to stop
        """
        logger.info("Worker started")

        while True:
            # Check if stop signal received
            if stop_event and stop_event.is_set():
                logger.info("Worker stop signal received")
                break

            try:
                processed = self.run_once()
                if not processed:
                    if stop_event:
                        stop_event.wait(self.poll_interval)
                    else:
                        time.sleep(self.poll_interval)

            except KeyboardInterrupt:
                logger.info("Worker shutting down")
                break
            except Exception as e:
                logger.error(f"Worker error: {e}", exc_info=True)
                time.sleep(self.poll_interval)

    def run_once(self) -> bool:
        """Process the next queued job, if any.

        Returns:
            True if a job was processed
        """
        db = self.session_factory()
        try:
            job = self.get_next_job(db)
            if not job:
                return False
            self.process_job(job, db)
            return True
        finally:
            db.close()

    def get_next_job(self, db: Session) -> Optional[ValidationJob]:
        """Get next queued job."""
        job = (
            db.query(ValidationJob)
            .filter(ValidationJob.status == "queued")
            .order_by(ValidationJob.created_at)
            .with_for_update(skip_locked=True)
            .first()
        )
        return job

    def process_job(self, job: ValidationJob, db: Session):
        """Process a single job."""
        job_id = job.job_id
        logger.info(f"Processing job {job_id} ({job.mode} validation of {job.submission_id})")

        # Mark as running
        job.status = "running"
        db.commit()

        try:
            response = request_validation(
                db, job.submission_id, job.mode, rng=self.rng, abandon_on_error=True
            )

            job.status = "done"
            db.commit()

            logger.info(f"Job {job_id} completed, submission is {response.model_status.value}")

        except SubmissionNotFound as e:
            db.rollback()
            job.status = "failed"
            job.last_error = str(e)
            db.commit()
            logger.error(f"Job {job_id} failed: {e}")

        except Exception as e:
            logger.error(f"Job {job_id} failed: {e}", exc_info=True)
            db.rollback()

            # Handle failure
            job.retries += 1
            job.last_error = str(e)

            if job.retries >= self.max_retries:
                job.status = "failed"
                logger.error(f"Job {job_id} failed after {job.retries} retries")
            else:
                job.status = "queued"
                logger.warning(f"Job {job_id} retry {job.retries}/{self.max_retries}")

            db.commit()


def worker_loop(stop_event=None):
    """Run worker loop (for use as background thread).

    Args:
        stop_event: Optional threading.Event to signal worker to stop
    """
    worker = Worker()
    worker.run(stop_event=stop_event)


def main():
    """Entry point for standalone worker."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    worker = Worker()
    worker.run()


if __name__ == "__main__":
    main()
