"""Best-effort notification delivery off the request path.

Jobs are executed at most once on a background worker pool. A failing job is
logged and dropped; nothing is retried and nothing is reported back to the
operation that enqueued it.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID, uuid4

from loguru import logger

from ticketing.domain import NotificationJob, NotificationKind


class Notifier(Protocol):
    def send(self, job: NotificationJob) -> None: ...


def new_booking_confirmation(
    user_name: str,
    user_email: str,
    event_title: str,
    tickets: int,
    event_date: datetime,
    job_id: UUID | None = None,
) -> NotificationJob:
    return NotificationJob(
        id=job_id or uuid4(),
        kind=NotificationKind.BOOKING_CONFIRMATION,
        payload={
            "user_name": user_name,
            "user_email": user_email,
            "event_title": event_title,
            "tickets": tickets,
            "event_date": event_date.isoformat(),
        },
    )


def new_event_update(
    event_title: str,
    affected_users: int,
    changes: list[str],
    job_id: UUID | None = None,
) -> NotificationJob:
    return NotificationJob(
        id=job_id or uuid4(),
        kind=NotificationKind.EVENT_UPDATE,
        payload={
            "event_title": event_title,
            "affected_users": affected_users,
            "changes": ", ".join(changes),
        },
    )


class EmailNotifier:
    """Simulated email sender that logs messages instead of sending them.

    Sent messages are kept in ``outbox`` for inspection.
    """

    def __init__(self) -> None:
        self.outbox: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def send(self, job: NotificationJob) -> None:
        if job.kind is NotificationKind.BOOKING_CONFIRMATION:
            message = self._booking_confirmation(job.payload)
        elif job.kind is NotificationKind.EVENT_UPDATE:
            message = self._event_update(job.payload)
        else:
            raise ValueError(f"Unsupported notification kind: {job.kind}")

        message["job_id"] = job.id
        with self._lock:
            self.outbox.append(message)
        logger.bind(job_id=str(job.id)).info(
            "EMAIL to {to}: {subject}\n{body}",
            to=message["to"],
            subject=message["subject"],
            body=message["body"],
        )

    @staticmethod
    def _booking_confirmation(payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "to": payload["user_email"],
            "subject": f"Booking confirmed for {payload['user_name']}",
            "body": (
                f"Event: {payload['event_title']}\n"
                f"Tickets: {payload['tickets']}\n"
                f"Date: {payload['event_date']}"
            ),
        }

    @staticmethod
    def _event_update(payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "to": "customers",
            "subject": f'Event "{payload["event_title"]}" updated',
            "body": (
                f"Notifying {payload['affected_users']} customer(s)\n"
                f"Changes: {payload['changes']}"
            ),
        }


class NotificationDispatcher:
    """Fire-and-forget job queue drained by a pool of worker threads."""

    def __init__(self, notifier: Notifier, workers: int = 2) -> None:
        self._notifier = notifier
        self._executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="notifications"
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def enqueue(self, job: NotificationJob) -> None:
        """Schedule a job and return immediately."""
        with self._lock:
            if self._closed:
                logger.warning("Dispatcher closed, dropping job {}", job.id)
                return
            future = self._executor.submit(self.execute, job)
            self._pending.add(future)
        future.add_done_callback(self._forget)
        logger.bind(job_id=str(job.id)).info("Job enqueued: {}", job.kind.value)

    def execute(self, job: NotificationJob) -> bool:
        """Run one job. Failures are logged and swallowed."""
        log = logger.bind(job_id=str(job.id))
        log.info("Job processing started: {}", job.kind.value)
        try:
            self._notifier.send(job)
        except Exception:
            log.exception("Job failed and was dropped: {}", job.kind.value)
            return False
        log.info("Job completed: {}", job.kind.value)
        return True

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for the jobs enqueued so far. Return False on timeout."""
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
