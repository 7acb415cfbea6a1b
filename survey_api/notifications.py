"""EmailJS notification sent after each survey submission."""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

EMAILJS_API_URL = "https://api.emailjs.com/api/v1.0/email/send"

logger = logging.getLogger(__name__)

# Notifications leave the request thread; the response never waits on them
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="emailjs")
# Running plus queued jobs; extra notifications are dropped with a warning
MAX_PENDING = 20
_pending = threading.BoundedSemaphore(MAX_PENDING)


class NotificationError(Exception):
    """EmailJS call could not be made or was refused."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class NotificationSettings:
    service_id: str = ""
    template_id: str = ""
    user_id: str = ""
    api_url: str = EMAILJS_API_URL
    timeout: float = 8

    @property
    def enabled(self) -> bool:
        return bool(self.service_id and self.template_id and self.user_id)


def build_template_params(survey_id, brand_name: str | None, now: datetime | None = None) -> dict:
    """Minimal message: id and brand name only, no survey answers."""
    now = now or datetime.now(timezone.utc)
    return {
        "survey_id": str(survey_id),
        "brand_name": brand_name or "N/A",
        "message": f"A new survey was submitted (id: {survey_id}).",
        "submitted_at": now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


def send_via_emailjs(settings: NotificationSettings, template_params: dict, session=None) -> requests.Response:
    """POST one email to EmailJS. Raises NotificationError on any failure."""
    if not settings.enabled:
        raise NotificationError("Missing EmailJS configuration (service_id/template_id/user_id).")
    body = {
        "service_id": settings.service_id,
        "template_id": settings.template_id,
        "user_id": settings.user_id,
        "template_params": template_params,
    }
    http = session or requests
    try:
        r = http.post(
            settings.api_url,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=settings.timeout,
        )
    except requests.RequestException as e:
        raise NotificationError(f"EmailJS request failed: {e}") from e
    if not 200 <= r.status_code < 300:
        raise NotificationError(
            f"EmailJS request failed: {r.status_code} {r.reason or ''} {(r.text or '')[:400]}".rstrip(),
            status=r.status_code,
        )
    return r


def notify_new_survey(settings: NotificationSettings, survey_id, brand_name: str | None) -> bool:
    """Send the new-survey email. Logs errors, does not raise. Returns True when sent."""
    if not settings.enabled:
        logger.warning("EmailJS credentials not configured; skipping notification")
        return False
    try:
        r = send_via_emailjs(settings, build_template_params(survey_id, brand_name))
    except NotificationError as e:
        logger.error("EmailJS notify error for survey %s: %s", survey_id, e)
        return False
    logger.info("EmailJS notification sent for survey %s (status %s)", survey_id, r.status_code)
    return True


def _finished(future: Future, pending: threading.BoundedSemaphore) -> None:
    pending.release()
    exc = future.exception()
    if exc is not None:
        logger.error("Unexpected error sending EmailJS notification", exc_info=exc)


def dispatch_notification(settings: NotificationSettings, survey_id, brand_name: str | None) -> Future | None:
    """Run notify_new_survey in the background and return its future.

    Returns None without queueing when MAX_PENDING notifications are already waiting.
    """
    pending = _pending
    if not pending.acquire(blocking=False):
        logger.warning("EmailJS backlog full (%s pending); dropping notification for survey %s", MAX_PENDING, survey_id)
        return None
    try:
        future = _executor.submit(notify_new_survey, settings, survey_id, brand_name)
    except RuntimeError as e:
        pending.release()
        logger.error("EmailJS notification for survey %s not queued: %s", survey_id, e)
        return None
    future.add_done_callback(lambda f: _finished(f, pending))
    return future
