"""Best-effort notification sink."""
import logging
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..models import Notification, NotificationChannel, NotificationStatus

logger = logging.getLogger(__name__)

GRADE_RELEASED = "grade_released"


class NotificationSink:
    """Records outbound notifications; actual transport lives outside this service."""

    def __init__(self, db: Session):
        self.db = db

    def queue_notification(
        self,
        user_id: str,
        type: str,
        payload: Dict[str, Any],
        channel: NotificationChannel = NotificationChannel.email,
    ) -> Notification:
        """Persist a notification and mark it delivered."""
        notification = Notification(
            user_id=user_id,
            type=type,
            payload=payload,
            channel=channel,
            status=NotificationStatus.pending,
        )
        self.db.add(notification)
        self.db.flush()

        # Delivery is simulated; transports pick up rows marked sent.
        logger.info(f"Notification queued for user {user_id} [{type}]: {payload}")

        notification.status = NotificationStatus.sent
        notification.sent_at = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def notify_grade_release(
        self,
        student_id: str,
        assignment_title: str,
        class_id: str,
        score: Optional[float] = None,
        letter_grade: Optional[str] = None,
    ) -> Notification:
        return self.queue_notification(
            user_id=student_id,
            type=GRADE_RELEASED,
            payload={
                "assignment_title": assignment_title,
                "class_id": class_id,
                "score": score,
                "letter_grade": letter_grade,
            },
        )
