"""Activity logging service for metrics and audit trail."""
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Service for logging user and system activities.

    Interpretation request metrics and security-relevant events are
    emitted as structured log records.
    """

    def log(
        self,
        action: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an activity.

        Args:
            action: Action identifier (e.g., "user_signed_up")
            user_id: Optional user ID associated with the action
            metadata: Optional additional data to log
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "user_id": user_id,
            "metadata": metadata or {}
        }

        logger.info(f"Activity: {action}", extra={"activity": log_entry})

    def log_interpretation_request(
        self,
        success: bool,
        card_count: int,
        elapsed_seconds: float,
        user_id: Optional[str] = None,
    ) -> None:
        """
        Record one finished interpretation backend call.

        Counter ``interpretation_requests`` and histogram
        ``interpretation_requests_duration_seconds``, both labelled with
        status and card count.
        """
        labels = {
            "status": "success" if success else "failure",
            "cards": str(card_count),
        }
        self.log(
            action="metric.interpretation_requests",
            user_id=user_id,
            metadata={**labels, "increment": 1},
        )
        self.log(
            action="metric.interpretation_requests_duration_seconds",
            user_id=user_id,
            metadata={**labels, "value": round(elapsed_seconds, 3)},
        )

    def log_security_event(
        self,
        event_type: str,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log a security-related event.

        Args:
            event_type: Type of security event
            user_id: User ID if applicable
            ip_address: IP address of the request
            details: Additional event details
        """
        metadata = {
            "ip": ip_address,
            "event_type": event_type,
            **(details or {})
        }

        self.log(
            action=f"security.{event_type}",
            user_id=user_id,
            metadata=metadata
        )
