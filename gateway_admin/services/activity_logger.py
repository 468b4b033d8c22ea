"""Activity logging service for the admin audit trail."""
import logging
from typing import Any, Dict, Optional
from datetime import datetime

logger = logging.getLogger(__name__)


class ActivityLogger:
    """
    Emits one structured audit record per admin mutation.

    Records go to the ``gateway_admin.services.activity_logger`` logger with
    the entry attached as ``extra`` fields, so any JSON log formatter picks
    them up.
    """

    def log(
        self,
        action: str,
        resource_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an activity.

        Args:
            action: Action identifier (e.g., "plugin_config.patch")
            resource_id: Id of the resource acted on
            metadata: Optional additional data to log
        """
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "action": action,
            "resource_id": resource_id,
            "metadata": metadata or {}
        }

        logger.info(f"Activity: {action} [{resource_id}]", extra=log_entry)

    def log_mutation(
        self,
        kind: str,
        operation: str,
        resource_id: Optional[str],
        status: int,
        revision: Optional[int] = None,
    ) -> None:
        """Log a completed write against a stored resource."""
        self.log(
            action=f"{kind}.{operation}",
            resource_id=resource_id,
            metadata={"status": status, "revision": revision},
        )
