import logging
import sys
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger("mws_client")

SENSITIVE_KEYS = ("AWSAccessKeyId", "Signature", "Merchant", "SellerId")


def sanitize_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Mask credential-bearing query fields before they reach any log."""
    if not params:
        return {}

    sanitized = dict(params)
    for key in SENSITIVE_KEYS:
        if key in sanitized:
            value = str(sanitized[key])
            if len(value) > 8:
                sanitized[key] = f"{value[:4]}...{value[-4:]}"
            else:
                sanitized[key] = "***"
    return sanitized


class MwsCallLogger:
    """Bounded in-memory record of recent MWS calls, newest last."""

    def __init__(self, max_logs: int = 1000):
        self.max_logs = max_logs
        self.logs = deque(maxlen=max_logs)

    def log_call(
        self,
        operation: str,
        verb: str,
        params: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        duration_ms: Optional[int] = None,
        error: Optional[str] = None,
    ) -> Dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": operation,
            "verb": verb,
            "params": sanitize_params(params),
            "status_code": status_code,
            "duration_ms": duration_ms,
            "status": "error" if error else "success",
            "error": error,
        }

        self.logs.append(log_entry)

        log_msg = f"[mws] {operation} {verb} status={status_code} duration_ms={duration_ms}"
        if error:
            logger.error(f"{log_msg} - Error: {error}")
        else:
            logger.info(log_msg)

        return log_entry

    def get_logs(self, limit: Optional[int] = None) -> list:
        logs = list(self.logs)
        if limit:
            return logs[-limit:]
        return logs

    def clear_logs(self):
        self.logs.clear()
        logger.info("Cleared MWS call logs")
