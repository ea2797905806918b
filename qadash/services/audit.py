"""
Audit trail.

Every security-relevant action is written to the ``qadash.audit`` logger as
a single JSON object, so any log handler (file, Sentry breadcrumbs, a
collector) can pick it up without parsing free text.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from qadash.core.utils import timestamp_iso

audit_logger = logging.getLogger("qadash.audit")


def log_activity(
    action: str,
    user_id: int | None,
    target_id: int | None = None,
    **details: Any,
) -> dict[str, Any]:
    """Record an audit event and return the entry that was logged."""
    entry = {
        "timestamp": timestamp_iso(),
        "action": action,
        "userId": user_id,
        "targetId": target_id,
        "details": details,
    }
    audit_logger.info(json.dumps(entry, default=str))
    return entry
