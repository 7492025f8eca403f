"""In-memory request audit trail (bounded; cleared on restart)."""
from __future__ import annotations

from collections import deque
from typing import Deque, List

from lumina.models import AuditEntry

audit_max = 2000
audit: Deque[AuditEntry] = deque(maxlen=audit_max)


def append_audit(entry: AuditEntry) -> None:
    audit.append(entry)


def recent_audit(limit: int = 100) -> List[AuditEntry]:
    limit = max(1, min(limit, audit_max))
    return list(audit)[-limit:]
