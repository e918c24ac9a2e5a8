from __future__ import annotations
import logging
import time
from typing import Any, MutableMapping, Optional


logger = logging.getLogger(__name__)


def purge_idle_sessions(registry: MutableMapping[str, Any], max_idle_seconds: float, now: Optional[float] = None) -> int:
	# Entries carry a monotonic ``last_seen`` stamp updated on every request
	now = time.monotonic() if now is None else now
	stale = [sid for sid, entry in list(registry.items()) if now - getattr(entry, "last_seen", now) > max_idle_seconds]
	for sid in stale:
		registry.pop(sid, None)
	if stale:
		logger.info("Dropped %d idle practice sessions", len(stale))
	return len(stale)
