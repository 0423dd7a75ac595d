"""
Structured logging for rollout traffic routing.

Outputs JSON-formatted log lines (one object per line) so log pipelines can
filter by rollout and namespace without parsing free text.

Usage:
    from canaryroute.logger import RolloutLogger

    log = RolloutLogger(rollout="checkout", namespace="default")
    log.info("Updating canary mapping weight", desired_weight=20)
    log.warning("rollout webhook error: no annotations found")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Configure structured logger for rollout events
_rollout_logger = logging.getLogger("canaryroute.rollouts")
_rollout_logger.setLevel(logging.INFO)

# Default handler outputs JSON to stdout (for container log pickup)
if not _rollout_logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    _rollout_logger.addHandler(handler)


def configure_logging(level: Optional[str] = None) -> None:
    """Apply a log level to the canaryroute loggers (defaults to config)."""
    if level is None:
        from canaryroute.config import get_config
        level = get_config().log_level
    numeric = getattr(logging, level.upper())
    logging.getLogger("canaryroute").setLevel(numeric)
    _rollout_logger.setLevel(numeric)


class RolloutLogger:
    """
    Structured logger bound to a single rollout.

    Each log entry includes standard fields for filtering:
    - rollout, namespace
    - level and message
    - any keyword fields passed by the caller
    """

    def __init__(
        self,
        rollout: str,
        namespace: str = "default",
        service_name: str = "canaryroute",
        extra_labels: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize rollout logger.

        Args:
            rollout: Rollout name
            namespace: Rollout namespace
            service_name: Service name for log attribution
            extra_labels: Additional labels attached to every line
        """
        self.rollout = rollout
        self.namespace = namespace
        self.service_name = service_name
        self.extra_labels = extra_labels or {}
        self._logger = _rollout_logger

    @classmethod
    def for_rollout(cls, rollout: Any) -> "RolloutLogger":
        """Build a logger from anything with ``name`` and ``namespace``."""
        return cls(rollout=rollout.name, namespace=rollout.namespace)

    def _emit(self, level: int, message: str, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level).lower(),
            "service": self.service_name,
            "rollout": self.rollout,
            "namespace": self.namespace,
            "msg": message,
        }
        entry.update(fields)

        if self.extra_labels:
            entry["labels"] = self.extra_labels

        self._logger.log(level, json.dumps(entry, default=str))

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, **fields)
