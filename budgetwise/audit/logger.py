"""
Audit Logger

DESIGN DECISION: Every state mutation is logged.
This provides:
1. Complete traceability of what the user changed
2. Debugging capability when persisted data disagrees with memory
3. Visibility of storage failures that are otherwise swallowed

The audit logger:
- Is synchronous, because store mutations are synchronous
- Never raises into the caller
- Emits through structlog so output format is configured in one place
"""

import logging
import sys
from typing import Any, Optional

import structlog

from budgetwise.config import AppSettings
from budgetwise.models.audit import AuditEvent, AuditEventType, AuditSeverity


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Called once at import with defaults and again by create_app_state()
    with the loaded settings.
    """
    level_name = settings.log_level if settings else "INFO"
    render_json = settings.log_json if settings else True

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name),
    )
    logging.getLogger().setLevel(getattr(logging, level_name))

    renderer = (
        structlog.processors.JSONRenderer()
        if render_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


configure_logging()


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to `name`."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Stores hold one of these and call record() after each mutation.
    """

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger or get_logger("budgetwise.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def record(
        self,
        event_type: AuditEventType,
        description: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        severity: AuditSeverity = AuditSeverity.INFO,
        **details: Any,
    ) -> AuditEvent:
        """Build an event from its parts, log it and return it."""
        event = AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            details=details,
        )
        self.log(event)
        return event
