"""
Structured diagnostics emitted while a TimeSeries is built.

Components never write log records directly: they hand events to a
DiagnosticLog, which keeps them for later inspection and forwards each one
to the ``logging`` hierarchy. Nothing in the computation reads them back.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticEvent:
    """
    A single construction event.

    Attributes
    ----------
    code : str
        Machine-readable event name (e.g. ``'gaps_detected'``).
    message : str
        Human-readable summary.
    level : int
        ``logging`` level the event was forwarded with.
    context : Mapping
        Numeric or string details attached to the event. Read-only.
    """

    code: str
    message: str
    level: int = logging.INFO
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))


class DiagnosticLog:
    """
    Collector for DiagnosticEvent objects.

    Parameters
    ----------
    logger_ : logging.Logger or None, optional
        Logger that receives every event. Default is this module's logger.

    Examples
    --------
    >>> log = DiagnosticLog()
    >>> log.emit('no_gaps', 'No gaps in timeline')
    >>> log.codes()
    ('no_gaps',)
    """

    def __init__(self, logger_: Optional[logging.Logger] = None):
        self._logger = logger_ if logger_ is not None else logger
        self._events: List[DiagnosticEvent] = []

    def emit(self, code: str, message: str, level: int = logging.INFO, **context: Any) -> None:
        """Record an event and forward it to the logger."""
        event = DiagnosticEvent(code=code, message=message, level=level, context=dict(context))
        self._events.append(event)
        self._logger.log(level, message, extra={"event": code, "context": dict(event.context)})

    def warning(self, code: str, message: str, **context: Any) -> None:
        """Shortcut for ``emit`` at WARNING level."""
        self.emit(code, message, logging.WARNING, **context)

    @property
    def events(self) -> Tuple[DiagnosticEvent, ...]:
        """Get recorded events (oldest first)."""
        return tuple(self._events)

    def codes(self) -> Tuple[str, ...]:
        """Get the codes of all recorded events."""
        return tuple(event.code for event in self._events)

    def __len__(self) -> int:
        return len(self._events)
