"""Callback-based timing log for integration sessions."""

import time
from typing import Any, Dict, Optional

import attrs

_VERBOSITY_LEVELS = {"default", "verbose", "debug", None}
_CATEGORIES = {"setup", "runtime"}


@attrs.define(frozen=True)
class TimingEvent:
    """Record of a single timing event.

    Attributes
    ----------
    name : str
        Registered identifier of the event, e.g. ``'integrator_step'``.
    event_type : str
        One of ``'start'``, ``'stop'`` or ``'progress'``.
    timestamp : float
        Value of :func:`time.perf_counter` when the event was recorded.
    metadata : dict
        Free-form values attached by the caller.
    """

    name: str = attrs.field(validator=attrs.validators.instance_of(str))
    event_type: str = attrs.field(
        validator=attrs.validators.in_({"start", "stop", "progress"})
    )
    timestamp: float = attrs.field(
        validator=attrs.validators.instance_of(float)
    )
    metadata: dict = attrs.field(factory=dict)


class TimeLogger:
    """Timing recorder shared by the objects of one integration session.

    Parameters
    ----------
    verbosity : str or None, default='default'
        ``'default'`` prints aggregate totals from :meth:`print_summary`,
        ``'verbose'`` prints each duration as events stop, ``'debug'``
        prints every event and ``None`` (or ``'None'``) records nothing.

    Notes
    -----
    Events must be registered with :meth:`_register_event` before they are
    started, stopped or reported.
    """

    def __init__(self, verbosity: Optional[str] = "default") -> None:
        self.verbosity = None
        self.set_verbosity(verbosity)
        self.events: list[TimingEvent] = []
        self._active_starts: Dict[str, float] = {}
        self._event_registry: Dict[str, Dict[str, str]] = {}

    def set_verbosity(self, verbosity: Optional[str]) -> None:
        """Change the verbosity level."""
        if verbosity == "None":
            verbosity = None
        if verbosity not in _VERBOSITY_LEVELS:
            raise ValueError(
                "verbosity must be 'default', 'verbose', 'debug' or None, "
                f"got '{verbosity}'"
            )
        self.verbosity = verbosity

    @property
    def enabled(self) -> bool:
        return self.verbosity is not None

    def _register_event(
        self, event_name: str, category: str, description: str
    ) -> None:
        """Declare an event name so it can be timed."""
        if category not in _CATEGORIES:
            raise ValueError(
                f"category must be one of {sorted(_CATEGORIES)}, "
                f"got '{category}'"
            )
        self._event_registry[event_name] = {
            "category": category,
            "description": description,
        }

    def _check_event(self, event_name: str) -> None:
        if not event_name:
            raise ValueError("event_name cannot be empty")
        if event_name not in self._event_registry:
            raise ValueError(f"Event '{event_name}' is not registered")

    def _record(
        self, event_name: str, event_type: str, metadata: Dict[str, Any]
    ) -> float:
        timestamp = time.perf_counter()
        metadata = dict(metadata)
        metadata.setdefault(
            "category", self._event_registry[event_name]["category"]
        )
        self.events.append(
            TimingEvent(
                name=event_name,
                event_type=event_type,
                timestamp=timestamp,
                metadata=metadata,
            )
        )
        return timestamp

    def start_event(self, event_name: str, **metadata: Any) -> None:
        """Record the start of a timed operation.

        Raises
        ------
        ValueError
            If the name is empty, unregistered, or already running.
        """
        self._check_event(event_name)
        if not self.enabled:
            return
        if event_name in self._active_starts:
            raise ValueError(
                f"Event '{event_name}' already has an active start"
            )
        timestamp = self._record(event_name, "start", metadata)
        self._active_starts[event_name] = timestamp
        if self.verbosity == "debug":
            print(f"[DEBUG] Started: {event_name}")

    def stop_event(self, event_name: str, **metadata: Any) -> None:
        """Record the end of a timed operation.

        Raises
        ------
        ValueError
            If the name is empty, unregistered, or was never started.
        """
        self._check_event(event_name)
        if not self.enabled:
            return
        if event_name not in self._active_starts:
            raise ValueError(f"Event '{event_name}' has no active start")
        timestamp = self._record(event_name, "stop", metadata)
        duration = timestamp - self._active_starts.pop(event_name)
        if self.verbosity == "debug":
            print(f"[DEBUG] Stopped: {event_name} ({duration:.6f}s)")
        elif self.verbosity == "verbose":
            print(f"{event_name}: {duration:.6f}s")

    def progress(
        self, event_name: str, message: str, **metadata: Any
    ) -> None:
        """Record a progress message; printed only at debug verbosity."""
        self._check_event(event_name)
        if not self.enabled:
            return
        metadata = dict(metadata)
        metadata["message"] = message
        self._record(event_name, "progress", metadata)
        if self.verbosity == "debug":
            print(f"[DEBUG] Progress: {event_name} - {message}")

    def get_event_duration(self, event_name: str) -> Optional[float]:
        """Return the duration of the most recent completed ``event_name``."""
        stop_time = None
        for event in reversed(self.events):
            if event.name != event_name:
                continue
            if event.event_type == "stop" and stop_time is None:
                stop_time = event.timestamp
            elif event.event_type == "start" and stop_time is not None:
                return stop_time - event.timestamp
        return None

    def get_aggregate_durations(
        self, category: Optional[str] = None
    ) -> Dict[str, float]:
        """Sum completed durations per event name.

        Parameters
        ----------
        category : str, optional
            Only include events registered under this category.
        """
        durations: Dict[str, float] = {}
        starts: Dict[str, float] = {}
        for event in self.events:
            if (
                category is not None
                and event.metadata.get("category") != category
            ):
                continue
            if event.event_type == "start":
                starts[event.name] = event.timestamp
            elif event.event_type == "stop" and event.name in starts:
                elapsed = event.timestamp - starts.pop(event.name)
                durations[event.name] = (
                    durations.get(event.name, 0.0) + elapsed
                )
        return durations

    def count_events(self, event_name: str) -> int:
        """Return the number of completed ``event_name`` intervals."""
        return sum(
            1
            for event in self.events
            if event.name == event_name and event.event_type == "stop"
        )

    def print_summary(self) -> None:
        """Print aggregate durations when verbosity is ``'default'``."""
        if self.verbosity != "default":
            return
        durations = self.get_aggregate_durations()
        if durations:
            print("\nTiming Summary:")
            for name, duration in sorted(durations.items()):
                count = self.count_events(name)
                print(f"  {name}: {duration:.6f}s over {count} call(s)")
