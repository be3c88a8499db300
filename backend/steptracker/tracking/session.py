"""Lifecycle of one tracked walk.

`WalkSessionAggregator` owns the authoritative state of a single walk:

    IDLE -> ACTIVE <-> PAUSED -> STOPPED

Every transition runs under one lock, so sensor callbacks, location callbacks
and UI reads are applied in arrival order and readers only ever see a complete
`SessionSnapshot`. Totals live in immutable values (`TrackState`,
`StepCounter`) that are swapped, never edited in place.
"""
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from steptracker.core.constants import CALORIES_PER_STEP, REFERENCE_WEIGHT_KG, STEP_LENGTH_M
from steptracker.core.errors import InvalidStateError, ValidationError
from steptracker.core.time_utils import utc_now
from steptracker.tracking import accumulator
from steptracker.tracking.geo import GeoSample, SampleFilter

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"


class WalkMode(str, Enum):
    AUTO_ROUTE = "AUTO_ROUTE"
    DRAW_ROUTE = "DRAW_ROUTE"
    JUST_WALK = "JUST_WALK"


class DurationPolicy(str, Enum):
    # stop time minus start time, pauses included
    WALL_CLOCK = "wall_clock"
    EXCLUDE_PAUSES = "exclude_pauses"


def average_pace(duration_seconds: Optional[float], distance_m: Optional[float]) -> Optional[float]:
    """Minutes per kilometer, or None when distance (or duration) is unknown or zero."""
    if duration_seconds is None or not distance_m or distance_m <= 0:
        return None
    return (duration_seconds / 60.0) / (distance_m / 1000.0)


def estimate_calories(steps: int, weight_kg: float = REFERENCE_WEIGHT_KG) -> int:
    return int(round(steps * CALORIES_PER_STEP * (weight_kg / REFERENCE_WEIGHT_KG)))


def estimate_distance_m(steps: int, step_length_m: float = STEP_LENGTH_M) -> float:
    return round(steps * step_length_m, 2)


@dataclass(frozen=True)
class StepCounter:
    """Session steps derived from the platform's lifetime step counter.

    The first reading after start (or after a reset) becomes the baseline. A
    reading lower than the previous one means the device rebooted and the
    counter restarted from zero: steps counted so far are carried over.
    """

    baseline: Optional[int] = None
    last_reading: Optional[int] = None
    carried: int = 0

    @property
    def steps(self) -> int:
        if self.baseline is None or self.last_reading is None:
            return self.carried
        return self.carried + (self.last_reading - self.baseline)

    def read(self, reading: int) -> "StepCounter":
        if self.baseline is None:
            return StepCounter(baseline=reading, last_reading=reading, carried=self.carried)
        if reading < self.last_reading:
            return StepCounter(baseline=0, last_reading=reading, carried=self.steps)
        return replace(self, last_reading=reading)


@dataclass(frozen=True)
class SessionSnapshot:
    phase: SessionPhase
    mode: Optional[WalkMode]
    start_time: Optional[datetime]
    elapsed_seconds: int
    distance_m: float
    max_elevation_m: Optional[float]
    elevation_gain_m: float
    steps: int
    accepted_samples: int
    rejected_samples: int
    current_pace_min_per_km: Optional[float]

    @classmethod
    def idle(cls) -> "SessionSnapshot":
        return cls(
            phase=SessionPhase.IDLE,
            mode=None,
            start_time=None,
            elapsed_seconds=0,
            distance_m=0.0,
            max_elevation_m=None,
            elevation_gain_m=0.0,
            steps=0,
            accepted_samples=0,
            rejected_samples=0,
            current_pace_min_per_km=None,
        )


@dataclass(frozen=True)
class FinishedWalk:
    """The finalized walk handed to persistence on stop."""

    mode: WalkMode
    start_time: datetime
    end_time: datetime
    duration_seconds: int
    distance_m: float
    steps: int
    average_pace_min_per_km: Optional[float]
    max_elevation_m: Optional[float]
    elevation_gain_m: float
    calories: int
    samples: tuple = field(default=(), repr=False)


class WalkSessionAggregator:
    def __init__(
        self,
        sample_filter: Optional[SampleFilter] = None,
        policy: DurationPolicy = DurationPolicy.WALL_CLOCK,
        clock: Callable[[], datetime] = utc_now,
        weight_kg: float = REFERENCE_WEIGHT_KG,
    ):
        self.sample_filter = sample_filter or SampleFilter()
        self.policy = DurationPolicy(policy)
        self.weight_kg = weight_kg
        self._clock = clock
        self._lock = threading.Lock()
        self._listeners: list[Callable[[SessionSnapshot], None]] = []
        self._clear()

    def _clear(self) -> None:
        self._phase = SessionPhase.IDLE
        self._mode: Optional[WalkMode] = None
        self._start: Optional[datetime] = None
        self._end: Optional[datetime] = None
        self._track = accumulator.TrackState()
        self._counter = StepCounter()
        self._samples: list[GeoSample] = []
        self._rejected = 0
        self._paused_since: Optional[datetime] = None
        self._paused_seconds = 0.0
        # finished walk not yet confirmed as stored
        self._unsaved: Optional[FinishedWalk] = None

    # ----- observers -----

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return self._phase

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> Callable[[], None]:
        """Register a listener called with a fresh snapshot after every transition.

        Listeners run under the session lock and must not call back into the
        aggregator. Returns an unsubscribe function.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot(self._clock())

    def _snapshot(self, now: datetime) -> SessionSnapshot:
        if self._end is not None:
            now = self._end
        elapsed = self._elapsed_seconds(now) if self._start is not None else 0
        return SessionSnapshot(
            phase=self._phase,
            mode=self._mode,
            start_time=self._start,
            elapsed_seconds=elapsed,
            distance_m=self._track.distance_m,
            max_elevation_m=self._track.max_elevation_m,
            elevation_gain_m=self._track.elevation_gain_m,
            steps=self._counter.steps,
            accepted_samples=self._track.sample_count,
            rejected_samples=self._rejected,
            current_pace_min_per_km=average_pace(elapsed, self._track.distance_m),
        )

    def _publish(self) -> None:
        if not self._listeners:
            return
        snap = self._snapshot(self._clock())
        for listener in list(self._listeners):
            listener(snap)

    def _elapsed_seconds(self, now: datetime) -> int:
        seconds = (now - self._start).total_seconds()
        if self.policy == DurationPolicy.EXCLUDE_PAUSES:
            paused = self._paused_seconds
            if self._paused_since is not None:
                paused += (now - self._paused_since).total_seconds()
            seconds -= paused
        return max(0, int(seconds))

    def _require(self, action: str, *phases: SessionPhase) -> None:
        if self._phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidStateError(f"Cannot {action} while {self._phase.value} (requires {allowed})")

    # ----- transitions -----

    def start(self, mode: WalkMode = WalkMode.JUST_WALK, restart_stopped: bool = False) -> SessionSnapshot:
        """IDLE -> ACTIVE.

        With `restart_stopped`, a STOPPED session whose walk has been stored is
        cleared and started again in the same locked step.
        """
        try:
            mode = WalkMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown walk mode '{mode}'")
        with self._lock:
            if restart_stopped and self._phase == SessionPhase.STOPPED:
                if self._unsaved is not None:
                    raise InvalidStateError("Cannot start while the previous walk is unsaved (retry stop or discard)")
            else:
                self._require("start", SessionPhase.IDLE)
            self._clear()
            self._phase = SessionPhase.ACTIVE
            self._mode = mode
            self._start = self._clock()
            logger.debug("walk started mode=%s at %s", self._mode.value, self._start.isoformat())
            self._publish()
            return self._snapshot(self._start)

    def ingest(self, sample: GeoSample) -> bool:
        """Feed one location fix. Returns True when the fix was accepted."""
        with self._lock:
            if self._phase == SessionPhase.PAUSED:
                return False
            self._require("ingest samples", SessionPhase.ACTIVE)
            if not self.sample_filter.accept(sample, self._track.last_sample):
                self._rejected += 1
                return False
            self._track = accumulator.update(self._track, sample)
            self._samples.append(sample)
            self._publish()
            return True

    def record_step_counter(self, reading: int) -> int:
        """Feed a lifetime step-counter reading; returns the session step count."""
        if reading < 0:
            raise ValidationError("Step counter reading must be >= 0")
        with self._lock:
            self._require("record steps", SessionPhase.ACTIVE, SessionPhase.PAUSED)
            self._counter = self._counter.read(int(reading))
            self._publish()
            return self._counter.steps

    def reset_step_count(self) -> None:
        with self._lock:
            self._counter = StepCounter()
            self._publish()

    def pause(self) -> SessionSnapshot:
        with self._lock:
            self._require("pause", SessionPhase.ACTIVE)
            now = self._clock()
            self._phase = SessionPhase.PAUSED
            self._paused_since = now
            self._publish()
            return self._snapshot(now)

    def resume(self) -> SessionSnapshot:
        with self._lock:
            self._require("resume", SessionPhase.PAUSED)
            now = self._clock()
            self._paused_seconds += (now - self._paused_since).total_seconds()
            self._paused_since = None
            self._phase = SessionPhase.ACTIVE
            self._publish()
            return self._snapshot(now)

    def stop(self) -> FinishedWalk:
        """ACTIVE|PAUSED -> STOPPED, returning the finalized walk.

        The walk is held until `mark_saved` confirms it was stored; stopping a
        STOPPED session hands the same walk back so persistence can be retried.
        """
        with self._lock:
            if self._phase == SessionPhase.STOPPED and self._unsaved is not None:
                return self._unsaved
            self._require("stop", SessionPhase.ACTIVE, SessionPhase.PAUSED)
            now = self._clock()
            duration = self._elapsed_seconds(now)
            if self._paused_since is not None:
                self._paused_seconds += (now - self._paused_since).total_seconds()
                self._paused_since = None
            self._phase = SessionPhase.STOPPED
            self._end = now

            steps = self._counter.steps
            distance = self._track.distance_m
            finished = FinishedWalk(
                mode=self._mode,
                start_time=self._start,
                end_time=now,
                duration_seconds=duration,
                distance_m=distance,
                steps=steps,
                average_pace_min_per_km=average_pace(duration, distance),
                max_elevation_m=self._track.max_elevation_m,
                elevation_gain_m=self._track.elevation_gain_m,
                calories=estimate_calories(steps, self.weight_kg),
                samples=tuple(self._samples),
            )
            logger.info(
                "walk stopped: %.1f m in %ss, %s steps, %s samples (%s rejected)",
                distance, duration, steps, len(self._samples), self._rejected,
            )
            self._unsaved = finished
            self._publish()
            return finished

    def mark_saved(self, finished: FinishedWalk) -> None:
        with self._lock:
            if self._unsaved is finished:
                self._unsaved = None

    def reset(self) -> None:
        """Discard everything and return to IDLE, from any phase."""
        with self._lock:
            self._clear()
            self._publish()


class SessionRegistry:
    """One aggregator per user; a user can track a single walk at a time."""

    def __init__(self, factory: Callable[[], WalkSessionAggregator]):
        self._factory = factory
        self._lock = threading.Lock()
        self._sessions: dict[str, WalkSessionAggregator] = {}

    def get(self, user_id: str) -> WalkSessionAggregator:
        with self._lock:
            agg = self._sessions.get(user_id)
            if agg is None:
                agg = self._factory()
                self._sessions[user_id] = agg
            return agg

    def find(self, user_id: str) -> Optional[WalkSessionAggregator]:
        """Existing aggregator for a user, without creating one."""
        with self._lock:
            return self._sessions.get(user_id)

    def start(self, user_id: str, mode: WalkMode) -> SessionSnapshot:
        # a stored walk does not block the next one
        return self.get(user_id).start(mode, restart_stopped=True)

    def discard(self, user_id: str) -> None:
        with self._lock:
            agg = self._sessions.pop(user_id, None)
        if agg is not None:
            agg.reset()
