"""
Realtime Tracking Service
=========================
Accumulates distance, emission and cost for a GPS-tracked trip.

State machine:

    SETUP --start--> TRACKING <--pause/resume--> PAUSED
                        |                          |
                        +----------stop------------+--> STOPPED

Per sample, while TRACKING:
    1. increment = haversine(previous, new), or 0 for the first fix
    2. total_distance += increment
    3. carbon = total_distance * factor[fuel]      (recomputed from total)
    4. money  = total_distance / 12.5 * price[fuel] (recomputed from total)
    5. average_speed = total_distance / elapsed hours (0 when elapsed is 0)
    6. append the waypoint and persist the full session snapshot

Samples that arrive while PAUSED are dropped without touching the session.
Carbon and cost factors depend on fuel type only: every tracked vehicle is
modelled like a car, whatever vehicle_type was chosen at setup.

A position-source error is logged and handed back as a notification; the
session is neither stopped nor retried. Enforcing one active session per
user is the caller's job (see routers.tracking).
"""

from __future__ import annotations

import enum
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol, Union

from app.db.repository import ActivityRepository
from app.models.activity import ActivityHistory
from app.models.tracking import (
    PositionError,
    PositionSample,
    TrackingSession,
    Waypoint,
)
from app.services.activity_log import build_activity
from app.services.emissions import round_to_int
from app.services.geo import distance_km

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

REALTIME_CARBON_FACTORS: dict[str, float] = {
    "petrol": 0.12,
    "diesel": 0.15,
    "electric": 0.05,
}

REALTIME_FUEL_COSTS: dict[str, float] = {
    "petrol": 1.5,
    "diesel": 1.4,
    "electric": 0.3,
}

REALTIME_MILEAGE_KM_PER_L = 12.5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Position source contract
# ---------------------------------------------------------------------------

SampleCallback = Callable[[PositionSample], object]
ErrorCallback = Callable[[PositionError], object]


class PositionSource(Protocol):
    """Anything that pushes samples (or errors) one at a time."""

    def subscribe(self, on_sample: SampleCallback, on_error: ErrorCallback) -> object:
        ...

    def unsubscribe(self, handle: object) -> None:
        ...


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------

class TrackingState(str, enum.Enum):
    SETUP = "setup"
    TRACKING = "tracking"
    PAUSED = "paused"
    STOPPED = "stopped"


class TrackingStateError(RuntimeError):
    """An operation was called in a state that does not allow it."""


class RealtimeTracker:
    """Owns one user's tracking session and persists it after every change."""

    def __init__(
        self,
        repository: ActivityRepository,
        user_id: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = repository
        self._clock = clock
        self.user_id = user_id
        self.state = TrackingState.SETUP
        self.session: Optional[TrackingSession] = None
        self._last_position: Optional[tuple[float, float]] = None
        self._source: Optional[PositionSource] = None
        self._handle: object = None

    @classmethod
    def from_session(
        cls,
        repository: ActivityRepository,
        session: TrackingSession,
        clock: Callable[[], datetime] = _utcnow,
    ) -> "RealtimeTracker":
        """Rebuild a tracker around a stored session.

        The last stored waypoint becomes the previous coordinate, so the
        next sample adds the leg from where the session left off.
        """
        tracker = cls(repository, session.user_id, clock=clock)
        tracker.session = session
        if not session.is_active:
            tracker.state = TrackingState.STOPPED
        elif session.is_paused:
            tracker.state = TrackingState.PAUSED
        else:
            tracker.state = TrackingState.TRACKING
        if session.waypoints:
            last = session.waypoints[-1]
            tracker._last_position = (last.lat, last.lng)
        return tracker

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require(self, *allowed: TrackingState) -> None:
        if self.state not in allowed:
            raise TrackingStateError(
                f"Cannot do that while {self.state.value}; "
                f"expected {' or '.join(s.value for s in allowed)}"
            )

    def start(
        self,
        vehicle_type: str = "car",
        fuel_type: str = "petrol",
        vehicle_age: float = 0,
    ) -> TrackingSession:
        self._require(TrackingState.SETUP)
        self.session = TrackingSession(
            id=str(uuid.uuid4()),
            user_id=self.user_id,
            vehicle_type=vehicle_type,
            fuel_type=fuel_type,
            vehicle_age=vehicle_age,
            start_time=self._clock(),
        )
        self.state = TrackingState.TRACKING
        self._last_position = None
        self._persist()
        logger.info(
            "Started tracking session %s for user %s (%s, %s)",
            self.session.id, self.user_id, vehicle_type, fuel_type,
        )
        return self.session

    def pause(self) -> TrackingSession:
        self._require(TrackingState.TRACKING)
        self.state = TrackingState.PAUSED
        self.session.is_paused = True
        self._persist()
        logger.info("Paused tracking session %s", self.session.id)
        return self.session

    def resume(self) -> TrackingSession:
        self._require(TrackingState.PAUSED)
        self.state = TrackingState.TRACKING
        self.session.is_paused = False
        self._persist()
        logger.info("Resumed tracking session %s", self.session.id)
        return self.session

    def stop(self) -> tuple[TrackingSession, ActivityHistory]:
        """Finalise the session and append it to history as realtime_travel."""
        self._require(TrackingState.TRACKING, TrackingState.PAUSED)
        self.detach()

        now = self._clock()
        session = self.session
        session.end_time = now
        session.is_active = False
        session.is_paused = False
        self.state = TrackingState.STOPPED
        self._persist()

        elapsed_minutes = (now - session.start_time).total_seconds() / 60
        activity = self._repo.add_activity(build_activity(
            self.user_id,
            "realtime_travel",
            {
                "vehicle_type": session.vehicle_type,
                "fuel_type": session.fuel_type,
                "vehicle_age": session.vehicle_age,
            },
            carbon_emitted=session.carbon_emitted,
            cost_spent=session.money_spent,
            distance_travelled=session.total_distance,
            duration=round_to_int(elapsed_minutes),
            now=now,
        ))
        self._last_position = None
        logger.info(
            "Stopped tracking session %s: %.3f km, %.3f kg CO2",
            session.id, session.total_distance, session.carbon_emitted,
        )
        return session, activity

    # ------------------------------------------------------------------
    # Samples
    # ------------------------------------------------------------------

    def handle_sample(self, sample: PositionSample) -> TrackingSession:
        """Fold one position fix into the running totals."""
        self._require(TrackingState.TRACKING, TrackingState.PAUSED)
        if self.state is TrackingState.PAUSED:
            logger.debug("Dropping sample for paused session %s", self.session.id)
            return self.session

        now = self._clock()
        session = self.session

        increment = 0.0
        if self._last_position is not None:
            prev_lat, prev_lng = self._last_position
            increment = distance_km(prev_lat, prev_lng, sample.latitude, sample.longitude)
        self._last_position = (sample.latitude, sample.longitude)

        total = session.total_distance + increment
        session.total_distance = total
        session.carbon_emitted = total * REALTIME_CARBON_FACTORS[session.fuel_type]
        session.money_spent = (
            total / REALTIME_MILEAGE_KM_PER_L * REALTIME_FUEL_COSTS[session.fuel_type]
        )

        elapsed_hours = (now - session.start_time).total_seconds() / 3600
        session.average_speed = total / elapsed_hours if elapsed_hours > 0 else 0.0

        session.waypoints.append(Waypoint(
            lat=sample.latitude,
            lng=sample.longitude,
            timestamp=sample.timestamp or now,
        ))
        self._persist()

        logger.debug(
            "Session %s: +%.4f km, total %.4f km, %.4f kg CO2",
            session.id, increment, total, session.carbon_emitted,
        )
        return session

    def handle_error(self, error: PositionError) -> str:
        """Report a position-source error. The session is left as it is."""
        notification = f"Error getting location: {error.message}"
        logger.warning(
            "Position error for session %s (code=%s): %s",
            self.session.id if self.session else None, error.code, error.message,
        )
        return notification

    def consume(
        self, stream: Iterable[Union[PositionSample, PositionError]]
    ) -> Optional[TrackingSession]:
        """Feed every item of *stream* through the sample/error handlers."""
        for item in stream:
            if isinstance(item, PositionError):
                self.handle_error(item)
            else:
                self.handle_sample(item)
        return self.session

    # ------------------------------------------------------------------
    # Position source wiring
    # ------------------------------------------------------------------

    def attach(self, source: PositionSource) -> None:
        """Subscribe to *source*; stop() unsubscribes."""
        self.detach()
        self._source = source
        self._handle = source.subscribe(self.handle_sample, self.handle_error)

    def detach(self) -> None:
        if self._source is not None:
            self._source.unsubscribe(self._handle)
        self._source = None
        self._handle = None

    def _persist(self) -> None:
        self.session = self._repo.save_tracking_session(self.session)
