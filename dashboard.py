# dashboard.py
"""
Dashboard controller: selection -> fetch -> format -> state.

Nothing in here knows about flask, the routes in app.py build a controller per
request, call submit() and hand the resulting state to a template.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from services.formatting import DisplaySunRecord, to_display_record
from services.sun import SunDataError

log = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "Please select a location first!"
NETWORK_MESSAGE = "Network error. Please check your internet connection."
RATE_LIMIT_MESSAGE = "API rate limit exceeded. Please try again later."
INVALID_COORDINATES_MESSAGE = "Invalid location coordinates. Please select a different location."

TRIGGER_LABEL = "Get Sunrise/Sunset Times"
TRIGGER_BUSY_LABEL = "Loading..."


class ValidationError(Exception):
    """Bad or missing selection, never reaches the api."""


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    @classmethod
    def parse(cls, value: str) -> "Coordinates":
        #select values look like "40.7128,-74.0060"
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 2:
            raise ValidationError(INVALID_COORDINATES_MESSAGE)
        try:
            lat, lng = float(parts[0]), float(parts[1])
        except ValueError:
            raise ValidationError(INVALID_COORDINATES_MESSAGE) from None
        # nan fails both comparisons too
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise ValidationError(INVALID_COORDINATES_MESSAGE)
        return cls(lat=lat, lng=lng)

    def as_selection(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True)
class DayPanel:
    title: str
    record: DisplaySunRecord


@dataclass(frozen=True)
class SunReport:
    """What a successful submit renders: a location heading and the day panels."""

    location_name: str
    coordinates: Coordinates
    panels: Tuple[DayPanel, ...]

    @property
    def timezone(self) -> str:
        return self.panels[0].record.timezone

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location_name,
            "lat": self.coordinates.lat,
            "lng": self.coordinates.lng,
            "timezone": self.timezone,
            "panels": [{"title": p.title, **p.record.to_dict()} for p in self.panels],
        }


class RequestStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RequestState:
    status: RequestStatus
    report: Optional[SunReport] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestState":
        return cls(RequestStatus.IDLE)

    @classmethod
    def loading(cls) -> "RequestState":
        return cls(RequestStatus.LOADING)

    @classmethod
    def success(cls, report: SunReport) -> "RequestState":
        return cls(RequestStatus.SUCCESS, report=report)

    @classmethod
    def error(cls, message: str) -> "RequestState":
        return cls(RequestStatus.ERROR, message=message)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status.value}
        if self.report is not None:
            out["report"] = self.report.to_dict()
        if self.message is not None:
            out["message"] = self.message
        return out


@dataclass
class TriggerControl:
    """The "get times" button: disabled with a busy label while a request runs."""

    label: str = TRIGGER_LABEL
    disabled: bool = False

    @contextmanager
    def busy(self):
        self.disabled = True
        self.label = TRIGGER_BUSY_LABEL
        try:
            yield self
        finally:
            self.disabled = False
            self.label = TRIGGER_LABEL


@dataclass
class DashboardState:
    request: RequestState = field(default_factory=RequestState.idle)
    trigger: TriggerControl = field(default_factory=TriggerControl)


def describe_error(error: Exception) -> str:
    """Turns a failure into the message shown in the error box."""
    message = str(error)
    if "Failed to fetch" in message:
        return NETWORK_MESSAGE
    if "OVER_QUERY_LIMIT" in message:
        return RATE_LIMIT_MESSAGE
    if "INVALID_REQUEST" in message:
        return INVALID_COORDINATES_MESSAGE
    return f"Error: {message}"


class DashboardController:
    """
    Owns the dashboard state and its transitions.

    client needs a fetch(lat, lng) returning the api "results" object.
    render, when given, is called with the state after every transition.
    tomorrow_fetch, when given, is called with the Coordinates to get a separate
    record for the Tomorrow panel; without it both panels show today's record.
    """

    def __init__(
        self,
        client,
        state: Optional[DashboardState] = None,
        render: Optional[Callable[[DashboardState], None]] = None,
        tomorrow_fetch: Optional[Callable[[Coordinates], Dict[str, Any]]] = None,
    ):
        self.client = client
        self.state = state if state is not None else DashboardState()
        self.render = render
        self.tomorrow_fetch = tomorrow_fetch

    def _transition(self, new_state: RequestState) -> RequestState:
        log.debug("dashboard %s -> %s", self.state.request.status.value, new_state.status.value)
        self.state.request = new_state
        if self.render is not None:
            self.render(self.state)
        return new_state

    def reset(self) -> RequestState:
        return self._transition(RequestState.idle())

    def submit(self, selection: Optional[str], location_name: Optional[str] = None) -> RequestState:
        if not selection or not selection.strip():
            return self._transition(RequestState.error(NO_SELECTION_MESSAGE))
        try:
            coords = Coordinates.parse(selection)
        except ValidationError as e:
            return self._transition(RequestState.error(str(e)))

        name = location_name or coords.as_selection()
        if self.state.request.status is not RequestStatus.IDLE:
            self.reset()  # a finished request goes back to idle before the next one
        with self.state.trigger.busy():
            self._transition(RequestState.loading())
            try:
                outcome = RequestState.success(self._load(coords, name))
            except SunDataError as e:
                log.warning("could not load sun data for %s: %s", name, e)
                outcome = RequestState.error(describe_error(e))
            except Exception as e:
                log.exception("unexpected failure loading sun data for %s", name)
                outcome = RequestState.error(describe_error(e))
        #rendered after the trigger is released
        return self._transition(outcome)

    def _load(self, coords: Coordinates, name: str) -> SunReport:
        raw = self.client.fetch(coords.lat, coords.lng)
        log.debug("raw api results for %s: %r", name, raw)
        today = to_display_record(raw)
        #without a second fetch tomorrow is a copy of today
        tomorrow = to_display_record(self.tomorrow_fetch(coords)) if self.tomorrow_fetch else today
        return SunReport(
            location_name=name,
            coordinates=coords,
            panels=(DayPanel("Today", today), DayPanel("Tomorrow", tomorrow)),
        )
