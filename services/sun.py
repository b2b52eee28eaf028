import requests, logging, datetime as dt
#request http client and dt dates
from typing import Any, Dict, Optional, Union

log = logging.getLogger(__name__)

API = "https://api.sunrisesunset.io/json"
#sunrise sunset api endpoint
DEFAULT_TIMEOUT = 10  # seconds, stops us waiting forever on a dead connection


class SunDataError(Exception):
    """Base class for anything that stops us getting sun data."""


class HttpError(SunDataError):
    #non 2xx status even after the fallback url
    def __init__(self, status: int):
        self.status = status
        super().__init__(f"HTTP error! status: {status}")


class ApiError(SunDataError):
    #api answered but its envelope status was not OK (OVER_QUERY_LIMIT, INVALID_REQUEST...)
    def __init__(self, status: Optional[str]):
        self.status = status or "Unknown API error"
        super().__init__(self.status)


class NetworkError(SunDataError):
    #dns, refused connection, timeout
    def __init__(self, reason: Any):
        self.reason = reason
        super().__init__(f"Failed to fetch: {reason}")


def _succeeded(r: requests.Response) -> bool:
    #only 2xx counts, Response.ok would also let an unfollowed redirect through
    return 200 <= r.status_code < 300


class SunDataClient:
    """Fetches one day of sun data, retrying once with formatted=0 when the first url fails."""

    def __init__(self, base_url: str = API, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout

    def _params(self, lat: float, lng: float, date, formatted: bool) -> Dict[str, Any]:
        params: Dict[str, Any] = {"lat": lat, "lng": lng}
        if not formatted:
            params["formatted"] = 0
        if date is not None:
            params["date"] = date.isoformat() if isinstance(date, dt.date) else str(date)
        return params

    def _get(self, params: Dict[str, Any]) -> requests.Response:
        try:
            return requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("sun api request failed: %s", e)
            raise NetworkError(e) from e

    def fetch(self, lat: float, lng: float, date: Union[str, dt.date, None] = None) -> Dict[str, Any]:
        """Returns the "results" object of the api response or raises a SunDataError."""
        r = self._get(self._params(lat, lng, date, formatted=True))
        if not _succeeded(r):
            log.info("sun api returned %s, retrying with formatted=0", r.status_code)
            r = self._get(self._params(lat, lng, date, formatted=False))
            if not _succeeded(r):
                raise HttpError(r.status_code)

        try:
            data = r.json()
        except ValueError as e:  # body was not json at all
            raise ApiError("INVALID_RESPONSE") from e
        log.debug("full api response: %r", data)

        if not isinstance(data, dict):
            raise ApiError("INVALID_RESPONSE")
        if data.get("status") != "OK":
            raise ApiError(data.get("status"))

        results = data.get("results")
        if not isinstance(results, dict):
            raise ApiError("INVALID_RESPONSE")
        return results
