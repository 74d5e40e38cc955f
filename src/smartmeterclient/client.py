from __future__ import annotations
import datetime as dt
from typing import Any, Dict, List, Optional, Tuple
import logging
import httpx

from .models import (
    AccountInfo, BasicInfo, ConsumptionSeries, MeterInfo, MeterValue,
    YearlyConsumptionSeries, quarter_hour_values,
)

BASE_URL = "https://smartmeter.netz-noe.at"

AUTH_PATH = "/orchestration/Authentication/Login"
BASIC_INFO_PATH = "/orchestration/User/GetBasicInfo"
ACCOUNT_INFO_PATH = "/orchestration/User/GetAccountIdByBussinespartnerId"
METERING_POINT_INFO_PATH = "/orchestration/User/GetMeteringPointByAccountId"
CONSUMPTION_DAY_PATH = "/orchestration/ConsumptionRecord/Day"
CONSUMPTION_MONTH_PATH = "/orchestration/ConsumptionRecord/Month"
CONSUMPTION_YEAR_PATH = "/orchestration/ConsumptionRecord/Year"

# portal-side selector for the smart-meter view of an account
CONTEXT = 2


class SmartMeterError(Exception):
    pass

class TransportError(SmartMeterError):
    """No response was obtained (connection, DNS, TLS, timeout)."""
    pass

class AuthError(SmartMeterError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class HTTPStatusError(SmartMeterError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code

class BodyReadError(SmartMeterError):
    pass

class DecodeError(SmartMeterError):
    """Payload is not JSON or does not have the expected shape."""
    pass


def login_payload(username: str, password: str) -> Dict[str, str]:
    return {"user": username, "pwd": password}


class SmartMeterClient:
    """Session-bound client for the smart-meter portal.

    ``login`` must succeed before any other call; the session cookie it
    receives lives in this instance's cookie jar and is sent with every later
    request. Nothing is retried and nothing is re-authenticated implicitly.
    """

    def __init__(self, base_url: str = BASE_URL, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        # timeout=None leaves requests unbounded unless configured
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._log = logging.getLogger(__name__)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> 'SmartMeterClient':
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # ---------------- Internal Helpers -----------------
    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get(self, path: str, what: str, params: Dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        request = self._client.build_request('GET', url, params=params)
        try:
            resp = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"could not retrieve {what}: {e}") from e
        try:
            self._log.debug("GET %s -> %s", path, resp.status_code)
            if resp.status_code != httpx.codes.OK:
                raise HTTPStatusError(
                    f"could not retrieve {what}, status code: {resp.status_code}", resp.status_code
                )
            try:
                resp.read()
            except httpx.HTTPError as e:
                raise BodyReadError(f"could not read {what} payload: {e}") from e
        finally:
            resp.close()
        try:
            return resp.json()
        except ValueError as e:  # JSON decode error
            raise DecodeError(f"could not decode {what} payload: {resp.text[:200]}") from e

    @staticmethod
    def _decode(what: str, parse, payload: Any):
        try:
            return parse(payload)
        except (ValueError, TypeError, KeyError) as e:
            raise DecodeError(f"could not decode {what} payload: {e}") from e

    # ---------------- Session -----------------
    def login(self, username: str, password: str) -> None:
        """Start a portal session; the session cookie is kept for later calls."""
        try:
            resp = self._client.post(self._url(AUTH_PATH), json=login_payload(username, password))
        except httpx.HTTPError as e:
            raise AuthError(f"could not login: {e}") from e
        if resp.status_code != httpx.codes.OK:
            self._log.warning("Login failed with status %s", resp.status_code)
            raise AuthError(f"login failed, status code: {resp.status_code}", resp.status_code)
        self._log.info("Logged in to %s", self.base_url)

    # ---------------- Account Discovery -----------------
    def get_basic_info(self) -> BasicInfo:
        payload = self._get(BASIC_INFO_PATH, 'basic info')
        return self._decode('basic info', BasicInfo.from_json, payload)

    def get_account_infos(self) -> List[AccountInfo]:
        """Return every account of the logged-in business partner (possibly none)."""
        payload = self._get(ACCOUNT_INFO_PATH, 'account info', {'context': CONTEXT})
        accounts = self._decode('account info', AccountInfo.list_from_json, payload)
        self._log.debug("Found %s accounts", len(accounts))
        return accounts

    def get_meter_infos(self, account_id: str) -> List[MeterInfo]:
        """Return the metering points of one account."""
        params = {'accountId': account_id, 'context': CONTEXT}
        payload = self._get(METERING_POINT_INFO_PATH, 'meter info', params)
        meters = self._decode('meter info', MeterInfo.list_from_json, payload)
        self._log.debug("Found %s metering points for account %s", len(meters), account_id)
        return meters

    # ---------------- Consumption -----------------
    def get_consumption_by_meter_and_date(self, meter_id: str, date: dt.date) -> Tuple[ConsumptionSeries, List[MeterValue]]:
        """Return one day of readings, typically 96 quarter-hour values.

        ``date`` is used as its own calendar date; no time-zone conversion is
        applied. The second element stamps each metered value with its UTC
        interval end; peak demands are only available on the raw series.
        """
        params = {'meterId': meter_id, 'day': f"{date.year:04d}-{date.month:02d}-{date.day:02d}"}
        payload = self._get(CONSUMPTION_DAY_PATH, 'daily consumption', params)
        series = self._decode('daily consumption', ConsumptionSeries.from_json, payload)
        return series, quarter_hour_values(date, series)

    def get_consumption_by_meter_and_year_and_month(self, meter_id: str, date: dt.date) -> ConsumptionSeries:
        """Return daily values (one entry per day) for the month containing ``date``."""
        params = {'meterId': meter_id, 'year': date.year, 'month': date.month}
        payload = self._get(CONSUMPTION_MONTH_PATH, 'monthly consumption', params)
        return self._decode('monthly consumption', ConsumptionSeries.from_json, payload)

    def get_consumption_by_meter_and_year(self, meter_id: str, date: dt.date) -> YearlyConsumptionSeries:
        """Return monthly values (twelve entries) for the year containing ``date``."""
        params = {'meterId': meter_id, 'year': date.year}
        payload = self._get(CONSUMPTION_YEAR_PATH, 'yearly consumption', params)
        return self._decode('yearly consumption', YearlyConsumptionSeries.from_json, payload)
