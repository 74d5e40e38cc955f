from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# The portal sends zone-less timestamps; they are read as UTC.
_SECONDS_RE = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}')
_REGISTER_DATE_RE = re.compile(r'([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2})(\.[0-9]{1,2})?')
_SECONDS_FMT = '%Y-%m-%dT%H:%M:%S'

QUARTER_HOUR = dt.timedelta(minutes=15)


class RelationType(str, Enum):
    """Direction of energy flow at a metering point."""
    FROM_GRID = 'Bezug'
    TO_GRID = 'Einspeisung'


def parse_relation_type(value: Any) -> Union[RelationType, str]:
    """Map the portal literal to a RelationType; unknown strings pass through unchanged."""
    if value is None:
        return ''
    if not isinstance(value, str):
        raise TypeError(f"typeOfRelation must be a string, got {type(value).__name__}")
    try:
        return RelationType(value)
    except ValueError:
        return value


# ---------------- Date parsers (one per field role) -----------------
def _parse_seconds(value: str, key: str) -> dt.datetime:
    if not _SECONDS_RE.fullmatch(value):
        raise ValueError(f"{key} {value!r} does not match YYYY-MM-DDTHH:MM:SS")
    return dt.datetime.strptime(value, _SECONDS_FMT).replace(tzinfo=dt.timezone.utc)


def parse_register_date(value: str) -> dt.datetime:
    """Parse ``registerDate``: ``YYYY-MM-DDTHH:MM:SS`` with an optional 1-2 digit fraction."""
    if not isinstance(value, str):
        raise TypeError(f"registerDate must be a string, got {type(value).__name__}")
    m = _REGISTER_DATE_RE.fullmatch(value)
    if not m:
        raise ValueError(f"registerDate {value!r} does not match YYYY-MM-DDTHH:MM:SS[.ff]")
    base = m.group(1)
    ts = dt.datetime.strptime(base, _SECONDS_FMT).replace(tzinfo=dt.timezone.utc)
    fraction = m.group(2)
    if fraction:
        ts = ts.replace(microsecond=int(fraction[1:].ljust(6, '0')))
    return ts


def parse_valid_from(value: str) -> dt.datetime:
    """Parse ``validFrom``: exactly ``YYYY-MM-DDTHH:MM:SS``, fractions are rejected."""
    if not isinstance(value, str):
        raise TypeError(f"validFrom must be a string, got {type(value).__name__}")
    return _parse_seconds(value, 'validFrom')


def parse_peak_demand_time(value: Optional[str]) -> Optional[dt.datetime]:
    """Parse one ``peakDemandTimes`` entry; null marks an interval without a reading."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"peakDemandTimes entries must be strings, got {type(value).__name__}")
    return _parse_seconds(value, 'peakDemandTimes entry')


# ---------------- Field helpers -----------------
def _obj(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} payload must be a JSON object, got {type(data).__name__}")
    return data


def _list(data: Any, what: str) -> List[Any]:
    if not isinstance(data, list):
        raise TypeError(f"{what} payload must be a JSON array, got {type(data).__name__}")
    return data


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {type(value).__name__}")
    return value


def _number(value: Any, key: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} entries must be numbers, got {type(value).__name__}")
    return float(value)


def _numbers(data: Dict[str, Any], key: str) -> List[Optional[float]]:
    raw = data.get(key)
    if raw is None:
        return []
    return [_number(v, key) for v in _list(raw, key)]


def _times(data: Dict[str, Any], key: str) -> List[Optional[dt.datetime]]:
    raw = data.get(key)
    if raw is None:
        return []
    return [parse_peak_demand_time(v) for v in _list(raw, key)]


# ---------------- Records -----------------
@dataclass
class BasicInfo:
    """Account holder identity as returned by ``GetBasicInfo``."""
    gp_number: str
    title_pre: str
    title_post: str
    form_of_address: str
    name: str
    surname: str
    register_date: Optional[dt.datetime]
    from_: str = ''

    @staticmethod
    def from_json(data: Any) -> 'BasicInfo':
        data = _obj(data, 'basic info')
        raw_date = data.get('registerDate')
        return BasicInfo(
            gp_number=_str(data, 'gpNummer'),
            title_pre=_str(data, 'titelVorgestellt'),
            title_post=_str(data, 'titelNachgestellt'),
            form_of_address=_str(data, 'anrede'),
            name=_str(data, 'vorname'),
            surname=_str(data, 'nachname'),
            register_date=parse_register_date(raw_date) if raw_date is not None else None,
            from_=_str(data, 'von'),
        )


@dataclass
class AccountInfo:
    """One business-partner account and its service flags."""
    gp_number: str
    account_id: str
    external_power_supply: bool = False
    has_smart_meter: bool = False
    has_electricity: bool = False
    has_gas: bool = False
    is_communicative: bool = False
    has_opt_in: bool = False
    is_active: bool = False

    @staticmethod
    def from_json(data: Any) -> 'AccountInfo':
        data = _obj(data, 'account info')
        return AccountInfo(
            gp_number=_str(data, 'gpNumber'),
            account_id=_str(data, 'accountId'),
            external_power_supply=_bool(data, 'externalPowerSupply'),
            has_smart_meter=_bool(data, 'hasSmartMeter'),
            has_electricity=_bool(data, 'hasElectricity'),
            has_gas=_bool(data, 'hasGas'),
            is_communicative=_bool(data, 'hasCommunicative'),
            has_opt_in=_bool(data, 'hasOptIn'),
            is_active=_bool(data, 'hasActive'),
        )

    @staticmethod
    def list_from_json(data: Any) -> List['AccountInfo']:
        return [AccountInfo.from_json(item) for item in _list(data, 'account info')]


@dataclass
class MeterInfo:
    """A metering point under an account."""
    id: str
    type_of_relation: Union[RelationType, str]
    valid_from: Optional[dt.datetime]
    smart_meter_type: str = ''
    ftm_read_out: bool = False
    ftm_read_out_provider: bool = False
    community_production_facility: bool = False
    has_ftm_meter_data: bool = False
    locked: bool = False
    point_of_consumption: str = ''
    category: str = ''

    @staticmethod
    def from_json(data: Any) -> 'MeterInfo':
        data = _obj(data, 'meter info')
        raw_valid_from = data.get('validFrom')
        return MeterInfo(
            id=_str(data, 'meteringPointId'),
            type_of_relation=parse_relation_type(data.get('typeOfRelation')),
            valid_from=parse_valid_from(raw_valid_from) if raw_valid_from is not None else None,
            smart_meter_type=_str(data, 'smartMeterType'),
            ftm_read_out=_bool(data, 'ftmReadOut'),
            ftm_read_out_provider=_bool(data, 'ftmReadOutProvider'),
            community_production_facility=_bool(data, 'communityProductionFacility'),
            has_ftm_meter_data=_bool(data, 'hasFtmMeterData'),
            locked=_bool(data, 'locked'),
            point_of_consumption=_str(data, 'pointOfConsumption'),
            category=_str(data, 'category'),
        )

    @staticmethod
    def list_from_json(data: Any) -> List['MeterInfo']:
        return [MeterInfo.from_json(item) for item in _list(data, 'meter info')]


@dataclass
class ConsumptionSeries:
    """Day or month readings: three index-aligned arrays, no per-entry timestamp."""
    metered_values: List[Optional[float]] = field(default_factory=list)
    metered_peak_demands: List[Optional[float]] = field(default_factory=list)
    peak_demand_times: List[Optional[dt.datetime]] = field(default_factory=list)

    @staticmethod
    def from_json(data: Any) -> 'ConsumptionSeries':
        data = _obj(data, 'consumption')
        return ConsumptionSeries(
            metered_values=_numbers(data, 'meteredValues'),
            metered_peak_demands=_numbers(data, 'meteredPeakDemands'),
            peak_demand_times=_times(data, 'peakDemandTimes'),
        )


@dataclass
class YearlyConsumptionSeries:
    """Monthly readings for one year."""
    values: List[Optional[float]] = field(default_factory=list)
    peak_demands: List[Optional[float]] = field(default_factory=list)
    peak_demand_times: List[Optional[dt.datetime]] = field(default_factory=list)

    @staticmethod
    def from_json(data: Any) -> 'YearlyConsumptionSeries':
        data = _obj(data, 'yearly consumption')
        return YearlyConsumptionSeries(
            values=_numbers(data, 'values'),
            peak_demands=_numbers(data, 'peakDemands'),
            peak_demand_times=_times(data, 'peakDemandTimes'),
        )


@dataclass
class MeterValue:
    timestamp: dt.datetime
    value: Optional[float]


def quarter_hour_values(day: dt.date, series: ConsumptionSeries) -> List[MeterValue]:
    """Assign each metered value of a day-series its interval end.

    Sample ``i`` is stamped ``UTC midnight(day) + 15min + i*15min``; the count is
    whatever the portal sent (96 on a regular day).
    """
    ts = dt.datetime(day.year, day.month, day.day, 0, 15, tzinfo=dt.timezone.utc)
    values: List[MeterValue] = []
    for value in series.metered_values:
        values.append(MeterValue(timestamp=ts, value=value))
        ts += QUARTER_HOUR
    return values
