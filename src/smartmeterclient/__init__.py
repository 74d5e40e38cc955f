"""
Netz NÖ smart-meter portal client for account, metering-point and consumption data.
Provides a Python interface to the portal's session-authenticated REST endpoints.
"""

__all__ = [
    'SmartMeterClient', 'PortalSettings',
    'SmartMeterError', 'TransportError', 'AuthError', 'HTTPStatusError', 'BodyReadError', 'DecodeError',
    'BasicInfo', 'AccountInfo', 'MeterInfo', 'RelationType',
    'ConsumptionSeries', 'YearlyConsumptionSeries', 'MeterValue',
]

from .client import (
    SmartMeterClient, SmartMeterError, TransportError, AuthError, HTTPStatusError,
    BodyReadError, DecodeError,
)
from .config import PortalSettings
from .models import (
    BasicInfo, AccountInfo, MeterInfo, RelationType,
    ConsumptionSeries, YearlyConsumptionSeries, MeterValue,
)
