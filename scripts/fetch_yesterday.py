"""
Print yesterday's quarter-hour consumption for every metering point of the account.
Usage: python fetch_yesterday.py   (reads EVN_USR / EVN_PWD, optionally from ../.env)
"""
import datetime as dt
import logging
import os
import sys

from dotenv import load_dotenv

from smartmeterclient.client import SmartMeterClient, SmartMeterError
from smartmeterclient.config import PortalSettings

load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

def main() -> int:
    try:
        settings = PortalSettings.from_env()
    except KeyError:
        print("username and password must be supplied (EVN_USR, EVN_PWD)", file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    yesterday = dt.datetime.now() - dt.timedelta(days=1)
    with SmartMeterClient(settings.base_url, timeout=settings.timeout) as client:
        try:
            client.login(settings.username, settings.password)
            print(client.get_basic_info())
            for account in client.get_account_infos():
                for meter in client.get_meter_infos(account.account_id):
                    _, values = client.get_consumption_by_meter_and_date(meter.id, yesterday)
                    relation = getattr(meter.type_of_relation, 'value', meter.type_of_relation)
                    print(f"Meter ID: {meter.id}, Relation: {relation}")
                    for i, value in enumerate(values):
                        print(f"{i:02d} - {value.timestamp.isoformat()}: {value.value}")
        except SmartMeterError as e:
            logging.error(str(e))
            return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
