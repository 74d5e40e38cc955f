import datetime as dt
import pytest
from smartmeterclient.models import (
    AccountInfo, BasicInfo, ConsumptionSeries, MeterInfo, RelationType,
    YearlyConsumptionSeries, parse_peak_demand_time, parse_register_date,
    parse_relation_type, parse_valid_from, quarter_hour_values,
)

UTC = dt.timezone.utc

def test_register_date_with_and_without_fraction():
    assert parse_register_date('2021-05-01T10:00:00.12') == dt.datetime(2021, 5, 1, 10, 0, 0, 120000, tzinfo=UTC)
    assert parse_register_date('2021-05-01T10:00:00.5') == dt.datetime(2021, 5, 1, 10, 0, 0, 500000, tzinfo=UTC)
    assert parse_register_date('2021-05-01T10:00:00') == dt.datetime(2021, 5, 1, 10, tzinfo=UTC)

def test_register_and_valid_from_agree_on_shared_prefix():
    with_fraction = parse_register_date('2021-05-01T10:00:00.12')
    plain = parse_valid_from('2021-05-01T10:00:00')
    assert with_fraction.replace(microsecond=0) == plain

@pytest.mark.parametrize('value', [
    '2021-05-01T10:00:00.123',
    '2021-05-01T10:00:00.',
    '2021-05-01 10:00:00',
    '2021-05-01',
    '2021-13-01T10:00:00',
    '',
    '2021-05-01T10:00:00.12\n',
    '2021-05-01T10:00:00\n',
    '2021-5-1T10:0:0',
    '\u0662021-05-01T10:00:00',
])
def test_register_date_rejects_other_formats(value):
    with pytest.raises(ValueError):
        parse_register_date(value)

@pytest.mark.parametrize('parse', [parse_valid_from, parse_peak_demand_time])
@pytest.mark.parametrize('value', [
    '2021-05-01T10:00:00.12',
    '2021-05-01T10:00',
    '2021-05-01T10:00:00Z',
    '2020-1-5T3:4:5',
    '2024-3-1T0:7:1',
    '2021-05-01T10:00:00\n',
    ' 2021-05-01T10:00:00',
    '\u0662021-05-01T10:00:00',
])
def test_second_precision_parsers_reject_other_formats(parse, value):
    with pytest.raises(ValueError):
        parse(value)

def test_date_parsers_reject_non_strings():
    with pytest.raises(TypeError):
        parse_register_date(20210501)
    with pytest.raises(TypeError):
        parse_valid_from(None)
    assert parse_peak_demand_time(None) is None

def test_relation_type_mapping():
    assert parse_relation_type('Bezug') is RelationType.FROM_GRID
    assert parse_relation_type('Einspeisung') is RelationType.TO_GRID
    unknown = parse_relation_type('Speicher')
    assert unknown == 'Speicher'
    assert not isinstance(unknown, RelationType)

def test_meter_info_unknown_relation_round_trips():
    meter = MeterInfo.from_json({'meteringPointId': 'AT1', 'typeOfRelation': 'Gemeinschaft',
                                 'validFrom': '2020-01-01T00:00:00'})
    assert meter.type_of_relation == 'Gemeinschaft'

def test_missing_fields_take_empty_defaults():
    account = AccountInfo.from_json({'accountId': 'ACC1'})
    assert account.gp_number == ''
    assert account.has_gas is False
    info = BasicInfo.from_json({})
    assert info.register_date is None
    series = ConsumptionSeries.from_json({})
    assert series.metered_values == [] and series.peak_demand_times == []

def test_wrong_field_types_rejected():
    with pytest.raises(TypeError):
        AccountInfo.from_json({'accountId': 'ACC1', 'hasGas': 'yes'})
    with pytest.raises(TypeError):
        AccountInfo.from_json({'accountId': 12345})
    with pytest.raises(TypeError):
        ConsumptionSeries.from_json({'meteredValues': ['0.5']})
    with pytest.raises(TypeError):
        ConsumptionSeries.from_json({'meteredValues': [True]})
    with pytest.raises(TypeError):
        YearlyConsumptionSeries.from_json([])

def test_series_values_are_floats():
    series = YearlyConsumptionSeries.from_json({'values': [1, 2.5], 'peakDemands': [3], 'peakDemandTimes': []})
    assert series.values == [1.0, 2.5]
    assert all(isinstance(v, float) for v in series.values)

def test_quarter_hour_values_properties():
    for n in (0, 1, 92, 96, 100):
        series = ConsumptionSeries(metered_values=[float(i) for i in range(n)])
        values = quarter_hour_values(dt.date(2023, 3, 26), series)
        assert len(values) == n
        if n:
            assert values[0].timestamp == dt.datetime(2023, 3, 26, 0, 15, tzinfo=UTC)
            assert values[-1].timestamp == values[0].timestamp + (n - 1) * dt.timedelta(minutes=15)
        assert sorted(values, key=lambda v: v.timestamp) == values
