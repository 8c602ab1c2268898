"""
Tests for joining sites with their samples.
"""

import copy

import pytest

from conftest import sample
from data_fetch.sheets_client import Sheet
from features.site_record import (
    MeasurementSet,
    SiteRecord,
    build_measurements,
    build_record,
    ordered_data,
    to_float,
)

SITE = {"sitio": "Nopoló", "latitud": "25.9378", "longitud": -111.356, "descripción": "Resort beach"}

SAMPLES = [
    sample("Nopoló", 9, 85, temperatura=25.7),
    sample("Juncalito", 1, 410),
    sample("Nopoló", 3, 150),
    sample("nopoló", 2, 5),
]


def test_build_record_keeps_matching_rows_in_order():
    record = build_record(SITE, SAMPLES)
    assert record.site_name == "Nopoló"
    assert record.data == [SAMPLES[0], SAMPLES[2]]


def test_build_record_reads_metadata():
    record = build_record(SITE, SAMPLES)
    assert record.latitude == pytest.approx(25.9378)
    assert record.longitude == pytest.approx(-111.356)
    assert record.description == "Resort beach"
    assert record.has_location


def test_build_record_is_repeatable_and_leaves_input_alone():
    before = copy.deepcopy(SAMPLES)
    first = build_record(SITE, SAMPLES)
    second = build_record(SITE, SAMPLES)
    assert first == second
    assert SAMPLES == before


def test_site_without_samples():
    record = build_record({"sitio": "Isla Coronado"}, SAMPLES)
    assert record.data == []
    assert record.latitude is None
    assert not record.has_location


@pytest.mark.parametrize("lat,lon", [(None, -111.3), (26.0, ""), ("norte", -111.3), ("inf", -111.0), (26.0, "-inf")])
def test_missing_or_bad_coordinates_mean_no_location(lat, lon):
    record = build_record({"sitio": "X", "latitud": lat, "longitud": lon}, [])
    assert not record.has_location


def test_zero_coordinates_are_still_a_location():
    record = build_record({"sitio": "X", "latitud": 0, "longitud": 0}, [])
    assert record.has_location


def test_ordered_data_follows_measurement_order():
    record = build_record(SITE, SAMPLES)
    rows = ordered_data(record, ["enterococos", "temperatura"])
    assert rows == [[85, 25.7], [150, None]]


def test_ordered_data_empty_record():
    record = SiteRecord("X", None, None, None, [])
    assert ordered_data(record, ["enterococos"]) == []


def test_build_measurements_from_label_sheet():
    sheet = Sheet(
        "etiquetas",
        ["fecha", "enterococos", "turbidez"],
        [{"fecha": "Fecha", "enterococos": "Enterococos (NMP/100 mL)", "turbidez": None}],
    )
    measurements = build_measurements(sheet)
    assert measurements == MeasurementSet(
        names=["fecha", "enterococos", "turbidez"],
        labels=["Fecha", "Enterococos (NMP/100 mL)", "turbidez"],
    )


def test_build_measurements_without_label_row():
    measurements = build_measurements(Sheet("etiquetas", ["fecha"], []))
    assert measurements.labels == ["fecha"]


@pytest.mark.parametrize(
    "value,expected",
    [("26.5", 26.5), (-111, -111.0), (None, None), ("", None), ("abc", None), (float("nan"), None), (True, None),
     ("inf", None), ("-inf", None), (float("inf"), None)],
)
def test_to_float(value, expected):
    assert to_float(value) == expected
