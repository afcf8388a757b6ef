import pydantic
import pytest

import caddy_log_converter


def test_record_fields_from_caddy_names():
    record = caddy_log_converter.CaddyLogRecord.model_validate(
        {
            "level": "info",
            "ts": 1700000000.5,
            "logger": "http.log.access",
            "msg": "handled request",
            "request": {
                "remote_addr": "10.0.0.1:443",
                "proto": "HTTP/2.0",
                "headers": {"User-Agent": ["curl/8.4.0"]},
                "tls": {"resumed": True, "version": 772, "cipher_suite": 4865, "proto": "h2", "server_name": "a.b"},
            },
            "resp_headers": {"Server": ["Caddy"]},
        }
    )

    assert record.timestamp == 1700000000.5
    assert record.logger == "http.log.access"
    assert record.request.remote_address == "10.0.0.1:443"
    assert record.request.headers == {"User-Agent": ["curl/8.4.0"]}
    assert record.request.tls.cipher_suite == 4865
    assert record.request.tls.server_name == "a.b"
    assert record.response_headers == {"Server": ["Caddy"]}


def test_absent_and_null_fields_take_zero_values():
    record = caddy_log_converter.CaddyLogRecord.model_validate(
        {"ts": None, "request": None, "status": None, "resp_headers": None}
    )

    assert record.timestamp == 0.0
    assert record.status == 0
    assert record.size == 0
    assert record.duration == 0.0
    assert record.request.host == ""
    assert record.request.headers == dict()
    assert record.request.tls.resumed is False
    assert record.response_headers == dict()


def test_record_is_immutable():
    record = caddy_log_converter.CaddyLogRecord.model_validate({"status": 200})

    with pytest.raises(pydantic.ValidationError):
        record.status = 500


@pytest.mark.parametrize("status", ["not-a-number", 200.5, [200]])
def test_ill_typed_status_is_rejected(status: object):
    with pytest.raises(pydantic.ValidationError):
        caddy_log_converter.CaddyLogRecord.model_validate({"status": status})


def test_non_object_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        caddy_log_converter.CaddyLogRecord.model_validate([1, 2, 3])


@pytest.mark.parametrize("field_name", ["ts", "duration"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_are_rejected(field_name: str, value: float):
    with pytest.raises(pydantic.ValidationError):
        caddy_log_converter.CaddyLogRecord.model_validate({field_name: value})


def test_null_header_values_are_dropped():
    record = caddy_log_converter.CaddyLogRecord.model_validate(
        {
            "request": {"headers": {"Referer": None, "User-Agent": ["ua"]}},
            "resp_headers": {"Content-Type": None},
        }
    )

    assert record.request.headers == {"User-Agent": ["ua"]}
    assert record.response_headers == dict()
