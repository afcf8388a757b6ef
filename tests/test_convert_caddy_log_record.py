import caddy_log_converter


def _make_record(**request_fields) -> caddy_log_converter.CaddyLogRecord:
    request = {"remote_addr": "10.0.0.1:443", "method": "GET", "host": "www.example.com", "uri": "/"}
    request.update(request_fields)

    return caddy_log_converter.CaddyLogRecord.model_validate(
        {
            "ts": 1700000000.789,
            "request": request,
            "duration": 0.25,
            "size": 10,
            "status": 200,
            "resp_headers": {"content-type": ["text/plain"]},
        }
    )


def test_accepted_record():
    record = _make_record(headers={"User-Agent": ["curl/8.4.0"], "X-Forwarded-For": ["203.0.113.5, 10.0.0.1"]})
    filter_config = caddy_log_converter.LogFilterConfig()

    line = caddy_log_converter.convert_caddy_log_record(record=record, filter_config=filter_config)

    assert line == "1700000000\twww.example.com\t203.0.113.5\tGET\t/\t200\t10\t\tcurl/8.4.0\ttext/plain\t0.25"


def test_exclude_client_uses_resolved_client_host():
    record = _make_record(headers={"X-Forwarded-For": ["203.0.113.5"]})

    excluding_connection = caddy_log_converter.LogFilterConfig(exclude_client="10.")
    excluding_forwarded = caddy_log_converter.LogFilterConfig(exclude_client="203.")

    assert caddy_log_converter.convert_caddy_log_record(record=record, filter_config=excluding_connection) is not None
    assert caddy_log_converter.convert_caddy_log_record(record=record, filter_config=excluding_forwarded) is None


def test_rejected_record():
    record = _make_record(uri="/metrics")
    filter_config = caddy_log_converter.LogFilterConfig(exclude_urls="/metrics")

    assert caddy_log_converter.convert_caddy_log_record(record=record, filter_config=filter_config) is None


def test_record_is_left_untouched():
    record = _make_record(headers={"User-Agent": ["a", "b"]})
    snapshot = record.model_dump()

    caddy_log_converter.convert_caddy_log_record(record=record, filter_config=caddy_log_converter.LogFilterConfig())

    assert record.model_dump() == snapshot
