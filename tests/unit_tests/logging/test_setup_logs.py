"""
setup_logs 单元测试

验证过滤指令的解析来源、一次性安装语义以及 sink 输出。
"""

from __future__ import annotations

import logging

import orjson
import pytest

from service_utils.config import LogFormat, LoggingSettings, LogStream
from service_utils.logging import (
    DEFAULT_FILTER_ENV,
    FilterParseError,
    default_directives,
    get_logger,
    setup_logs,
)


def json_settings(**overrides) -> LoggingSettings:
    return LoggingSettings(format=LogFormat.JSON, stream=LogStream.STDOUT, **overrides)


def read_json_lines(capsys) -> list[dict]:
    out = capsys.readouterr().out
    return [orjson.loads(line) for line in out.splitlines() if line.strip()]


class TestDirectiveResolution:
    """过滤指令来源"""

    def test_default_directives(self) -> None:
        """包名中的 - 替换为 _，并追加共享库指令"""
        assert default_directives("my-pkg") == "my_pkg=debug,service_utils=debug"

    def test_default_directives_with_extras(self) -> None:
        assert default_directives("my-pkg", ["foo=trace"]) == "my_pkg=debug,service_utils=debug,foo=trace"

    def test_setup_logs_synthesizes_default(self) -> None:
        handle = setup_logs("my-pkg", [], settings=json_settings())
        assert handle.directives == "my_pkg=debug,service_utils=debug"

    def test_setup_logs_appends_extras(self) -> None:
        handle = setup_logs("my-pkg", ["foo=trace"], settings=json_settings())
        assert handle.directives == "my_pkg=debug,service_utils=debug,foo=trace"

    def test_override_variable_is_used_verbatim(self, monkeypatch) -> None:
        """设置覆盖变量时忽略包名与额外指令"""
        monkeypatch.setenv(DEFAULT_FILTER_ENV, "  warn,my_pkg::db=info  ")
        handle = setup_logs("my-pkg", ["foo=trace"], settings=json_settings())
        assert handle.directives == "warn,my_pkg::db=info"
        assert handle.filter_spec.level_for("my_pkg.db") == logging.INFO

    def test_custom_override_variable(self, monkeypatch) -> None:
        monkeypatch.setenv("APP_LOG", "info")
        handle = setup_logs("my-pkg", filter_env="APP_LOG", settings=json_settings())
        assert handle.directives == "info"

    def test_blank_override_falls_back_to_default(self, monkeypatch) -> None:
        monkeypatch.setenv(DEFAULT_FILTER_ENV, "   ")
        handle = setup_logs("my-pkg", settings=json_settings())
        assert handle.directives == "my_pkg=debug,service_utils=debug"

    def test_malformed_override_raises(self, monkeypatch) -> None:
        """非法指令抛出异常，且不安装任何状态"""
        monkeypatch.setenv(DEFAULT_FILTER_ENV, "my_pkg=loud")
        with pytest.raises(FilterParseError):
            setup_logs("my-pkg", settings=json_settings())

        monkeypatch.delenv(DEFAULT_FILTER_ENV)
        handle = setup_logs("my-pkg", settings=json_settings())
        assert handle.directives == "my_pkg=debug,service_utils=debug"


class TestInstallOnce:
    """一次性安装语义"""

    def test_second_call_returns_same_handle(self, capsys) -> None:
        first = setup_logs("my-pkg", settings=json_settings())
        second = setup_logs("other-pkg", ["foo=trace"], settings=json_settings())
        assert second is first
        assert second.directives == "my_pkg=debug,service_utils=debug"

        # only the first call announces itself
        records = read_json_lines(capsys)
        assert len(records) == 1

    def test_handle_hands_out_loggers(self, capsys) -> None:
        handle = setup_logs("my-pkg", settings=json_settings())
        handle.get_logger("my_pkg.worker").info("ready")
        records = read_json_lines(capsys)
        assert records[-1]["logger"] == "my_pkg.worker"
        assert records[-1]["message"] == "ready"


class TestOutput:
    """sink 输出与过滤"""

    def test_announces_directives_at_debug(self, capsys) -> None:
        setup_logs("my-pkg", settings=json_settings())
        (record,) = read_json_lines(capsys)
        assert record["level"] == "debug"
        assert record["logger"] == "service_utils"
        assert record["message"] == "Initialized logger with directives: my_pkg=debug,service_utils=debug"
        assert "timestamp" in record

    def test_filters_by_logger_name(self, capsys) -> None:
        setup_logs("my-pkg", ["noisy=error"], settings=json_settings())
        capsys.readouterr()

        get_logger("my_pkg.jobs").debug("kept")
        get_logger("unrelated").critical("dropped")
        get_logger("noisy").warning("dropped")
        get_logger("noisy").error("kept too", code=7)

        records = read_json_lines(capsys)
        assert [r["message"] for r in records] == ["kept", "kept too"]
        assert records[1]["code"] == 7

    def test_stdlib_records_follow_directives(self, capsys) -> None:
        """标准库 logging 记录同样经过过滤"""
        setup_logs("my-pkg", settings=json_settings())
        capsys.readouterr()

        logging.getLogger("my_pkg.legacy").info("from %s", "stdlib")
        logging.getLogger("urllib3").warning("dropped")

        records = read_json_lines(capsys)
        assert len(records) == 1
        assert records[0]["logger"] == "my_pkg.legacy"
        assert records[0]["message"] == "from stdlib"
        assert records[0]["level"] == "info"

    def test_console_omits_logger_column(self, capsys) -> None:
        settings = LoggingSettings(format=LogFormat.CONSOLE, stream=LogStream.STDOUT)
        setup_logs("my-pkg", settings=settings)
        capsys.readouterr()

        get_logger("my_pkg.worker").info("ready", jobs=3)

        line = capsys.readouterr().out.strip()
        assert line.endswith("INFO ready jobs=3")
        assert "my_pkg.worker" not in line

    def test_console_logger_column_can_be_enabled(self, capsys) -> None:
        settings = LoggingSettings(format=LogFormat.CONSOLE, stream=LogStream.STDOUT, show_logger=True)
        setup_logs("my-pkg", settings=settings)
        capsys.readouterr()

        get_logger("my_pkg.worker").info("ready")

        assert "my_pkg.worker ready" in capsys.readouterr().out

    def test_file_sink_writes_json_lines(self, tmp_path, capsys) -> None:
        log_file = tmp_path / "logs" / "app.log"
        setup_logs("my-pkg", settings=json_settings(file_path=str(log_file)))
        get_logger("my_pkg").error("disk full")

        records = [orjson.loads(line) for line in log_file.read_text().splitlines()]
        assert [r["message"] for r in records][-1] == "disk full"
        assert records[-1]["level"] == "error"


def test_undecodable_override_file_falls_back_to_default(monkeypatch, tmp_path):
    """LOG_FILTER 指向非 UTF-8 文件时回退到默认指令"""
    binary = tmp_path / "filter"
    binary.write_bytes(b"\xff")
    monkeypatch.setenv(DEFAULT_FILTER_ENV, f"file:{binary}")

    handle = setup_logs("my-pkg", settings=json_settings())
    assert handle.directives == "my_pkg=debug,service_utils=debug"
