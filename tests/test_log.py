"""
日志适配器与日志配置测试
"""

import logging

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from pwt.ciarray.case_insensitive_array import CaseInsensitiveArray
from pwt.ciarray.config import LogConfig, configure_logging, get_handler
from pwt.ciarray.log import (
    PACKAGE_LOGGER_NAME,
    EnhancedFormatter,
    LoggerAdapter,
    StandardHandler,
)


@pytest.fixture
def logger():
    logger = logging.getLogger("tests.ciarray")
    logger.setLevel(logging.DEBUG)
    yield logger
    for h in logger.handlers[:]:
        logger.removeHandler(h)


class TestLoggerAdapter:
    """测试日志适配器"""

    def test_brace_style_message(self, logger, caplog):
        adapter = LoggerAdapter(logger, component="array")
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            adapter.debugf("Loaded {written} pairs", written=3)
        record = caplog.records[0]
        assert record.written == 3
        assert record.component == "array"
        assert EnhancedFormatter("{message}").format(record) == "Loaded 3 pairs"

    def test_percent_style_message(self, logger, caplog):
        adapter = LoggerAdapter(logger)
        with caplog.at_level(logging.INFO, logger=logger.name):
            adapter.info("%s entries", 2)
        assert caplog.records[0].getMessage() == "2 entries"

    def test_disabled_level_is_skipped(self, logger, caplog):
        logger.setLevel(logging.WARNING)
        adapter = LoggerAdapter(logger)
        with caplog.at_level(logging.WARNING, logger=logger.name):
            adapter.debugf("hidden {x}", x=1)
        assert caplog.records == []

    def test_standard_handler_splits_streams(self, logger, capsys):
        handler = StandardHandler()
        handler.setFormatter(EnhancedFormatter("{levelname}: {message}"))
        logger.addHandler(handler)
        adapter = LoggerAdapter(logger)
        adapter.infof("to {where}", where="stdout")
        adapter.warningf("to {where}", where="stderr")
        captured = capsys.readouterr()
        assert captured.out == "INFO: to stdout\n"
        assert captured.err == "WARNING: to stderr\n"

    @pytest.mark.parametrize("style", ["$", "unknown"])
    def test_unsupported_style_leaves_message_as_is(self, logger, style):
        record = logger.makeRecord(
            logger.name, logging.INFO, __file__, 1, "value $x {x}", (), None
        )
        record._style = style
        record.x = 1
        assert EnhancedFormatter("{message}").format(record) == "value $x {x}"


class TestArrayLogging:
    """测试数组的调试日志"""

    def test_load_logs_collapsed_count(self, caplog):
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER_NAME):
            CaseInsensitiveArray({"Foo": 1, "FOO": 2, "bar": 3})
        record = caplog.records[-1]
        assert record.written == 3
        assert record.entries == 2
        assert record.collapsed == 1

    def test_clear_logs_removed_count(self, caplog):
        array = CaseInsensitiveArray({"a": 1})
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER_NAME):
            array.clear()
        assert caplog.records[-1].removed == 1


class TestLogConfig:
    """测试日志配置"""

    def test_defaults(self):
        config = LogConfig()
        assert config.name == PACKAGE_LOGGER_NAME
        assert config.level == "WARNING"
        assert config.output == "std"

    def test_case_insensitive_values(self):
        config = LogConfig(level="debug", output="RICH")
        assert config.level == "DEBUG"
        assert config.output == "rich"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("level", "verbose"),
            ("output", "file"),
            ("text_format", "{asctime"),
            ("text_format", "no fields"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            LogConfig(**{field: value})

    @pytest.mark.parametrize(
        "output, handler_type",
        [("std", StandardHandler), ("stderr", logging.StreamHandler), ("rich", RichHandler)],
    )
    def test_get_handler(self, output, handler_type):
        handler = get_handler(LogConfig(output=output, level="info"))
        assert isinstance(handler, handler_type)
        assert handler.level == logging.INFO
        assert isinstance(handler.formatter, EnhancedFormatter)

    def test_configure_is_idempotent(self):
        config = LogConfig(name="tests.ciarray.config", level="DEBUG")
        configure_logging(config)
        logger = configure_logging(config)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        logger.removeHandler(logger.handlers[0])
