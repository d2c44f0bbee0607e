from __future__ import annotations

import logging
import sys
from typing import Any, Literal

PACKAGE_LOGGER_NAME = "pwt.ciarray"


def get_logger_adapter(name: str | None = None, **extra: Any) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), **extra)


class StandardHandler(logging.Handler):
    """
    标准日志处理器, WARNING 以下输出到 stdout, 其余输出到 stderr.
    """

    def __init__(self) -> None:
        super().__init__()
        self.stdout = sys.stdout
        self.stderr = sys.stderr

    def flush(self) -> None:
        with self.lock:  # type: ignore
            self.stdout.flush()
            self.stderr.flush()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stdout if record.levelno < logging.WARNING else self.stderr
            stream.write(msg + "\n")
            stream.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        cls = type(self).__name__
        return f"<{cls} <stdout> <stderr> ({level})>"


class EnhancedFormatter(logging.Formatter):
    """
    支持按记录上的 `_style` 字段渲染消息的格式化器.

    LoggerAdapter 的 `logf` 系列会把关键字参数放进记录,
    这里用 `str.format` 把它们填入消息模板.
    """

    def __init__(
        self,
        textfmt: str | None = None,
        datefmt: str | None = None,
        style: Literal["%", "{", "$"] = "{",
        validate: bool = True,
    ) -> None:
        super().__init__(textfmt, datefmt, style, validate)

    def format(self, record: logging.LogRecord) -> str:
        record.message = self.getMessage(record)
        record.asctime = self.formatTime(record, self.datefmt)
        text = self.formatMessage(record)
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            text = f"{text}\n{record.exc_text}"
        return text

    def getMessage(self, record: logging.LogRecord) -> str:
        msg = str(record.msg)
        args = record.args or ()
        kwargs = vars(record)
        style = getattr(record, "_style", "%")

        try:
            if style == "%":
                return record.getMessage()
            elif style == "{":
                return msg.format(*args, **kwargs)
            return msg
        except Exception:
            return msg


class LoggerAdapter:
    """
    日志适配器, 封装标准库 `logging.Logger`

    提供两种日志格式化风格:
    - `log`: `%` 占位符格式(默认 logging 行为)
    - `logf`: `{}` 格式化(`str.format` 风格), 关键字参数即模板字段

    通过构造函数传入的 `extra` 字段会自动合并到每条日志记录的 `extra` 中,
    并在 `extra` 中注入 `_style` 字段, 供 EnhancedFormatter 使用.
    """

    def __init__(self, logger: logging.Logger, **extra: Any) -> None:
        self.logger = logger
        self.extra = extra

    def process(
        self,
        level: int,
        msg: str,
        style: Literal["%", "{"],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> tuple[int, str, tuple[Any, ...], dict[str, Any]]:
        """
        预处理日志调用参数, 统一合并并调整 `extra` 字段.

        - `%` 风格: 直接在现有 `extra` 基础上合并适配器实例的 `extra`.
        - `{` 风格: 把原本的 `kwargs` 作为 `extra` 嵌入, `exc_info` 等保留参数除外.
        """
        if style != "%":
            reserved = {
                k: kwargs.pop(k)
                for k in ("exc_info", "stack_info", "stacklevel")
                if k in kwargs
            }
            extra = kwargs.pop("extra", {})
            kwargs = {**reserved, "extra": {**extra, **kwargs}}
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {}), "_style": style}
        return level, msg, args, kwargs

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        level, msg, args, kwargs = self.process(level, msg, "%", args, kwargs)
        self.logger.log(level, msg, *args, **kwargs)

    def debugf(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logf(logging.DEBUG, msg, *args, **kwargs)

    def infof(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logf(logging.INFO, msg, *args, **kwargs)

    def warningf(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logf(logging.WARNING, msg, *args, **kwargs)

    def errorf(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logf(logging.ERROR, msg, *args, **kwargs)

    def logf(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        level, msg, args, kwargs = self.process(level, msg, "{", args, kwargs)
        self.logger.log(level, msg, *args, **kwargs)
