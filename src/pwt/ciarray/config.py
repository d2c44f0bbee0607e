from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, BeforeValidator
from rich.logging import RichHandler

from pwt.ciarray.log import PACKAGE_LOGGER_NAME, EnhancedFormatter, StandardHandler

OUTPUT_DEFAULT = "std"
OUTPUT_TYPE = Literal["std", "stdout", "stderr", "rich"]

TEXT_FORMAT_DEFAULT = "{asctime} {levelname} {name}: {message}"
DATE_FORMAT_DEFAULT = "%Y-%m-%d %H:%M:%S"

LEVEL_DEFAULT = "WARNING"
LEVEL_TYPE = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def _lower(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


def _upper(value: object) -> object:
    return value.upper() if isinstance(value, str) else value


def _check_text_format(value: str) -> str:
    logging.StrFormatStyle(value).validate()
    return value


def _check_date_format(value: str | None) -> str | None:
    if value is not None:
        datetime.now().strftime(value)
    return value


class LogConfig(BaseModel):
    """
    pwt.ciarray 包日志配置.

    字段:
        name: 日志记录器名称, 默认为包名.
        level: 日志级别, 大小写不敏感.
        output: std(按级别分流到 stdout/stderr)/stdout/stderr/rich.
        text_format: `{}` 风格的记录模板.
        date_format: 时间格式, 为 None 时使用 logging 默认格式.
        propagate: 是否向上级记录器传播.
    """

    name: str = PACKAGE_LOGGER_NAME
    level: Annotated[LEVEL_TYPE, BeforeValidator(_upper)] = LEVEL_DEFAULT
    output: Annotated[OUTPUT_TYPE, BeforeValidator(_lower)] = OUTPUT_DEFAULT
    text_format: Annotated[str, AfterValidator(_check_text_format)] = (
        TEXT_FORMAT_DEFAULT
    )
    date_format: Annotated[str | None, AfterValidator(_check_date_format)] = (
        DATE_FORMAT_DEFAULT
    )
    propagate: bool = False


def get_handler(config: LogConfig) -> logging.Handler:
    """
    根据日志配置创建日志处理器.

    参数:
        config (LogConfig): 日志配置.

    返回:
        logging.Handler: 已设置格式化器与级别的处理器.
    """
    if config.output == "rich":
        handler: logging.Handler = RichHandler(
            show_path=False,
            markup=False,
            rich_tracebacks=False,
            log_time_format=config.date_format or DATE_FORMAT_DEFAULT,
        )
        formatter = EnhancedFormatter("{message}", style="{")
    else:
        if config.output == "stdout":
            handler = logging.StreamHandler(sys.stdout)
        elif config.output == "stderr":
            handler = logging.StreamHandler(sys.stderr)
        else:
            handler = StandardHandler()
        formatter = EnhancedFormatter(
            config.text_format, config.date_format, style="{"
        )
    handler.setFormatter(formatter)
    handler.setLevel(config.level)
    return handler


def configure_logging(config: LogConfig | None = None) -> logging.Logger:
    """
    按配置设置日志记录器, 重复调用时替换之前安装的处理器.

    返回:
        logging.Logger: 配置好的日志记录器.
    """
    config = config or LogConfig()
    logger = logging.getLogger(config.name)
    logger.setLevel(config.level)
    logger.propagate = config.propagate

    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logger.addHandler(get_handler(config))
    return logger
