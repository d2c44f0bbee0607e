"""
定义大小写不敏感数组使用的异常体系.

异常层级结构如下:
    - CaseInsensitiveArrayError: 所有异常的统一基类, 支持嵌套链式追踪.
        - InvalidKeyError: 键既不是 int 也不是 str(属于调用方的编程错误).

说明:
    - 读取/删除不存在的键不是错误, 不会抛出任何异常;
    - 只有键类型非法时才快速失败.
"""

from __future__ import annotations

from typing import Any


class CaseInsensitiveArrayError(Exception):
    """
    所有 CaseInsensitiveArray 异常的基类,具备错误链追踪能力.

    参数:
    - `*args`: 异常消息内容;
    - `cause`: 可选的原始异常,用于记录异常链(自动赋值给 `__cause__`).
    """

    def __init__(self, *args: Any, cause: Exception | None = None) -> None:
        super().__init__(*args)
        self.cause: Exception | None = cause
        self.__cause__ = cause


class InvalidKeyError(CaseInsensitiveArrayError, TypeError):
    """
    键类型非法.

    说明:
    - 仅接受 int 与 str 键, bool 虽然是 int 的子类也会被拒绝;
    - 同时继承 TypeError, 便于按内置异常类型捕获;
    - `key` 属性保留调用方传入的原始键.
    """

    def __init__(self, key: Any, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Array keys must be int or str, not {type(key).__name__}: {key!r}",
            cause=cause,
        )
        self.key = key
