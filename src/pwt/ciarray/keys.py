"""
数组键的校验与归一化.

规则:
- int 键: 归一化结果为其本身.
- 形如 "0"/"42"/"-7" 的十进制字符串(无前导零, 可选负号, 位于 64 位有符号整数范围内):
  归一化为对应的 int, 与整数键指向同一个槽位.
- 其他字符串: 仅把 ASCII 大写字母 A-Z 转为小写, 其余字符原样保留.
- 其他类型(包括 bool): 抛出 InvalidKeyError.

示例:
    >>> normalize_key("X-Frame-Options")
    'x-frame-options'
    >>> normalize_key("42")
    42
    >>> normalize_key("042")
    '042'
"""

from __future__ import annotations

import re
import string
from typing import Any, Union

from pwt.ciarray.errors import InvalidKeyError

ArrayKey = Union[int, str]

INT_KEY_MIN = -(2**63)
INT_KEY_MAX = 2**63 - 1

_INTEGER_KEY_PATTERN = re.compile(r"0|-?[1-9][0-9]*")
_ASCII_LOWER_TABLE = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """
    按字节语义对 7 位 ASCII 字母做小写转换.

    与 str.lower()/str.casefold() 不同, 非 ASCII 字符(如 "Ä"/"İ")保持不变.
    """
    return text.translate(_ASCII_LOWER_TABLE)


def check_key(key: Any) -> ArrayKey:
    """
    校验键类型并原样返回.

    Raises:
        InvalidKeyError: 键不是 int/str, 或者是 bool.
    """
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise InvalidKeyError(key)
    return key


def _parse_integer_key(key: str) -> int | None:
    # "-9223372036854775808" 是最长的合法整数键
    if len(key) > 20 or not _INTEGER_KEY_PATTERN.fullmatch(key):
        return None
    value = int(key)
    if value < INT_KEY_MIN or value > INT_KEY_MAX:
        return None
    return value


def is_integer_key(key: Any) -> bool:
    """判断键归一化后是否为整数."""
    key = check_key(key)
    if isinstance(key, int):
        return True
    return _parse_integer_key(key) is not None


def normalize_key(key: Any) -> ArrayKey:
    """
    计算键的查找令牌.

    Args:
        key: int 或 str 键.

    Returns:
        整数令牌或 ASCII 小写化后的字符串令牌.

    Raises:
        InvalidKeyError: 键类型非法.
    """
    key = check_key(key)
    if isinstance(key, int):
        return key
    integer = _parse_integer_key(key)
    if integer is not None:
        return integer
    return ascii_lower(key)
