"""
提供一个大小写不敏感的有序数组(关联数组)实现.

设计目标:
- 行为与按插入顺序保存的原生关联数组一致: int/str 混合键, 追加时自动分配递增整数键,
  删除/计数/保序遍历.
- 字符串键仅按 ASCII 规则大小写折叠, 适合 `X-Frame-Options` 这类头部名称.
- 整数键与其十进制字符串形式("42")指向同一个槽位.
- 覆盖写入同一逻辑键时, 值与展示用的原始键都以最后一次写入为准, 但位置保持首次写入时的位置.
- 读取/删除不存在的键不是错误: `arr[key]` 与 `get()` 返回 None, `del` 静默忽略.

主要组件:
- CaseInsensitiveArray: 大小写不敏感的有序数组

示例:
    >>> arr = CaseInsensitiveArray({"Foo": "Foo", "FOO": "FooBar", "foo": "Bar"})
    >>> len(arr)
    1
    >>> list(arr.items())
    [('foo', 'Bar')]
    >>> arr.append("Zero")
    0
    >>> arr["missing"] is None
    True
"""

from __future__ import annotations

from collections.abc import ItemsView, Mapping, MutableMapping
from reprlib import recursive_repr
from typing import Any, Generic, Iterable, Iterator, TypeVar

from pwt.ciarray.cursor import ArrayCursor
from pwt.ciarray.entries import Entry, EntryList
from pwt.ciarray.errors import InvalidKeyError
from pwt.ciarray.keys import ArrayKey, normalize_key
from pwt.ciarray.log import get_logger_adapter

V = TypeVar("V")

_logger = get_logger_adapter(__name__)
_MISSING: Any = object()


class _ArrayItemsView(ItemsView):
    # 缺失的键读作 None, 成员判断不能依赖 __getitem__ 抛出 KeyError
    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        key, value = item
        if key not in self._mapping:
            return False
        v = self._mapping[key]
        return v is value or v == value


class CaseInsensitiveArray(MutableMapping[ArrayKey, V], Generic[V]):
    """
    对字符串键大小写不敏感的有序数组.

    内部结构:
    - self._index:   {令牌: 条目}, 令牌由 normalize_key 计算.
    - self._entries: 条目链表, 顺序为令牌首次写入的顺序.
    - self._next_free_index: 下一次 append 使用的整数键, 只增不减.
    - self._cursor:  内置游标, 供 rewind/current/key/next/valid 使用.

    查找与更新逻辑:
    - 写入: 令牌已存在则原地更新值与原始键; 否则在链表尾部追加新条目.
    - 取值: 通过令牌在 _index 找到条目; 不存在时返回 None(或指定的默认值).
    - 删除: 同步从 _index 与 _entries 删除; 键不存在时什么也不做.
    - 遍历: 使用新的游标按链表顺序产出原始键.

    遍历过程中修改数组的行为是未定义的, 但不会破坏内部存储.
    该类型不是线程安全的, 并发修改需要调用方自行加锁.
    """

    def __init__(
        self, source: Mapping[Any, V] | Iterable[tuple[Any, V]] | None = None
    ) -> None:
        self._index: dict[ArrayKey, Entry[V]] = {}
        self._entries: EntryList[V] = EntryList()
        self._next_free_index = 0
        self._cursor: ArrayCursor[V] = ArrayCursor(self._entries)
        if source is not None:
            self._load(source)

    def _load(self, source: Mapping[Any, V] | Iterable[tuple[Any, V]]) -> None:
        pairs = source.items() if isinstance(source, Mapping) else source
        written = 0
        for key, value in pairs:
            self.set(key, value)
            written += 1
        _logger.debugf(
            "Loaded {written} pairs into {entries} entries ({collapsed} collapsed)",
            written=written,
            entries=len(self._entries),
            collapsed=written - len(self._entries),
        )

    @classmethod
    def fromkeys(
        cls, keys: Iterable[Any], value: Any = None
    ) -> CaseInsensitiveArray[Any]:
        return cls((key, value) for key in keys)

    # ===========================================================================

    def set(self, key: ArrayKey, value: V) -> None:
        """
        写入一个键值对.

        Args:
            key (ArrayKey): int 或 str 键.
            value (V): 任意值.

        Raises:
            InvalidKeyError: 键类型非法.
        """
        token = normalize_key(key)
        entry = self._index.get(token)
        if entry is None:
            self._index[token] = self._entries.append(Entry(token, key, value))
        else:
            entry.key = key
            entry.value = value
        if isinstance(token, int) and token >= self._next_free_index:
            self._next_free_index = token + 1

    def append(self, value: V) -> int:
        """
        以 next_free_index 作为键追加值.

        Returns:
            int: 本次分配的整数键.
        """
        key = self._next_free_index
        self.set(key, value)
        return key

    def get(self, key: ArrayKey, default: Any = None) -> V | Any:
        """读取键对应的值, 不存在时返回 default."""
        entry = self._index.get(normalize_key(key))
        if entry is None:
            return default
        return entry.value

    def has(self, key: ArrayKey) -> bool:
        """
        判断键是否存在.

        Raises:
            InvalidKeyError: 键类型非法.
        """
        return normalize_key(key) in self._index

    def delete(self, key: ArrayKey) -> None:
        """删除键; 不存在时什么也不做, 不影响 next_free_index."""
        entry = self._index.pop(normalize_key(key), None)
        if entry is not None:
            self._entries.remove(entry)

    def size(self) -> int:
        return len(self._entries)

    @property
    def next_free_index(self) -> int:
        return self._next_free_index

    # ===========================================================================

    def __setitem__(self, key: ArrayKey, value: V) -> None:
        self.set(key, value)

    def __getitem__(self, key: ArrayKey) -> V | None:  # type: ignore[override]
        return self.get(key)

    def __delitem__(self, key: ArrayKey) -> None:
        self.delete(key)

    def __iter__(self) -> Iterator[ArrayKey]:
        for key, _ in ArrayCursor(self._entries):
            yield key

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        try:
            return self.has(key)
        except InvalidKeyError:
            return False

    def items(self) -> ItemsView[ArrayKey, V]:
        return _ArrayItemsView(self)

    @recursive_repr()
    def __repr__(self) -> str:
        inner = ", ".join(f"{e.key!r}: {e.value!r}" for e in self._entries)
        return f"{self.__class__.__name__}({{{inner}}})"

    # ===========================================================================

    def pop(self, key: ArrayKey, default: Any = _MISSING) -> V | Any:
        """
        删除键并返回其值.

        Raises:
            KeyError: 键不存在且未提供 default.
        """
        entry = self._index.pop(normalize_key(key), None)
        if entry is None:
            if default is _MISSING:
                raise KeyError(key)
            return default
        self._entries.remove(entry)
        return entry.value

    def popitem(self) -> tuple[ArrayKey, V]:
        """删除并返回最后一个条目(后进先出)."""
        if not self._entries:
            raise KeyError("popitem(): array is empty")
        entry = self._entries.sentinel.prev
        del self._index[entry.token]
        self._entries.remove(entry)
        return entry.key, entry.value

    def setdefault(self, key: ArrayKey, default: Any = None) -> V | Any:
        entry = self._index.get(normalize_key(key))
        if entry is not None:
            return entry.value
        self.set(key, default)
        return default

    def clear(self) -> None:
        """删除全部条目; next_free_index 保持不变."""
        removed = len(self._entries)
        self._index.clear()
        self._entries.clear()
        _logger.debugf("Cleared {removed} entries", removed=removed)

    def copy(self) -> CaseInsensitiveArray[V]:
        """浅拷贝, 保留条目顺序/原始键与 next_free_index."""
        other: CaseInsensitiveArray[V] = self.__class__()
        for entry in self._entries:
            other.set(entry.key, entry.value)
        other._next_free_index = self._next_free_index
        return other

    def inspect(self) -> dict[ArrayKey, V]:
        """
        调试视图: 按顺序返回 {原始键: 值}, 不包含归一化令牌.

        只读投影, 不改变数组状态(包括内置游标).
        """
        return {entry.key: entry.value for entry in self._entries}

    to_dict = inspect

    # ===========================================================================

    def cursor(self) -> ArrayCursor[V]:
        """返回一个新的独立游标."""
        return ArrayCursor(self._entries)

    def rewind(self) -> None:
        self._cursor.rewind()

    def valid(self) -> bool:
        return self._cursor.valid()

    def current(self) -> V | None:
        """内置游标所在条目的值; 耗尽时返回 None."""
        return self._cursor.current()

    def key(self) -> ArrayKey | None:
        """内置游标所在条目的原始键; 耗尽时返回 None."""
        return self._cursor.key()

    def next(self) -> None:
        self._cursor.next()
