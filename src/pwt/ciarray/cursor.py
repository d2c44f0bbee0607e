"""
数组游标.

提供 rewind/current/key/next/valid 五个操作的有状态遍历协议,
遍历的是链表的实时状态(而非快照).

状态:
- 待定: 指向"当前第 0 个条目", 第一次在非空链表上访问时固定到头部节点;
- 定位: 指向某个条目;
- 耗尽: 指向哨兵.

遍历过程中修改数组的行为是未定义的. 游标不会破坏数组的存储,
若当前条目被删除, 游标会落到删除时紧随其后的条目上.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

from pwt.ciarray.entries import Entry, EntryList
from pwt.ciarray.keys import ArrayKey

V = TypeVar("V")


class ArrayCursor(Generic[V]):
    """
    借用 EntryList 的可重置游标.

    示例:
        >>> cursor = ArrayCursor(entries)
        >>> cursor.rewind()
        >>> while cursor.valid():
        ...     print(cursor.key(), cursor.current())
        ...     cursor.next()
    """

    __slots__ = ("_entries", "_node")

    def __init__(self, entries: EntryList[V]) -> None:
        self._entries = entries
        self._node: Entry[Any] | None = None

    def __iter__(self) -> Iterator[tuple[ArrayKey, V]]:
        """从头遍历, 依次产出 (key, value)."""
        self.rewind()
        while self.valid():
            yield self.key(), self.current()  # type: ignore[misc]
            self.next()

    def _resolve(self) -> Entry[Any]:
        if self._node is None:
            # 待定状态在第一次遇到非空链表时固定到头部节点
            first = self._entries.first
            if first is not self._entries.sentinel:
                self._node = first
            return first
        return self._entries.resolve(self._node)

    def rewind(self) -> None:
        """回到第 0 个条目; 数组为空时即为耗尽状态."""
        self._node = None

    def valid(self) -> bool:
        return self._resolve() is not self._entries.sentinel

    def current(self) -> V | None:
        """当前条目的值; 耗尽时返回 None."""
        node = self._resolve()
        if node is self._entries.sentinel:
            return None
        return node.value

    def key(self) -> ArrayKey | None:
        """当前条目的原始键; 耗尽时返回 None."""
        node = self._resolve()
        if node is self._entries.sentinel:
            return None
        return node.key

    def next(self) -> None:
        """
        前进一个条目; 已耗尽时不做任何事.

        当前条目已被删除时, 落到删除时紧随其后的条目上.
        """
        if self._node is None:
            self._resolve()
        node = self._node
        if node is None or node is self._entries.sentinel:
            self._node = self._entries.sentinel
        elif node.linked:
            self._node = node.next
        else:
            self._node = self._entries.resolve(node)
