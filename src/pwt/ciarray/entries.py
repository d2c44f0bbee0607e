"""
数组槽位与有序槽位链表.

基于哨兵节点的双向链表保存数组条目, 顺序即键(归一化后)首次写入的顺序.
链表本身不负责按键查找, 查找由 CaseInsensitiveArray 中的 {令牌: 条目} 索引完成,
因此追加/按节点删除均为 O(1).

主要组件:
- Entry: 链表节点, 即一个逻辑槽位(token/key/value)
- EntryList: 有序槽位链表

被移除的节点会保留指向原后继的 next 引用, 使正在遍历的游标可以继续前进.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar

from pwt.ciarray.keys import ArrayKey

V = TypeVar("V")


class Entry(Generic[V]):
    """
    数组中的一个逻辑槽位.

    Attributes:
        token (ArrayKey): 归一化后的查找令牌, 不对外暴露.
        key (ArrayKey): 最近一次写入时使用的原始键, 遍历时返回它.
        value (V): 最近一次写入的值.
        linked (bool): 节点是否仍在链表中.
        prev (Entry[Any]): 前驱节点, 初始化时指向自身.
        next (Entry[Any]): 后继节点, 初始化时指向自身.
    """

    __slots__ = ("token", "key", "value", "linked", "prev", "next")

    def __init__(self, token: ArrayKey, key: ArrayKey, value: V) -> None:
        self.token: ArrayKey = token
        self.key: ArrayKey = key
        self.value: V = value
        self.linked: bool = False
        self.prev: Entry[Any] = self
        self.next: Entry[Any] = self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.key!r}: {self.value!r})"


class EntryList(Generic[V]):
    """
    基于哨兵节点的有序槽位链表.

    只支持尾部追加/按节点移除/正向迭代, 这正是数组语义所需的全部操作:
    新键永远追加在末尾, 覆盖写入不移动位置, 删除后空位自然闭合.
    """

    def __init__(self) -> None:
        self.sentinel: Entry[Any] = Entry(0, 0, None)
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Entry[V]]:
        node = self.sentinel.next
        while node is not self.sentinel:
            yield node
            node = node.next

    def __repr__(self) -> str:
        items = ", ".join(repr(entry) for entry in self)
        return f"{self.__class__.__name__}([{items}])"

    @property
    def first(self) -> Entry[Any]:
        """头部节点; 链表为空时返回哨兵."""
        return self.sentinel.next

    def append(self, entry: Entry[V]) -> Entry[V]:
        """
        在链表尾部插入节点.

        Args:
            entry (Entry[V]): 尚未链接的节点.

        Returns:
            Entry[V]: 插入的节点.

        Raises:
            ValueError: 节点已经在链表中.
        """
        if entry.linked:
            raise ValueError("Entry is already linked")
        tail = self.sentinel.prev
        entry.prev = tail
        entry.next = self.sentinel
        tail.next = entry
        self.sentinel.prev = entry
        entry.linked = True
        self._length += 1
        return entry

    def remove(self, entry: Entry[V]) -> Entry[V]:
        """
        从链表中摘除节点.

        节点的 next 保持不变, 仍指向摘除时的后继.

        Raises:
            ValueError: 试图移除哨兵或未链接的节点.
        """
        if entry is self.sentinel:
            raise ValueError("Cannot remove sentinel entry")
        if not entry.linked:
            raise ValueError("Entry is not linked")
        entry.prev.next = entry.next
        entry.next.prev = entry.prev
        entry.prev = entry
        entry.linked = False
        self._length -= 1
        return entry

    def clear(self) -> None:
        """摘除所有节点, 长度归零."""
        node = self.sentinel.next
        while node is not self.sentinel:
            node.linked = False
            node.prev = node
            node = node.next
        self.sentinel.next = self.sentinel
        self.sentinel.prev = self.sentinel
        self._length = 0

    def resolve(self, entry: Entry[Any]) -> Entry[Any]:
        """
        沿 next 引用跳过已摘除的节点.

        Returns:
            Entry[Any]: 第一个仍在链表中的节点, 或哨兵.
        """
        while entry is not self.sentinel and not entry.linked:
            entry = entry.next
        return entry
