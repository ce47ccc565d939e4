"""
ContextStore：单个会话内的上下文集合，保持插入顺序。

所有修改（add / remove / toggle）都是同步的本地操作，不存在被观察到一半的中间态。
"""
from __future__ import annotations

from loguru import logger

from resumefit.errors import ContextItemNotFound
from .schemas import ContextItem, ContextType


class ContextStore:
    """会话级上下文存储。条目按添加顺序保存，active() 也按此顺序返回。"""

    def __init__(self) -> None:
        self._items: list[ContextItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return any(i.id == item_id for i in self._items)

    def add(
        self,
        content: str,
        type: ContextType | str = ContextType.NOTE,
        title: str | None = None,
        is_active: bool = True,
    ) -> ContextItem:
        """新增一条上下文；标题为空时用类型名（如 Hobby）。content 为空抛 ValueError。"""
        ctype = ContextType(type)
        item = ContextItem(
            type=ctype,
            title=(title or "").strip() or ctype.default_title,
            content=content,
            is_active=is_active,
        )
        return self.add_item(item)

    def add_item(self, item: ContextItem) -> ContextItem:
        """插入一个已构造好的条目（如文件上传得到的简历）。"""
        if item.id in self:
            raise ValueError(f"duplicate context item id: {item.id}")
        self._items.append(item)
        logger.debug("context added: {} ({}, active={})", item.id, item.type.value, item.is_active)
        return item

    def get(self, item_id: str) -> ContextItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise ContextItemNotFound(item_id)

    def remove(self, item_id: str) -> bool:
        """删除条目；不存在时不报错，返回是否真的删除了。已有快照不受影响。"""
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        removed = len(self._items) != before
        if removed:
            logger.debug("context removed: {}", item_id)
        return removed

    def toggle(self, item_id: str) -> ContextItem:
        """翻转单条的 is_active，原位置替换为新副本。不存在抛 ContextItemNotFound。"""
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                updated = item.model_copy(update={"is_active": not item.is_active})
                self._items[idx] = updated
                logger.debug("context toggled: {} -> active={}", item_id, updated.is_active)
                return updated
        raise ContextItemNotFound(item_id)

    def items(self) -> list[ContextItem]:
        return list(self._items)

    def active(self) -> list[ContextItem]:
        """当前启用的条目，按插入顺序。"""
        return [i for i in self._items if i.is_active]

    def snapshot(self) -> tuple[ContextItem, ...]:
        """当前启用集合的深拷贝，与存储中的对象互不引用。"""
        return tuple(i.model_copy(deep=True) for i in self.active())
