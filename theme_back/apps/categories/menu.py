import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from utils.exceptions import CategoryCycleError

logger = logging.getLogger(__name__)


class VisibilityPolicy(str, Enum):
    """헤더 카테고리 메뉴 노출 정책 (테마 설정 menuheadercateg)"""
    SHOW_ALL = "showall"
    EXCLUDE_HIDDEN = "excludehidden"
    DISABLED = "disabled"

    @classmethod
    def from_setting(cls, value):
        """설정값 → 정책. 비어 있거나 알 수 없는 값은 DISABLED"""
        if not value:
            return cls.DISABLED
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"알 수 없는 카테고리 메뉴 정책: {value!r} → disabled")
            return cls.DISABLED


# 트리 스냅샷 노드 (요청마다 새로 만들고 읽기 전용으로 사용)
@dataclass(eq=False)
class CategoryNode:
    id: int
    name: str
    url: str
    visible: bool = True
    parent_id: Optional[int] = None
    children: List["CategoryNode"] = field(default_factory=list)

    @property
    def is_root(self):
        return self.parent_id is None


@dataclass
class MenuItem:
    name: str
    url: str
    submenu: Optional[List["MenuItem"]] = None

    def to_dict(self):
        data = {"name": self.name, "url": self.url}
        if self.submenu:
            data["submenu"] = [item.to_dict() for item in self.submenu]
        return data


def _excluded(category, policy):
    return policy is VisibilityPolicy.EXCLUDE_HIDDEN and not category.visible


def _menu_item(category, policy, visited):
    item = MenuItem(name=category.name, url=category.url)
    if category.children:
        submenu = build_submenu(category, policy, visited)
        # 보이는 자식이 없으면 submenu 자체를 붙이지 않는다
        if submenu:
            item.submenu = submenu
    return item


def build_menu(categories, policy):
    """
    최상위 카테고리 목록으로 헤더 드롭다운 메뉴 트리를 만든다.

    Args:
        categories: 최상위 CategoryNode 시퀀스 (입력 순서 그대로 출력)
        policy: VisibilityPolicy

    Returns:
        list[MenuItem]. DISABLED 이면 빈 리스트

    Raises:
        CategoryCycleError: 부모-자식 관계에 순환이 있는 경우
    """
    if policy is VisibilityPolicy.DISABLED:
        return []

    items = []
    for category in categories:
        if _excluded(category, policy) or not category.is_root:
            continue
        items.append(_menu_item(category, policy, set()))
    return items


def build_submenu(category, policy, visited=None):
    """category 의 직계 자식부터 재귀적으로 하위 메뉴를 만든다."""
    if policy is VisibilityPolicy.DISABLED:
        return []

    # 현재 경로상의 카테고리 id. 다시 만나면 순환이다.
    visited = set() if visited is None else visited
    if category.id in visited:
        raise CategoryCycleError(category.id)

    visited.add(category.id)
    try:
        return [
            _menu_item(child, policy, visited)
            for child in category.children
            if not _excluded(child, policy)
        ]
    finally:
        visited.discard(category.id)
