import logging

from django.urls import reverse

from .menu import CategoryNode, VisibilityPolicy, build_menu
from .models import Category

logger = logging.getLogger(__name__)


# 전체 카테고리를 한 번에 조회해 메모리 트리 스냅샷으로 만드는 함수.
def get_category_tree():
    categories = (
        Category.objects
        .only("id", "name", "visible", "parent_id", "sortorder")
        .order_by("sortorder", "id")
    )

    # 1. 모든 카테고리 노드 생성
    nodes = {}
    for category in categories:
        nodes[category.id] = CategoryNode(
            id=category.id,
            name=category.name,
            url=reverse("category-detail", args=[category.id]),
            visible=category.visible,
            parent_id=category.parent_id,
        )

    # 2. 부모-자식 관계 연결 (정렬 순서 유지)
    roots = []
    for node in nodes.values():
        if node.parent_id is None:
            roots.append(node)
            continue

        parent = nodes.get(node.parent_id)
        if parent is None:
            logger.warning(f"부모 카테고리를 찾을 수 없음: category_id={node.id}, parent_id={node.parent_id}")
            continue
        parent.children.append(node)

    return roots


# 정책에 따라 헤더 카테고리 메뉴를 반환하는 함수.
def get_category_menu(policy):
    if policy is VisibilityPolicy.DISABLED:
        return []
    return build_menu(get_category_tree(), policy)
