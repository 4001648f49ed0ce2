from dataclasses import dataclass, field
from typing import List, Optional

from django.utils.translation import gettext as _


@dataclass(frozen=True)
class ModuleRef:
    """현재 사용자 기준 활동 스냅샷"""
    id: int
    name: str
    url: str = ''
    modname: str = 'page'
    visible: bool = True
    user_visible: bool = True
    stealth: bool = False
    completion: bool = False


@dataclass
class ActivityNavigation:
    prev: Optional[ModuleRef] = None
    next: Optional[ModuleRef] = None
    activity_list: List[dict] = field(default_factory=list)


def module_ref(module, user):
    return ModuleRef(
        id=module.id,
        name=module.name,
        url=module.get_absolute_url(),
        modname=module.modname,
        visible=module.visible,
        user_visible=module.visible or bool(getattr(user, 'is_staff', False)),
        stealth=module.stealth,
        completion=module.completion,
    )


def get_course_modules(course, user):
    """강좌 활동을 표시 순서대로 ModuleRef 리스트로 반환"""
    return [module_ref(module, user) for module in course.modules.order_by('position', 'id')]


def next_visible_module(modules, current_id):
    """current_id 다음에 오는 첫 번째 사용자 표시 활동"""
    found = False
    for module in modules:
        if not found:
            if module.id == current_id:
                found = True
            continue
        if module.user_visible:
            return module
    return None


def _with_forceview(url):
    separator = '&' if '?' in url else '?'
    return f"{url}{separator}forceview=1"


def activity_navigation(modules, current_id):
    """
    이전/다음 활동과 활동 바로가기 목록

    사용자에게 보이고, 링크 전용(stealth)이 아니고, URL 이 있는 활동만 대상.
    대상이 하나뿐이거나 현재 활동이 대상에 없으면 None.
    """
    mods = []
    activity_list = []
    for module in modules:
        if not module.user_visible or module.stealth or not module.url:
            continue
        mods.append(module)

        # 현재 활동은 바로가기 목록에서 제외
        if module.id == current_id:
            continue
        name = module.name
        if not module.visible:
            name = f"{name} {_('(숨김)')}"
        activity_list.append({'url': _with_forceview(module.url), 'name': name})

    if len(mods) <= 1:
        return None

    ids = [module.id for module in mods]
    if current_id not in ids:
        return None
    position = ids.index(current_id)

    return ActivityNavigation(
        prev=mods[position - 1] if position > 0 else None,
        next=mods[position + 1] if position < len(mods) - 1 else None,
        activity_list=activity_list,
    )
