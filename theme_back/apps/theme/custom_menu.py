"""
커스텀 메뉴 텍스트 파서

한 줄에 한 항목, 형식: ``텍스트|URL|툴팁|언어``
앞에 붙은 '-' 개수가 깊이. '###' 는 구분선이라 건너뛴다.
언어 목록이 있으면 현재 언어가 포함될 때만 표시한다.
"""
from dataclasses import dataclass, field
from typing import List

from django.utils.html import strip_tags
from django.utils.translation import get_language


@dataclass
class CustomMenuItem:
    text: str
    url: str = ''
    title: str = ''
    children: List["CustomMenuItem"] = field(default_factory=list)


def _language_matches(langs):
    if not langs:
        return True
    current = (get_language() or '').lower()
    wanted = [lang.strip().lower().replace('_', '-') for lang in langs.split(',') if lang.strip()]
    return any(current == lang or current.startswith(lang + '-') for lang in wanted)


def parse_custom_menu(text):
    """최상위 CustomMenuItem 리스트를 반환"""
    roots = []
    # stack[d] = 깊이 d 의 마지막 항목
    stack = []

    for raw_line in (text or '').splitlines():
        line = strip_tags(raw_line).strip()
        if not line:
            continue

        depth = len(line) - len(line.lstrip('-'))
        line = line[depth:].strip()
        if not line or line.startswith('###'):
            continue

        parts = [part.strip() for part in line.split('|')]
        while len(parts) < 4:
            parts.append('')
        item_text, url, title, langs = parts[:4]

        if not _language_matches(langs):
            continue

        item = CustomMenuItem(text=item_text, url=url, title=title or item_text)

        # 부모가 없는 깊이는 가능한 가장 가까운 깊이로 붙인다
        depth = min(depth, len(stack))
        del stack[depth:]
        if depth == 0:
            roots.append(item)
        else:
            stack[depth - 1].children.append(item)
        stack.append(item)

    return roots
