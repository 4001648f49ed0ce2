import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.conf import settings
from django.templatetags.static import static
from django.template.defaultfilters import linebreaksbr
from django.template.loader import render_to_string
from django.utils.html import escape, strip_tags
from django.utils.safestring import mark_safe
from django.utils.translation import gettext as _

from apps.categories.menu import VisibilityPolicy
from apps.categories.services import get_category_menu
from apps.courses.navigation import ModuleRef, activity_navigation, next_visible_module
from utils.exceptions import CategoryCycleError

from .config import ThemeConfig
from .custom_menu import parse_custom_menu

logger = logging.getLogger(__name__)

QUIZ_ATTEMPT_BODYID = 'page-mod-quiz-attempt'
FOOTER_COLUMNS = 4
BLOCK_ROWS = 8
EMPTY_BLOCK_ROW = '0-0-0-0'
GRID_COLUMNS = 12
DEFAULT_FONT = 'Verdana'

# 푸터 텍스트가 실제로 비어 있는지 판단할 때 제거하는 패턴
FOOTER_BLANK_PATTERN = re.compile(r'\s|&nbsp;|<p>|</p>')

HOME_PAGE_TYPES = {
    'site': 'site-index',
    'my': 'my-index',
    'mycourses': 'my-index',
}


@dataclass
class PageContext:
    """렌더링 대상 페이지 정보 (뷰에서 명시적으로 전달)"""
    request: Any = None
    layout: str = 'standard'
    pagetype: str = ''
    bodyid: str = ''
    course: Any = None
    module: Optional[ModuleRef] = None
    modules: List[ModuleRef] = field(default_factory=list)
    context_level: str = 'system'
    heading: str = ''
    editing: bool = False

    @property
    def user(self):
        return getattr(self.request, 'user', None)


class ThemeRenderer:
    """
    페이지 영역별 템플릿 데이터/HTML 을 만드는 테마 렌더러
    - 요청마다 PageContext 와 함께 생성
    - 테마 설정은 ThemeConfig 로 한 번만 읽는다
    """

    def __init__(self, page=None, config=None):
        self.page = page or PageContext()
        self._config = config

    @property
    def config(self):
        if self._config is None:
            self._config = ThemeConfig()
        return self._config

    def _render(self, template_name, context):
        return render_to_string(template_name, context, request=self.page.request)

    # ------------------------------------------------------------------
    # 설정
    # ------------------------------------------------------------------

    def get_setting(self, name, fmt=None):
        """
        설정값을 형식에 맞게 반환. 비어 있으면 False.

        fmt:
            None/False    : 원본 문자열
            'format_text' : 이스케이프된 일반 텍스트 (줄바꿈 유지)
            'format_html' : 신뢰된 HTML
            그 외          : 태그를 제거하고 이스케이프한 한 줄 문자열
        """
        if not self.config.is_set(name):
            return False

        value = self.config.get(name)
        if not fmt:
            return value
        if fmt == 'format_text':
            return linebreaksbr(value, autoescape=True)
        if fmt == 'format_html':
            return mark_safe(value)
        return escape(strip_tags(value))

    def show_activity_navigation(self):
        return self.config.is_set('showactivitynavigation')

    def removed_primary_nav_items(self):
        if not self.config.is_set('removedprimarynavitems'):
            return []
        items = self.config.get('removedprimarynavitems').split(',')
        return [item.strip() for item in items if item.strip()]

    def is_carousel_enabled(self):
        return self.config.get('enablecarousel') == '1'

    def googlefont(self):
        if self.config.is_set('googlefont'):
            return self.config.get('googlefont')
        return DEFAULT_FONT

    # ------------------------------------------------------------------
    # 파일 설정 (로고, 파비콘)
    # ------------------------------------------------------------------

    def sitelogo(self):
        return self.config.file_url('sitelogo')

    def navbarpicture(self):
        return self.config.file_url('navbarpicture')

    def favicon(self):
        url = self.config.file_url('favicon')
        if url:
            return url
        return static('theme/favicon.ico')

    # ------------------------------------------------------------------
    # 헤더
    # ------------------------------------------------------------------

    def header_category_menu(self, policy=None):
        """헤더 카테고리 메뉴를 dict 리스트로 반환"""
        policy = policy or self.config.category_menu_policy()
        return [item.to_dict() for item in get_category_menu(policy)]

    def display_header_categories(self):
        policy = self.config.category_menu_policy()
        if policy is VisibilityPolicy.DISABLED:
            return ''

        try:
            items = self.header_category_menu(policy)
        except CategoryCycleError as e:
            logger.error(f"헤더 카테고리 메뉴 생성 실패: {e.message}")
            return ''

        return self._render('theme/header_dropdown.html', {
            'dropdownname': _('카테고리'),
            'dropdownitems': items,
        })

    def context_header(self, heading=None):
        layout = self.page.layout
        if layout in ('incourse', 'course'):
            css_class = 'h2 themecourseheader'
        else:
            css_class = 'h2'

        title_catalog = self.config.get('titlecatalog').strip()
        if layout == 'coursecategory' and self.config.is_set('enablecatalog') and title_catalog:
            # 카탈로그 사용 시 카테고리 목록 제목 대체
            heading = escape(strip_tags(title_catalog))
            css_class = 'h2'
        elif heading is None:
            heading = self.page.heading

        return self._render('theme/context_header.html', {
            'heading': heading,
            'headingclass': css_class,
        })

    def full_header(self):
        page = self.page
        course = page.course
        header = {}

        cover = course.cover_image if course is not None and course.cover_image else None
        if cover:
            header['urlcoverimage'] = cover.url

        if course is not None and (
            page.layout == 'course'
            or (page.layout == 'incourse' and self.config.is_set('displaycoverallpage'))
        ):
            header['coverimagedata'] = {
                'id': course.id,
                'filename': os.path.basename(cover.name) if cover else None,
                'withgradient': self.config.is_set('gradientcovercolor'),
                'coverexist': bool(cover),
                'displayasthumbnail': self.config.is_set('displayasthumbnail') if cover else False,
                'seemenu': bool(getattr(page.user, 'is_staff', False)),
            }

        header['contextheader'] = self.context_header()

        home_page_type = HOME_PAGE_TYPES.get(settings.THEME_HOME_PAGE)
        if page.pagetype and home_page_type and page.pagetype == home_page_type:
            header['welcomemessage'] = self._welcome_message()

        return self._render('theme/full_header.html', header)

    def _welcome_message(self):
        user = self.page.user
        if user is not None and user.is_authenticated:
            name = user.get_short_name() or user.get_username()
            return _('%(name)s 님, 환영합니다!') % {'name': name}
        return _('환영합니다!')

    # ------------------------------------------------------------------
    # 푸터
    # ------------------------------------------------------------------

    def footer_context(self):
        """footertext1..4 / footerheading1..4 설정을 푸터 열 데이터로 변환"""
        columns = []
        for i in range(1, FOOTER_COLUMNS + 1):
            text_key = f'footertext{i}'
            heading_key = f'footerheading{i}'
            if not self.config.is_set(text_key):
                continue
            text = self.config.get(text_key)
            if not FOOTER_BLANK_PATTERN.sub('', text):
                continue

            column = {
                'text': mark_safe(text),
                'classtext': text_key,
                'list': [
                    {'text': item.text, 'url': item.url}
                    for item in parse_custom_menu(text)
                ],
            }
            # 제목은 저장돼 있으면 빈 값이어도 붙인다
            if self.config.has(heading_key):
                column['heading'] = mark_safe(self.config.get(heading_key))
                column['classheading'] = heading_key
            columns.append(column)

        gridcount = GRID_COLUMNS // len(columns) if columns else GRID_COLUMNS
        return {'columns': columns, 'gridcount': gridcount}

    def footer_custom_content(self):
        return self._render('theme/footer_custom_content.html', self.footer_context())

    def render_completion_footer(self):
        """
        활동 화면 하단의 이수 표시와 다음 활동 링크.
        이수 추적 대상 활동 화면이 아니면 빈 문자열.
        """
        page = self.page
        course = page.course
        module = page.module

        if (course is None or not course.enable_completion
                or page.layout == 'admin'
                or page.pagetype == 'course-editsection'
                or page.bodyid == QUIZ_ATTEMPT_BODYID
                or module is None
                or not module.completion):
            return ''

        pagepath = page.pagetype.split('-')
        if pagepath[0] != 'mod':
            return ''
        if len(pagepath) > 2 and pagepath[2] == 'index':
            return ''

        # 기본 이수 표시를 쓰는 설정이면 테마 푸터는 그리지 않는다
        if self.config.is_set('moodleactivitycompletion'):
            return ''

        template = {'module': module}
        nextmod = next_visible_module(page.modules, module.id)
        if nextmod is not None:
            template['nextmodname'] = nextmod.name
            template['nextmodurl'] = nextmod.url

        return self._render('theme/completion_footer.html', template)

    # ------------------------------------------------------------------
    # 강좌 내 활동 이동
    # ------------------------------------------------------------------

    def activity_navigation(self):
        page = self.page
        if (page.layout not in ('incourse', 'frametop')
                or page.context_level != 'module'
                or page.bodyid == QUIZ_ATTEMPT_BODYID
                or page.module is None):
            return ''

        # 링크 전용 활동은 이동 링크를 보이지 않는다
        if page.module.stealth:
            return ''

        navigation = activity_navigation(page.modules, page.module.id)
        if navigation is None:
            return ''

        return self._render('theme/activity_navigation.html', {
            'prevmod': navigation.prev,
            'nextmod': navigation.next,
            'activitylist': navigation.activity_list,
        })

    # ------------------------------------------------------------------
    # 프론트 페이지
    # ------------------------------------------------------------------

    def block_rows(self):
        """
        blockrow1..8 설정을 행/열 데이터로 변환
        '0-0-0-0' 행은 건너뛰고, 저장되지 않은 행은 열 없는 빈 행으로 둔다
        """
        rows = []
        block_count = 0
        for i in range(1, BLOCK_ROWS + 1):
            layout = self.config.get(f'blockrow{i}')
            if layout == EMPTY_BLOCK_ROW:
                continue

            try:
                widths = [int(width) for width in layout.split('-')] if layout else []
            except ValueError:
                logger.warning(f"블록 행 설정 형식 오류: blockrow{i}={layout!r}")
                continue

            columns = []
            for width in widths:
                if width <= 0:
                    continue
                block_count += 1
                # 영역 이름에는 숫자 대신 알파벳 사용
                columns.append({
                    'width': width,
                    'region': f'theme-front-{chr(96 + block_count)}',
                })
            rows.append({'id': f'front-page-row-{len(rows) + 1}', 'columns': columns})
        return rows

    def block_regions(self):
        user = self.page.user
        admin_editing = bool(getattr(user, 'is_superuser', False)) and self.page.editing
        return self._render('theme/block_regions.html', {
            'rows': self.block_rows(),
            'adminediting': admin_editing,
        })

    def carousel_slides(self):
        try:
            count = int(self.config.get('slidenum') or 0)
        except ValueError:
            logger.warning(f"슬라이드 수 설정 형식 오류: {self.config.get('slidenum')!r}")
            return []

        slides = []
        for i in range(1, count + 1):
            image_url = self.config.file_url(f'slideimage{i}')
            if not image_url:
                continue
            slides.append({
                'index': len(slides),
                'image': image_url,
                'caption': self.get_setting(f'slidecaption{i}', 'format_html') or '',
            })
        return slides

    def carousel(self):
        if not self.is_carousel_enabled():
            return ''
        return self._render('theme/carousel.html', {'slides': self.carousel_slides()})

    # ------------------------------------------------------------------
    # 로그인 / 기타
    # ------------------------------------------------------------------

    def login_page_context(self):
        sitename = self.get_setting('sitename', 'format_string') or settings.SITE_NAME
        return {
            'sitename': sitename,
            'hidesitename': self.config.is_set('hidesitename'),
            'logourl': self.sitelogo() or None,
            'logintextboxtop': self.get_setting('logintextboxtop', 'format_html'),
            'logintextboxbottom': self.get_setting('logintextboxbottom', 'format_html'),
            'leftblockloginhtmlcontent': self.get_setting('leftblockloginhtmlcontent', 'format_html'),
            'rightblockloginhtmlcontent': self.get_setting('rightblockloginhtmlcontent', 'format_html'),
        }

    def render_custom_pix(self, pixstring):
        return self._render('theme/pix.html', {'pixstring': pixstring})

    def render_contactus(self):
        return self._render('theme/contactus.html', {'contactemail': self.config.get('contactemail')})
