from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.template import Context, Template
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from django.utils import translation
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APITestCase, APIClient

from apps.categories.models import Category
from apps.courses.models import Course
from utils.exception_handlers import custom_exception_handler
from utils.exceptions import CategoryCycleError

from .config import ThemeConfig
from .custom_menu import parse_custom_menu
from .models import ThemeSetting
from .renderer import PageContext, ThemeRenderer

User = get_user_model()


def make_renderer(values=None, request=None, **page_kwargs):
    page = PageContext(request=request, **page_kwargs)
    return ThemeRenderer(page, ThemeConfig(values=values or {}))


def anonymous_request(path='/'):
    request = RequestFactory().get(path)
    request.user = AnonymousUser()
    return request


class ThemeConfigTest(SimpleTestCase):
    """테마 설정 핸들 테스트"""

    def test_empty_values(self):
        config = ThemeConfig(values={'a': '', 'b': '0', 'c': '1'})
        self.assertFalse(config.is_set('a'))
        self.assertFalse(config.is_set('b'))
        self.assertTrue(config.is_set('c'))
        self.assertFalse(config.is_set('missing'))

    def test_file_url(self):
        config = ThemeConfig(values={'sitelogo': 'logo/site.png'})
        self.assertEqual(config.file_url('sitelogo'), '/media/logo/site.png')
        self.assertEqual(config.file_url('favicon'), '')

    def test_category_menu_policy(self):
        self.assertEqual(ThemeConfig(values={}).category_menu_policy().value, 'disabled')
        config = ThemeConfig(values={'menuheadercateg': 'excludehidden'})
        self.assertEqual(config.category_menu_policy().value, 'excludehidden')


class ThemeSettingModelTest(TestCase):
    """ThemeSetting 저장/조회 테스트"""

    def test_set_value_converts(self):
        ThemeSetting.set_value('enablecarousel', True)
        ThemeSetting.set_value('hidesitename', False)
        ThemeSetting.set_value('slidenum', 3)
        ThemeSetting.set_value('footertext1', None)

        self.assertEqual(ThemeSetting.as_dict(), {
            'enablecarousel': '1',
            'hidesitename': '0',
            'slidenum': '3',
            'footertext1': '',
        })

    def test_set_value_updates(self):
        ThemeSetting.set_value('googlefont', 'Roboto')
        ThemeSetting.set_value('googlefont', 'Nanum Gothic')
        self.assertEqual(ThemeSetting.objects.count(), 1)
        self.assertEqual(ThemeSetting.get_value('googlefont'), 'Nanum Gothic')
        self.assertIsNone(ThemeSetting.get_value('missing'))

    def test_set_values(self):
        user = User.objects.create_superuser('admin', 'admin@example.com', 'pass1234')
        ThemeSetting.set_values({'blockrow1': '6-6-0-0', 'enablecatalog': True}, user=user)

        self.assertEqual(ThemeSetting.get_value('enablecatalog'), '1')
        self.assertEqual(ThemeSetting.objects.filter(updated_by=user).count(), 2)

    def test_str_preview(self):
        setting = ThemeSetting.set_value('footertext1', '가' * 40)
        self.assertEqual(str(setting), f"footertext1={'가' * 30}...")


class SettingFormatTest(SimpleTestCase):
    """설정값 조회/형식 테스트"""

    def test_unset_is_false(self):
        renderer = make_renderer({'footertext1': '0'})
        self.assertIs(renderer.get_setting('footertext1'), False)
        self.assertIs(renderer.get_setting('missing', 'format_html'), False)

    def test_formats(self):
        renderer = make_renderer({'logintextboxtop': 'a<b>\nc'})
        self.assertEqual(renderer.get_setting('logintextboxtop'), 'a<b>\nc')
        self.assertEqual(renderer.get_setting('logintextboxtop', 'format_text'), 'a&lt;b&gt;<br>c')
        self.assertEqual(renderer.get_setting('logintextboxtop', 'format_html'), 'a<b>\nc')
        self.assertEqual(renderer.get_setting('logintextboxtop', 'format_string'), 'a\nc')

    def test_removed_primary_nav_items(self):
        renderer = make_renderer({'removedprimarynavitems': ' home, courses ,,'})
        self.assertEqual(renderer.removed_primary_nav_items(), ['home', 'courses'])
        self.assertEqual(make_renderer().removed_primary_nav_items(), [])

    def test_flags(self):
        renderer = make_renderer({'enablecarousel': '1', 'showactivitynavigation': '1'})
        self.assertTrue(renderer.is_carousel_enabled())
        self.assertTrue(renderer.show_activity_navigation())
        self.assertFalse(make_renderer({'enablecarousel': 'yes'}).is_carousel_enabled())
        self.assertFalse(make_renderer().show_activity_navigation())

    def test_googlefont(self):
        self.assertEqual(make_renderer().googlefont(), 'Verdana')
        self.assertEqual(make_renderer({'googlefont': 'Roboto'}).googlefont(), 'Roboto')

    def test_favicon(self):
        self.assertEqual(make_renderer().favicon(), '/static/theme/favicon.ico')
        self.assertEqual(make_renderer({'favicon': 'icons/fav.ico'}).favicon(), '/media/icons/fav.ico')


class FooterTest(SimpleTestCase):
    """푸터 사용자 정의 영역 테스트"""

    def test_no_columns(self):
        context = make_renderer().footer_context()
        self.assertEqual(context, {'columns': [], 'gridcount': 12})
        self.assertEqual(make_renderer().footer_custom_content().strip(), '')

    def test_blank_columns_skipped(self):
        renderer = make_renderer({
            'footertext1': '<p>&nbsp;</p>',
            'footertext2': '0',
            'footertext3': '문의: 02-123-4567',
        })
        context = renderer.footer_context()
        self.assertEqual(len(context['columns']), 1)
        self.assertEqual(context['gridcount'], 12)
        self.assertEqual(context['columns'][0]['classtext'], 'footertext3')

    def test_two_columns(self):
        renderer = make_renderer({
            'footertext1': '홈|/\n강좌|/courses/',
            'footerheading1': '바로가기',
            'footertext2': '문의하기',
        })
        context = renderer.footer_context()

        self.assertEqual(context['gridcount'], 6)
        first, second = context['columns']
        self.assertEqual(first['heading'], '바로가기')
        self.assertEqual(first['classheading'], 'footerheading1')
        self.assertEqual(first['list'], [{'text': '홈', 'url': '/'}, {'text': '강좌', 'url': '/courses/'}])
        self.assertNotIn('heading', second)

        html = renderer.footer_custom_content()
        self.assertEqual(html.count('col-md-6'), 2)
        self.assertIn('<a href="/courses/">강좌</a>', html)

    def test_saved_empty_heading_attached(self):
        """저장된 제목은 빈 값이어도 열에 붙는다"""
        renderer = make_renderer({'footertext1': '안내', 'footerheading1': ''})
        column = renderer.footer_context()['columns'][0]

        self.assertEqual(column['heading'], '')
        self.assertEqual(column['classheading'], 'footerheading1')


class CustomMenuTest(SimpleTestCase):
    """커스텀 메뉴 텍스트 파서 테스트"""

    def test_nesting(self):
        items = parse_custom_menu('강좌|/courses/\n-수학|/courses/math/\n--대수|/courses/algebra/\n공지|/news/|새 소식')

        self.assertEqual([item.text for item in items], ['강좌', '공지'])
        self.assertEqual(items[0].children[0].text, '수학')
        self.assertEqual(items[0].children[0].children[0].url, '/courses/algebra/')
        self.assertEqual(items[1].title, '새 소식')
        self.assertEqual(items[0].title, '강좌')

    def test_divider_and_tags(self):
        items = parse_custom_menu('<p>홈|/</p>\n-###\n\n-자료실|/files/')
        self.assertEqual(len(items), 1)
        self.assertEqual([child.text for child in items[0].children], ['자료실'])

    def test_orphan_depth_is_clamped(self):
        items = parse_custom_menu('---깊은 항목|/deep/')
        self.assertEqual([item.text for item in items], ['깊은 항목'])

    def test_language_filter(self):
        text = 'English|/en/||en\n한국어|/ko/||ko\n공통|/all/'
        with translation.override('en'):
            self.assertEqual([item.text for item in parse_custom_menu(text)], ['English', '공통'])
        with translation.override('ko-kr'):
            self.assertEqual([item.text for item in parse_custom_menu(text)], ['한국어', '공통'])

    def test_empty(self):
        self.assertEqual(parse_custom_menu(''), [])
        self.assertEqual(parse_custom_menu(None), [])


class FrontPageBlockTest(TestCase):
    """프론트 페이지 블록 행/영역 테스트"""

    def block_values(self, **rows):
        """지정하지 않은 행은 '0-0-0-0' (비활성)"""
        values = {f'blockrow{i}': '0-0-0-0' for i in range(1, 9)}
        values.update(rows)
        return values

    def test_block_rows(self):
        renderer = make_renderer(self.block_values(blockrow1='6-6-0-0', blockrow3='4-4-4-0'))
        rows = renderer.block_rows()

        self.assertEqual([row['id'] for row in rows], ['front-page-row-1', 'front-page-row-2'])
        regions = [column['region'] for row in rows for column in row['columns']]
        self.assertEqual(regions, [f'theme-front-{letter}' for letter in 'abcde'])
        self.assertEqual([column['width'] for column in rows[0]['columns']], [6, 6])

    def test_unsaved_rows_are_empty(self):
        """저장되지 않은 행은 열 없는 빈 행으로 남는다"""
        rows = make_renderer({'blockrow2': '12-0-0-0', 'blockrow5': '0-0-0-0'}).block_rows()

        self.assertEqual(len(rows), 7)
        self.assertEqual(rows[0], {'id': 'front-page-row-1', 'columns': []})
        self.assertEqual(rows[1]['columns'], [{'width': 12, 'region': 'theme-front-a'}])
        self.assertTrue(all(row['columns'] == [] for row in rows[2:]))

        html = make_renderer().block_regions()
        self.assertIn('id="front-page-row-8"', html)
        self.assertNotIn('block-region-front', html)

    def test_malformed_row_skipped(self):
        renderer = make_renderer(self.block_values(blockrow1='wide', blockrow2='12-0-0-0'))
        with self.assertLogs('apps.theme.renderer', level='WARNING'):
            rows = renderer.block_rows()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['columns'], [{'width': 12, 'region': 'theme-front-a'}])

    def test_block_regions_editing(self):
        admin = User.objects.create_superuser('admin', 'admin@example.com', 'pass1234')
        request = RequestFactory().get('/')
        request.user = admin

        html = make_renderer({'blockrow1': '6-6-0-0'}, request=request, editing=True).block_regions()
        self.assertIn('block-region-editing', html)
        self.assertIn('id="theme-front-b"', html)

        html = make_renderer({'blockrow1': '6-6-0-0'}, request=request, editing=False).block_regions()
        self.assertNotIn('block-region-editing', html)

    def test_block_regions_not_editing_for_staff(self):
        staff = User.objects.create_user('staff', password='pass1234', is_staff=True)
        request = RequestFactory().get('/')
        request.user = staff
        html = make_renderer({'blockrow1': '12-0-0-0'}, request=request, editing=True).block_regions()
        self.assertNotIn('block-region-editing', html)


class CarouselTest(SimpleTestCase):
    """캐러셀 테스트"""

    def test_slides(self):
        renderer = make_renderer({
            'enablecarousel': '1',
            'slidenum': '3',
            'slideimage1': 'slides/one.jpg',
            'slidecaption1': '<b>환영</b>',
            'slideimage3': 'slides/three.jpg',
        })
        slides = renderer.carousel_slides()

        self.assertEqual([slide['image'] for slide in slides], ['/media/slides/one.jpg', '/media/slides/three.jpg'])
        self.assertEqual(slides[0]['caption'], '<b>환영</b>')
        self.assertEqual(slides[1]['caption'], '')
        self.assertEqual([slide['index'] for slide in slides], [0, 1])
        self.assertIn('carousel-item active', renderer.carousel())

    def test_disabled(self):
        renderer = make_renderer({'slidenum': '1', 'slideimage1': 'slides/one.jpg'})
        self.assertEqual(renderer.carousel(), '')

    def test_bad_slidenum(self):
        renderer = make_renderer({'slidenum': 'many'})
        with self.assertLogs('apps.theme.renderer', level='WARNING'):
            self.assertEqual(renderer.carousel_slides(), [])


class HeaderTest(TestCase):
    """헤더 영역 테스트"""

    def test_context_header_classes(self):
        html = make_renderer(layout='incourse', heading='1주차 강의').context_header()
        self.assertIn('class="h2 themecourseheader"', html)
        self.assertIn('1주차 강의', html)

        html = make_renderer(layout='standard', heading='관리').context_header()
        self.assertIn('class="h2"', html)

    def test_context_header_catalog_title(self):
        values = {'enablecatalog': '1', 'titlecatalog': '<i>강좌 카탈로그</i>'}
        html = make_renderer(values, layout='coursecategory', heading='공학').context_header()
        self.assertIn('강좌 카탈로그', html)
        self.assertNotIn('공학', html)
        self.assertNotIn('<i>', html)

        html = make_renderer({'titlecatalog': '강좌 카탈로그'}, layout='coursecategory', heading='공학').context_header()
        self.assertIn('공학', html)

    def test_full_header_cover(self):
        course = Course.objects.create(fullname='데이터 과학', shortname='DS101', cover_image='coverimage/cover.png')
        renderer = make_renderer(
            {'gradientcovercolor': '1'},
            request=anonymous_request(),
            layout='course',
            course=course,
            heading=course.fullname,
        )
        html = renderer.full_header()

        self.assertIn(f'data-course="{course.id}"', html)
        self.assertIn('src="/media/coverimage/cover.png"', html)
        self.assertIn('with-gradient', html)
        self.assertNotIn('cover-edit', html)
        self.assertNotIn('welcome-message', html)

    def test_full_header_incourse_needs_setting(self):
        course = Course.objects.create(fullname='데이터 과학', shortname='DS101')
        html = make_renderer(request=anonymous_request(), layout='incourse', course=course).full_header()
        self.assertNotIn('data-course', html)

        html = make_renderer({'displaycoverallpage': '1'}, request=anonymous_request(),
                             layout='incourse', course=course).full_header()
        self.assertIn('data-course', html)

    def test_full_header_welcome(self):
        html = make_renderer(request=anonymous_request(), pagetype='site-index').full_header()
        self.assertIn('환영합니다!', html)

        user = User.objects.create_user('hong', password='pass1234', first_name='길동')
        request = RequestFactory().get('/')
        request.user = user
        html = make_renderer(request=request, pagetype='site-index').full_header()
        self.assertIn('길동 님, 환영합니다!', html)

    @override_settings(THEME_HOME_PAGE='my')
    def test_full_header_welcome_my_home(self):
        html = make_renderer(request=anonymous_request(), pagetype='site-index').full_header()
        self.assertNotIn('welcome-message', html)
        html = make_renderer(request=anonymous_request(), pagetype='my-index').full_header()
        self.assertIn('welcome-message', html)


class HeaderCategoriesTest(TestCase):
    """헤더 카테고리 드롭다운 테스트"""

    def setUp(self):
        self.root = Category.objects.create(name='공학')
        self.child = Category.objects.create(name='기계', parent=self.root)
        Category.objects.create(name='비공개 학과', parent=self.root, visible=False)
        Category.objects.create(name='자동차', parent=self.child)

    def test_disabled_renders_nothing(self):
        with self.assertNumQueries(0):
            self.assertEqual(make_renderer().display_header_categories(), '')

    def test_dropdown(self):
        html = make_renderer({'menuheadercateg': 'excludehidden'}).display_header_categories()

        self.assertIn('theme-header-categories', html)
        self.assertIn('카테고리', html)
        self.assertIn(f'href="/categories/{self.root.id}/"', html)
        self.assertIn('자동차', html)
        self.assertIn('dropdown-submenu', html)
        self.assertNotIn('비공개 학과', html)

    def test_header_category_menu(self):
        menu = make_renderer({'menuheadercateg': 'showall'}).header_category_menu()
        self.assertEqual(menu[0]['name'], '공학')
        self.assertEqual([item['name'] for item in menu[0]['submenu']], ['기계', '비공개 학과'])
        self.assertNotIn('submenu', menu[0]['submenu'][1])

    def test_cycle_is_logged_and_hidden(self):
        renderer = make_renderer({'menuheadercateg': 'showall'})
        with mock.patch('apps.theme.renderer.get_category_menu', side_effect=CategoryCycleError(7)):
            with self.assertLogs('apps.theme.renderer', level='ERROR') as logs:
                self.assertEqual(renderer.display_header_categories(), '')
        self.assertIn('category_id=7', logs.output[0])

    def test_fragment_view(self):
        ThemeSetting.set_value('menuheadercateg', 'showall')
        response = self.client.get('/theme/header/categories/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '비공개 학과')


class TemplateTagTest(SimpleTestCase):
    """테마 템플릿 태그 테스트"""

    def test_theme_pix(self):
        html = Template('{% load theme_tags %}{% theme_pix "i/star" %}').render(Context({}))
        self.assertIn('data-pix="i/star"', html)

    def test_theme_contactus(self):
        renderer = make_renderer({'contactemail': 'help@example.com'})
        html = Template('{% load theme_tags %}{% theme_contactus %}').render(Context({'theme': renderer}))
        self.assertIn('mailto:help@example.com', html)


class ThemePageTest(TestCase):
    """테마 화면 테스트 (프론트, 로그인, 푸터 조각)"""

    def test_frontpage(self):
        ThemeSetting.set_value('blockrow1', '6-6-0-0')
        ThemeSetting.set_value('googlefont', 'Roboto')

        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'id="front-page-row-1"')
        self.assertContains(response, 'font-family: "Roboto"')
        self.assertContains(response, 'welcome-message')
        self.assertNotContains(response, 'block-region-editing')

    def test_frontpage_editing(self):
        ThemeSetting.set_value('blockrow1', '12-0-0-0')
        admin = User.objects.create_superuser('admin', 'admin@example.com', 'pass1234')
        self.client.force_login(admin)
        session = self.client.session
        session['editing'] = True
        session.save()

        response = self.client.get('/')
        self.assertContains(response, 'block-region-editing')

    def test_frontpage_carousel(self):
        ThemeSetting.set_value('enablecarousel', True)
        ThemeSetting.set_value('slidenum', '1')
        ThemeSetting.set_value('slideimage1', 'slides/one.jpg')

        response = self.client.get('/')
        self.assertContains(response, 'src="/media/slides/one.jpg"')

    def test_footer_fragment(self):
        ThemeSetting.set_value('footertext1', '도움말|/help/')
        response = self.client.get('/theme/footer/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '<a href="/help/">도움말</a>')
        self.assertContains(response, 'col-md-12')

    def test_login_page(self):
        response = self.client.get('/theme/login/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '<h1 class="login-heading">LMS</h1>')

    def test_login_page_settings(self):
        ThemeSetting.set_value('sitename', '<b>우리 학교</b>')
        ThemeSetting.set_value('logintextboxtop', '<p class="notice">공지</p>')
        ThemeSetting.set_value('sitelogo', 'logo/site.png')

        response = self.client.get('/theme/login/')
        self.assertContains(response, '우리 학교')
        self.assertNotContains(response, '<b>우리 학교</b>')
        self.assertContains(response, '<p class="notice">공지</p>')
        self.assertContains(response, 'src="/media/logo/site.png"')

    def test_login_hides_sitename(self):
        ThemeSetting.set_value('hidesitename', True)
        response = self.client.get('/theme/login/')
        self.assertNotContains(response, 'login-heading')

    def test_login_submit(self):
        User.objects.create_user('student', password='pass1234')
        response = self.client.post('/theme/login/', {'username': 'student', 'password': 'pass1234'})
        self.assertEqual(response.status_code, 302)


class ThemeSettingAPITest(APITestCase):
    """테마 설정 API 테스트"""

    def setUp(self):
        self.admin = User.objects.create_superuser('admin', 'admin@example.com', 'pass1234')
        self.user = User.objects.create_user('student', password='pass1234')
        self.client = APIClient()

    def test_get_settings(self):
        ThemeSetting.set_value('googlefont', 'Roboto')
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/theme/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'settings': {'googlefont': 'Roboto'}})

    def test_put_settings(self):
        self.client.force_authenticate(user=self.admin)
        payload = {'settings': {'menuheadercateg': 'excludehidden', 'blockrow1': '4-4-4-0'}}

        response = self.client.put('/api/theme/settings/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['settings']['menuheadercateg'], 'excludehidden')
        setting = ThemeSetting.objects.get(key='blockrow1')
        self.assertEqual(setting.value, '4-4-4-0')
        self.assertEqual(setting.updated_by, self.admin)

    def test_put_invalid_block_row(self):
        self.client.force_authenticate(user=self.admin)
        payload = {'settings': {'menuheadercateg': 'showall', 'blockrow1': '8-8-0-0'}}

        response = self.client.put('/api/theme/settings/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error']['code'], 'ERR_101')
        self.assertEqual(response.json()['error']['field'], 'settings')
        # 하나라도 실패하면 저장하지 않는다
        self.assertFalse(ThemeSetting.objects.exists())

    def test_put_invalid_policy(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put('/api/theme/settings/', {'settings': {'menuheadercateg': 'all'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get('/api/theme/settings/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()['error']['code'], 'ERR_403')

    def test_anonymous_forbidden(self):
        response = self.client.get('/api/theme/settings/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class HealthCheckTest(APITestCase):
    """헬스 체크 테스트"""

    def test_health(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['status'], 'healthy')
        self.assertEqual(response.json()['database'], 'connected')


class ExceptionHandlerTest(SimpleTestCase):
    """공통 예외 핸들러 테스트"""

    def test_theme_exception(self):
        response = custom_exception_handler(CategoryCycleError(3), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error']['code'], 'ERR_601')
        self.assertEqual(response.data['error']['detail'], {'category_id': 3})
        self.assertTrue(response.data['error']['timestamp'].endswith('Z'))

    def test_drf_exception(self):
        response = custom_exception_handler(NotFound(), {})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['error']['code'], 'ERR_404')

    def test_unexpected_exception(self):
        with self.assertLogs('utils.exception_handlers', level='ERROR'):
            response = custom_exception_handler(ValueError('boom'), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error']['code'], 'ERR_500')
