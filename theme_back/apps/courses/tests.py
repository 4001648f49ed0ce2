from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, SimpleTestCase, TestCase
from django.urls import reverse

from apps.theme.config import ThemeConfig
from apps.theme.models import ThemeSetting
from apps.theme.renderer import PageContext, ThemeRenderer

from .models import Course, CourseModule
from .navigation import ModuleRef, activity_navigation, get_course_modules, next_visible_module
from .views import module_detail

User = get_user_model()


def ref(id, **kwargs):
    kwargs.setdefault('url', f'/courses/1/modules/{id}/')
    return ModuleRef(id=id, name=f'활동{id}', **kwargs)


class NextVisibleModuleTest(SimpleTestCase):
    """다음 표시 활동 탐색 테스트"""

    def test_next(self):
        modules = [ref(1), ref(2), ref(3)]
        self.assertEqual(next_visible_module(modules, 1).id, 2)
        self.assertIsNone(next_visible_module(modules, 3))

    def test_skips_hidden(self):
        modules = [ref(1), ref(2, visible=False, user_visible=False), ref(3)]
        self.assertEqual(next_visible_module(modules, 1).id, 3)

    def test_unknown_current(self):
        self.assertIsNone(next_visible_module([ref(1), ref(2)], 99))


class ActivityNavigationTest(SimpleTestCase):
    """이전/다음 활동 계산 테스트"""

    def test_middle(self):
        navigation = activity_navigation([ref(1), ref(2), ref(3)], 2)

        self.assertEqual(navigation.prev.id, 1)
        self.assertEqual(navigation.next.id, 3)
        self.assertEqual(
            [item['url'] for item in navigation.activity_list],
            ['/courses/1/modules/1/?forceview=1', '/courses/1/modules/3/?forceview=1'],
        )

    def test_first_and_last(self):
        modules = [ref(1), ref(2)]
        self.assertIsNone(activity_navigation(modules, 1).prev)
        self.assertIsNone(activity_navigation(modules, 2).next)

    def test_single_module(self):
        self.assertIsNone(activity_navigation([ref(1)], 1))
        self.assertIsNone(activity_navigation([ref(1), ref(2, stealth=True)], 1))

    def test_current_not_in_list(self):
        self.assertIsNone(activity_navigation([ref(1), ref(2), ref(3, url='')], 3))

    def test_filters(self):
        modules = [
            ref(1),
            ref(2, url=''),
            ref(3, stealth=True),
            ref(4, visible=False, user_visible=False),
            ref(5, visible=False, user_visible=True),
            ref(6),
        ]
        navigation = activity_navigation(modules, 1)

        self.assertEqual(navigation.next.id, 5)
        self.assertEqual([item['name'] for item in navigation.activity_list], ['활동5 (숨김)', '활동6'])

    def test_existing_query_string(self):
        navigation = activity_navigation([ref(1, url='/mod/?id=1'), ref(2)], 2)
        self.assertEqual(navigation.activity_list[0]['url'], '/mod/?id=1&forceview=1')


class CourseModuleSnapshotTest(TestCase):
    """사용자 기준 활동 스냅샷 테스트"""

    def setUp(self):
        self.course = Course.objects.create(fullname='파이썬 기초', shortname='PY101')
        self.label = CourseModule.objects.create(course=self.course, name='안내', modname='label', position=0)
        self.page = CourseModule.objects.create(course=self.course, name='1주차', position=1)
        self.hidden = CourseModule.objects.create(course=self.course, name='2주차', position=2, visible=False)

    def test_order_and_urls(self):
        modules = get_course_modules(self.course, AnonymousUser())

        self.assertEqual([module.name for module in modules], ['안내', '1주차', '2주차'])
        self.assertEqual(modules[0].url, '')
        self.assertEqual(modules[1].url, reverse('module-detail', args=[self.course.id, self.page.id]))

    def test_user_visibility(self):
        student = get_course_modules(self.course, AnonymousUser())
        self.assertFalse(student[2].user_visible)

        instructor = User.objects.create_user('instructor', password='pass1234', is_staff=True)
        self.assertTrue(get_course_modules(self.course, instructor)[2].user_visible)


class CompletionFooterTest(TestCase):
    """활동 이수 푸터 테스트"""

    def setUp(self):
        self.course = Course.objects.create(fullname='파이썬 기초', shortname='PY101', enable_completion=True)
        self.modules = [
            ref(1, completion=True),
            ref(2, visible=False, user_visible=False),
            ref(3),
        ]

    def renderer(self, values=None, **kwargs):
        page_kwargs = {
            'layout': 'incourse',
            'pagetype': 'mod-page-view',
            'bodyid': 'page-mod-page-view',
            'course': self.course,
            'module': self.modules[0],
            'modules': self.modules,
            'context_level': 'module',
        }
        page_kwargs.update(kwargs)
        return ThemeRenderer(PageContext(**page_kwargs), ThemeConfig(values=values or {}))

    def test_renders_next_activity(self):
        html = self.renderer().render_completion_footer()
        self.assertIn('completion-footer', html)
        self.assertIn('다음 활동: 활동3', html)
        self.assertIn('href="/courses/1/modules/3/"', html)

    def test_last_module_has_no_next(self):
        """마지막 활동은 이수 표시만 있고 다음 활동 링크는 없다"""
        html = self.renderer(module=ref(3, completion=True)).render_completion_footer()
        self.assertIn('completion-footer', html)
        self.assertNotIn('next-activity', html)

    def test_short_circuits(self):
        no_completion_course = Course.objects.create(fullname='미추적', shortname='NC101')
        cases = [
            {'course': None},
            {'course': no_completion_course},
            {'layout': 'admin'},
            {'pagetype': 'course-editsection'},
            {'bodyid': 'page-mod-quiz-attempt'},
            {'module': None},
            {'module': ref(1, completion=False)},
            {'pagetype': 'course-view-topics'},
            {'pagetype': 'mod-page-index'},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                self.assertEqual(self.renderer(**kwargs).render_completion_footer(), '')

    def test_core_completion_setting(self):
        html = self.renderer({'moodleactivitycompletion': '1'}).render_completion_footer()
        self.assertEqual(html, '')


class ActivityNavigationRenderTest(SimpleTestCase):
    """활동 이동 영역 렌더링 테스트"""

    def setUp(self):
        self.modules = [ref(1), ref(2), ref(3)]

    def renderer(self, **kwargs):
        page_kwargs = {
            'layout': 'incourse',
            'pagetype': 'mod-page-view',
            'module': self.modules[1],
            'modules': self.modules,
            'context_level': 'module',
        }
        page_kwargs.update(kwargs)
        return ThemeRenderer(PageContext(**page_kwargs), ThemeConfig(values={}))

    def test_renders_links(self):
        html = self.renderer().activity_navigation()
        self.assertIn('id="prev-activity-link" href="/courses/1/modules/1/"', html)
        self.assertIn('id="next-activity-link" href="/courses/1/modules/3/"', html)
        self.assertIn('id="jump-to-activity"', html)

    def test_frametop_layout(self):
        self.assertIn('prev-activity-link', self.renderer(layout='frametop').activity_navigation())

    def test_short_circuits(self):
        cases = [
            {'layout': 'course'},
            {'context_level': 'course'},
            {'bodyid': 'page-mod-quiz-attempt'},
            {'module': None},
            {'module': ref(2, stealth=True)},
            {'modules': [ref(2)]},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                self.assertEqual(self.renderer(**kwargs).activity_navigation(), '')


class CourseViewTest(TestCase):
    """강좌/활동 화면 테스트"""

    def setUp(self):
        self.course = Course.objects.create(fullname='파이썬 기초', shortname='PY101', enable_completion=True)
        self.first = CourseModule.objects.create(course=self.course, name='1주차 강의', position=1, completion=True)
        self.hidden = CourseModule.objects.create(course=self.course, name='비공개 과제', position=2, visible=False)
        self.second = CourseModule.objects.create(course=self.course, name='2주차 강의', position=3)
        self.label = CourseModule.objects.create(course=self.course, name='안내문', modname='label', position=4)

    def module_url(self, module):
        return reverse('module-detail', args=[self.course.id, module.id])

    def test_course_detail(self):
        response = self.client.get(reverse('course-detail', args=[self.course.id]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '1주차 강의')
        self.assertContains(response, '안내문')
        self.assertNotContains(response, '비공개 과제')
        self.assertContains(response, f'data-course="{self.course.id}"')

    def test_module_detail_navigation(self):
        ThemeSetting.set_value('showactivitynavigation', True)

        response = self.client.get(self.module_url(self.first))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'id="next-activity-link"')
        self.assertContains(response, f'href="{self.module_url(self.second)}"')
        self.assertNotContains(response, '비공개 과제')
        self.assertContains(response, '다음 활동: 2주차 강의')

    def test_module_detail_navigation_disabled(self):
        response = self.client.get(self.module_url(self.first))
        self.assertNotContains(response, 'next-activity-link')
        self.assertContains(response, 'completion-footer')

    def test_hidden_module_for_staff(self):
        instructor = User.objects.create_user('instructor', password='pass1234', is_staff=True)
        self.client.force_login(instructor)

        response = self.client.get(self.module_url(self.hidden))
        self.assertEqual(response.status_code, 200)

    def test_hidden_module_not_found(self):
        response = self.client.get(self.module_url(self.hidden))
        self.assertEqual(response.status_code, 404)

    def test_label_not_found(self):
        response = self.client.get(self.module_url(self.label))
        self.assertEqual(response.status_code, 404)

    def test_module_of_other_course(self):
        other = Course.objects.create(fullname='다른 강좌', shortname='OT101')
        response = self.client.get(reverse('module-detail', args=[other.id, self.first.id]))
        self.assertEqual(response.status_code, 404)

    def test_module_detail_with_request_factory(self):
        request = RequestFactory().get(self.module_url(self.second))
        request.user = AnonymousUser()
        response = module_detail(request, self.course.id, self.second.id)
        self.assertEqual(response.status_code, 200)
