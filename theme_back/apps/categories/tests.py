import random
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from apps.theme.models import ThemeSetting
from utils.exceptions import CategoryCycleError

from .menu import CategoryNode, MenuItem, VisibilityPolicy, build_menu, build_submenu
from .models import Category
from .services import get_category_menu, get_category_tree


def node(id, visible=True, parent_id=None, children=()):
    category = CategoryNode(
        id=id,
        name=f'카테고리{id}',
        url=f'/categories/{id}/',
        visible=visible,
        parent_id=parent_id,
    )
    for child in children:
        child.parent_id = id
        category.children.append(child)
    return category


def item(id, submenu=None):
    return MenuItem(name=f'카테고리{id}', url=f'/categories/{id}/', submenu=submenu)


def random_tree(rng, next_id, depth, all_visible=False):
    """임의의 카테고리 트리 생성 (최대 depth 단계)"""
    children = []
    if depth > 0:
        for _ in range(rng.randint(0, 3)):
            child, next_id = random_tree(rng, next_id, depth - 1, all_visible)
            children.append(child)
    category_id = next_id
    visible = True if all_visible else rng.random() > 0.3
    return node(category_id, visible=visible, children=children), next_id + 1


def random_forest(seed, all_visible=False):
    rng = random.Random(seed)
    roots = []
    next_id = 1
    for _ in range(rng.randint(0, 4)):
        root, next_id = random_tree(rng, next_id, 3, all_visible)
        roots.append(root)
    return roots


class VisibilityPolicyTest(SimpleTestCase):
    """메뉴 정책 설정값 변환 테스트"""

    def test_known_values(self):
        self.assertIs(VisibilityPolicy.from_setting('showall'), VisibilityPolicy.SHOW_ALL)
        self.assertIs(VisibilityPolicy.from_setting('excludehidden'), VisibilityPolicy.EXCLUDE_HIDDEN)
        self.assertIs(VisibilityPolicy.from_setting('disabled'), VisibilityPolicy.DISABLED)

    def test_empty_is_disabled(self):
        self.assertIs(VisibilityPolicy.from_setting(''), VisibilityPolicy.DISABLED)
        self.assertIs(VisibilityPolicy.from_setting(None), VisibilityPolicy.DISABLED)

    def test_unknown_is_disabled(self):
        with self.assertLogs('apps.categories.menu', level='WARNING'):
            policy = VisibilityPolicy.from_setting('everything')
        self.assertIs(policy, VisibilityPolicy.DISABLED)


class BuildMenuTest(SimpleTestCase):
    """헤더 카테고리 메뉴 트리 생성 테스트"""

    def test_disabled_returns_empty(self):
        for seed in range(20):
            roots = random_forest(seed)
            self.assertEqual(build_menu(roots, VisibilityPolicy.DISABLED), [])

    def test_empty_input(self):
        self.assertEqual(build_menu([], VisibilityPolicy.SHOW_ALL), [])

    def test_all_visible_policies_match(self):
        """모두 보이는 트리에서는 showall 과 excludehidden 결과가 같다"""
        for seed in range(20):
            roots = random_forest(seed, all_visible=True)
            self.assertEqual(
                build_menu(roots, VisibilityPolicy.SHOW_ALL),
                build_menu(roots, VisibilityPolicy.EXCLUDE_HIDDEN),
            )

    def test_filtering_never_adds_items(self):
        def check(categories, items):
            self.assertLessEqual(len(items), len(categories))
            by_url = {category.url: category for category in categories}
            for menu_item in items:
                category = by_url[menu_item.url]
                if menu_item.submenu:
                    check(category.children, menu_item.submenu)

        for seed in range(20):
            roots = random_forest(seed)
            for policy in (VisibilityPolicy.SHOW_ALL, VisibilityPolicy.EXCLUDE_HIDDEN):
                check(roots, build_menu(roots, policy))

    def test_example_tree(self):
        """A(B 숨김, C), D 숨김 → A 아래 C 만 남는다"""
        roots = [
            node(1, children=[node(2, visible=False), node(3)]),
            node(4, visible=False),
        ]
        menu = build_menu(roots, VisibilityPolicy.EXCLUDE_HIDDEN)
        self.assertEqual(menu, [item(1, submenu=[item(3)])])

    def test_show_all_keeps_hidden(self):
        roots = [
            node(1, children=[node(2, visible=False), node(3)]),
            node(4, visible=False),
        ]
        menu = build_menu(roots, VisibilityPolicy.SHOW_ALL)
        self.assertEqual(menu, [item(1, submenu=[item(2), item(3)]), item(4)])

    def test_only_hidden_children_omits_submenu(self):
        roots = [node(1, children=[node(2, visible=False)])]
        menu = build_menu(roots, VisibilityPolicy.EXCLUDE_HIDDEN)

        self.assertEqual(len(menu), 1)
        self.assertIsNone(menu[0].submenu)
        self.assertNotIn('submenu', menu[0].to_dict())

    def test_hidden_sibling_keeps_order(self):
        roots = [node(1, children=[node(2), node(3, visible=False), node(4)])]
        menu = build_menu(roots, VisibilityPolicy.EXCLUDE_HIDDEN)
        self.assertEqual([entry.name for entry in menu[0].submenu], ['카테고리2', '카테고리4'])

    def test_depth_three_tree(self):
        roots = [node(1, children=[node(2, children=[node(3)])]), node(4)]
        menu = build_menu(roots, VisibilityPolicy.SHOW_ALL)

        self.assertEqual(menu, [item(1, submenu=[item(2, submenu=[item(3)])]), item(4)])
        self.assertEqual(menu[0].to_dict(), {
            'name': '카테고리1',
            'url': '/categories/1/',
            'submenu': [{
                'name': '카테고리2',
                'url': '/categories/2/',
                'submenu': [{'name': '카테고리3', 'url': '/categories/3/'}],
            }],
        })

    def test_input_order_preserved(self):
        roots = [node(3), node(1), node(2)]
        menu = build_menu(roots, VisibilityPolicy.SHOW_ALL)
        self.assertEqual([entry.url for entry in menu], ['/categories/3/', '/categories/1/', '/categories/2/'])

    def test_non_root_input_skipped(self):
        roots = [node(1), node(2, parent_id=1)]
        menu = build_menu(roots, VisibilityPolicy.SHOW_ALL)
        self.assertEqual(menu, [item(1)])

    def test_submenu_does_not_check_root(self):
        parent = node(1, children=[node(2), node(3)])
        self.assertEqual(build_submenu(parent, VisibilityPolicy.SHOW_ALL), [item(2), item(3)])

    def test_cycle_raises(self):
        first = node(1)
        second = node(2, parent_id=1)
        first.children.append(second)
        second.children.append(first)

        with self.assertRaises(CategoryCycleError) as ctx:
            build_menu([first], VisibilityPolicy.SHOW_ALL)
        self.assertEqual(ctx.exception.category_id, 1)
        self.assertEqual(ctx.exception.get_full_details()['error']['code'], 'ERR_601')

    def test_self_cycle_raises(self):
        category = node(1)
        category.children.append(category)
        with self.assertRaises(CategoryCycleError):
            build_menu([category], VisibilityPolicy.EXCLUDE_HIDDEN)


class CategoryStoreTest(TestCase):
    """카테고리 스냅샷 생성 테스트"""

    def setUp(self):
        self.science = Category.objects.create(name='과학', sortorder=2)
        self.arts = Category.objects.create(name='예술', sortorder=1)
        self.physics = Category.objects.create(name='물리', parent=self.science, sortorder=1)
        self.biology = Category.objects.create(name='생물', parent=self.science, sortorder=0, visible=False)
        self.quantum = Category.objects.create(name='양자역학', parent=self.physics)

    def test_tree_order_and_links(self):
        roots = get_category_tree()

        self.assertEqual([root.name for root in roots], ['예술', '과학'])
        science = roots[1]
        self.assertEqual([child.name for child in science.children], ['생물', '물리'])
        self.assertEqual(science.children[1].children[0].name, '양자역학')
        self.assertEqual(science.url, reverse('category-detail', args=[self.science.id]))

    def test_menu_excludes_hidden(self):
        menu = get_category_menu(VisibilityPolicy.EXCLUDE_HIDDEN)

        self.assertEqual([entry.name for entry in menu], ['예술', '과학'])
        self.assertEqual([entry.name for entry in menu[1].submenu], ['물리'])
        self.assertIsNone(menu[0].submenu)

    def test_disabled_skips_query(self):
        with self.assertNumQueries(0):
            self.assertEqual(get_category_menu(VisibilityPolicy.DISABLED), [])

    def test_cyclic_rows_are_unreachable(self):
        first = Category.objects.create(name='순환1')
        second = Category.objects.create(name='순환2', parent=first)
        Category.objects.filter(pk=first.pk).update(parent=second)

        roots = get_category_tree()
        names = [root.name for root in roots]
        self.assertNotIn('순환1', names)
        self.assertNotIn('순환2', names)
        self.assertEqual(len(get_category_menu(VisibilityPolicy.SHOW_ALL)), 2)

    def test_clean_rejects_cycle(self):
        self.science.parent = self.quantum
        with self.assertRaises(ValidationError):
            self.science.clean()

    def test_clean_rejects_self_parent(self):
        self.arts.parent = self.arts
        with self.assertRaises(ValidationError):
            self.arts.clean()

    def test_clean_accepts_move(self):
        self.quantum.parent = self.arts
        self.quantum.clean()


class CategoryMenuAPITest(APITestCase):
    """헤더 카테고리 메뉴 API 테스트"""

    def setUp(self):
        self.root = Category.objects.create(name='공학')
        Category.objects.create(name='기계', parent=self.root)
        Category.objects.create(name='비공개', parent=self.root, visible=False)
        self.client = APIClient()

    def test_disabled_by_default(self):
        response = self.client.get('/api/categories/menu/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'menus': []})

    def test_policy_from_theme_setting(self):
        ThemeSetting.set_value('menuheadercateg', 'excludehidden')

        response = self.client.get('/api/categories/menu/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        menus = response.json()['menus']
        self.assertEqual(len(menus), 1)
        self.assertEqual(menus[0]['name'], '공학')
        self.assertEqual([entry['name'] for entry in menus[0]['submenu']], ['기계'])
        self.assertNotIn('submenu', menus[0]['submenu'][0])

    def test_policy_query_override(self):
        response = self.client.get('/api/categories/menu/', {'policy': 'showall'})
        names = [entry['name'] for entry in response.json()['menus'][0]['submenu']]
        self.assertEqual(names, ['기계', '비공개'])

    def test_invalid_policy(self):
        response = self.client.get('/api/categories/menu/', {'policy': 'everything'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['error']['code'], 'ERR_101')
        self.assertEqual(response.json()['error']['field'], 'policy')

    def test_cycle_returns_empty_menu(self):
        """순환 데이터는 로그만 남기고 메뉴 없음으로 응답"""
        first = node(1)
        first.children.append(first)
        with mock.patch('apps.categories.services.get_category_tree', return_value=[first]):
            with self.assertLogs('apps.categories.views', level='ERROR') as logs:
                response = self.client.get('/api/categories/menu/', {'policy': 'showall'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'menus': []})
        self.assertIn('category_id=1', logs.output[0])


class CategoryDetailViewTest(TestCase):
    """카테고리 화면 테스트"""

    def setUp(self):
        self.root = Category.objects.create(name='인문')
        self.child = Category.objects.create(name='철학', parent=self.root)
        self.hidden = Category.objects.create(name='숨김 카테고리', parent=self.root, visible=False)

    def test_detail(self):
        response = self.client.get(reverse('category-detail', args=[self.root.id]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '인문')
        self.assertContains(response, '철학')
        self.assertNotContains(response, '숨김 카테고리')

    def test_hidden_category_not_found(self):
        response = self.client.get(reverse('category-detail', args=[self.hidden.id]))
        self.assertEqual(response.status_code, 404)

    def test_missing_category(self):
        response = self.client.get(reverse('category-detail', args=[9999]))
        self.assertEqual(response.status_code, 404)
