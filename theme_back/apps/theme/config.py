from django.core.files.storage import default_storage

from apps.categories.menu import VisibilityPolicy

from .models import ThemeSetting

# 비어 있는 것으로 취급하는 설정값
EMPTY_VALUES = (None, '', '0')


class ThemeConfig:
    """
    테마 설정 핸들
    - 첫 조회 시 전체 설정을 한 번에 읽고 인스턴스 수명 동안 캐시
    - values 를 직접 넘기면 DB 를 조회하지 않는다 (테스트/미리보기용)
    """

    def __init__(self, values=None):
        self._values = values

    @property
    def values(self):
        if self._values is None:
            self._values = ThemeSetting.as_dict()
        return self._values

    def get(self, name, default=''):
        return self.values.get(name, default)

    def has(self, name):
        """값과 관계없이 저장된 설정인지"""
        return name in self.values

    def is_set(self, name):
        return self.get(name) not in EMPTY_VALUES

    def file_url(self, name):
        """설정에 저장된 파일 경로의 스토리지 URL"""
        if not self.is_set(name):
            return ''
        return default_storage.url(self.get(name))

    def category_menu_policy(self):
        return VisibilityPolicy.from_setting(self.get('menuheadercateg'))
