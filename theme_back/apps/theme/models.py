from django.conf import settings
from django.db import models, transaction


def to_setting_text(value):
    """설정값을 저장용 문자열로 변환 (체크박스 bool → '1' / '0')"""
    if isinstance(value, bool):
        return '1' if value else '0'
    if value is None:
        return ''
    return str(value)


class ThemeSetting(models.Model):
    """
    테마 설정 (키/값)
    - 푸터 문구, 로고 파일 경로, 블록 행 레이아웃, 카테고리 메뉴 정책 등
    - 값은 항상 문자열이고 빈 문자열과 '0' 은 미설정으로 본다
    """
    key = models.CharField(max_length=100, unique=True, verbose_name='설정 키')
    value = models.TextField(blank=True, verbose_name='설정 값')
    description = models.CharField(max_length=200, blank=True, verbose_name='설명')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='수정일시')
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='theme_settings',
        verbose_name='수정자'
    )

    class Meta:
        db_table = 'theme_setting'
        verbose_name = '테마 설정'
        verbose_name_plural = '테마 설정'

    def __str__(self):
        preview = self.value if len(self.value) <= 30 else f"{self.value[:30]}..."
        return f"{self.key}={preview}"

    @classmethod
    def get_value(cls, key, default=None):
        row = cls.objects.filter(key=key).values_list('value', flat=True).first()
        return default if row is None else row

    @classmethod
    def set_value(cls, key, value, description='', user=None):
        setting, _ = cls.objects.update_or_create(
            key=key,
            defaults={
                'value': to_setting_text(value),
                'description': description,
                'updated_by': user,
            }
        )
        return setting

    @classmethod
    def set_values(cls, values, user=None):
        """여러 설정을 한 트랜잭션으로 저장 (하나라도 실패하면 전체 롤백)"""
        with transaction.atomic():
            return [cls.set_value(key, value, user=user) for key, value in values.items()]

    @classmethod
    def as_dict(cls):
        """전체 설정 {key: value}. 렌더러는 요청당 한 번만 조회한다"""
        return dict(cls.objects.values_list('key', 'value'))
