from django.db import models
from django.urls import reverse

# 자체 화면이 없는 활동 유형 (URL 없음)
NO_VIEW_MODULES = ('label',)


class Course(models.Model):
    """강좌"""
    fullname = models.CharField(max_length=255, verbose_name='강좌명')
    shortname = models.CharField(max_length=100, unique=True, verbose_name='약칭')
    category = models.ForeignKey(
        'categories.Category',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courses',
        verbose_name='카테고리'
    )
    enable_completion = models.BooleanField(default=False, verbose_name='이수 추적 사용')
    cover_image = models.FileField(upload_to='coverimage/', blank=True, verbose_name='커버 이미지')

    class Meta:
        db_table = 'course'
        ordering = ['id']
        verbose_name = '강좌'
        verbose_name_plural = '강좌'

    def __str__(self):
        return self.shortname

    def get_absolute_url(self):
        return reverse('course-detail', args=[self.pk])


class CourseModule(models.Model):
    """강좌 내 활동 (page, quiz, label ...)"""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='modules')
    name = models.CharField(max_length=255, verbose_name='활동명')
    modname = models.CharField(max_length=50, default='page', verbose_name='활동 유형')
    position = models.IntegerField(default=0, verbose_name='표시 순서')
    visible = models.BooleanField(default=True, verbose_name='표시')
    stealth = models.BooleanField(default=False, verbose_name='링크로만 접근')
    completion = models.BooleanField(default=False, verbose_name='이수 추적')

    class Meta:
        db_table = 'course_module'
        ordering = ['position', 'id']
        verbose_name = '강좌 활동'
        verbose_name_plural = '강좌 활동'

    def __str__(self):
        return f"{self.course_id} - {self.name}"

    @property
    def has_view(self):
        return self.modname not in NO_VIEW_MODULES

    def get_absolute_url(self):
        if not self.has_view:
            return ''
        return reverse('module-detail', args=[self.course_id, self.pk])
