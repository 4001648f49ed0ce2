from django.core.exceptions import ValidationError
from django.db import models
from django.urls import reverse


# 강좌 카테고리 (parent-child 구조)
class Category(models.Model):
    name = models.CharField(max_length=255, verbose_name='카테고리명')
    description = models.TextField(blank=True, verbose_name='설명')
    parent = models.ForeignKey("self", related_name="children", on_delete=models.CASCADE, blank=True, null=True)
    sortorder = models.IntegerField(default=0)  # 형제 카테고리 간 표시 순서
    visible = models.BooleanField(default=True)  # False 면 숨김 카테고리

    class Meta:
        db_table = 'course_category'
        ordering = ['sortorder', 'id']
        verbose_name = '강좌 카테고리'
        verbose_name_plural = '강좌 카테고리'

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse("category-detail", args=[self.pk])

    def clean(self):
        # 자기 자신 또는 자손을 부모로 지정하면 순환이 생긴다
        ancestor = self.parent
        seen = set()
        while ancestor is not None:
            if (self.pk is not None and ancestor.pk == self.pk) or ancestor.pk in seen:
                raise ValidationError({'parent': '상위 카테고리 지정이 순환 구조를 만듭니다.'})
            seen.add(ancestor.pk)
            ancestor = ancestor.parent
