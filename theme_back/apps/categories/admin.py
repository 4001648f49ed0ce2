from django.contrib import admin

from .models import Category


# 부모 변경 시 Category.clean() 이 순환 구조를 막는다
@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "parent", "sortorder", "visible")
    list_filter = ("visible",)
    list_editable = ("sortorder", "visible")
    search_fields = ("name",)
