from django.contrib import admin

from .models import Course, CourseModule


class CourseModuleInline(admin.TabularInline):
    model = CourseModule
    extra = 0
    fields = ("name", "modname", "position", "visible", "stealth", "completion")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("shortname", "fullname", "category", "enable_completion")
    search_fields = ("shortname", "fullname")
    inlines = [CourseModuleInline]
