import logging

from django.http import Http404
from django.shortcuts import get_object_or_404, render

from apps.theme.renderer import PageContext, ThemeRenderer

from .models import Course, CourseModule
from .navigation import get_course_modules, module_ref

logger = logging.getLogger(__name__)


# 강좌 메인 화면
def course_detail(request, pk):
    course = get_object_or_404(Course, pk=pk)
    modules = get_course_modules(course, request.user)

    page = PageContext(
        request=request,
        layout="course",
        pagetype="course-view-topics",
        bodyid="page-course-view-topics",
        course=course,
        modules=modules,
        context_level="course",
        heading=course.fullname,
    )
    return render(request, "courses/course_detail.html", {
        "course": course,
        "modules": [module for module in modules if module.user_visible],
        "theme": ThemeRenderer(page),
    })


# 활동 화면 (활동 이동 + 이수 푸터)
def module_detail(request, course_id, pk):
    module = get_object_or_404(CourseModule, pk=pk, course_id=course_id)
    if not module.has_view:
        raise Http404("표시할 화면이 없는 활동입니다.")

    current = module_ref(module, request.user)
    if not current.user_visible:
        logger.info(f"숨김 활동 접근 차단: module_id={pk}")
        raise Http404("활동을 찾을 수 없습니다.")

    course = module.course
    page = PageContext(
        request=request,
        layout="incourse",
        pagetype=f"mod-{module.modname}-view",
        bodyid=f"page-mod-{module.modname}-view",
        course=course,
        module=current,
        modules=get_course_modules(course, request.user),
        context_level="module",
        heading=module.name,
    )
    return render(request, "courses/module_detail.html", {
        "course": course,
        "module": module,
        "theme": ThemeRenderer(page),
    })
