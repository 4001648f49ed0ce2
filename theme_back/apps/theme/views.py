import logging

from django.contrib.auth.views import LoginView
from django.db import DatabaseError, connection
from django.http import HttpResponse
from django.shortcuts import render
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import ThemeSetting
from .renderer import PageContext, ThemeRenderer
from .serializers import ThemeSettingsSerializer

logger = logging.getLogger(__name__)


def _database_connected():
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"헬스 체크 DB 연결 실패: {e}")
        return False
    return True


class HealthCheckView(APIView):
    """서버/DB 상태 확인 (인증 없음)"""
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["Health"],
        summary="서버 헬스 체크",
        responses={
            200: OpenApiResponse(description="정상"),
            503: OpenApiResponse(description="DB 연결 불가"),
        }
    )
    def get(self, request):
        connected = _database_connected()
        body = {
            "status": "healthy" if connected else "unhealthy",
            "database": "connected" if connected else "disconnected",
            "timestamp": timezone.now().isoformat(),
        }
        code = status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(body, status=code)


class ThemeSettingView(APIView):
    """
    테마 설정 API
    - GET: 전체 설정 조회
    - PUT: 설정 일괄 저장 (없는 키는 생성)
    """
    permission_classes = [IsAdminUser]

    @extend_schema(tags=["Theme"], summary="테마 설정 조회")
    def get(self, request):
        return Response({'settings': ThemeSetting.as_dict()})

    @extend_schema(tags=["Theme"], summary="테마 설정 저장", request=ThemeSettingsSerializer)
    def put(self, request):
        serializer = ThemeSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        values = serializer.validated_data['settings']
        ThemeSetting.set_values(values, user=request.user)

        logger.info(f"테마 설정 저장: user={request.user.pk}, keys={sorted(values)}")
        return Response({'detail': '설정이 저장되었습니다.', 'settings': ThemeSetting.as_dict()})


# 헤더 카테고리 드롭다운 (HTML 조각)
def header_categories(request):
    renderer = ThemeRenderer(PageContext(request=request))
    return HttpResponse(renderer.display_header_categories())


# 푸터 사용자 정의 영역 (HTML 조각)
def footer(request):
    renderer = ThemeRenderer(PageContext(request=request))
    return HttpResponse(renderer.footer_custom_content())


# 프론트 페이지 (블록 영역 + 캐러셀)
def frontpage(request):
    page = PageContext(
        request=request,
        layout="frontpage",
        pagetype="site-index",
        bodyid="page-site-index",
        editing=bool(request.session.get("editing", False)),
    )
    return render(request, "theme/frontpage.html", {"theme": ThemeRenderer(page)})


class ThemeLoginView(LoginView):
    """테마 로그인 화면 (인증 자체는 django.contrib.auth 에 위임)"""
    template_name = "theme/login.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        renderer = ThemeRenderer(PageContext(request=self.request, layout="login", pagetype="login-index"))
        context["theme"] = renderer
        context.update(renderer.login_page_context())
        return context
