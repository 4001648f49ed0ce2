from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
)
from apps.theme.views import HealthCheckView


urlpatterns = [
    # Health Check (Docker/K8s용 - 인증 불필요)
    path("health/", HealthCheckView.as_view(), name="health_check"),

    path("admin/", admin.site.urls),

    # 카테고리 메뉴 API / 카테고리 화면
    path("", include("apps.categories.urls")),

    # 강좌 / 활동 화면
    path("", include("apps.courses.urls")),

    # 프론트 페이지 / 테마 조각 / 테마 설정 API
    path("", include("apps.theme.urls")),

    # API 문서화 엔드포인트
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
