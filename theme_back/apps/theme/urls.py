from django.urls import path

from .views import ThemeLoginView, ThemeSettingView, footer, frontpage, header_categories


urlpatterns = [
    # 프론트 페이지
    path('', frontpage, name='frontpage'),
    # 테마 HTML 조각
    path('theme/header/categories/', header_categories, name='theme-header-categories'),
    path('theme/footer/', footer, name='theme-footer'),
    path('theme/login/', ThemeLoginView.as_view(), name='theme-login'),
    # 테마 설정 API
    path('api/theme/settings/', ThemeSettingView.as_view(), name='theme-settings'),
]
