from django.urls import path

from .views import CategoryMenuView, category_detail


urlpatterns = [
    # 헤더 카테고리 메뉴 API
    path('api/categories/menu/', CategoryMenuView.as_view(), name='category-menu'),
    # 카테고리 화면
    path('categories/<int:pk>/', category_detail, name='category-detail'),
]
