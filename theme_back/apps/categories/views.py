import logging

from django.shortcuts import get_object_or_404, render
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.theme.config import ThemeConfig
from apps.theme.renderer import PageContext, ThemeRenderer
from utils.exceptions import CategoryCycleError, ValidationException

from .menu import VisibilityPolicy
from .models import Category
from .serializers import MenuItemSerializer, MenuQuerySerializer
from .services import get_category_menu

logger = logging.getLogger(__name__)


# 헤더 카테고리 메뉴 API
class CategoryMenuView(APIView):
    """
    헤더 카테고리 드롭다운 메뉴
    - 정책은 테마 설정(menuheadercateg)을 따르고, ?policy= 로 미리보기 가능
    """
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Categories"],
        summary="헤더 카테고리 메뉴 조회",
        parameters=[
            OpenApiParameter(
                name="policy",
                description="showall / excludehidden / disabled (미지정 시 테마 설정값)",
                required=False,
                type=str,
            ),
        ],
    )
    def get(self, request):
        query = MenuQuerySerializer(data=request.query_params)
        if not query.is_valid():
            raise ValidationException(
                message='policy 값이 올바르지 않습니다.',
                field='policy',
                detail=request.query_params.get('policy'),
            )

        policy_value = query.validated_data.get('policy')
        if policy_value:
            policy = VisibilityPolicy(policy_value)
        else:
            policy = ThemeConfig().category_menu_policy()

        # 순환 데이터는 헤더 드롭다운과 같이 메뉴 없음(disabled)으로 응답
        try:
            menus = get_category_menu(policy)
        except CategoryCycleError as e:
            logger.error(f"카테고리 메뉴 생성 실패: {e.message}")
            menus = []

        return Response({
            "menus": MenuItemSerializer(menus, many=True).data
        })


# 카테고리 화면 (메뉴 링크 대상)
def category_detail(request, pk):
    category = get_object_or_404(Category, pk=pk)
    if not category.visible and not request.user.is_staff:
        logger.info(f"숨김 카테고리 접근 차단: category_id={pk}")
        return render(request, "categories/category_hidden.html", status=404)

    children = category.children.all()
    if not request.user.is_staff:
        children = children.filter(visible=True)

    page = PageContext(
        request=request,
        layout="coursecategory",
        pagetype="course-index-category",
        heading=category.name,
    )
    return render(request, "categories/category_detail.html", {
        "category": category,
        "children": children,
        "courses": category.courses.all(),
        "theme": ThemeRenderer(page),
    })
