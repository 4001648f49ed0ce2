"""
테마 컨텍스트 프로세서

모든 템플릿에서 {{ theme.<영역> }} 으로 테마 렌더러를 사용할 수 있게 한다.
뷰가 컨텍스트에 theme 을 직접 넣으면 그 값이 우선한다.
"""
from .renderer import PageContext, ThemeRenderer


def theme(request):
    return {"theme": ThemeRenderer(PageContext(request=request))}
