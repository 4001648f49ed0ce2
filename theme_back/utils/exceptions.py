from datetime import datetime, timezone

from rest_framework import status
from rest_framework.exceptions import APIException


def error_body(code, message, **extra):
    """API 오류 응답 본문 {"error": {code, message, timestamp, ...}} (None 값은 생략)"""
    error = {
        'code': code,
        'message': message,
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
    error.update({key: value for key, value in extra.items() if value not in (None, '')})
    return {'error': error}


class ThemeException(APIException):
    """
    테마 프로젝트 기본 예외
    code: ERR_xxx 오류 코드, detail: 부가 정보, field: 문제 필드명
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'ERR_500'
    default_detail = '서버 내부 오류가 발생했습니다.'

    def __init__(self, code=None, message=None, detail=None, field=None, status_code=None):
        self.message = message or self.default_detail
        super().__init__(detail=self.message)
        self.code = code or self.default_code
        self.detail_info = detail
        self.field = field
        if status_code:
            self.status_code = status_code

    def get_full_details(self):
        return error_body(self.code, self.message, detail=self.detail_info, field=self.field)


class ValidationException(ThemeException):
    """요청 파라미터 검증 실패"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'ERR_101'
    default_detail = '입력값이 올바르지 않습니다.'


class CorruptDataException(ThemeException):
    """저장된 데이터 구조 손상"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = 'ERR_601'
    default_detail = '저장된 데이터 구조가 손상되었습니다.'


class CategoryCycleError(CorruptDataException):
    """카테고리 부모-자식 관계에 순환이 있는 경우"""
    default_detail = '카테고리 트리에 순환 참조가 있습니다.'

    def __init__(self, category_id):
        self.category_id = category_id
        super().__init__(
            message=f'{self.default_detail} (category_id={category_id})',
            detail={'category_id': category_id},
        )
