import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import ThemeException, error_body

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = '서버 내부 오류가 발생했습니다. 관리자에게 문의해주세요.'


def _first_field_error(data):
    """검증 오류 dict 에서 첫 번째 (field, 메시지). 없으면 (None, None)"""
    if not isinstance(data, dict):
        return None, None
    for field, errors in data.items():
        if field == 'detail':
            continue
        if isinstance(errors, list) and errors:
            return field, str(errors[0])
        return field, str(errors)
    return None, None


def custom_exception_handler(exc, context):
    """
    API 오류 응답을 {"error": {code, message, timestamp[, detail][, field]}} 로 통일

    - ThemeException: 예외가 가진 코드/상태 그대로
    - DRF 예외: ERR_{status}, 필드 검증 오류는 ERR_101
    - 그 외: ERR_500 (traceback 로깅)
    """
    view = context.get('view')

    if isinstance(exc, ThemeException):
        logger.warning(f"Theme Exception: {exc.code} - {exc.message} (view={view.__class__.__name__ if view else None})")
        return Response(exc.get_full_details(), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        logger.error(f"Unexpected Exception: {exc!r}", exc_info=exc)
        return Response(error_body('ERR_500', UNEXPECTED_ERROR_MESSAGE), status=500)

    data = response.data
    message = '요청 처리 중 오류가 발생했습니다.'
    if isinstance(data, dict) and 'detail' in data:
        message = str(data['detail'])

    field, field_message = _first_field_error(data)
    if field is not None:
        response.data = error_body('ERR_101', message, detail=field_message, field=field)
    else:
        response.data = error_body(f'ERR_{response.status_code}', message)

    logger.warning(f"DRF Exception: {response.data['error']['code']} - {message}")
    return response
