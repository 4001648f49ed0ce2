"""
테마 설정 검증 유틸리티

목적: 테마 설정 API / 관리 화면에서 공통으로 사용하는 검증 함수들
"""
import re
from rest_framework import serializers


class ValidationPatterns:
    """검증 정규표현식 패턴"""

    # 프론트 페이지 블록 행 (예: 6-6-0-0, 4-4-4-0)
    BLOCK_ROW = r'^\d{1,2}(-\d{1,2}){3}$'

    # 카테고리 헤더 메뉴 정책
    CATEGORY_MENU_POLICY = r'^(showall|excludehidden|disabled)$'


GRID_COLUMNS = 12


def validate_block_row(value):
    """
    블록 행 레이아웃 검증

    Args:
        value: '6-6-0-0' 형식의 문자열

    Returns:
        검증된 레이아웃

    Raises:
        serializers.ValidationError: 형식이 올바르지 않거나 폭 합계가 12를 넘는 경우
    """
    if not value:
        return value

    if not re.match(ValidationPatterns.BLOCK_ROW, value):
        raise serializers.ValidationError(
            '블록 행 형식이 올바르지 않습니다. (예: 6-6-0-0)'
        )

    total = sum(int(width) for width in value.split('-'))
    if total > GRID_COLUMNS:
        raise serializers.ValidationError(
            f'블록 폭의 합계는 {GRID_COLUMNS} 이하여야 합니다. (현재 {total})'
        )
    return value


def validate_category_menu_policy(value):
    """카테고리 헤더 메뉴 정책값 검증"""
    if not value:
        return value

    if not re.match(ValidationPatterns.CATEGORY_MENU_POLICY, value):
        raise serializers.ValidationError(
            '메뉴 정책은 showall, excludehidden, disabled 중 하나여야 합니다.'
        )
    return value


def validate_positive_number(value, field_name='값'):
    """
    양수 검증

    Args:
        value: 숫자 문자열 또는 숫자
        field_name: 필드명 (에러 메시지용)

    Returns:
        검증된 값

    Raises:
        serializers.ValidationError: 양수가 아닌 경우
    """
    if value in (None, ''):
        return value

    try:
        number = int(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError(f'{field_name}은(는) 숫자여야 합니다.')

    if number <= 0:
        raise serializers.ValidationError(
            f'{field_name}은(는) 양수여야 합니다.'
        )

    return value


# 설정 키별 검증 함수
SETTING_VALIDATORS = {
    'menuheadercateg': validate_category_menu_policy,
    'slidenum': lambda value: validate_positive_number(value, '슬라이드 수'),
}
SETTING_VALIDATORS.update({
    f'blockrow{i}': validate_block_row for i in range(1, 9)
})


def validate_theme_setting(key, value):
    """설정 키에 맞는 검증 함수를 적용"""
    validator = SETTING_VALIDATORS.get(key)
    if validator is None:
        return value
    return validator(value)
