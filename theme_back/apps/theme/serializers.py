from rest_framework import serializers

from utils.validators import validate_theme_setting


class ThemeSettingsSerializer(serializers.Serializer):
    """
    테마 설정 일괄 저장
    요청 예: {"settings": {"menuheadercateg": "excludehidden", "blockrow1": "6-6-0-0"}}
    """
    settings = serializers.DictField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        allow_empty=False,
    )

    def validate_settings(self, value):
        errors = {}
        for key, setting_value in value.items():
            try:
                validate_theme_setting(key, setting_value)
            except serializers.ValidationError as e:
                errors[key] = e.detail
        if errors:
            raise serializers.ValidationError(errors)
        return value
