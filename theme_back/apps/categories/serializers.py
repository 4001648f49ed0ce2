from rest_framework import serializers

from .menu import VisibilityPolicy


# 프론트에 내려줄 형태
# MenuItem 직렬화 (submenu 는 있을 때만 포함)
class MenuItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    url = serializers.CharField()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.submenu:
            data["submenu"] = MenuItemSerializer(instance.submenu, many=True).data
        return data


# 메뉴 미리보기용 정책 파라미터
class MenuQuerySerializer(serializers.Serializer):
    policy = serializers.ChoiceField(
        choices=[policy.value for policy in VisibilityPolicy],
        required=False,
    )
