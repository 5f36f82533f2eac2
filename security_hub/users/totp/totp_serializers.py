# === TOTP 序列化器模块 ===
from rest_framework import serializers # DRF 序列化器基类
from django.utils.translation import gettext_lazy as _ # 国际化支持(错误信息可翻译)

class OneTimePasswordSerializer(serializers.Serializer):
    """
    确认启用 / 解绑: 6位动态验证码
    - 仅做必填与长度校验, 格式不合法交由校验器判定为验证码错误(计入失败次数)
    """
    one_time_password = serializers.CharField(
        max_length=16,
        required=True,
        trim_whitespace=True,
        help_text=_("认证器 App 中显示的6位验证码"),
        label=_("验证码"),
    )

class StepUpVerifySerializer(serializers.Serializer):
    """登录二次验证: 6位动态验证码或恢复码"""
    one_time_password = serializers.CharField(
        max_length=64,
        required=True,
        trim_whitespace=True,
        help_text=_("6位动态验证码或恢复码"),
        label=_("验证码"),
    )
