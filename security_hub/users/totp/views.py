# === TOTP 接口视图模块(状态、启用、确认、解绑、二次验证) ===
from django.conf import settings
from django.shortcuts import render
from rest_framework.views import APIView # 基础API视图类
from rest_framework.permissions import IsAuthenticated # 权限控制类
from users.exceptions import TwoFactorError, to_app_exception
from users.recovery import RecoveryCodeService
from users.totp import step_up
from users.totp.pending_store import build_pending_store
from users.totp.totp_serializers import OneTimePasswordSerializer, StepUpVerifySerializer
from users.totp.totp_service import TwoFactorDeactivationService, TwoFactorEnrollmentService
from security_hub.settings.utils.error_codes import ErrorCodes
from security_hub.settings.utils.request_utils import ensure_session_key
from security_hub.settings.utils.response_wrapper import json_response # 统一五段式响应

def _issuer_label(request) -> str:
    """认证器 App 中显示的签发方, 未配置时使用请求 Host"""
    return settings.TWOFA.get("ISSUER") or request.get_host()

# === 二次验证状态 ===
class TwoFactorStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        session_key = request.session.session_key
        try:
            pending = build_pending_store().peek(session_key) if session_key else None
            remaining = RecoveryCodeService().remaining(user)
        except TwoFactorError as e:
            raise to_app_exception(e) from e

        return json_response(
            success=True,
            code=ErrorCodes.OK,
            message="获取成功",
            data={
                "enabled": user.totp_enabled,
                "setup_pending": pending is not None and pending.user_id == user.id,
                "recovery_codes_remaining": remaining,
                "step_up_passed": step_up.is_passed(request.session),
            },
            request=request,
        )

# === 启用TOTP接口 ===
class TOTPEnableView(APIView):
    permission_classes = [IsAuthenticated] # 仅限登录用户访问

    def post(self, request):
        """
        发起启用: 返回二维码(data URI)与密钥, 密钥待确认前不落库
        """
        try:
            payload = TwoFactorEnrollmentService().enable(
                request.user, ensure_session_key(request), _issuer_label(request),
            )
        except TwoFactorError as e:
            raise to_app_exception(e) from e

        return json_response(
            success=True,
            code=ErrorCodes.OK,
            message="请使用认证器 App 扫描二维码",
            data=payload.as_response_data(),
            request=request,
        )

# === 确认启用TOTP接口 ===
class TOTPConfirmView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """
        提交验证码确认绑定; 无论成败待确认密钥均作废
        """
        serializer = OneTimePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            TwoFactorEnrollmentService().confirm(
                request.user,
                ensure_session_key(request),
                serializer.validated_data["one_time_password"],
                request.session,
            )
        except TwoFactorError as e:
            raise to_app_exception(e) from e

        return json_response(
            success=True, code=ErrorCodes.OK, message="二次验证已启用", data={"success": True}, request=request,
        )

# === 解绑 TOTP 接口 ===
class TOTPDisableView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """解绑确认页"""
        return render(request, "users/2fa_disable.html", {"totp_enabled": request.user.totp_enabled})

    def post(self, request):
        """
        提交验证码解绑
        - 验证码错误与未启用统一返回, 不暴露具体原因
        """
        serializer = OneTimePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            TwoFactorDeactivationService().disable(
                request.user, serializer.validated_data["one_time_password"], request.session,
            )
        except TwoFactorError as e:
            raise to_app_exception(e, uniform_failure=True) from e

        return json_response(
            success=True, code=ErrorCodes.OK, message="二次验证已解绑", data={"success": True}, request=request,
        )

# === 登录二次验证接口 ===
class TwoFactorVerifyView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """提交 TOTP 动态码或恢复码, 通过后标记当前会话已完成二次验证"""
        serializer = StepUpVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            method = step_up.StepUpService().verify_login(
                request.user, serializer.validated_data["one_time_password"], request.session,
            )
        except TwoFactorError as e:
            raise to_app_exception(e) from e

        return json_response(
            success=True,
            code=ErrorCodes.OK,
            message="二次验证通过",
            data={"success": True, "method": method},
            request=request,
        )
