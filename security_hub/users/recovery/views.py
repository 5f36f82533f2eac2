# === 恢复码接口 ===
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from users.exceptions import NotEnabledError, StepUpRequiredError, TwoFactorError, to_app_exception
from users.recovery.recovery_service import RecoveryCodeService
from users.totp import step_up
from security_hub.settings.utils.error_codes import ErrorCodes
from security_hub.settings.utils.response_wrapper import json_response

class RecoveryCodesView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """
        重新生成恢复码(旧码全部失效)
        - 需已启用二次验证, 且当前会话已通过二次验证
        - 明文只在本次响应中返回
        """
        user = request.user
        try:
            if not user.totp_enabled:
                raise NotEnabledError()
            if not step_up.is_passed(request.session):
                raise StepUpRequiredError()
            codes = RecoveryCodeService().regenerate(user)
        except TwoFactorError as e:
            raise to_app_exception(e) from e

        return json_response(
            success=True, code=ErrorCodes.OK, message="恢复码已重新生成, 请妥善保存", data={"codes": codes}, request=request,
        )
