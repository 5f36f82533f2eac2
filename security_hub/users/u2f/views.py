# === U2F 安全密钥注册接口 ===
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from users.u2f.u2f_service import U2FRegistrationService
from security_hub.settings.utils.error_codes import ErrorCodes
from security_hub.settings.utils.response_wrapper import json_response

class U2FRegisterView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """发起安全密钥注册, challenge 暂存于 session"""
        data = U2FRegistrationService().begin_registration(request.user, request.session)
        return json_response(success=True, code=ErrorCodes.OK, message="请按提示操作安全密钥", data=data, request=request)
