from django.urls import path
from users.totp.views import ( # TOTP 二次验证视图
    TwoFactorStatusView,
    TOTPEnableView,
    TOTPConfirmView,
    TOTPDisableView,
    TwoFactorVerifyView,
)
from users.recovery.views import RecoveryCodesView # 恢复码视图
from users.u2f.views import U2FRegisterView # U2F 安全密钥视图

app_name = "users"

urlpatterns = [
    # TOTP 二次验证
    path("2fa/status/", TwoFactorStatusView.as_view(), name="2fa_status"), # 当前二次验证状态
    path("2fa/enable/", TOTPEnableView.as_view(), name="2fa_enable"), # 发起启用: 二维码 + 密钥
    path("2fa/confirm/", TOTPConfirmView.as_view(), name="2fa_confirm"), # 确认启用: 校验验证码后落库
    path("2fa/disable/", TOTPDisableView.as_view(), name="2fa_disable"), # GET 解绑确认页 / POST 校验后解绑
    path("2fa/verify/", TwoFactorVerifyView.as_view(), name="2fa_verify"), # 登录二次验证(TOTP 或恢复码)

    # 恢复码
    path("2fa/recovery-codes/", RecoveryCodesView.as_view(), name="2fa_recovery_codes"), # 重新生成恢复码

    # U2F 安全密钥
    path("u2f/register/", U2FRegisterView.as_view(), name="u2f_register"), # 发起注册
]
