from django.db import models
from django.conf import settings # 获取 AUTH_USER_MODEL配置

# === 恢复码模型 ===
class RecoveryCode(models.Model):
    """
    二次验证恢复码
    - 仅存储规范化后恢复码的 sha256, 明文只在生成时返回一次
    - 行存在即未使用, 使用后删除
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="recovery_codes",
        help_text="关联的用户"
    )
    organization = models.BigIntegerField("组织ID", null=True, blank=True, help_text="生成时用户所属组织")
    code_hash = models.CharField("恢复码哈希", max_length=64)
    created_at = models.DateTimeField("生成时间", auto_now_add=True)

    class Meta:
        db_table = 'users_recovery_code'
        verbose_name = '恢复码'
        verbose_name_plural = '恢复码'
        constraints = [
            models.UniqueConstraint(fields=["user", "code_hash"], name="uniq_recovery_code_per_user"),
        ]

    def __str__(self):
        return f"{self.user}的恢复码"

# === 安全密钥模型 ===
class SecurityKey(models.Model):
    """
    已注册的 U2F / WebAuthn 安全密钥
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="security_keys",
        help_text="关联的用户"
    )
    name = models.CharField("密钥名称", max_length=64, blank=True, default="")
    credential_id = models.CharField("凭据ID(base64url)", max_length=255, unique=True)
    public_key = models.TextField("公钥(base64url)")
    sign_count = models.PositiveIntegerField("签名计数", default=0)
    created_at = models.DateTimeField("注册时间", auto_now_add=True)

    class Meta:
        db_table = 'users_security_key'
        verbose_name = '安全密钥'
        verbose_name_plural = '安全密钥'

    def __str__(self):
        return f"{self.user}的安全密钥{self.name}"
