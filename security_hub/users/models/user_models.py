from django.db import models # ORM核心模块
from django.utils import timezone # 时间处理, 获取当前时间戳
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin # 自定义用户模型基类
from users.managers import CustomUserManager # 自定义用户管理器,支持邮箱注册、权限设定

# === 用户主模型 ===
class User(AbstractBaseUser, PermissionsMixin):
    """
    自定义用户模型:
    - 使用邮箱作为登录字段
    - totp_secret 非空即视为已启用二次验证(不单独存布尔字段, 避免状态不一致)
    - 支持 is_staff/is_superuser 权限控制
    - 密码字段由 AbstractBaseUser 提供, 自动加密存储
    """
    email = models.EmailField('邮箱地址', unique=True, null=False, blank=False, help_text="用于用户账户登录与验证")
    username = models.CharField('用户名', max_length=150, unique=True, null=False, blank=False, help_text="可选用户名")
    organization = models.BigIntegerField("组织ID", null=True, blank=True, help_text="所属组织/项目")

    is_active = models.BooleanField("账户是否启用", default=True)
    is_staff = models.BooleanField("后台管理员", default=False)
    is_superuser = models.BooleanField("超级管理员", default=False)

    # editable=False 密钥不在管理后台表单中展示
    totp_secret = models.CharField("TOTP密钥", max_length=64, null=True, blank=True, editable=False)

    date_joined = models.DateTimeField("注册时间", null=False, default=timezone.now)
    is_deleted = models.BooleanField("是否已逻辑删除", default=False)

    # 配置用户管理器
    objects = CustomUserManager()

    # 配置Django登录字段与必须字段
    USERNAME_FIELD = 'email' # 指定登录标识字段(createsuperuser使用该字段作为登录账号)
    REQUIRED_FIELDS = ['username'] # 创建超级用户时,需额外填写的字段

    class Meta:
        db_table = 'users_user' # 模型在数据库中对应的表名
        verbose_name = '用户' # 后台管理界面模型单数名
        verbose_name_plural = '用户表' # 后台模型复数名

    def __str__(self):
        return self.email

    @property
    def totp_enabled(self) -> bool:
        """是否已启用 TOTP 二次验证"""
        return self.totp_secret is not None
