from django.contrib.auth.base_user import BaseUserManager # django内置基础用户管理器

class CustomUserManager(BaseUserManager):
    """
    自定义用户管理器:
    - 支持通过邮箱(email)创建普通用户和超级用户
    - 新建用户一律未启用二次验证(totp_secret 为空)
    """
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        """
        创建普通用户
        - email: 用户邮箱地址(唯一身份标识)
        - password: 明文密码, set_password() 哈希后存储
        """
        if not email:
            raise ValueError("必须提供邮箱地址")
        if not password:
            raise ValueError("密码不能为空")

        extra_fields.pop("totp_secret", None) # 二次验证只能通过绑定流程启用
        email = self.normalize_email(email) # 邮箱格式规范化
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db) # 支持多数据库路由
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """创建超级管理员用户(is_staff / is_superuser 强制为 True)"""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if not extra_fields.get("is_staff"):
            raise ValueError("超级用户必须设置 is_staff=True")
        if not extra_fields.get("is_superuser"):
            raise ValueError("超级用户必须设置 is_superuser=True")

        return self.create_user(email, password, **extra_fields)
