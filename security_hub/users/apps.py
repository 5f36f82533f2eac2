from django.apps import AppConfig

class UsersConfig(AppConfig):
    """用户与二次验证(TOTP / 恢复码 / U2F) 模块"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = '用户与二次验证'
