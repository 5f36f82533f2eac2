# 测试公共工具
from django.contrib.auth import get_user_model
from django.core.cache import cache
from users.totp.pending_store import build_pending_store

User = get_user_model()

def create_user(email="alice@example.com", username="alice", **extra):
    return User.objects.create_user(email=email, password="S3cure-pass!", username=username, **extra)

def reset_twofa_state():
    """清空进程内待确认密钥与失败计数"""
    build_pending_store("local").clear_all()
    cache.clear()
