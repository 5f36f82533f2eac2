from django.http import HttpRequest

def ensure_session_key(request: HttpRequest) -> str:
    """
    获取当前请求的 session_key
    - 匿名或新会话尚未落库时 session_key 为空, 先 save() 生成
    - 2FA 待确认密钥按 session_key 分槽存储, 必须保证其存在
    """
    session = request.session
    if not session.session_key:
        session.save()
    return str(session.session_key)
