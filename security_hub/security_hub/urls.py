"""
URL configuration for security_hub project.

- /api/users/ 二次验证相关接口
- /api-auth/ DRF 自带 session 登录页(浏览器调试)
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/users/', include('users.urls')),
    path('api-auth/', include('rest_framework.urls')),
]
