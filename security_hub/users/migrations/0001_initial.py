import django.db.models.deletion
import django.utils.timezone
import users.managers
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('email', models.EmailField(help_text='用于用户账户登录与验证', max_length=254, unique=True, verbose_name='邮箱地址')),
                ('username', models.CharField(help_text='可选用户名', max_length=150, unique=True, verbose_name='用户名')),
                ('organization', models.BigIntegerField(blank=True, help_text='所属组织/项目', null=True, verbose_name='组织ID')),
                ('is_active', models.BooleanField(default=True, verbose_name='账户是否启用')),
                ('is_staff', models.BooleanField(default=False, verbose_name='后台管理员')),
                ('is_superuser', models.BooleanField(default=False, verbose_name='超级管理员')),
                ('totp_secret', models.CharField(blank=True, editable=False, max_length=64, null=True, verbose_name='TOTP密钥')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='注册时间')),
                ('is_deleted', models.BooleanField(default=False, verbose_name='是否已逻辑删除')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': '用户',
                'verbose_name_plural': '用户表',
                'db_table': 'users_user',
            },
            managers=[
                ('objects', users.managers.CustomUserManager()),
            ],
        ),
        migrations.CreateModel(
            name='RecoveryCode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('organization', models.BigIntegerField(blank=True, help_text='生成时用户所属组织', null=True, verbose_name='组织ID')),
                ('code_hash', models.CharField(max_length=64, verbose_name='恢复码哈希')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='生成时间')),
                ('user', models.ForeignKey(help_text='关联的用户', on_delete=django.db.models.deletion.CASCADE, related_name='recovery_codes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': '恢复码',
                'verbose_name_plural': '恢复码',
                'db_table': 'users_recovery_code',
            },
        ),
        migrations.CreateModel(
            name='SecurityKey',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, default='', max_length=64, verbose_name='密钥名称')),
                ('credential_id', models.CharField(max_length=255, unique=True, verbose_name='凭据ID(base64url)')),
                ('public_key', models.TextField(verbose_name='公钥(base64url)')),
                ('sign_count', models.PositiveIntegerField(default=0, verbose_name='签名计数')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='注册时间')),
                ('user', models.ForeignKey(help_text='关联的用户', on_delete=django.db.models.deletion.CASCADE, related_name='security_keys', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': '安全密钥',
                'verbose_name_plural': '安全密钥',
                'db_table': 'users_security_key',
            },
        ),
        migrations.AddConstraint(
            model_name='recoverycode',
            constraint=models.UniqueConstraint(fields=('user', 'code_hash'), name='uniq_recovery_code_per_user'),
        ),
    ]
