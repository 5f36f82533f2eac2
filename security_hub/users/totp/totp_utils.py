import base64 # Base64 编码工具
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO # 内存缓冲, 生成 PNG 字节流
from typing import Optional, Union

import pyotp # 生成和验证一次性密码的 Python 库
import qrcode # 二维码生成库
from qrcode.image.pil import PilImage # 使用PIL工厂生成图像
from qrcode.constants import ERROR_CORRECT_M
from PIL import Image # 图像处理库
from django.conf import settings

from users.exceptions import RandomnessUnavailableError
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.totp")

# 默认二维码尺寸参数
DEFAULT_BOX_SIZE = 10
DEFAULT_BORDER = 4
TOTP_DIGITS = 6

TimeLike = Union[datetime, int, float]

def _twofa_conf(key: str, default):
    return getattr(settings, "TWOFA", {}).get(key, default)

def generate_qr_image(uri: str, box_size: int = DEFAULT_BOX_SIZE, border: int = DEFAULT_BORDER) -> Image.Image:
    """
    根据 OTP URI 生成二维码图像对象(PIL Image)
    :param uri: OTP URI 字符串
    :param box_size: 单个二维码模块大小(像素)
    :param border: 二维码边框宽度(单位: 模块数)
    """
    try:
        qr = qrcode.QRCode(
            version=None, # 自动适应内容长度
            error_correction=ERROR_CORRECT_M,
            box_size=box_size,
            border=border
        )
        qr.add_data(uri)
        qr.make(fit=True)
        return qr.make_image(image_factory=PilImage).get_image()
    except (ValueError, TypeError, OSError) as e:
        raise RuntimeError(f"二维码生成失败: {e}, 请稍后重试") from e

def encode_qr_image_to_data_uri(img: Image.Image) -> str:
    """
    将二维码图像编码为 data URI, 前端 <img src> 直接渲染
    """
    with BytesIO() as buffer:
        img.save(buffer, format='PNG')
        encoded = base64.b64encode(buffer.getvalue()).decode()
    return f"data:image/png;base64,{encoded}"

@dataclass(frozen=True)
class EnrollmentPayload:
    """启用阶段返回给用户的绑定信息(不落库)"""
    uri: str # otpauth:// 配置 URI
    secret: str # base32 密钥(供无法扫码时手动输入)
    image: str # 二维码 data URI

    def as_response_data(self) -> dict:
        return {"image": self.image, "secret": self.secret}

class SecretIssuer:
    """
    TOTP 密钥签发
    - issue(): 生成 base32 随机密钥, 与用户状态无关
    - build_enrollment_payload(): 纯函数, 生成 URI 与二维码, 不做任何持久化
    """
    def __init__(self, secret_length: Optional[int] = None, box_size: Optional[int] = None):
        self.secret_length = secret_length or _twofa_conf("SECRET_LENGTH", 32)
        self.box_size = box_size or _twofa_conf("QR_BOX_SIZE", DEFAULT_BOX_SIZE)

    def issue(self) -> str:
        try:
            return pyotp.random_base32(length=self.secret_length)
        except (NotImplementedError, OSError) as e:
            # 系统随机源不可用属于进程级故障, 不做业务重试
            logger.critical("[TOTP签发] 系统安全随机源不可用", exc_info=True)
            raise RandomnessUnavailableError() from e

    def build_enrollment_payload(self, secret: str, account_label: str, issuer_label: str) -> EnrollmentPayload:
        """
        示例 URI: otpauth://totp/Security%20Hub:user%40example.com?secret=XXXX&issuer=Security%20Hub
        """
        uri = pyotp.TOTP(secret).provisioning_uri(name=account_label, issuer_name=issuer_label)
        image = encode_qr_image_to_data_uri(generate_qr_image(uri, box_size=self.box_size))
        return EnrollmentPayload(uri=uri, secret=secret, image=image)

class TOTPVerifier:
    """
    TOTP 动态验证码校验(无状态)
    - 非6位数字直接判定失败, 不调用 pyotp
    - 容忍前后 valid_window 个时间步长的时钟偏差, 单次最多比较 2*window+1 次
    """
    def __init__(self, valid_window: Optional[int] = None):
        self.valid_window = _twofa_conf("VALID_WINDOW", 1) if valid_window is None else valid_window

    @staticmethod
    def is_well_formed(code: Optional[str]) -> bool:
        return bool(code) and code.isdigit() and len(code) == TOTP_DIGITS

    def verify(self, secret: Optional[str], submitted_code: Optional[str], now: Optional[TimeLike] = None) -> bool:
        if not secret or not self.is_well_formed(submitted_code):
            return False
        try:
            return pyotp.TOTP(secret).verify(submitted_code, for_time=now, valid_window=self.valid_window)
        except (ValueError, TypeError):
            # 密钥格式损坏(非法 base32)
            logger.warning("[TOTP校验] 密钥格式非法, 判定校验失败")
            return False

    @staticmethod
    def current_code(secret: str, now: Optional[TimeLike] = None) -> str:
        totp = pyotp.TOTP(secret)
        return totp.now() if now is None else totp.at(now)


__all__ = [
    "EnrollmentPayload",
    "SecretIssuer", # 密钥签发 + 绑定二维码
    "TOTPVerifier", # 动态验证码校验
    "generate_qr_image", # 生成二维码 PIL 图像
    "encode_qr_image_to_data_uri", # 图像转 data URI
]
