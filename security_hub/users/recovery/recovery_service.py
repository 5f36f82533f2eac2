# === 恢复码服务 ===
import hashlib
import math
import secrets # 系统安全随机源
from typing import List, Optional

from django.conf import settings

from users.exceptions import RandomnessUnavailableError
from users.repositories import RecoveryCodeRepository
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.recovery")

# 单个恢复码可取值空间低于该值时告警
MIN_CODE_SPACE_BITS = 40

def _recovery_conf(key: str, default):
    return getattr(settings, "RECOVERY_CODES", {}).get(key, default)

def code_space_bits(blocks: int, block_length: int, alphabet: str) -> float:
    """单个恢复码的组合空间(bit)"""
    return blocks * block_length * math.log2(len(set(alphabet)))

def entropy_bits(count: int, blocks: int, block_length: int, alphabet: str) -> float:
    """整批恢复码的总熵(bit): count × blocks × block_length × log2(|alphabet|)"""
    return count * code_space_bits(blocks, block_length, alphabet)

class RecoveryCodeService:
    """
    恢复码生成与核销
    - regenerate: 旧码全部失效 + 新码写入在同一事务内, 明文只返回这一次
    - redeem: 规范化后按哈希核销, 每个恢复码只能使用一次
    """
    def __init__(self, repository: Optional[RecoveryCodeRepository] = None):
        self.repository = repository or RecoveryCodeRepository()
        self.separator = _recovery_conf("SEPARATOR", "-")

    def canonicalize(self, code: str) -> str:
        """去除空白与分隔符并转大写(用户输入大小写/格式不敏感)"""
        return "".join((code or "").split()).replace(self.separator, "").upper()

    def hash_code(self, code: str) -> str:
        return hashlib.sha256(self.canonicalize(code).encode("utf-8")).hexdigest()

    def generate(self, count: int, blocks: int, block_length: int, alphabet: str) -> List[str]:
        alphabet = "".join(dict.fromkeys(alphabet.upper())) # 大写去重, 保持顺序
        if count <= 0 or blocks <= 0 or block_length <= 0 or not alphabet:
            raise ValueError("恢复码数量、分段与字符集必须为正")

        if count > len(alphabet) ** (blocks * block_length):
            raise ValueError(f"恢复码数量 {count} 超出组合空间, 无法生成互不重复的恢复码")

        space = code_space_bits(blocks, block_length, alphabet)
        if space < MIN_CODE_SPACE_BITS:
            logger.warning(
                f"[恢复码] 单个恢复码组合空间仅 {space:.1f} bit, 低于 {MIN_CODE_SPACE_BITS} bit",
                extra={"blocks": blocks, "block_length": block_length, "alphabet_size": len(alphabet)},
            )

        codes: List[str] = []
        seen = set()
        try:
            while len(codes) < count:
                code = self.separator.join(
                    "".join(secrets.choice(alphabet) for _ in range(block_length))
                    for _ in range(blocks)
                )
                if code in seen:
                    continue # 同批次去重
                seen.add(code)
                codes.append(code)
        except (NotImplementedError, OSError) as e:
            logger.critical("[恢复码] 系统安全随机源不可用", exc_info=True)
            raise RandomnessUnavailableError() from e
        return codes

    def regenerate(
        self,
        user,
        count: Optional[int] = None,
        blocks: Optional[int] = None,
        block_length: Optional[int] = None,
        alphabet: Optional[str] = None,
    ) -> List[str]:
        codes = self.generate(
            count or _recovery_conf("COUNT", 8),
            blocks or _recovery_conf("BLOCKS", 2),
            block_length or _recovery_conf("BLOCK_LENGTH", 10),
            alphabet or _recovery_conf("ALPHABET", "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"),
        )
        replaced = self.repository.replace_all(user, [self.hash_code(c) for c in codes])
        logger.info(f"[恢复码] 用户ID={user.id} 重新生成恢复码", extra={"count": len(codes), "replaced": replaced})
        return codes

    def redeem(self, user, code: str) -> bool:
        if not self.canonicalize(code):
            return False
        used = self.repository.consume(user.id, self.hash_code(code))
        if used:
            logger.info(f"[恢复码] 用户ID={user.id} 使用恢复码通过验证")
        return used

    def remaining(self, user) -> int:
        return self.repository.count(user.id)
