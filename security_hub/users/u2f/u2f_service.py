"""
U2F / WebAuthn 安全密钥注册(发起阶段)

- 生成注册参数(challenge + 已注册密钥排除列表)
- challenge 写入 session["u2f.registerData"], 供完成注册时比对
"""
import json
from typing import Optional

from django.conf import settings
from webauthn import generate_registration_options, options_to_json
from webauthn.helpers import bytes_to_base64url, base64url_to_bytes
from webauthn.helpers.structs import (
    AttestationConveyancePreference,
    AuthenticatorSelectionCriteria,
    PublicKeyCredentialDescriptor,
    UserVerificationRequirement,
)

from users.repositories import SecurityKeyRepository
from security_hub.settings.utils.logging import get_logger

logger = get_logger("security_hub.users.u2f")

SESSION_REGISTER_DATA = "u2f.registerData"

class U2FRegistrationService:
    def __init__(self, keys: Optional[SecurityKeyRepository] = None, rp_id: Optional[str] = None, rp_name: Optional[str] = None):
        conf = getattr(settings, "WEBAUTHN", {})
        self.keys = keys or SecurityKeyRepository()
        self.rp_id = rp_id or conf.get("RP_ID", "localhost")
        self.rp_name = rp_name or conf.get("RP_NAME", "Security Hub")
        self.timeout = int(conf.get("TIMEOUT_MS", 60000))

    def begin_registration(self, user, session) -> dict:
        """
        :return: {"registerData": 注册参数, "currentKeys": 已注册凭据ID列表}
        """
        current_keys = self.keys.list_credential_ids(user.id)
        options = generate_registration_options(
            rp_id=self.rp_id,
            rp_name=self.rp_name,
            user_id=str(user.id).encode("utf-8"),
            user_name=user.email,
            user_display_name=user.username or user.email,
            timeout=self.timeout,
            attestation=AttestationConveyancePreference.NONE,
            authenticator_selection=AuthenticatorSelectionCriteria(
                user_verification=UserVerificationRequirement.DISCOURAGED,
            ),
            exclude_credentials=[
                PublicKeyCredentialDescriptor(id=base64url_to_bytes(cid)) for cid in current_keys
            ],
        )
        session[SESSION_REGISTER_DATA] = bytes_to_base64url(options.challenge)
        logger.info(f"[U2F注册] 用户ID={user.id} 发起安全密钥注册", extra={"existing_keys": len(current_keys)})
        return {
            "registerData": json.loads(options_to_json(options)),
            "currentKeys": current_keys,
        }
