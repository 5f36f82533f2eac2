from .u2f_service import U2FRegistrationService

__all__ = [
    "U2FRegistrationService", # U2F / WebAuthn 注册发起
]
