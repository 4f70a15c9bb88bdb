# Security modules

from .auth import ShopperSession, AuthDependency, optional_user, require_user

__all__ = ["ShopperSession", "AuthDependency", "optional_user", "require_user"]
