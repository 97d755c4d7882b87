# ledger_api/models/user.py
# Note: User is defined in core/auth.py next to the identity-provider wiring,
# so we re-export it here for code that expects every model under models/.

from ledger_api.core.auth import Role, User

__all__ = ["Role", "User"]
