"""Authorization infrastructure: the casbin policy store.

- model.py: domain RBAC casbin model
- policy_store.py: CasbinPolicyStore implementing IPolicyStore
"""

from rbac_console.infrastructure.authorization.policy_store import CasbinPolicyStore

__all__ = ["CasbinPolicyStore"]
