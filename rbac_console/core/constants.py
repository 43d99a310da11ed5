"""Core constants: cache key prefixes and policy tuple layout.

Single source of truth for cache key structure and for the positional
layout of policy tuples shared by the enforcer and its callers.
"""

# Session Authority Cache key prefix (auth:token:<user_id>)
CACHE_PREFIX_AUTH_TOKEN = "auth:token"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Policy tuple field indexes: (role, resource, action, domain, effect)
POLICY_FIELD_ROLE = 0
POLICY_FIELD_RESOURCE = 1
POLICY_FIELD_DOMAIN = 3

POLICY_EFFECT_ALLOW = "allow"
