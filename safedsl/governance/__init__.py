"""
safedsl Governance

Allow/deny decisions for the interpreter:
- SecurityPolicy: method denylist, identifier shape and optional allowlist
- Value sanitizers: CSS tokens and URLs written into render nodes
"""

from safedsl.governance.policy import (
    SecurityPolicy,
    DEFAULT_POLICY,
    DENIED_METHODS,
    SHELL_METACHARACTERS,
    is_method_allowed,
    is_identifier_suspicious,
)
from safedsl.governance.values import safe_css_token, validate_url

__all__ = [
    "SecurityPolicy",
    "DEFAULT_POLICY",
    "DENIED_METHODS",
    "SHELL_METACHARACTERS",
    "is_method_allowed",
    "is_identifier_suspicious",
    "safe_css_token",
    "validate_url",
]
