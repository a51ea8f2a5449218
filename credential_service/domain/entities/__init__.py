"""
Credential Service Domain Entities
"""

from .account import Account

__all__ = [
    "Account",
]
