"""
Resolution event hooks for blazedialect.
"""

from .dispatcher import DIALECT_RESOLVED, IDENTITY_REFINED, HookDispatcher, hooks

__all__ = ["DIALECT_RESOLVED", "IDENTITY_REFINED", "HookDispatcher", "hooks"]
