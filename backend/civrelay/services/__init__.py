"""Request-level services: the authentication-gated write policy.

Routes and socket handlers import from here, keeping transport concerns
separated from the rules that govern credential and file storage.
"""
from .access import AccessPolicy

__all__ = ['AccessPolicy']
