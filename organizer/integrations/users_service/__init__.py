"""
Users service integration: OAuth sign-in and session lookup.
"""

from .client import UsersServiceClient, UsersServiceError

__all__ = ['UsersServiceClient', 'UsersServiceError']
