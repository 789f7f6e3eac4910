"""
Business logic services.
"""

from shopify_oauth.services.oauth_service import OAuthService

__all__ = ["OAuthService"]
