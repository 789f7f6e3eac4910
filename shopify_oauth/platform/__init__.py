"""
Message integrity primitives for Shopify requests.

- hmac_signing: HMAC-SHA256 signing and constant-time comparison
- query_canonicalizer: signing input for callback and app proxy queries
- webhook_verification: webhook body verification with body replay
"""
