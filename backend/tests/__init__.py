"""
Test suite for the Vigil billing backend.

- Portal-session handler and endpoint
- Subscription lookup repository
- Stripe webhook sync
- Storage-estimate reporter
"""
