class BillingError(Exception):
    pass


class SubscriptionLookupError(BillingError):
    """The subscription lookup could not produce a single record."""
    pass


class PaymentProviderError(BillingError):
    """A payment-provider call failed. ``str()`` is the provider's own message."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class PaymentProviderRejectedError(PaymentProviderError):
    """The provider refused the request (bad customer id, auth, permissions)."""
    pass


class PaymentProviderUnavailableError(PaymentProviderError):
    """The provider could not be reached or failed on its side."""
    pass
