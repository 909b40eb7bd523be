"""Custom exceptions for trusted proxy handling."""


class TrustedProxiesError(Exception):
    """Base class for trusted proxy errors."""


class InvalidTrustSpecification(TrustedProxiesError, ValueError):
    """A trusted proxy entry is neither an IP address nor a CIDR range."""
    def __init__(self, spec: str, detail: str = "invalid IP specification"):
        self.spec = spec
        self.detail = detail
        super().__init__(f"{detail}: {spec!r}")


class TrustStoreFrozenError(TrustedProxiesError, RuntimeError):
    """Trusted networks cannot be added once evaluation has started."""
    def __init__(self, detail: str = "trust store is frozen; add proxies before evaluating"):
        self.detail = detail
        super().__init__(detail)
