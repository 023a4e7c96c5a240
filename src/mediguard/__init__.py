"""MediGuard - privacy-preserving health credential verification

Providers open verification sessions and show a scannable code; holders scan
it with their wallet and answer with a proof; every attempt lands in the
provider's audit trail.
"""

__version__ = "0.1.0"
