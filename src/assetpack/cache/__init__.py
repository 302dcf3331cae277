"""Content fingerprint APIs."""

from .digest import digest, host_for, stamped_name
from .store import Fingerprint, FingerprintCache

__all__ = ["Fingerprint", "FingerprintCache", "digest", "host_for", "stamped_name"]
