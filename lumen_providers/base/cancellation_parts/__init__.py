"""Implementation modules behind ``lumen_providers.base.cancellation``."""

from .cancellation_token import CancellationToken

__all__ = ["CancellationToken"]
