"""Single-class Protocol modules; import from ``lumen_providers.base.interfaces``."""

from .generation_provider import GenerationProvider, GenerationResult
from .has_default_model import HasDefaultModel
from .model_listing_provider import ModelListingProvider

__all__ = ["GenerationProvider", "GenerationResult", "HasDefaultModel", "ModelListingProvider"]
