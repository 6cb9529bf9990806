"""Provider Factory utilities.

Purpose
-------
Create adapter instances from a canonical backend identifier. Adapter
modules are imported lazily with ``importlib`` so that selecting the local
backend never imports the hosted SDKs (and vice versa).

External dependencies
---------------------
- Standard library only (``importlib``). Adapters themselves depend on their
  SDKs, imported on demand.

Timeout and fallback semantics
------------------------------
None: the factory either returns an instance or raises
:class:`UnknownProviderError`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from .dto.adapter_params import AdapterParams


class UnknownProviderError(ValueError):
    """Raised when a backend cannot be resolved or initialized.

    Failure modes include an unregistered identifier, an adapter module that
    fails to import, a missing adapter class, and a constructor error.
    """


class ProviderFactory:
    """Create adapters based on a canonical name (e.g. ``"ollama"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "lumen_providers.openai.client", "class": "OpenAIProvider"},
        "gemini": {"module": "lumen_providers.gemini.client", "class": "GeminiProvider"},
        "ollama": {"module": "lumen_providers.ollama.client", "class": "OllamaProvider"},
    }

    @classmethod
    def normalize(cls, provider: str) -> str:
        """Return the canonical identifier or raise :class:`UnknownProviderError`."""
        name = (provider or "").lower().strip()
        if name not in cls._PROVIDERS:
            raise UnknownProviderError(
                f"Unknown provider '{provider}'; expected one of {', '.join(cls.supported())}"
            )
        return name

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        params: Optional[AdapterParams] = None,
        **kwargs: Any,
    ) -> Any:
        """Create an adapter instance.

        Parameters
        ----------
        provider:
            Canonical backend name.
        params:
            Optional :class:`AdapterParams`; explicit ``kwargs`` win conflicts.
        **kwargs:
            Adapter constructor keyword arguments.

        Raises
        ------
        UnknownProviderError
            Unknown backend, import failure, missing class, or constructor error.
        """
        name = cls.normalize(provider)
        merged_kwargs = cls._coerce_params(params, kwargs)
        spec = cls._PROVIDERS[name]
        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**merged_kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' adapter constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical backend names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())

    @staticmethod
    def _coerce_params(params: Optional[AdapterParams], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``AdapterParams`` into constructor ``kwargs``.

        - ``None`` fields are skipped so adapter defaults apply.
        - ``extra`` entries are flattened into the kwargs.
        - Explicit ``kwargs`` always win.
        """
        if params is None:
            return dict(kwargs)
        merged: Dict[str, Any] = dict(params.model_dump(exclude_none=True))
        merged.pop("provider", None)
        extra = merged.pop("extra", {}) or {}
        merged.update(extra)
        merged.update(kwargs)
        return merged


__all__ = ["ProviderFactory", "UnknownProviderError"]
