"""Boundary DTOs."""

from .adapter_params import AdapterParams

__all__ = ["AdapterParams"]
