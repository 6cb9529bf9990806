"""Model DTO parts; import from ``lumen_providers.base.models`` instead."""
