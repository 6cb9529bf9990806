"""Provider-agnostic core of the generation layer.

Import concrete pieces from their modules (``base.models``, ``base.errors``,
``base.streaming``, ``base.registry``...); this package module stays free of
re-exports so adapters can import any submodule without cycles.
"""
