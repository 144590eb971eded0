"""Load a catalog object from an import reference.

The CLI accepts ``--catalog package.module:attribute``. The attribute may be
a ``BlockCatalog`` instance or a zero-argument callable returning one.
"""

from __future__ import annotations

import importlib

from blockflow.serializer.catalog.protocol import BlockCatalog
from blockflow.serializer.errors import ReferenceResolutionError

__all__ = ["load_catalog"]


def load_catalog(reference: str) -> BlockCatalog:
    """Resolve ``module:attribute`` to a catalog.

    Args:
        reference: Import reference such as ``myapp.blocks:catalog``.

    Returns:
        The catalog object.

    Raises:
        ReferenceResolutionError: If the module or attribute cannot be found,
            or the object does not implement ``BlockCatalog``.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ReferenceResolutionError(
            reference_type="catalog",
            reference_name=reference,
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ReferenceResolutionError(
            reference_type="catalog",
            reference_name=reference,
        ) from e

    target = module
    for part in attribute.split("."):
        if not hasattr(target, part):
            raise ReferenceResolutionError(
                reference_type="catalog",
                reference_name=reference,
            )
        target = getattr(target, part)

    candidate = target
    if not isinstance(candidate, BlockCatalog) and callable(candidate):
        candidate = candidate()
    if not isinstance(candidate, BlockCatalog):
        raise ReferenceResolutionError(
            reference_type="catalog",
            reference_name=reference,
        )
    return candidate
