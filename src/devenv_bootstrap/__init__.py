from .app.main import (
    apply_patches,
    bootstrap,
    clone_repositories,
    patch_status,
    restore_registry,
    revert_patches,
)

__all__ = [
    "apply_patches",
    "bootstrap",
    "clone_repositories",
    "patch_status",
    "restore_registry",
    "revert_patches",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
