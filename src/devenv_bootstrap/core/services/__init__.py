from __future__ import annotations

from .textual_patcher import TextualPatcher, rewrite_lockfile_urls, swap_snippet
from .patch_orchestrator import PatchOrchestrator
from .failure_classifier import classify_clone_failure
from .checkout_repair import CheckoutRepair, sanitize_path
from .repository_manager import RepositoryAcquisitionManager
from .registry_restore import RegistryRestorer

__all__ = [
    "TextualPatcher",
    "rewrite_lockfile_urls",
    "swap_snippet",
    "PatchOrchestrator",
    "classify_clone_failure",
    "CheckoutRepair",
    "sanitize_path",
    "RepositoryAcquisitionManager",
    "RegistryRestorer",
]
