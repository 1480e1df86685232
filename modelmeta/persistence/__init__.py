# ==============================================
# PERSISTENCE: per-host metadata cache + flush
# ==============================================
#
# Modules:
# --------
# - metadata_entry.py  → MetadataEntry, MetadataCache
# - metadata_store.py  → MetadataStore, FlushResult
#
# ==============================================

from .metadata_entry import MetadataEntry, MetadataCache
from .metadata_store import MetadataStore, FlushResult

__all__ = ["MetadataEntry", "MetadataCache", "MetadataStore", "FlushResult"]
