# ==============================================
# Entity
# ==============================================
#
# PURPOSE:
#   The minimal surface an object needs to be stored as a
#   `reference` metadata value: a type identifier and an id.
#   MetaModel (the host base) derives from it, so any host can
#   also be the target of another host's metadata.
#
# ==============================================

from typing import Any, Optional


class Entity:
    """
    Base class for anything that can be referenced by id.

    Subclasses may set `__entity_type__` to control the identifier
    written into `"<type>#<id>"` references; it defaults to the
    class name.
    """

    __entity_type__: Optional[str] = None

    def __init__(self, id: Any = None):
        self.id = id

    @classmethod
    def entity_type(cls) -> str:
        return cls.__entity_type__ or cls.__name__

    @property
    def exists(self) -> bool:
        """True once the entity has been persisted (has an id)."""
        return self.id is not None

    def __repr__(self) -> str:
        return f"<{self.entity_type()} id={self.id!r}>"
