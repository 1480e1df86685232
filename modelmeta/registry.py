# ==============================================
# EntityRegistry
# ==============================================
#
# PURPOSE:
#   Resolve `"<type>#<id>"` references back into entities.
#   Each entity type is registered with a finder callable that
#   returns the entity, or None when no row has that id.
#
#   The registry is an ordinary object handed to the ValueCodec;
#   hosts that share a codec share a registry.
#
# USAGE:
# ------
#   registry = EntityRegistry()
#   registry.register("User", users.get)
#   registry.register_model(Account)       # uses Account.find
#   user = registry.find("User", 7)
#
# ==============================================

from typing import Any, Callable, Dict, Optional

from modelmeta.errors import NotFoundError

Finder = Callable[[Any], Optional[Any]]


class EntityRegistry:
    def __init__(self):
        self._finders: Dict[str, Finder] = {}

    def register(self, type_name: str, finder: Finder) -> None:
        """Register `finder(id) -> entity | None` for a type identifier."""
        self._finders[type_name] = finder

    def register_model(self, model_cls) -> None:
        """Register an Entity subclass that exposes a `find(id)` classmethod."""
        self.register(model_cls.entity_type(), model_cls.find)

    def unregister(self, type_name: str) -> None:
        self._finders.pop(type_name, None)

    def is_registered(self, type_name: str) -> bool:
        return type_name in self._finders

    def find(self, type_name: str, entity_id: Any) -> Any:
        """
        Load an entity by type identifier and id.

        Raises:
            NotFoundError: unknown type identifier, or no such entity
        """
        finder = self._finders.get(type_name)
        if finder is None:
            raise NotFoundError(f"No finder registered for entity type '{type_name}'")
        entity = finder(entity_id)
        if entity is None:
            raise NotFoundError(f"{type_name} with id {entity_id!r} not found")
        return entity
