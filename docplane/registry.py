# docplane/registry.py
"""
Component registry.

Holds the pluggable boot units - collections and plugins - in registration
order. Registration order is the order the stage resolver visits them.
"""
from typing import Any, Callable, Dict, List, Optional

from docplane.core.exceptions import ConfigError
from docplane.schema.collection import Collection
from docplane.schema.compiler import STAGE_COMPILE


class Plugin:
    """A non-collection component with an optional boot hook."""

    def __init__(self, id: str, name: Optional[str] = None, boot: Optional[Callable] = None):
        self.id = id
        self.name = name or id
        self._boot = boot

    def boot(self, stage: str, pass_: int) -> Any:
        if self._boot is None:
            return None
        return self._boot(stage, pass_)

    def __repr__(self) -> str:
        return f"<Plugin {self.name}>"


class Registry:
    def __init__(self) -> None:
        self.components: List[Any] = []
        self.by_id: Dict[str, Any] = {}
        self.by_name: Dict[str, Collection] = {}

    @property
    def collections(self) -> List[Collection]:
        return [c for c in self.components if isinstance(c, Collection)]

    def register(self, component: Any) -> Any:
        """
        Add a component. Collections are compiled (stage "compile") right away;
        links to collections registered later stay unresolved until the link stage.
        """
        component_id = getattr(component, "id", None)
        if not component_id:
            raise ConfigError("Components must have an id")

        if component_id in self.by_id:
            raise ConfigError(
                f'Duplicate component id "{component_id}"',
                {"id": component_id, "existing": getattr(self.by_id[component_id], "name", None)}
            )

        if isinstance(component, Collection):
            if component.name in self.by_name:
                raise ConfigError(f'Duplicate collection name "{component.name}"', {"name": component.name})
            component.registry = self
            component.compile(STAGE_COMPILE)
            self.by_name[component.name] = component

        self.components.append(component)
        self.by_id[component_id] = component
        return component

    def get(self, component_id: Any) -> Any:
        return self.by_id.get(component_id)

    def find_collection(self, name: str) -> Optional[Collection]:
        return self.by_name.get(name)

    def forget(self, component_id: str) -> Optional[Any]:
        """Remove a component by id. Returns the removed component, if any."""
        component = self.by_id.pop(component_id, None)
        if component is None:
            return None

        self.components = [c for c in self.components if c is not component]
        if isinstance(component, Collection):
            self.by_name.pop(component.name, None)
            component.registry = None
        return component

    def clear(self) -> None:
        self.components = []
        self.by_id = {}
        self.by_name = {}
