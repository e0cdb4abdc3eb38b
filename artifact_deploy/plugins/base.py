"""Extension hooks fired around the artifact build"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

ENV_PREFIX = "ARTIFACT_DEPLOY_"


class HookPoint(Enum):
    """Points in the build where plugins run"""
    PRE_DEPLOY_BUILD = "pre-deploy-build"
    POST_DEPLOY_BUILD = "post-deploy-build"


class PluginPriority(Enum):
    """Lower values run first"""
    FIRST = 0
    NORMAL = 50
    LAST = 100


@dataclass
class PluginContext:
    """State shared by the plugins handling one hook

    ``data`` carries the run's directories and, on the tag path, the tag.
    """
    hook_point: HookPoint
    operation: str
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def environment(self) -> Dict[str, str]:
        """Hook name, operation and scalar data as ``ARTIFACT_DEPLOY_*`` variables"""
        env = {
            f"{ENV_PREFIX}HOOK": self.hook_point.value,
            f"{ENV_PREFIX}OPERATION": self.operation,
        }
        for key, value in self.data.items():
            if isinstance(value, (str, int, float, bool)):
                env[f"{ENV_PREFIX}{key.upper()}"] = str(value)
        return env


@dataclass
class PluginInfo:
    """Plugin metadata"""
    name: str
    version: str
    description: str
    enabled: bool = True
    priority: PluginPriority = PluginPriority.NORMAL
    hook_points: List[HookPoint] = field(default_factory=list)


class Plugin(ABC):
    """A handler for one or more hook points

    Subclasses either override handle_hook or provide ``on_<hook>``
    coroutines, e.g. ``on_post_deploy_build``.
    """

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def get_info(self) -> PluginInfo:
        """Get plugin information"""

    async def handle_hook(self, context: PluginContext) -> PluginContext:
        handler = getattr(self, f"on_{context.hook_point.name.lower()}", None)
        if handler is None:
            return context
        return await handler(context)


class PluginManager:
    """Runs registered plugins for a hook point in priority order

    The first plugin that reports an error ends the hook.
    """

    def __init__(self):
        self._plugins: Dict[str, Plugin] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, plugin: Plugin) -> None:
        """Register a plugin, replacing one with the same name"""
        info = plugin.get_info()
        if info.name in self._plugins:
            self.logger.warning("Plugin %s already registered, replacing", info.name)
        self._plugins[info.name] = plugin
        self.logger.debug("Registered plugin %s v%s", info.name, info.version)

    def unregister(self, plugin_name: str) -> None:
        self._plugins.pop(plugin_name, None)

    def plugins_for(self, hook_point: HookPoint) -> List[Plugin]:
        """Enabled plugins handling hook_point, in execution order"""
        handlers = [
            plugin for plugin in self._plugins.values()
            if plugin.get_info().enabled and hook_point in plugin.get_info().hook_points
        ]
        return sorted(handlers, key=lambda p: p.get_info().priority.value)

    async def execute_hook(self,
                           hook_point: HookPoint,
                           context: PluginContext) -> PluginContext:
        """
        Execute plugins for a hook point

        Args:
            hook_point: Hook point to execute
            context: Plugin context

        Returns:
            The context after the last plugin that ran
        """
        for plugin in self.plugins_for(hook_point):
            name = plugin.get_info().name
            self.logger.debug("Running plugin %s for %s", name, hook_point.value)

            try:
                context = await plugin.handle_hook(context)
            except Exception as e:
                self.logger.error("Plugin %s failed: %s", name, e)
                context.add_error(f"Plugin {name} error: {e}")

            if context.has_errors():
                break

        return context

    def list_plugins(self) -> List[PluginInfo]:
        """List all registered plugins"""
        return [p.get_info() for p in self._plugins.values()]
