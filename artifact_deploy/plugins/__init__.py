"""Plugin system for artifact-deploy"""

from .base import (
    Plugin,
    PluginInfo,
    PluginContext,
    PluginManager,
    PluginPriority,
    HookPoint,
)
from .builtin import LifecycleHooksPlugin

__all__ = [
    'Plugin',
    'PluginInfo',
    'PluginContext',
    'PluginManager',
    'PluginPriority',
    'HookPoint',
    'LifecycleHooksPlugin',
]
