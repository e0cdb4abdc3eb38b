"""Built-in plugins"""

from .hooks import LifecycleHooksPlugin

__all__ = ['LifecycleHooksPlugin']
