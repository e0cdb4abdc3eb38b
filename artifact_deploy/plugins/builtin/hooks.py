"""Lifecycle hooks plugin for custom scripts"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Dict, Any, List

from ..base import Plugin, PluginInfo, PluginContext, PluginPriority, HookPoint
from ...constants import DEFAULT_HOOKS_DIR, DEFAULT_HOOK_TIMEOUT


class LifecycleHooksPlugin(Plugin):
    """Execute custom scripts at lifecycle points

    A script named after the hook point (``post-deploy-build.sh``,
    ``post-deploy-build.py`` or ``post-deploy-build``) in the hooks
    directory runs when that hook fires. Numbered scripts such as
    ``10-post-deploy-build.sh`` run afterwards in name order. A non-zero
    exit is reported as a hook error.
    """

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)

        self.hooks_dir = Path(self.config.get('hooks_dir') or DEFAULT_HOOKS_DIR)
        self.timeout = self.config.get('timeout', DEFAULT_HOOK_TIMEOUT)
        self.cwd = self.config.get('cwd')

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name="lifecycle-hooks",
            version="1.0.0",
            description="Run project scripts around the artifact build",
            priority=PluginPriority.FIRST,
            hook_points=list(HookPoint)
        )

    async def handle_hook(self, context: PluginContext) -> PluginContext:
        for script in self._find_hook_scripts(context.hook_point.value):
            self.logger.info(f"Executing hook script: {script}")
            if not await self._execute_script(script, context):
                context.add_error(f"Hook script failed: {script}")
                break

        return context

    def _find_hook_scripts(self, hook_name: str) -> List[Path]:
        if not self.hooks_dir.is_dir():
            return []

        scripts = []
        for ext in ['.sh', '.py', '']:
            script_path = self.hooks_dir / f"{hook_name}{ext}"
            if script_path.is_file():
                scripts.append(script_path)

        numbered = sorted(
            s for s in self.hooks_dir.glob(f"[0-9][0-9]-{hook_name}*") if s.is_file()
        )
        return scripts + numbered

    def _command_for(self, script_path: Path) -> List[str]:
        if script_path.suffix == '.py':
            return [sys.executable, str(script_path)]
        if os.access(script_path, os.X_OK):
            return [str(script_path)]
        return ['sh', str(script_path)]

    async def _execute_script(self, script_path: Path, context: PluginContext) -> bool:
        """Run one script; True when it exits 0 within the timeout"""
        env = os.environ.copy()
        env.update(context.environment())

        try:
            process = await asyncio.create_subprocess_exec(
                *self._command_for(script_path),
                env=env,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            self.logger.error(f"Failed to execute hook script: {e}")
            return False

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            self.logger.error(f"Hook script timed out after {self.timeout}s")
            return False

        if stdout:
            self.logger.info(f"Hook output: {stdout.decode(errors='replace').strip()}")
        if stderr:
            self.logger.warning(f"Hook error: {stderr.decode(errors='replace').strip()}")

        return process.returncode == 0
