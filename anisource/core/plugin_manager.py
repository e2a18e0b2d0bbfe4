"""
Plugin Manager - Provider plugin discovery, loading and resolution routing.

This module discovers provider plugins, instantiates the enabled ones with
their configuration, and routes resolution requests through them in
priority order. A provider that fails to load is skipped, never fatal.
"""

import asyncio
import importlib
import inspect
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type

from anisource.core.config_manager import ConfigManager
from anisource.core.exceptions import PluginError
from anisource.core.models import ResolutionRequest, ResolutionResult, VariantAttempt
from anisource.core.resolver import DEFAULT_DUB_SUFFIX, EpisodeResolver
from anisource.plugins.base import BasePlugin


logger = logging.getLogger(__name__)

PLUGIN_PACKAGE = "anisource.plugins"
PLUGIN_SUFFIX = "_plugin"


class PluginManager:
    """
    Manages provider plugins and runs resolutions through them.

    Plugin modules live as ``*.py`` files in the plugins package; a module
    named ``foo_plugin.py`` registers its BasePlugin subclass as ``foo``.
    """

    def __init__(self, config_manager: ConfigManager, plugins_dir: Optional[Path] = None):
        """
        Initialize plugin manager.

        Args:
            config_manager: Configuration manager instance
            plugins_dir: Directory containing plugin modules
        """
        self.config_manager = config_manager
        self.plugins_dir = plugins_dir or Path(__file__).parent.parent / "plugins"

        self._available_plugins: Dict[str, Type[BasePlugin]] = {}
        self._loaded_plugins: Dict[str, BasePlugin] = {}
        self._plugin_errors: Dict[str, Exception] = {}

        self._discovery_complete = False

    def discover_plugins(self) -> None:
        """
        Discover available plugins in the plugins directory.

        Imports each candidate module and registers the first concrete
        BasePlugin subclass found in it.
        """
        if not self.plugins_dir.exists():
            logger.warning(f"Plugins directory does not exist: {self.plugins_dir}")
            return

        logger.debug(f"Discovering plugins in {self.plugins_dir}")

        plugin_files = [
            f for f in sorted(self.plugins_dir.glob("*.py"))
            if f.name not in ("__init__.py", "base.py")
        ]

        for plugin_file in plugin_files:
            plugin_name = plugin_file.stem
            if plugin_name.endswith(PLUGIN_SUFFIX):
                plugin_name = plugin_name[:-len(PLUGIN_SUFFIX)]
            try:
                plugin_class = self._discover_plugin_module(plugin_file.stem)
            except Exception as e:
                self._plugin_errors[plugin_name] = e
                logger.error(f"Failed to discover plugin {plugin_name}: {e}")
                continue

            if plugin_class is None:
                logger.warning(f"No valid plugin class found in {plugin_file}")
                continue

            self._available_plugins.setdefault(plugin_name, plugin_class)
            logger.debug(f"Discovered plugin: {plugin_name} ({plugin_class.__name__})")

        self._discovery_complete = True
        logger.debug(f"Plugin discovery complete: {len(self._available_plugins)} plugins found")

    def _discover_plugin_module(self, module_stem: str) -> Optional[Type[BasePlugin]]:
        """Import a plugin module and return its plugin class."""
        try:
            module = importlib.import_module(f"{PLUGIN_PACKAGE}.{module_stem}")
        except ImportError as e:
            raise PluginError(f"Failed to import plugin module {module_stem}: {e}", module_stem)

        for _, obj in inspect.getmembers(module, inspect.isclass):
            if issubclass(obj, BasePlugin) and obj is not BasePlugin and not inspect.isabstract(obj):
                return obj
        return None

    def register_plugin(self, name: str, plugin_class: Type[BasePlugin]) -> None:
        """Register a plugin class directly, bypassing discovery."""
        if not issubclass(plugin_class, BasePlugin):
            raise PluginError(f"{plugin_class!r} is not a BasePlugin", name)
        self._available_plugins[name] = plugin_class
        self._loaded_plugins.pop(name, None)

    @property
    def available_plugins(self) -> Dict[str, Type[BasePlugin]]:
        if not self._discovery_complete:
            self.discover_plugins()
        return dict(self._available_plugins)

    def _plugin_config(self, plugin_name: str) -> Dict[str, Any]:
        sources_config = self.config_manager.sources
        source_config = sources_config.get_source(plugin_name)

        config: Dict[str, Any] = dict(source_config.config) if source_config else {}
        config.setdefault("timeout", sources_config.global_config.plugin_timeout)
        return config

    def load_plugin(self, plugin_name: str) -> Optional[BasePlugin]:
        """
        Load a specific plugin by name.

        Returns:
            Loaded plugin instance or None if loading failed
        """
        if plugin_name in self._loaded_plugins:
            return self._loaded_plugins[plugin_name]

        plugin_class = self.available_plugins.get(plugin_name)
        if plugin_class is None:
            logger.error(f"Plugin not found: {plugin_name}")
            return None

        try:
            plugin_instance = plugin_class(config=self._plugin_config(plugin_name))
        except Exception as e:
            self._plugin_errors[plugin_name] = e
            logger.error(f"Failed to load plugin {plugin_name}: {e}")
            return None

        self._loaded_plugins[plugin_name] = plugin_instance
        logger.debug(f"Loaded plugin: {plugin_name}")
        return plugin_instance

    def get_active_plugins(self) -> Dict[str, BasePlugin]:
        """
        Get all enabled plugins that load, in priority order.

        Returns:
            Dictionary of plugin name to plugin instance
        """
        active_plugins = {}

        for plugin_name in self.config_manager.sources.get_enabled_sources():
            plugin = self.load_plugin(plugin_name)
            if plugin is not None:
                active_plugins[plugin_name] = plugin

        return active_plugins

    def _plugins_for(self, source: Optional[str]) -> Dict[str, BasePlugin]:
        if source is not None:
            plugin = self.load_plugin(source)
            if plugin is None:
                raise PluginError(f"Source '{source}' is not available", source)
            return {source: plugin}

        plugins = self.get_active_plugins()
        if not plugins:
            raise PluginError("No provider plugins are enabled")

        if not self.config_manager.sources.global_config.fallback_across_sources:
            first = next(iter(plugins))
            return {first: plugins[first]}
        return plugins

    async def resolve_episode(
        self,
        request: ResolutionRequest,
        source: Optional[str] = None,
        timeout: Optional[float] = None,
        dub_suffix: str = DEFAULT_DUB_SUFFIX,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResolutionResult:
        """
        Resolve an episode across providers.

        Providers are tried in priority order (or only ``source`` when
        given); the first found result wins. A not-found result carries the
        attempts of every provider tried.

        Raises:
            InvalidRequestError: If the request violates the contract
            PluginError: If no provider can be loaded
        """
        EpisodeResolver.validate_request(request)

        if not request.title_variants:
            return ResolutionResult.not_found()

        plugins = self._plugins_for(source)
        attempts: List[VariantAttempt] = []

        for plugin_name, plugin in plugins.items():
            resolver = EpisodeResolver(plugin, timeout=timeout, dub_suffix=dub_suffix)
            result = await resolver.resolve(request, cancel_event=cancel_event)
            if result.found:
                if attempts:
                    result = result.model_copy(update={"attempts": attempts + result.attempts})
                return result

            attempts.extend(result.attempts)
            logger.debug(f"Source {plugin_name} found nothing, trying next source")

        return ResolutionResult.not_found(attempts)

    async def resolve_episodes(
        self,
        requests: Sequence[ResolutionRequest],
        max_concurrent: Optional[int] = None,
        **kwargs: Any,
    ) -> List[ResolutionResult]:
        """
        Resolve several independent requests concurrently, in request order.

        ``max_concurrent`` defaults to the ``resolver.max_concurrent``
        setting. Keyword arguments are passed to ``resolve_episode``.
        """
        for request in requests:
            EpisodeResolver.validate_request(request)

        if max_concurrent is None:
            max_concurrent = self.config_manager.settings.resolver.max_concurrent
        semaphore = asyncio.Semaphore(max(1, max_concurrent))

        async def resolve_one(request: ResolutionRequest) -> ResolutionResult:
            async with semaphore:
                return await self.resolve_episode(request, **kwargs)

        return list(await asyncio.gather(*(resolve_one(r) for r in requests)))

    def get_plugin_status(self) -> Dict[str, Dict[str, Any]]:
        """
        Get status information for all discovered plugins.

        Returns:
            Mapping of plugin name to class, enabled/loaded flags, priority
            and last error
        """
        status = {}

        for name, plugin_class in self.available_plugins.items():
            source_config = self.config_manager.sources.get_source(name)
            error = self._plugin_errors.get(name)
            status[name] = {
                "class": plugin_class.__name__,
                "enabled": bool(source_config and source_config.enabled),
                "priority": source_config.priority if source_config else None,
                "loaded": name in self._loaded_plugins,
                "error": str(error) if error else None,
            }

        for name, error in self._plugin_errors.items():
            status.setdefault(name, {
                "class": None,
                "enabled": False,
                "priority": None,
                "loaded": False,
                "error": str(error),
            })

        return status

    async def cleanup(self) -> None:
        """Clean up all loaded plugins."""
        cleanup_tasks = [plugin.cleanup() for plugin in self._loaded_plugins.values()]

        if cleanup_tasks:
            results = await asyncio.gather(*cleanup_tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.debug(f"Plugin cleanup failed: {result}")

        self._loaded_plugins.clear()
        logger.debug("Plugin manager cleanup complete")


__all__ = ["PluginManager"]
