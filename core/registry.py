"""
Plugin Registry - Dynamic plugin registration and management.
Implements Open/Closed Principle (OCP) for extensibility.

Registering a plugin makes it known; enabling it runs ``activate`` and
publishes its page handlers in an explicit handler table that the
dispatcher resolves request paths against.
"""
from typing import Dict, List, Optional, Set, Tuple, Type
import logging

from core.interface import IPagePlugin, PageHandler
from core.app_context import AppContext
from core.controller import PageController, RenderHook


class PluginRegistry:
    """
    Registry for managing page plugins.
    Allows dynamic registration, enabling and lookup of plugins.
    """

    _instance: Optional["PluginRegistry"] = None

    def __new__(cls) -> "PluginRegistry":
        """Singleton pattern to ensure single registry instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._plugins: Dict[str, IPagePlugin] = {}
        self._enabled: Set[str] = set()
        # internal path (lowercase) -> (plugin name, handler)
        self._handlers: Dict[str, Tuple[str, PageHandler]] = {}
        self._logger = logging.getLogger(__name__)
        self._context: Optional[AppContext] = None
        self._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (used by tests and app factories)."""
        cls._instance = None

    def set_context(self, context: AppContext) -> None:
        """Set the application context for plugin activation."""
        self._context = context

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, plugin: IPagePlugin) -> bool:
        """
        Register a plugin with the registry (does not enable it).

        Args:
            plugin: The plugin instance to register

        Returns:
            bool: True if registration successful, False otherwise
        """
        plugin_name = plugin.get_plugin_name()

        if plugin_name in self._plugins:
            self._logger.warning(f"Plugin '{plugin_name}' already registered. Skipping.")
            return False

        self._plugins[plugin_name] = plugin
        self._logger.info(f"Plugin '{plugin_name}' registered successfully.")
        return True

    def register_class(self, plugin_class: Type[IPagePlugin]) -> bool:
        """
        Register a plugin by its class (instantiates automatically).

        Args:
            plugin_class: The plugin class to instantiate and register

        Returns:
            bool: True if registration successful, False otherwise
        """
        try:
            plugin_instance = plugin_class()
            return self.register(plugin_instance)
        except Exception as e:
            self._logger.error(f"Failed to instantiate plugin class: {e}")
            return False

    def unregister(self, plugin_name: str) -> bool:
        """
        Unregister a plugin, disabling it first if needed.

        Args:
            plugin_name: The name of the plugin to unregister

        Returns:
            bool: True if unregistration successful, False otherwise
        """
        if plugin_name not in self._plugins:
            self._logger.warning(f"Plugin '{plugin_name}' not found in registry.")
            return False

        if plugin_name in self._enabled:
            self.disable(plugin_name)

        plugin = self._plugins[plugin_name]
        try:
            plugin.on_shutdown()
        except Exception as e:
            self._logger.error(f"Error during plugin '{plugin_name}' shutdown: {e}")

        del self._plugins[plugin_name]
        self._logger.info(f"Plugin '{plugin_name}' unregistered.")
        return True

    # =========================================================================
    # Enable / Disable
    # =========================================================================

    def enable(self, plugin_name: str) -> bool:
        """
        Enable a registered plugin: run ``activate`` and publish its handlers.

        Handler paths already served by another plugin are rejected and the
        plugin stays disabled.

        Returns:
            bool: True if the plugin is enabled afterwards
        """
        plugin = self._plugins.get(plugin_name)
        if plugin is None:
            self._logger.warning(f"Cannot enable unknown plugin '{plugin_name}'.")
            return False
        if plugin_name in self._enabled:
            return True
        if self._context is None:
            self._logger.error(f"Cannot enable '{plugin_name}': registry has no context.")
            return False

        handlers = {path.strip("/").lower(): handler for path, handler in plugin.get_page_handlers().items()}
        conflicts = [
            path for path in handlers
            if path in self._handlers and self._handlers[path][0] != plugin_name
        ]
        if conflicts:
            self._logger.error(
                f"Plugin '{plugin_name}' handler path(s) already served: {conflicts}"
            )
            self._context.log_event(f"Plugin '{plugin_name}' not enabled: route conflict", "ERROR")
            return False

        try:
            plugin.activate(self._context)
        except Exception as e:
            self._logger.error(f"Failed to activate plugin '{plugin_name}': {e}")
            self._context.log_event(f"Plugin '{plugin_name}' activation failed: {e}", "ERROR")
            return False

        for path, handler in handlers.items():
            self._handlers[path] = (plugin_name, handler)
        self._enabled.add(plugin_name)
        self._context.log_event(f"Plugin '{plugin_name}' enabled", "SUCCESS")
        return True

    def disable(self, plugin_name: str) -> bool:
        """
        Disable a plugin: withdraw its handlers and run ``deactivate``.

        Returns:
            bool: True if the plugin was enabled and is now disabled
        """
        if plugin_name not in self._enabled:
            self._logger.warning(f"Plugin '{plugin_name}' is not enabled.")
            return False

        plugin = self._plugins[plugin_name]
        self._handlers = {
            path: entry for path, entry in self._handlers.items() if entry[0] != plugin_name
        }
        self._enabled.discard(plugin_name)

        try:
            plugin.deactivate(self._context)
        except Exception as e:
            self._logger.error(f"Error deactivating plugin '{plugin_name}': {e}")

        if self._context:
            self._context.log_event(f"Plugin '{plugin_name}' disabled", "INFO")
        return True

    def enable_configured(self, names: List[str]) -> int:
        """
        Enable the plugins listed in configuration. ``*`` means all.

        Returns:
            int: Number of plugins enabled
        """
        targets = self.get_plugin_names() if "*" in names else names
        return sum(1 for name in targets if self.enable(name))

    def is_enabled(self, plugin_name: str) -> bool:
        return plugin_name in self._enabled

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_plugin(self, plugin_name: str) -> Optional[IPagePlugin]:
        """
        Retrieve a plugin by name.

        Returns:
            The plugin instance or None if not found
        """
        return self._plugins.get(plugin_name)

    def get_all_plugins(self) -> List[IPagePlugin]:
        """Get all registered plugins."""
        return list(self._plugins.values())

    def get_enabled_plugins(self) -> List[IPagePlugin]:
        return [plugin for name, plugin in self._plugins.items() if name in self._enabled]

    def get_plugin_names(self) -> List[str]:
        """Get names of all registered plugins."""
        return list(self._plugins.keys())

    def get_handler_paths(self) -> List[str]:
        return sorted(self._handlers.keys())

    def resolve_handler(self, path: str) -> Optional[Tuple[PageHandler, List[str]]]:
        """
        Find the handler serving ``path``.

        The longest registered handler path that is a segment prefix of
        ``path`` wins (case-insensitive). The remaining segments are the
        handler arguments. ``path`` is expected to be already URL decoded.

        Returns:
            (handler, args) or None
        """
        segments = [segment for segment in path.strip("/").split("/") if segment]
        lowered = [segment.lower() for segment in segments]

        for size in range(len(segments), 0, -1):
            entry = self._handlers.get("/".join(lowered[:size]))
            if entry is not None:
                args = segments[size:]
                return entry[1], args

        return None

    def get_render_hooks(self) -> List[RenderHook]:
        """``base_render_before`` hooks of all enabled plugins."""
        hooks: List[RenderHook] = []
        for plugin in self.get_enabled_plugins():
            hooks.append(self._guard_hook(plugin))
        return hooks

    def _guard_hook(self, plugin: IPagePlugin) -> RenderHook:
        """Wrap a plugin hook so one broken plugin cannot break every page."""
        def hook(controller: PageController) -> None:
            try:
                plugin.base_render_before(controller)
            except Exception as e:
                self._logger.error(
                    f"Error in render hook of plugin '{plugin.get_plugin_name()}': {e}"
                )
        return hook

    def shutdown_all(self) -> None:
        """Shutdown all registered plugins."""
        for plugin_name in list(self._plugins.keys()):
            self.unregister(plugin_name)
        self._logger.info("All plugins shut down.")


class PluginLoader:
    """
    Dynamic plugin loader for discovering and loading plugins.
    """

    def __init__(self, registry: PluginRegistry, package: str = "plugins") -> None:
        self._registry = registry
        self._package = package
        self._logger = logging.getLogger(__name__)

    def _register_from(self, module: object) -> int:
        """Register every IPagePlugin implementation found in ``module``."""
        count = 0
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if (isinstance(attr, type) and
                issubclass(attr, IPagePlugin) and
                attr is not IPagePlugin and
                not getattr(attr, "__abstractmethods__", None)):
                if self._registry.register_class(attr):
                    count += 1
        return count

    def load_from_directory(self, plugins_path: str) -> int:
        """
        Load plugins from a directory.

        Supports:
        - Single-file plugins: plugins/*.py
        - Package plugins: plugins/<name>/__init__.py (e.g., howto_page/)

        Args:
            plugins_path: Path to the plugins directory

        Returns:
            int: Number of plugins loaded
        """
        import importlib.util
        import importlib
        from pathlib import Path

        path = Path(plugins_path)
        if not path.exists():
            self._logger.warning(f"Plugins directory '{plugins_path}' does not exist.")
            return 0

        loaded_count = 0

        # 1. Load single-file plugins (*.py)
        for plugin_file in sorted(path.glob("*.py")):
            if plugin_file.name.startswith("_"):
                continue

            try:
                spec = importlib.util.spec_from_file_location(
                    plugin_file.stem,
                    plugin_file
                )
                if spec and spec.loader:
                    module = importlib.util.module_from_spec(spec)
                    spec.loader.exec_module(module)
                    loaded_count += self._register_from(module)

            except Exception as e:
                self._logger.error(f"Error loading plugin from '{plugin_file}': {e}")

        # 2. Load package plugins (subdirectories with __init__.py)
        for subdir in sorted(path.iterdir()):
            if not subdir.is_dir():
                continue
            if subdir.name.startswith("_"):
                continue

            init_file = subdir / "__init__.py"
            if not init_file.exists():
                continue

            try:
                # Import the package using its dotted name
                module = importlib.import_module(f"{self._package}.{subdir.name}")
                count = self._register_from(module)
                if count:
                    loaded_count += count
                    self._logger.info(f"Loaded package plugin: {subdir.name}")

            except Exception as e:
                self._logger.error(f"Error loading package plugin '{subdir.name}': {e}")

        return loaded_count
