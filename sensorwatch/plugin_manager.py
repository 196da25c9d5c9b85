"""Keeps the loaded sensor plugins and matches devices to them."""

from __future__ import annotations

import logging

from .plugin_interface import DeviceInfo, Plugin

logger = logging.getLogger(__name__)


class PluginManager:
    """Holds initialised plugins in the order they were added."""

    def __init__(self) -> None:
        self._plugins: list[Plugin] = []

    def add_plugin(self, plugin: Plugin) -> None:
        """Initialise ``plugin`` and keep it.

        Whatever ``plugin.initialize()`` raises propagates, and the plugin is
        then not kept.
        """
        plugin.initialize()
        self._plugins.append(plugin)
        logger.info("Loaded plugin: %s v%s", plugin.plugin_name, plugin.version)

    def unload_all_plugins(self) -> None:
        """Clean up every plugin and forget them all."""
        for plugin in self._plugins:
            plugin.cleanup()
        self._plugins.clear()

    def detect_all_devices(self) -> list[DeviceInfo]:
        """Devices seen by all plugins, without duplicates, first sighting kept."""
        devices: list[DeviceInfo] = []
        for plugin in self._plugins:
            for device in plugin.detect_devices():
                if device not in devices:
                    devices.append(device)
        return devices

    def find_best_plugin_for_device(self, device: DeviceInfo) -> Plugin | None:
        """The plugin with the highest positive match score that can handle ``device``.

        On a tie the plugin added first wins.
        """
        best: Plugin | None = None
        best_score = 0.0
        for plugin in self._plugins:
            if not plugin.can_handle_device(device):
                continue
            score = plugin.device_match_score(device)
            if score > best_score:
                best_score = score
                best = plugin
        return best

    def loaded_plugins(self) -> list[Plugin]:
        """The plugins, in the order they were added."""
        return list(self._plugins)

    def plugin_names(self) -> list[str]:
        """Names of the plugins, in the order they were added."""
        return [plugin.plugin_name for plugin in self._plugins]

    def get_plugin_by_name(self, name: str) -> Plugin | None:
        """The first plugin called ``name``, or None."""
        return next((p for p in self._plugins if p.plugin_name == name), None)

    def __enter__(self) -> PluginManager:
        return self

    def __exit__(self, *args: object) -> None:
        self.unload_all_plugins()