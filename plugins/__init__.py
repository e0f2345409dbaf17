"""Plugins package - page plugins discovered by PluginLoader."""
