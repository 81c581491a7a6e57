"""Core infrastructure: errors, configuration, paths and theming."""
