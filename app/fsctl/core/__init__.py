"""Core application services: paths, configuration and theming."""
