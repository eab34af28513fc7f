"""SQL workbench: controller, backend and CLI."""

__version__ = "0.1.0"
