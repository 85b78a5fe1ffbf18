"""Application startup: configuration checks and component wiring"""
from startup.manager import StartupManager

__all__ = ['StartupManager']
