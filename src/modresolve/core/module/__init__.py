"""Modules, their declared dependencies, and the registry that holds them."""

from modresolve.core.module.models import DependencyInfo, Module
from modresolve.core.module.registry import ModuleRegistry, TableModuleRegistry

__all__ = [
    "DependencyInfo",
    "Module",
    "ModuleRegistry",
    "TableModuleRegistry",
]
