# netcompat/sysconfig/__init__.py
from .core import SysconfigTranslator, get_interfaces
from .globals import GlobalDefaults, global_defaults
from .model import ControlPolicy, InterfaceConfig
from .routes import parse_routes, read_routes
from .sysconfig import Sysconfig

__all__ = [
    "SysconfigTranslator",
    "get_interfaces",
    "GlobalDefaults",
    "global_defaults",
    "ControlPolicy",
    "InterfaceConfig",
    "parse_routes",
    "read_routes",
    "Sysconfig",
]
