"""
toot-comments Constants Module

Centralized constants; every magic value used across the package lives in
one of the submodules re-exported here.
"""

from .api import APIConfig, MastodonEndpoints
from .cache import Cache
from .cli import CLIDefaults, CLIHelp
from .http import HTTPHeaders, HTTPStatusCodes, ServerDefaults
from .system import Application, EnvVars, FileSystem

__all__ = [
    "APIConfig",
    "Application",
    "CLIDefaults",
    "CLIHelp",
    "Cache",
    "EnvVars",
    "FileSystem",
    "HTTPHeaders",
    "HTTPStatusCodes",
    "MastodonEndpoints",
    "ServerDefaults",
]
