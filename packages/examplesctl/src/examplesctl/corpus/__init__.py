from .build_config import NormalizedBuildConfig, normalize_build_config
from .discovery import ExampleProject, iter_projects
from .manifest import Manifest, read_manifest
from .toolchain import ToolchainPin, read_toolchain

__all__ = [
    "ExampleProject",
    "Manifest",
    "NormalizedBuildConfig",
    "ToolchainPin",
    "iter_projects",
    "normalize_build_config",
    "read_manifest",
    "read_toolchain",
]
