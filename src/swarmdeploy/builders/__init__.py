"""Build strategies for turning source into images."""

from swarmdeploy.builders.base import BuildCommand, BuildStrategy, BuildType
from swarmdeploy.builders.dispatcher import BuildDispatcher

__all__ = [
    "BuildCommand",
    "BuildDispatcher",
    "BuildStrategy",
    "BuildType",
]
