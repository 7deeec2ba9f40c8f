"""
mvnctl - Maven process orchestration from the terminal.

Builds Maven command lines, decides how to launch an application entry
point, injects logging/property overrides without touching project sources,
and manages the lifecycle of the spawned Maven processes.
"""

__version__ = "0.4.0"

from mvnctl.core.config.models import MvnctlConfig

__all__ = ["MvnctlConfig", "__version__"]
