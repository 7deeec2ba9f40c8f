"""
Service layer for mvnctl.

Services compose the core packages into the operations the CLI exposes.
"""

from mvnctl.core.services.session import LaunchPlan, ModuleSession

__all__ = ["LaunchPlan", "ModuleSession"]
