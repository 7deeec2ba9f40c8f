"""
Launch strategy detection.

Reads a module's effective POM and decides whether to start the application
with ``spring-boot:run`` or ``exec:java``.
"""

from mvnctl.core.detection.detector import (
    DescriptorQuery,
    LaunchStrategyDetector,
    descriptor_hash,
)
from mvnctl.core.detection.models import (
    DetectionError,
    ExecPluginStrategy,
    LaunchCapabilities,
    LaunchStrategy,
    PropertyScheme,
    RunPluginStrategy,
    UndetectableStrategyError,
)
from mvnctl.core.detection.pom import extract_tag_content, parse_effective_pom
from mvnctl.core.detection.starters import (
    Starter,
    StarterRegistry,
    extract_fqcn,
    find_main_class_candidates,
)
from mvnctl.core.detection.strategy import (
    DEFAULT_SCHEME_CUTOFFS,
    build_launch_goals,
    decide_launch_strategy,
    select_property_scheme,
    version_key,
)

__all__ = [
    "DEFAULT_SCHEME_CUTOFFS",
    "DescriptorQuery",
    "DetectionError",
    "ExecPluginStrategy",
    "LaunchCapabilities",
    "LaunchStrategy",
    "LaunchStrategyDetector",
    "PropertyScheme",
    "RunPluginStrategy",
    "Starter",
    "StarterRegistry",
    "UndetectableStrategyError",
    "build_launch_goals",
    "decide_launch_strategy",
    "descriptor_hash",
    "extract_fqcn",
    "extract_tag_content",
    "find_main_class_candidates",
    "parse_effective_pom",
    "select_property_scheme",
    "version_key",
]
