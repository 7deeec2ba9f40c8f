"""
Maven profile state and discovery.
"""

from mvnctl.core.profiles.models import (
    MavenProfile,
    ProfileSet,
    ProfileState,
    parse_maven_argument,
)
from mvnctl.core.profiles.parser import (
    extract_settings_profiles,
    parse_active_profiles,
    parse_all_profiles,
)
from mvnctl.core.profiles.service import MavenQuery, ProfileService

__all__ = [
    "MavenProfile",
    "MavenQuery",
    "ProfileService",
    "ProfileSet",
    "ProfileState",
    "extract_settings_profiles",
    "parse_active_profiles",
    "parse_all_profiles",
    "parse_maven_argument",
]
