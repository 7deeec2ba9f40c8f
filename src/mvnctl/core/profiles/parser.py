"""
Parsers for Maven's profile listings.

``help:all-profiles`` prints one ``Profile Id: <name> (Active: ..., Source: ...)``
line per profile and module, ``help:active-profiles`` prints
`` - <name> (source: ...)`` lines. Profiles declared in settings.xml are not
listed by Maven, so their ids are read from the file directly.
"""

import re

_PROFILE_ID_MARKER = "Profile Id:"
_ID_RE = re.compile(r"<id>\s*(.*?)\s*</id>")


def parse_all_profiles(lines: list[str]) -> list[str]:
    """
    Extract profile names from ``help:all-profiles`` output.

    Returns:
        Deduplicated names in first-seen order
    """
    seen: dict[str, None] = {}
    for line in lines:
        if _PROFILE_ID_MARKER not in line:
            continue
        rest = line.split(_PROFILE_ID_MARKER, 1)[1].strip()
        if not rest:
            continue
        name = rest.split()[0].split("(")[0].strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)


def parse_active_profiles(lines: list[str]) -> list[str]:
    """Extract profile names from ``help:active-profiles`` output."""
    seen: dict[str, None] = {}
    for line in lines:
        # Maven prefixes output with "[INFO] "
        stripped = line.strip()
        if stripped.startswith("[INFO]"):
            stripped = stripped[len("[INFO]") :].strip()
        if not stripped.startswith("- "):
            continue
        parts = stripped[2:].split()
        if parts:
            seen.setdefault(parts[0], None)
    return list(seen)


def extract_settings_profiles(xml_content: str) -> list[str]:
    """
    Read profile ids from a settings.xml document.

    Only ``<id>`` elements directly inside ``<profiles><profile>`` count, so
    server and mirror ids are ignored.
    """
    profiles: list[str] = []
    in_profiles = False
    in_profile = False

    for line in xml_content.splitlines():
        trimmed = line.strip()
        if trimmed.startswith("<profiles>"):
            in_profiles = True
            continue
        if trimmed.startswith("</profiles>"):
            in_profiles = False
            continue
        if not in_profiles:
            continue
        if trimmed.startswith("<profile>") or trimmed.startswith("<profile "):
            in_profile = True
            continue
        if trimmed.startswith("</profile>"):
            in_profile = False
            continue
        if in_profile and trimmed.startswith("<id>"):
            match = _ID_RE.match(trimmed)
            if match and match.group(1):
                profiles.append(match.group(1))
                # Only the profile's own id, not nested ones (repositories, ...)
                in_profile = False

    return profiles
