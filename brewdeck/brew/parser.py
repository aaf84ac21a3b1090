"""Parsers for brew command output.

Every parser is best-effort: malformed lines are skipped and missing fields
are left empty, so callers always get a (possibly partial) record back.
The only exception is ``parse_info_json``, which raises ``BrewParseError``
when the payload is not JSON at all so the client can fall back to the
text parser.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from brewdeck.exceptions import BrewParseError
from brewdeck.models import OutdatedPackage, Package, PackageInfo, PackageType, Tap

logger = logging.getLogger(__name__)

OFFICIAL_TAP_PREFIX = "homebrew/"
DEPENDENCY_MARKS = "✔✘"


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


# =============================================================================
# brew list / brew search / brew tap
# =============================================================================


def parse_list_versions(output: str, package_type: PackageType) -> list[Package]:
    """Parse ``brew list --versions``.

    Each line is ``name version [older versions...]``; the first version wins.
    """
    packages = []
    for line in _lines(output):
        fields = line.split()
        packages.append(
            Package(
                name=fields[0],
                full_name=fields[0],
                version=fields[1] if len(fields) > 1 else "",
                type=package_type,
                installed=True,
            )
        )
    return packages


def parse_names(output: str) -> list[str]:
    """Parse whitespace-separated package names (``brew list --pinned``)."""
    return [name for line in _lines(output) for name in line.split()]


def parse_search(output: str) -> list[Package]:
    """Parse ``brew search`` output.

    Results are grouped under ``==> Formulae`` and ``==> Casks`` headers;
    anything before the first header is a formula.
    """
    packages = []
    current = PackageType.FORMULA
    for line in _lines(output):
        if "Formulae" in line and line.startswith("==>"):
            current = PackageType.FORMULA
            continue
        if "Casks" in line and line.startswith("==>"):
            current = PackageType.CASK
            continue
        if line.startswith("=") or line.startswith("If you meant"):
            continue
        for name in line.split():
            packages.append(Package(name=name, full_name=name, type=current))
    return packages


def parse_taps(output: str) -> list[Tap]:
    """Parse ``brew tap``: one tap per line."""
    return [Tap(name=line, official=line.startswith(OFFICIAL_TAP_PREFIX)) for line in _lines(output)]


# =============================================================================
# brew outdated
# =============================================================================


def parse_outdated_text(output: str) -> list[OutdatedPackage]:
    """Parse ``brew outdated --verbose`` lines like ``git (2.39.0) < 2.39.1``.

    A bare name is accepted with empty versions.
    """
    packages = []
    for line in _lines(output):
        parts = line.split()
        current = latest = ""
        if len(parts) >= 4 and parts[-2] == "<":
            current = parts[1].strip("()").split(",")[0]
            latest = parts[-1]
        packages.append(
            OutdatedPackage(
                name=parts[0],
                current_version=current,
                latest_version=latest,
                pinned="[pinned" in line,
            )
        )
    return packages


def _outdated_entry(raw: dict[str, Any], package_type: PackageType) -> OutdatedPackage | None:
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        return None
    installed = raw.get("installed_versions")
    if isinstance(installed, list) and installed:
        current = str(installed[0])
    elif isinstance(installed, str):
        current = installed
    else:
        current = ""
    latest = raw.get("current_version")
    return OutdatedPackage(
        name=name,
        current_version=current,
        latest_version=latest if isinstance(latest, str) else "",
        pinned=bool(raw.get("pinned", False)),
        type=package_type,
    )


def parse_outdated_json(output: str) -> list[OutdatedPackage]:
    """Parse ``brew outdated --json=v2``.

    Raises:
        BrewParseError: If the output is not JSON.
    """
    if not output.strip():
        return []
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise BrewParseError("Invalid JSON from brew outdated", command="outdated", cause=e) from e

    if isinstance(data, list):
        # v1 shape: a flat list of formulae
        sections = [(data, PackageType.FORMULA)]
    elif isinstance(data, dict):
        sections = [
            (data.get("formulae") or [], PackageType.FORMULA),
            (data.get("casks") or [], PackageType.CASK),
        ]
    else:
        return []

    packages = []
    for entries, package_type in sections:
        for raw in entries:
            if isinstance(raw, dict):
                entry = _outdated_entry(raw, package_type)
                if entry is not None:
                    packages.append(entry)
    return packages


# =============================================================================
# brew info
# =============================================================================


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _formula_info(raw: dict[str, Any], name: str) -> PackageInfo:
    versions = raw.get("versions") if isinstance(raw.get("versions"), dict) else {}
    installed = raw.get("installed") if isinstance(raw.get("installed"), list) else []
    installed_version = ""
    if installed and isinstance(installed[-1], dict):
        installed_version = str(installed[-1].get("version", ""))
    return PackageInfo(
        name=raw.get("name") or name,
        type=PackageType.FORMULA,
        full_name=raw.get("full_name") or raw.get("name") or name,
        version=str(versions.get("stable") or ""),
        installed_version=installed_version,
        description=raw.get("desc") or "",
        homepage=raw.get("homepage") or "",
        dependencies=_string_list(raw.get("dependencies")),
        build_dependencies=_string_list(raw.get("build_dependencies")),
        caveats=raw.get("caveats") or "",
        installed=bool(installed),
        pinned=bool(raw.get("pinned", False)),
        outdated=bool(raw.get("outdated", False)),
    )


def _cask_info(raw: dict[str, Any], name: str) -> PackageInfo:
    # Casks list formula dependencies under depends_on.formula
    depends_on = raw.get("depends_on") if isinstance(raw.get("depends_on"), dict) else {}
    display = raw.get("name")
    description = raw.get("desc") or ""
    if not description and isinstance(display, list) and display:
        description = str(display[0])
    installed_version = raw.get("installed")
    return PackageInfo(
        name=raw.get("token") or name,
        type=PackageType.CASK,
        full_name=raw.get("full_token") or raw.get("token") or name,
        version=str(raw.get("version") or ""),
        installed_version=installed_version if isinstance(installed_version, str) else "",
        description=description,
        homepage=raw.get("homepage") or "",
        dependencies=_string_list(depends_on.get("formula")),
        caveats=raw.get("caveats") or "",
        installed=bool(installed_version),
        outdated=bool(raw.get("outdated", False)),
    )


def parse_info_json(output: str, name: str, package_type: PackageType) -> PackageInfo:
    """Parse ``brew info --json=v2 NAME``.

    Raises:
        BrewParseError: If the output is not JSON.
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise BrewParseError("Invalid JSON from brew info", command="info", cause=e) from e

    if not isinstance(data, dict):
        return PackageInfo(name=name, type=package_type)

    formulae = data.get("formulae") or []
    casks = data.get("casks") or []
    if package_type is PackageType.CASK and casks and isinstance(casks[0], dict):
        return _cask_info(casks[0], name)
    if formulae and isinstance(formulae[0], dict):
        return _formula_info(formulae[0], name)
    if casks and isinstance(casks[0], dict):
        return _cask_info(casks[0], name)
    logger.debug("brew info returned no entries for %s", name)
    return PackageInfo(name=name, type=package_type)


def _split_dependencies(text: str) -> tuple[str, ...]:
    deps = []
    for item in text.split(","):
        dep = item.strip().rstrip(DEPENDENCY_MARKS).strip()
        if dep:
            deps.append(dep)
    return tuple(deps)


def parse_info_text(output: str, name: str, package_type: PackageType) -> PackageInfo:
    """Parse the human-readable ``brew info`` output.

    Used when JSON output is unavailable. Heuristics:

    - version follows ``stable`` on the first line (``wget: stable 1.21.4 (bottled)``)
    - description is the first plain line after the header
    - homepage is the first http(s) line not pointing at Homebrew's own repo
    - dependencies come from ``Required:`` and ``Build:`` lines under ``==> Dependencies``
    """
    lines = output.splitlines()
    # Newer brew prints the header as "==> wget: stable 1.21.4 (bottled)"
    header = lines[0].lstrip("=> ").strip() if lines else ""
    version = ""
    if ":" in header:
        fields = header.split(":", 1)[1].split()
        if fields:
            version = fields[1] if fields[0] == "stable" and len(fields) > 1 else fields[0]
            version = version.rstrip(",")

    description = ""
    homepage = ""
    dependencies: tuple[str, ...] = ()
    build_dependencies: tuple[str, ...] = ()
    caveats: list[str] = []
    section = ""

    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("==>"):
            section = line[3:].strip().lower()
            continue
        if section == "dependencies":
            if line.startswith("Required:"):
                dependencies += _split_dependencies(line[len("Required:"):])
            elif line.startswith("Build:"):
                build_dependencies += _split_dependencies(line[len("Build:"):])
            continue
        if section == "caveats":
            caveats.append(line)
            continue
        if section:
            continue
        if line.startswith("http"):
            if not homepage and "github.com/Homebrew" not in line:
                homepage = line
            continue
        if (
            not description
            and not line.startswith(f"{name}:")
            and not line.startswith("From:")
            and not line.startswith("/")
            and not line.startswith("Not installed")
            and not line.startswith("Installed")
        ):
            description = line

    return PackageInfo(
        name=name,
        type=package_type,
        full_name=name,
        version=version,
        description=description,
        homepage=homepage,
        dependencies=dependencies,
        build_dependencies=build_dependencies,
        caveats="\n".join(caveats),
        installed="Not installed" not in output,
    )
