"""Reader for the host's installed-program registry.

Returns one VersionRecord per installed program, taken from whichever
program database the platform keeps:
    - Windows: the Uninstall keys of the registry
    - Linux: dpkg, falling back to rpm
    - macOS: Info.plist of each bundle in /Applications and ~/Applications

A failed query yields an empty inventory and a warning; the probes still
run and the report is still printed.
"""

import logging
import plistlib
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..probes.base import INVENTORY_SOURCE, VersionRecord
from ..utils.commands import CommandFailed, CommandNotFound, run_command
from ..utils.constants import TIMEOUT_PACKAGE_LIST

logger = logging.getLogger(__name__)

UNINSTALL_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"
UNINSTALL_KEY_WOW64 = r"SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall"

DPKG_QUERY = ["dpkg-query", "-W", "-f=${Package}\t${Version}\n"]
RPM_QUERY = ["rpm", "-qa", "--queryformat", "%{NAME}\t%{VERSION}-%{RELEASE}\t%{INSTALLTIME}\n"]


def format_install_date(value: Optional[str]) -> Optional[str]:
    """Format a registry InstallDate (YYYYMMDD) as YYYY-MM-DD.

    Values in any other shape are returned unchanged.
    """
    if not value:
        return None
    value = str(value).strip()
    if len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return value


def _format_epoch(value: str) -> Optional[str]:
    if not value.isdigit():
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc).strftime("%Y-%m-%d")


def parse_package_listing(output: str) -> list[VersionRecord]:
    """Parse tab-separated name/version[/install-time] lines.

    rpm adds a third column with the install time as a Unix timestamp;
    dpkg-query has no install time and prints two columns.
    """
    records = []
    for line in output.splitlines():
        parts = line.split("\t")
        name = parts[0].strip() if parts else ""
        if not name:
            continue
        version = parts[1].strip() if len(parts) > 1 and parts[1].strip() else None
        installed = _format_epoch(parts[2].strip()) if len(parts) > 2 else None
        records.append(VersionRecord(name, version, install_date=installed, source=INVENTORY_SOURCE))
    return records


def _read_registry_key(winreg, hive, path: str) -> list[VersionRecord]:
    records = []
    access = winreg.KEY_READ | winreg.KEY_WOW64_64KEY

    try:
        key = winreg.OpenKey(hive, path, 0, access)
    except (FileNotFoundError, PermissionError):
        return records

    def value_of(subkey, value_name: str):
        try:
            value, _ = winreg.QueryValueEx(subkey, value_name)
            return value
        except FileNotFoundError:
            return None

    try:
        for i in range(winreg.QueryInfoKey(key)[0]):
            try:
                subkey_name = winreg.EnumKey(key, i)
                subkey = winreg.OpenKey(hive, f"{path}\\{subkey_name}", 0, access)
            except OSError:
                continue

            try:
                name = value_of(subkey, "DisplayName")
                if not name:
                    continue
                version = value_of(subkey, "DisplayVersion")
                records.append(VersionRecord(
                    str(name),
                    str(version) if version else None,
                    install_date=format_install_date(value_of(subkey, "InstallDate")),
                    source=INVENTORY_SOURCE,
                ))
            finally:
                winreg.CloseKey(subkey)
    finally:
        winreg.CloseKey(key)

    return records


def read_windows_registry() -> list[VersionRecord]:
    """Read installed programs from the registry Uninstall keys."""
    import winreg

    records = []
    for hive, path in (
        (winreg.HKEY_LOCAL_MACHINE, UNINSTALL_KEY),
        (winreg.HKEY_LOCAL_MACHINE, UNINSTALL_KEY_WOW64),
        (winreg.HKEY_CURRENT_USER, UNINSTALL_KEY),
    ):
        records.extend(_read_registry_key(winreg, hive, path))
    return records


def read_package_database() -> list[VersionRecord]:
    """Read installed packages from dpkg, or rpm if dpkg is missing."""
    for query in (DPKG_QUERY, RPM_QUERY):
        try:
            result = run_command(query, timeout=TIMEOUT_PACKAGE_LIST)
        except CommandNotFound:
            continue
        except CommandFailed as e:
            logger.warning("Package database query failed: %s", e)
            return []
        return parse_package_listing(result.output)

    logger.warning("No package database (dpkg or rpm) found")
    return []


def _get_bundle_info(app_path: Path) -> Optional[dict]:
    """Extract name and version from an app's Info.plist."""
    info_plist = app_path / "Contents" / "Info.plist"
    if not info_plist.exists():
        return None

    try:
        with open(info_plist, "rb") as f:
            plist = plistlib.load(f)
    except plistlib.InvalidFileException:
        # Older binary plists need plutil to convert them first
        try:
            result = subprocess.run(
                ["plutil", "-convert", "xml1", "-o", "-", str(info_plist)],
                capture_output=True,
                timeout=5,
            )
            if result.returncode != 0:
                return None
            plist = plistlib.loads(result.stdout)
        except (subprocess.TimeoutExpired, plistlib.InvalidFileException, OSError):
            return None
    except OSError:
        return None

    return {
        "version": plist.get("CFBundleShortVersionString") or plist.get("CFBundleVersion"),
        "name": plist.get("CFBundleName") or plist.get("CFBundleDisplayName"),
    }


def read_application_bundles(scan_dirs: Optional[list[Path]] = None) -> list[VersionRecord]:
    """Read installed .app bundles from the Applications folders."""
    if scan_dirs is None:
        scan_dirs = [Path("/Applications"), Path.home() / "Applications"]

    records = []
    for scan_dir in scan_dirs:
        if not scan_dir.exists():
            continue
        try:
            for app_path in sorted(scan_dir.glob("*.app")):
                if not app_path.is_dir():
                    continue
                info = _get_bundle_info(app_path) or {}
                records.append(VersionRecord(
                    info.get("name") or app_path.stem,
                    info.get("version"),
                    source=INVENTORY_SOURCE,
                ))
        except PermissionError as e:
            logger.warning("Could not list %s: %s", scan_dir, e)
    return records


def scan(platform: str = sys.platform) -> list[VersionRecord]:
    """Read the installed-program inventory for this platform.

    Returns:
        Inventory records in the order the program database lists them
    """
    try:
        if platform.startswith("win"):
            return read_windows_registry()
        if platform.startswith("linux"):
            return read_package_database()
        if platform == "darwin":
            return read_application_bundles()
    except OSError as e:
        logger.warning("Installed-program inventory failed: %s", e)
        return []

    logger.warning("No installed-program inventory available on %s", platform)
    return []
