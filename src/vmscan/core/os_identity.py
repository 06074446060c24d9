"""Guest operating system detection from a VM definition file."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping

log = logging.getLogger(__name__)

UNKNOWN_OS = "Unknown"

# VMware guestOS codes → display labels.  Codes not listed here are shown raw.
DEFAULT_OS_LABELS: dict[str, str] = {
    "windows7": "Windows 7",
    "windows7-64": "Windows 7 x64",
    "windows8": "Windows 8",
    "windows8-64": "Windows 8 x64",
    "windows9": "Windows 10",
    "windows9-64": "Windows 10 x64",
    "windows11-64": "Windows 11 x64",
    "windows2019srv-64": "Windows Server 2019",
    "windows2019srvnext-64": "Windows Server 2022",
    "windows2022srvnext-64": "Windows Server 2025",
    "winnetenterprise": "Windows Server 2003",
    "winxppro": "Windows XP",
    "ubuntu": "Ubuntu",
    "ubuntu-64": "Ubuntu x64",
    "debian10-64": "Debian 10 x64",
    "debian11-64": "Debian 11 x64",
    "debian12-64": "Debian 12 x64",
    "centos7-64": "CentOS 7 x64",
    "centos8-64": "CentOS 8 x64",
    "rhel7-64": "Red Hat Enterprise Linux 7 x64",
    "rhel8-64": "Red Hat Enterprise Linux 8 x64",
    "rhel9-64": "Red Hat Enterprise Linux 9 x64",
    "fedora-64": "Fedora x64",
    "opensuse-64": "openSUSE x64",
    "other5xlinux-64": "Other Linux 5.x x64",
    "other6xlinux-64": "Other Linux 6.x x64",
    "otherlinux-64": "Other Linux x64",
    "freebsd-64": "FreeBSD x64",
    "darwin19-64": "macOS 10.15",
    "darwin20-64": "macOS 11",
    "darwin21-64": "macOS 12",
    "darwin22-64": "macOS 13",
    "arm-ubuntu-64": "Ubuntu ARM64",
    "arm-windows11-64": "Windows 11 ARM64",
    "other": "Other",
    "other-64": "Other x64",
}

_DETAILED_RE = re.compile(
    r'^\s*guestInfo\.detailed\.data\s*=\s*"[^"\n]*?prettyName=\'(?P<name>[^\']*)\'',
    re.IGNORECASE | re.MULTILINE,
)
_GUEST_OS_RE = re.compile(r'^\s*guestOS\s*=\s*"(?P<code>[^"\n]*)"', re.IGNORECASE | re.MULTILINE)
_BUILD_RE = re.compile(r"\(\s*Build\b[^)]*\)", re.IGNORECASE)
_COMMA_RUN_RE = re.compile(r",(?:\s*,)+")
_SPACE_RUN_RE = re.compile(r"\s+")


def clean_pretty_name(raw: str) -> str:
    """Strip build annotations and collapse comma/whitespace runs.

    >>> clean_pretty_name("Windows 10 Pro,  64-bit (Build 19045.3803)")
    'Windows 10 Pro, 64-bit'
    """
    text = _BUILD_RE.sub(" ", raw)
    text = _COMMA_RUN_RE.sub(",", text)
    text = _SPACE_RUN_RE.sub(" ", text)
    return text.strip(" ,")


def resolve_os(vmx_path: Path, os_labels: Mapping[str, str] | None = None) -> str:
    """Return a human-readable OS label for a VM definition file.

    The guest-reported ``prettyName`` wins when present.  Otherwise the
    declared ``guestOS`` code is looked up in ``os_labels`` (falling back to
    the raw code), and ``"Unknown"`` is returned when neither exists.
    """
    labels = DEFAULT_OS_LABELS if os_labels is None else os_labels
    try:
        text = vmx_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.debug("Cannot read %s: %s", vmx_path, e)
        return UNKNOWN_OS

    if m := _DETAILED_RE.search(text):
        name = clean_pretty_name(m.group("name"))
        if name:
            return name

    if m := _GUEST_OS_RE.search(text):
        code = m.group("code").strip()
        if code:
            return labels.get(code, code)

    return UNKNOWN_OS
