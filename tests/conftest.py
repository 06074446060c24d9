"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from vmscan.settings import Settings


def write_vmx(vm_dir: Path, name: str, *, guest_os: str | None = None, pretty_name: str | None = None) -> Path:
    """Write a minimal VMX file and return its path."""
    vm_dir.mkdir(parents=True, exist_ok=True)
    lines = ['.encoding = "UTF-8"', 'config.version = "8"', f'displayName = "{name}"']
    if guest_os is not None:
        lines.append(f'guestOS = "{guest_os}"')
    if pretty_name is not None:
        lines.append(
            "guestInfo.detailed.data = \"architecture='X86' bitness='64' "
            f"familyName='Windows' prettyName='{pretty_name}' version='10.0'\""
        )
    vmx = vm_dir / f"{name}.vmx"
    vmx.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return vmx


def write_descriptor(vm_dir: Path, filename: str, parent_hint: str | None = None) -> Path:
    """Write a small text VMDK descriptor, optionally linked to a parent disk."""
    vm_dir.mkdir(parents=True, exist_ok=True)
    lines = [
        "# Disk DescriptorFile",
        "version=1",
        'encoding="UTF-8"',
        "CID=fffffffe",
        "parentCID=ffffffff" if parent_hint is None else "parentCID=1a2b3c4d",
        'createType="monolithicSparse"',
    ]
    if parent_hint is not None:
        lines.append(f'parentFileNameHint="{parent_hint}"')
    lines += ["", "# Extent description", f'RW 83886080 SPARSE "{Path(filename).stem}-s001.vmdk"']
    path = vm_dir / filename
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def vm_root(tmp_path):
    """Empty scan root."""
    root = tmp_path / "Virtual Machines"
    root.mkdir()
    return root


@pytest.fixture
def base_and_clone(vm_root):
    """A standalone ``Base`` VM and a linked clone ``Base-Clone`` of it."""
    base = vm_root / "Base"
    write_vmx(base, "Base", guest_os="windows9-64")
    write_descriptor(base, "Base.vmdk")
    (base / "Base-s001.vmdk").write_bytes(b"\0" * 4096)

    clone = vm_root / "Base-Clone"
    write_vmx(clone, "Base-Clone", guest_os="windows9-64")
    write_descriptor(clone, "Base-Clone-cl1.vmdk", parent_hint="../Base/Base.vmdk")
    (clone / "Base-Clone-cl1-s001.vmdk").write_bytes(b"\0" * 2048)
    return vm_root


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Settings stored in a temp file, away from the real config dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("VMSCAN_SETTINGS", raising=False)
    return Settings(tmp_path / "settings.json")


@pytest.fixture
def make_vmx():
    """Factory fixture for :func:`write_vmx`."""
    return write_vmx


@pytest.fixture
def make_descriptor():
    """Factory fixture for :func:`write_descriptor`."""
    return write_descriptor
