"""
Offline registry hive readers built on regipy.

Each reader takes an open ``RegistryHive`` and returns plain records; the
extractor turns those into artifacts. Keys are looked up case-insensitively
because hive casing varies between Windows versions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from regipy.registry import RegistryHive

from core.logging import get_logger

from ..._shared.timestamps import filetime_to_epoch, unix_to_epoch
from ...exceptions import ExtractionFailedError

LOGGER = get_logger("extractors.system.registry.parser")

CURRENT_VERSION_PATH = "Microsoft\\Windows NT\\CurrentVersion"
COMPUTER_NAME_PATH = "Control\\ComputerName\\ComputerName"
USBSTOR_PATH = "Enum\\USBSTOR"
DEFAULT_CONTROL_SET = "ControlSet001"

# Disk&Ven_<vendor>&Prod_<product>&Rev_<revision>
_USBSTOR_DEVICE_RE = re.compile(
    r"^(?P<kind>[^&]+)&Ven_(?P<vendor>[^&]*)&Prod_(?P<product>[^&]*)(?:&Rev_(?P<rev>.*))?$",
    re.IGNORECASE,
)


@dataclass
class OsInfo:
    """Operating system details from the SOFTWARE hive."""
    product_name: Optional[str]
    version: Optional[str]
    owner: Optional[str]
    organization: Optional[str]
    install_date: Optional[int]


@dataclass
class UsbDevice:
    """One USB mass-storage device instance from USBSTOR."""
    make: Optional[str]
    model: Optional[str]
    device_id: str
    last_write: Optional[int]


def open_hive(hive_path: Path) -> RegistryHive:
    """
    Open a local hive copy.

    Raises:
        ExtractionFailedError: If regipy cannot parse the file
    """
    try:
        return RegistryHive(str(hive_path))
    # regipy and construct raise their own hierarchies for corrupt hives
    except Exception as exc:
        raise ExtractionFailedError(f"Cannot open registry hive {hive_path}: {exc}") from exc


def get_key_robust(hive, path: str):
    """
    Get a registry key, handling path separators and case sensitivity.

    Tries regipy's direct lookup first and falls back to a case-insensitive
    walk from the root.

    Raises:
        KeyError: If the key does not exist
    """
    path = path.replace("/", "\\")
    try:
        return hive.get_key(path)
    except Exception:
        LOGGER.debug("Direct lookup of %s failed, walking the hive", path)

    current_key = hive.root
    for part in [p for p in path.split("\\") if p]:
        for subkey in current_key.iter_subkeys():
            if subkey.name.lower() == part.lower():
                current_key = subkey
                break
        else:
            raise KeyError(f"Key not found: {path} (failed at '{part}')")
    return current_key


def key_values(key) -> Dict[str, Any]:
    """Values of a key keyed by lowercased name."""
    return {str(val.name).lower(): val.value for val in key.iter_values()}


def key_last_write(key) -> Optional[int]:
    """Last write time of a key as epoch seconds."""
    return filetime_to_epoch(key.header.last_modified)


def current_control_set(hive) -> str:
    """Name of the active control set from Select\\Current, defaulting to ControlSet001."""
    try:
        current = key_values(get_key_robust(hive, "Select")).get("current")
    except KeyError:
        return DEFAULT_CONTROL_SET
    if isinstance(current, int) and current > 0:
        return f"ControlSet{current:03d}"
    return DEFAULT_CONTROL_SET


def read_os_info(software_hive) -> Optional[OsInfo]:
    """Read Windows NT\\CurrentVersion; None when the key is absent."""
    try:
        key = get_key_robust(software_hive, CURRENT_VERSION_PATH)
    except KeyError:
        return None
    values = key_values(key)

    version = _string(values.get("currentversion"))
    major = values.get("currentmajorversionnumber")
    minor = values.get("currentminorversionnumber")
    if isinstance(major, int) and isinstance(minor, int):
        version = f"{major}.{minor}"
    build = _string(values.get("currentbuildnumber") or values.get("currentbuild"))
    if version and build:
        version = f"{version}.{build}"

    install_date = values.get("installdate")
    return OsInfo(
        product_name=_string(values.get("productname")),
        version=version,
        owner=_string(values.get("registeredowner")),
        organization=_string(values.get("registeredorganization")),
        install_date=unix_to_epoch(install_date) if isinstance(install_date, int) else None,
    )


def read_computer_name(system_hive) -> Optional[str]:
    """Computer name from the active control set."""
    control_set = current_control_set(system_hive)
    try:
        key = get_key_robust(system_hive, f"{control_set}\\{COMPUTER_NAME_PATH}")
    except KeyError:
        return None
    return _string(key_values(key).get("computername"))


def read_usb_devices(system_hive) -> List[UsbDevice]:
    """USB storage devices, one per serial subkey of USBSTOR."""
    control_set = current_control_set(system_hive)
    try:
        usbstor = get_key_robust(system_hive, f"{control_set}\\{USBSTOR_PATH}")
    except KeyError:
        return []

    devices: List[UsbDevice] = []
    for device_key in usbstor.iter_subkeys():
        make, model = parse_usbstor_name(device_key.name)
        for instance in device_key.iter_subkeys():
            devices.append(UsbDevice(
                make=make,
                model=model,
                device_id=instance.name,
                last_write=key_last_write(instance),
            ))
    return devices


def parse_usbstor_name(name: str) -> tuple[Optional[str], Optional[str]]:
    """
    Split a USBSTOR device key name into (make, model).

    Example:
        >>> parse_usbstor_name("Disk&Ven_SanDisk&Prod_Cruzer_Blade&Rev_1.00")
        ('SanDisk', 'Cruzer Blade')
    """
    match = _USBSTOR_DEVICE_RE.match(name)
    if not match:
        return None, None
    make = match.group("vendor").replace("_", " ").strip() or None
    model = match.group("product").replace("_", " ").strip() or None
    return make, model


def _string(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().strip("\x00")
    return text or None
