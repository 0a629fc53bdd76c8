"""
Registry extractor - OS information and attached USB storage.

Copies the SOFTWARE and SYSTEM hives out of the evidence and reads them
with regipy:
- SOFTWARE  Microsoft\\Windows NT\\CurrentVersion -> OS_INFO
- SYSTEM    Control\\ComputerName\\ComputerName    -> OS_INFO (NAME)
- SYSTEM    Enum\\USBSTOR\\<device>\\<serial>       -> DEVICE_ATTACHED

Hive parsing is the slowest step of the pipeline, so this unit runs last.
"""

from __future__ import annotations

from core.enums import ArtifactType, AttributeType
from core.evidence_fs import EvidenceFS
from core.logging import get_logger

from ..._shared.attributes import collect_attributes
from ...base import BaseExtractor, ExtractorMetadata
from ...callbacks import ExtractorCallbacks
from ...exceptions import ExtractionFailedError
from .parser import open_hive, read_computer_name, read_os_info, read_usb_devices

LOGGER = get_logger("extractors.system.registry")

SOFTWARE_HIVE_PATTERNS = ["Windows/System32/config/SOFTWARE"]
SYSTEM_HIVE_PATTERNS = ["Windows/System32/config/SYSTEM"]


class RegistryExtractor(BaseExtractor):
    """Operating system details and USB devices from offline hives."""

    @property
    def metadata(self) -> ExtractorMetadata:
        return ExtractorMetadata(
            name="registry",
            display_name="Registry",
            description="OS information and USB devices from SOFTWARE/SYSTEM hives",
            category="system",
        )

    def process(self, evidence_fs: EvidenceFS, callbacks: ExtractorCallbacks) -> None:
        for path in evidence_fs.iter_paths_any(SOFTWARE_HIVE_PATTERNS):
            if callbacks.is_cancelled():
                return
            hive = self._open(evidence_fs, path)
            if hive is not None:
                self._process_software(path, hive)

        for path in evidence_fs.iter_paths_any(SYSTEM_HIVE_PATTERNS):
            if callbacks.is_cancelled():
                return
            hive = self._open(evidence_fs, path)
            if hive is not None:
                self._process_system(path, hive)

    def _open(self, evidence_fs: EvidenceFS, path: str):
        try:
            local = self._copy_to_temp(evidence_fs, path)
            return open_hive(local)
        except (OSError, ExtractionFailedError) as exc:
            LOGGER.warning("Error while trying to read hive %s: %s", path, exc, exc_info=True)
            self._add_error(f"{self.display_name}: Error while trying to read hive {path}")
            return None

    def _process_software(self, path: str, hive) -> None:
        info = read_os_info(hive)
        if info is None:
            LOGGER.info("No CurrentVersion key in %s", path)
            return
        attributes = collect_attributes(self.display_name, [
            (AttributeType.PROG_NAME, info.product_name),
            (AttributeType.VERSION, info.version),
            (AttributeType.OWNER, info.owner),
            (AttributeType.ORGANIZATION, info.organization),
            (AttributeType.DATETIME, info.install_date),
        ])
        self._post_artifact(path, ArtifactType.OS_INFO, attributes)

    def _process_system(self, path: str, hive) -> None:
        name = read_computer_name(hive)
        attributes = collect_attributes(self.display_name, [(AttributeType.NAME, name)])
        self._post_artifact(path, ArtifactType.OS_INFO, attributes)

        devices = read_usb_devices(hive)
        for device in devices:
            attributes = collect_attributes(self.display_name, [
                (AttributeType.DEVICE_MAKE, device.make),
                (AttributeType.DEVICE_MODEL, device.model),
                (AttributeType.DEVICE_ID, device.device_id),
                (AttributeType.DATETIME, device.last_write),
            ])
            self._post_artifact(path, ArtifactType.DEVICE_ATTACHED, attributes)
        LOGGER.info("Registry %s: computer name %s, %d USB device(s)", path, name, len(devices))
