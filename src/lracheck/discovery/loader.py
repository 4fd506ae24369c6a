"""Loading of class descriptor documents from directories and archives."""

import json
import logging
import os
import zipfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lracheck.constants import DEFAULT_DESCRIPTOR_SUFFIX
from lracheck.models.descriptor import TypeDescriptor
from .paths import DiscoveryError, PathType, classify_paths

logger = logging.getLogger(__name__)


class DescriptorLoader:
    """Reads ``*.class.json`` type descriptors."""

    def __init__(self, descriptor_suffix: str = DEFAULT_DESCRIPTOR_SUFFIX):
        self.descriptor_suffix = descriptor_suffix

    def load(self, paths: list[Path]) -> list[TypeDescriptor]:
        """Load descriptors from every directory and archive in paths.

        Raises:
            DiscoveryError: If a path cannot be classified or a descriptor is malformed
        """
        descriptors: list[TypeDescriptor] = []
        for path, path_type in classify_paths(paths).items():
            if path_type == PathType.DIRECTORY:
                descriptors.extend(self.load_from_dir(path))
            else:
                descriptors.extend(self.load_from_archive(path))
        logger.info(f"Loaded {len(descriptors)} type descriptor(s) from {len(paths)} path(s)")
        return descriptors

    def load_from_dir(self, directory: Path) -> list[TypeDescriptor]:
        descriptors = []
        for descriptor_file in self._find_descriptor_files(directory):
            try:
                content = descriptor_file.read_text(encoding="utf-8")
            except OSError as e:
                raise DiscoveryError(f"Cannot read descriptor {descriptor_file}: {e}") from e
            descriptors.extend(self.parse_document(content, str(descriptor_file)))
        return descriptors

    def load_from_archive(self, archive: Path) -> list[TypeDescriptor]:
        descriptors = []
        try:
            with zipfile.ZipFile(archive) as zf:
                for member in sorted(zf.namelist()):
                    if member.endswith("/") or not member.endswith(self.descriptor_suffix):
                        continue
                    content = zf.read(member).decode("utf-8")
                    descriptors.extend(self.parse_document(content, f"{archive}!{member}"))
        except (zipfile.BadZipFile, OSError, UnicodeDecodeError) as e:
            raise DiscoveryError(f"Cannot read archive {archive}: {e}") from e
        return descriptors

    def parse_document(self, content: str, source: str) -> list[TypeDescriptor]:
        """Parse one descriptor document.

        A document holds a single type object, a list of type objects, or an
        object with a ``types`` list.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise DiscoveryError(f"Invalid JSON in descriptor {source}: {e}") from e

        descriptors = []
        for entry in self._type_entries(data, source):
            try:
                descriptor = TypeDescriptor.model_validate(entry)
            except ValidationError as e:
                raise DiscoveryError(f"Invalid type descriptor in {source}: {e}") from e
            descriptor.source = source
            descriptors.append(descriptor)
        return descriptors

    def _type_entries(self, data: Any, source: str) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and "types" in data:
            if not isinstance(data["types"], list):
                raise DiscoveryError(f"'types' must be a list in descriptor {source}")
            return data["types"]
        if isinstance(data, dict):
            return [data]
        raise DiscoveryError(f"Unexpected descriptor document in {source}")

    def _find_descriptor_files(self, directory: Path) -> Iterator[Path]:
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for file in sorted(files):
                if file.endswith(self.descriptor_suffix):
                    yield Path(root) / file
