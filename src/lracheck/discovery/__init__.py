"""Discovery of LRA participant classes.

Locates class descriptor documents in directories and zip archives and
turns every concrete LRA-marked type into a ClassModel for the rule engine.
"""

import logging
from pathlib import Path

from lracheck.constants import DEFAULT_DESCRIPTOR_SUFFIX
from lracheck.models.classmodel import ClassModel
from .builder import ClassModelBuilder, to_method_model, to_parameter_model
from .loader import DescriptorLoader
from .paths import DiscoveryError, PathType, classify_path, classify_paths, filter_existing_paths

logger = logging.getLogger(__name__)


def discover_class_models(
    paths: list[str | Path],
    fail_when_path_not_exist: bool = True,
    descriptor_suffix: str = DEFAULT_DESCRIPTOR_SUFFIX,
) -> list[ClassModel]:
    """Discover LRA participant classes under the given paths.

    Raises:
        DiscoveryError: If paths are missing or unreadable, or a descriptor
            or type hierarchy is malformed
    """
    existing = filter_existing_paths(paths, fail_when_path_not_exist)
    if not existing:
        return []

    logger.info(f"Loading class descriptors from paths: {[str(p) for p in existing]}")
    descriptors = DescriptorLoader(descriptor_suffix).load(existing)
    models = ClassModelBuilder(descriptors).build_all()
    logger.info(f"Discovered {len(models)} LRA participant class(es)")
    return models


__all__ = [
    "ClassModelBuilder",
    "DescriptorLoader",
    "DiscoveryError",
    "PathType",
    "classify_path",
    "classify_paths",
    "discover_class_models",
    "filter_existing_paths",
    "to_method_model",
    "to_parameter_model",
]
