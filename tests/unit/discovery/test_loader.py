"""Tests for descriptor loading."""

import json
import zipfile

import pytest

from lracheck.discovery.loader import DescriptorLoader
from lracheck.discovery.paths import DiscoveryError
from lracheck.models.descriptor import TypeKind

PARTICIPANT = {
    "name": "com.example.Participant",
    "annotations": ["LRA"],
    "methods": [
        {
            "name": "compensate",
            "parameters": [{"type": "java.net.URI"}, {"type": "java.net.URI"}],
            "returnType": "void",
            "annotations": ["Compensate"],
        }
    ],
}


class TestParseDocument:
    """Test descriptor document shapes."""

    def test_single_type_document(self):
        descriptors = DescriptorLoader().parse_document(json.dumps(PARTICIPANT), "inline")

        assert len(descriptors) == 1
        descriptor = descriptors[0]
        assert descriptor.name == "com.example.Participant"
        assert descriptor.kind == TypeKind.CLASS
        assert descriptor.is_lra_annotated
        assert descriptor.is_instantiable
        assert descriptor.source == "inline"
        assert descriptor.methods[0].return_type == "void"

    def test_types_list_document(self):
        document = {"types": [PARTICIPANT, {"name": "com.example.Other"}]}
        names = [d.name for d in DescriptorLoader().parse_document(json.dumps(document), "inline")]
        assert names == ["com.example.Participant", "com.example.Other"]

    def test_bare_list_document(self):
        assert len(DescriptorLoader().parse_document(json.dumps([PARTICIPANT]), "inline")) == 1

    def test_invalid_json(self):
        with pytest.raises(DiscoveryError, match="Invalid JSON"):
            DescriptorLoader().parse_document("{broken", "broken.class.json")

    def test_schema_violation(self):
        with pytest.raises(DiscoveryError, match="Invalid type descriptor"):
            DescriptorLoader().parse_document(json.dumps({"methods": []}), "nameless.class.json")

    def test_types_must_be_list(self):
        with pytest.raises(DiscoveryError):
            DescriptorLoader().parse_document(json.dumps({"types": "nope"}), "inline")

    def test_scalar_document_rejected(self):
        with pytest.raises(DiscoveryError, match="Unexpected descriptor document"):
            DescriptorLoader().parse_document("42", "inline")


class TestLoadSources:
    """Test loading from directories and archives."""

    def test_load_from_dir_recurses_and_filters_suffix(self, tmp_path):
        nested = tmp_path / "com" / "example"
        nested.mkdir(parents=True)
        (nested / "Participant.class.json").write_text(json.dumps(PARTICIPANT), encoding="utf-8")
        (nested / "settings.json").write_text("{}", encoding="utf-8")

        descriptors = DescriptorLoader().load_from_dir(tmp_path)

        assert [d.name for d in descriptors] == ["com.example.Participant"]

    def test_custom_suffix(self, tmp_path):
        (tmp_path / "Participant.lra.json").write_text(json.dumps(PARTICIPANT), encoding="utf-8")

        assert DescriptorLoader(".lra.json").load_from_dir(tmp_path)[0].name == "com.example.Participant"
        assert DescriptorLoader().load_from_dir(tmp_path) == []

    def test_load_from_archive(self, tmp_path):
        archive = tmp_path / "participants.jar"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("com/example/Participant.class.json", json.dumps(PARTICIPANT))
            zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")

        descriptors = DescriptorLoader().load_from_archive(archive)

        assert len(descriptors) == 1
        assert descriptors[0].source.endswith("participants.jar!com/example/Participant.class.json")

    def test_load_mixed_paths(self, tmp_path):
        directory = tmp_path / "classes"
        directory.mkdir()
        (directory / "A.class.json").write_text(json.dumps(PARTICIPANT), encoding="utf-8")
        archive = tmp_path / "lib.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("B.class.json", json.dumps({**PARTICIPANT, "name": "com.example.B"}))

        names = {d.name for d in DescriptorLoader().load([directory, archive])}

        assert names == {"com.example.Participant", "com.example.B"}

    def test_malformed_descriptor_in_archive(self, tmp_path):
        archive = tmp_path / "broken.jar"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Broken.class.json", "{not json")

        with pytest.raises(DiscoveryError, match="Invalid JSON"):
            DescriptorLoader().load_from_archive(archive)
