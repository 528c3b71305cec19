import json

from dlxbin.cache.metadata import MetadataStore
from dlxbin.models import EntryMetadata

CHECKSUM = "2d711642b726b04401627ca9fbac32f5c8530fb1903cc4db02258717921a4881"


def make_metadata(timestamp: int = 1000) -> EntryMetadata:
    return EntryMetadata(
        url="https://example.test/tool",
        checksum=CHECKSUM,
        platform="linux",
        arch="x64",
        timestamp=timestamp,
        version="1.0.0",
    )


def test_write_then_read(tmp_path):
    store = MetadataStore()
    path = store.write(tmp_path, make_metadata())
    assert path.name == ".dlx-metadata.json"
    doc = json.loads(path.read_text())
    assert doc == {
        "url": "https://example.test/tool",
        "checksum": CHECKSUM,
        "platform": "linux",
        "arch": "x64",
        "timestamp": 1000,
        "version": "1.0.0",
    }
    assert "\n  " in path.read_text()
    assert store.read(tmp_path) == make_metadata()


def test_missing_file_reads_as_none(tmp_path):
    assert MetadataStore().read(tmp_path) is None


def test_malformed_json_reads_as_none(tmp_path):
    (tmp_path / ".dlx-metadata.json").write_text("{not json")
    assert MetadataStore().read(tmp_path) is None


def test_wrong_shape_reads_as_none(tmp_path):
    meta = tmp_path / ".dlx-metadata.json"
    meta.write_text(json.dumps([1, 2, 3]))
    assert MetadataStore().read(tmp_path) is None
    meta.write_text(json.dumps({"url": "u", "timestamp": "yesterday"}))
    assert MetadataStore().read(tmp_path) is None
    meta.write_text(json.dumps({**make_metadata().model_dump(), "checksum": "nope"}))
    assert MetadataStore().read(tmp_path) is None


def test_unknown_keys_are_ignored(tmp_path):
    doc = {**make_metadata().model_dump(), "extra": True}
    (tmp_path / ".dlx-metadata.json").write_text(json.dumps(doc))
    assert MetadataStore().read(tmp_path) == make_metadata()


def test_missing_version_reads_as_none(tmp_path):
    doc = make_metadata().model_dump()
    del doc["version"]
    (tmp_path / ".dlx-metadata.json").write_text(json.dumps(doc))
    assert MetadataStore().read(tmp_path) is None
