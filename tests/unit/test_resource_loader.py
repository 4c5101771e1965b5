import unicodedata
from pathlib import Path

import pytest

from repositorium.application.services.resource_loader import (
    ResourceLoader,
    read_extension,
    split_audio_name,
    split_filename,
)
from repositorium.core.errors import MetadataMissingError, MetadataReadError
from repositorium.core.uid import decode_uid
from repositorium.domain.models.resource import ResourceKind


def test_read_extension() -> None:
    assert read_extension("fish.jpg") == "jpg"
    assert read_extension("fish.js") == "js"
    assert read_extension("fish") == ""
    assert read_extension("/var/info/fish.js") == "js"
    assert read_extension("fish.jpgabcdefg") == ""


def test_split_filename() -> None:
    assert split_filename("fish.jpg").name == "fish"
    assert split_filename("fish.jpg").kind is ResourceKind.JPG
    assert split_filename("opens.xml").kind is ResourceKind.XML
    info = split_filename("/fish/hat/opens.xml")
    assert (info.name, info.kind) == ("opens", ResourceKind.XML)
    assert split_filename("notes.md").kind is ResourceKind.UNKNOWN
    assert split_filename("README").kind is ResourceKind.UNKNOWN


def test_audio_filenames_need_a_known_marker() -> None:
    info = split_filename("./test/repo/jay~ἄρτος.wav")
    assert (info.name, info.kind) == ("jay~ἄρτος", ResourceKind.WAV)
    assert split_filename("JAY~fish.WAV").kind is ResourceKind.WAV
    assert split_filename("fish.wav").kind is ResourceKind.WAV
    assert split_filename("bob~fish.wav").kind is ResourceKind.UNKNOWN
    assert split_filename("bob~fish.wav", markers=("bob",)).kind is ResourceKind.WAV


def test_split_audio_name_strips_marker_and_take_number() -> None:
    assert split_audio_name("jay~ἄρτος") == "ἄρτος"
    assert split_audio_name("jay~ἄρτος2") == "ἄρτος"
    assert split_audio_name("ἄρτος") == "ἄρτος"
    assert split_audio_name("x~jay~ἄρτος") == "ἄρτος"
    assert split_audio_name("bob~ἄρτος") is None


def test_load_image_reads_metadata(sample_repo: Path) -> None:
    path = sample_repo / "GzeBWE.png"
    resource = ResourceLoader().load(path, "GzeBWE", ResourceKind.PNG)

    assert resource.id == 3989967536
    assert resource.source_path == path
    assert resource.kind is ResourceKind.PNG
    assert resource.visible is True
    assert resource.copyright == "jay"
    assert resource.date == "202309072345"
    assert resource.names == ["GzeBWE", "κρέα", "μάχαιρα.", "μάχαιρα"]


def test_load_audio_uses_name_from_filename(sample_repo: Path) -> None:
    path = sample_repo / "jay~ἄρτος.wav"
    resource = ResourceLoader().load(path, "jay~ἄρτος", ResourceKind.WAV)

    assert resource.id == 0
    assert resource.visible is True
    assert resource.kind is ResourceKind.WAV
    assert resource.names == ["ἄρτος"]
    assert resource.source_path == path


def test_load_audio_without_name_fails(tmp_path: Path) -> None:
    path = tmp_path / "jay~12.wav"
    path.write_bytes(b"RIFF")
    with pytest.raises(MetadataMissingError):
        ResourceLoader().load(path, "jay~12", ResourceKind.WAV)


def test_load_font_uses_stem(sample_repo: Path) -> None:
    resource = ResourceLoader().load(sample_repo / "αρτος.ttf", "αρτος", ResourceKind.TTF)
    assert resource.names == ["αρτος"]
    assert resource.id == 0


def test_missing_metadata_defaults_to_visible(sample_repo: Path) -> None:
    resource = ResourceLoader().load(sample_repo / "1122.csv", "1122", ResourceKind.CSV)
    assert resource.visible is True
    assert resource.names == ["1122"]
    assert resource.id == decode_uid("1122")


def test_tabular_uid_comes_from_stem_even_with_metadata(sample_repo: Path) -> None:
    resource = ResourceLoader().load(sample_repo / "2233.csv", "2233", ResourceKind.CSV)
    assert resource.id == decode_uid("2233")
    assert resource.names == ["2233", "abcd"]


def test_vector_stem_that_is_not_a_uid_leaves_id_unset(tmp_path: Path) -> None:
    path = tmp_path / "not-a-uid.svg"
    path.write_text("<svg/>", encoding="utf-8")
    resource = ResourceLoader().load(path, "not-a-uid", ResourceKind.SVG)
    assert resource.id == 0


def test_metadata_read_failure_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "pic.png"
    path.write_bytes(b"png")
    (tmp_path / "pic.txt").mkdir()
    with pytest.raises(MetadataReadError):
        ResourceLoader().load(path, "pic", ResourceKind.PNG)


def test_metadata_that_is_not_utf8_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "pic.png"
    path.write_bytes(b"png")
    (tmp_path / "pic.txt").write_bytes(b"s:\xff\xfe\n")
    with pytest.raises(MetadataReadError):
        ResourceLoader().load(path, "pic", ResourceKind.PNG)


def test_metadata_is_rewritten_as_nfc(tmp_path: Path) -> None:
    path = tmp_path / "pic.png"
    path.write_bytes(b"png")
    decomposed = unicodedata.normalize("NFD", "s:ἄρτος\nv:1\n")
    metadata = tmp_path / "pic.txt"
    metadata.write_text(decomposed, encoding="utf-8")

    resource = ResourceLoader().load(path, "pic", ResourceKind.PNG)

    composed = unicodedata.normalize("NFC", "ἄρτος")
    assert resource.names == ["pic", composed]
    assert metadata.read_text(encoding="utf-8") == unicodedata.normalize("NFC", decomposed)
