from pathlib import Path

import pytest

from repositorium.application.services.bundle_service import BundleService
from repositorium.cli.main import main


@pytest.fixture
def project(sample_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in ("REPOSITORIUM_RESOURCES", "REPOSITORIUM_BUNDLE", "REPOSITORIUM_AUDIO_MARKERS"):
        monkeypatch.delenv(name, raising=False)
    return sample_repo.parent


def test_lookup_and_search(project: Path) -> None:
    root = ["--project-root", str(project)]
    assert main([*root, "lookup", "ἄρτος."]) == 0
    assert main([*root, "lookup", "nothing"]) == 1
    assert main([*root, "lookup", "μάχ", "--partial", "--category", "image"]) == 0
    assert main([*root, "search", "λέγει"]) == 0
    assert main([*root, "list", "--category", "font"]) == 0


def test_query_errors_exit_nonzero(project: Path) -> None:
    assert main(["--project-root", str(project), "lookup", "   "]) == 1


def test_bundle_then_lookup_from_bundle(project: Path, tmp_path: Path) -> None:
    bundle_path = tmp_path / "out.bd"
    root = ["--project-root", str(project)]

    assert main([*root, "bundle", str(bundle_path), "μάχαιρα", "ἄρτος"]) == 0
    assert len(BundleService.inspect(bundle_path)) == 2
    assert main([*root, "inspect", str(bundle_path)]) == 0
    assert main([*root, "--bundle", str(bundle_path), "lookup", "μάχαιρα"]) == 0
    assert main([*root, "--bundle", str(bundle_path), "lookup", "1122"]) == 1


def test_bundle_reports_missing_queries(project: Path, tmp_path: Path) -> None:
    bundle_path = tmp_path / "partial.bd"
    assert main(["--project-root", str(project), "bundle", str(bundle_path), "μάχαιρα", "missing"]) == 1
    assert len(BundleService.inspect(bundle_path)) == 1


def test_export_image(project: Path, tmp_path: Path) -> None:
    destination = tmp_path / "g.jpg"
    code = main(
        ["--project-root", str(project), "export-image", "μάχαιρα", str(destination), "--width", "64", "--height", "64"]
    )
    assert code == 0
    assert destination.exists()


def test_missing_bundle_is_an_error(project: Path, tmp_path: Path) -> None:
    assert main(["--project-root", str(project), "--bundle", str(tmp_path / "none.bd"), "list"]) == 1
