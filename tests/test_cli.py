"""Tests for the uploadkit command line."""

from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from uploadkit.cli import cli


@pytest.fixture
def local_env(storage_dir: Path) -> dict[str, str]:
    return {
        "STORAGE_PROVIDER": "local",
        "UPLOAD_DIRECTORY": str(storage_dir),
        "UPLOAD_PUBLIC_URL_BASE": "https://files.example.com/uploads",
    }


def _printed_url(output: str) -> str:
    urls = [line for line in output.splitlines() if line.startswith("https://files.example.com")]
    assert len(urls) == 1, output
    return urls[0]


def test_upload_local_file(tmp_path: Path, storage_dir: Path, local_env):
    source = tmp_path / "report.pdf"
    source.write_bytes(b"%PDF-1.7")

    result = CliRunner().invoke(cli, ["upload", str(source)], env=local_env)

    assert result.exit_code == 0, result.output
    filename = _printed_url(result.output).rsplit("/", 1)[-1]
    assert filename.endswith(".pdf")
    assert filename != "report.pdf"
    assert (storage_dir / filename).read_bytes() == b"%PDF-1.7"


def test_upload_url(storage_dir: Path, local_env, http_source):
    http_source["https://example.com/logo"] = lambda: httpx.Response(
        200, content=b"<svg/>", headers={"content-type": "image/svg+xml"}
    )

    result = CliRunner().invoke(cli, ["upload", "https://example.com/logo"], env=local_env)

    assert result.exit_code == 0, result.output
    filename = _printed_url(result.output).rsplit("/", 1)[-1]
    assert filename.endswith(".svg")


def test_upload_missing_source_fails(tmp_path: Path, local_env):
    result = CliRunner().invoke(cli, ["upload", str(tmp_path / "nope.png")], env=local_env)

    assert result.exit_code == 1
    assert "Upload failed" in result.output


def test_remove(tmp_path: Path, storage_dir: Path, local_env):
    storage_dir.mkdir(parents=True)
    (storage_dir / "abc123.png").write_bytes(b"x")

    result = CliRunner().invoke(
        cli,
        ["remove", "https://files.example.com/uploads/abc123.png"],
        env=local_env,
    )

    assert result.exit_code == 0, result.output
    assert "Removed" in result.output
    assert not (storage_dir / "abc123.png").exists()


def test_remove_missing_file_succeeds(local_env):
    result = CliRunner().invoke(cli, ["remove", "never-stored.png"], env=local_env)

    assert result.exit_code == 0


def test_invalid_provider(local_env):
    env = {**local_env, "STORAGE_PROVIDER": "ftp"}

    result = CliRunner().invoke(cli, ["remove", "abc.png"], env=env)

    assert result.exit_code == 1
    assert "Invalid storage type" in result.output
