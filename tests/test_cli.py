# Tests for the webapk-builder command line.

import json

import pytest

from webapk_builder import cli
from webapk_builder.errors import BuildRequestFailed, InvalidManifest
from webapk_builder.platform import ConversionResult


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda verbose=False: None)


class _FakePlatform:
    calls: list[tuple] = []
    error: Exception | None = None

    async def convert(self, manifest, output_root, browser_version, page_origin=None):
        type(self).calls.append((manifest, output_root, browser_version, page_origin))
        if type(self).error is not None:
            raise type(self).error
        apk = output_root / "android-webapk" / "source" / "app.apk"
        return ConversionResult(
            output_dir=output_root / "android-webapk",
            apk_path=apk,
            manifest_path=output_root / "android-webapk" / "manifest.json",
            download_url="https://cdn/tok/1/app.apk",
            package_name="app",
            version="1",
            icon_embedded=True,
        )


@pytest.fixture
def fake_platform(monkeypatch):
    _FakePlatform.calls = []
    _FakePlatform.error = None
    monkeypatch.setattr(cli, "WebApkPlatform", _FakePlatform)
    return _FakePlatform


def test_load_manifest_wraps_bare_manifest(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"name": "App", "icons": [{"src": "/i.png"}]}))

    data = cli.load_manifest(path, "https://x/manifest.json")

    assert data == {
        "content": {"name": "App", "icons": [{"src": "/i.png"}]},
        "generatedUrl": "https://x/manifest.json",
    }


def test_load_manifest_keeps_host_shape(tmp_path):
    raw = {"content": {"name": "App"}, "default": {"short_name": "app"}, "generatedUrl": "u"}
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(raw))

    assert cli.load_manifest(path) == raw


@pytest.mark.parametrize("body", ["{not json", "[1, 2]"])
def test_load_manifest_rejects_bad_files(tmp_path, body):
    path = tmp_path / "manifest.json"
    path.write_text(body)
    with pytest.raises(InvalidManifest):
        cli.load_manifest(path)


def test_load_manifest_missing_file(tmp_path):
    with pytest.raises(InvalidManifest):
        cli.load_manifest(tmp_path / "nope.json")


def test_main_success(tmp_path, fake_platform, capsys):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"name": "App"}))

    code = cli.main(
        [str(path), "-o", str(tmp_path), "--browser-version", "120.0", "--origin", "https://x"]
    )

    assert code == 0
    manifest, output_root, version, origin = fake_platform.calls[0]
    assert manifest == {"content": {"name": "App"}}
    assert output_root == tmp_path
    assert version == "120.0"
    assert origin == "https://x"
    assert "app.apk" in capsys.readouterr().out


def test_main_failure_exit_code(tmp_path, fake_platform):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"name": "App"}))
    fake_platform.error = BuildRequestFailed("Build service returned HTTP 500")

    assert cli.main([str(path), "--browser-version", "120.0"]) == 1


def test_main_requires_browser_version(tmp_path):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / "manifest.json")])


def test_main_invalid_settings_exit_code(tmp_path, monkeypatch):
    monkeypatch.setenv("WEBAPK_REQUEST_TIMEOUT", "0")
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"name": "App"}))

    assert cli.main([str(path), "--browser-version", "120.0"]) == 1
