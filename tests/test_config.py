# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from scratch_fetch.config import BuildConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("image: my-image\ntarget_arch: arm64", ".yaml", None),
        (json.dumps({"image": "my-image", "target_arch": "arm64"}), ".json", None),
        ("image: my-image\nunknown_key: 1", ".yaml", ValidationError),
        ("image: my-image\ntarget_arch: mips", ".yaml", ValidationError),
        ("image: [unclosed", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("image = 'x'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, BuildConfig)
        assert cfg.image == "my-image"
        assert cfg.platform == "linux/arm64"


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config(None)
    assert cfg == BuildConfig()
    assert cfg.image == "example-scratch"
    assert cfg.dockerfile == "Dockerfile.scratch"
    assert cfg.binary_name == "main"
    assert cfg.platform == "linux/amd64"
    assert cfg.ca_bundle_dest == "/etc/ssl/certs/ca-certificates.crt"
    assert cfg.include_ca_bundle is True


def test_default_config_file_is_used(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("image: from-default\n", encoding="utf-8")
    assert load_config(None).image == "from-default"


def test_shipped_default_config_is_valid():
    shipped = Path(__file__).parent.parent / "configs" / "default.yaml"
    assert load_config(shipped) == BuildConfig()


def test_explicit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "field,value",
    [
        ("binary_name", "bin/main"),
        ("dockerfile", "../Dockerfile"),
        ("ca_bundle_dest", "etc/ssl/certs/ca.crt"),
        ("ca_bundle_dest", "/etc/ssl/certs/"),
        ("image", ""),
    ],
)
def test_invalid_fields(field, value):
    with pytest.raises(ValidationError):
        BuildConfig(**{field: value})


@pytest.mark.parametrize(
    "fields",
    [
        {"dockerfile": "main"},
        {"binary_name": "Dockerfile.scratch"},
        {"binary_name": "ca-certificates.crt"},
        {"dockerfile": "ca-certificates.crt"},
        {"binary_name": "tmp"},
        {"dockerfile": "tmp"},
    ],
)
def test_context_names_must_not_collide(fields):
    # binary, CA bundle, Dockerfile and tmp/ are written into one directory
    with pytest.raises(ValidationError):
        BuildConfig(**fields)


def test_overrides_are_validated():
    cfg = BuildConfig()
    assert cfg.with_overrides(image="other").image == "other"
    assert cfg.image == "example-scratch"
    with pytest.raises(ValidationError):
        cfg.with_overrides(image="")
    with pytest.raises(ValidationError):
        cfg.with_overrides(binary_name="Dockerfile.scratch")


def test_derived_directories(tmp_path):
    cfg = BuildConfig(build_dir=tmp_path)
    assert cfg.work_dir == tmp_path / "pyinstaller"
    assert cfg.dist_dir == tmp_path / "dist"
    assert cfg.context_dir == tmp_path / "context"


def test_config_is_frozen():
    cfg = BuildConfig()
    with pytest.raises(ValidationError):
        cfg.image = "other"
