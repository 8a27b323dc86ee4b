"""Step 2: package the static executable into an image built ``FROM scratch``.

The build context receives the executable, the CA bundle, an empty ``tmp/``
directory and the rendered image definition. The bundle lands at
``ca_bundle_dest`` and ``SSL_CERT_FILE`` points OpenSSL at it, since the frozen
interpreter's compiled-in certificate directory does not exist in the image.
"""
from __future__ import annotations

import shutil
import ssl
import stat
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, PackageLoader

from scratch_fetch.build.compiler import run_command
from scratch_fetch.config import BUNDLE_NAME, SCRATCH_DIR, BuildConfig
from scratch_fetch.errors import CertificateBundleNotFoundError
from scratch_fetch.logger import logger

__all__ = [
    "build_image",
    "docker_build_command",
    "prepare_context",
    "render_dockerfile",
    "resolve_ca_bundle",
]

TEMPLATE_NAME = "Dockerfile.scratch.j2"

_FALLBACK_BUNDLES = (
    Path("/etc/ssl/certs/ca-certificates.crt"),  # Debian, Ubuntu, Alpine
    Path("/etc/pki/tls/certs/ca-bundle.crt"),  # Fedora, RHEL
    Path("/etc/ssl/cert.pem"),  # macOS, BSD
)


def resolve_ca_bundle(cfg: BuildConfig) -> Path:
    """Find the CA bundle to ship: configured, OpenSSL default, then well-known paths."""
    if cfg.ca_bundle is not None:
        bundle = Path(cfg.ca_bundle).expanduser()
        if not bundle.is_file():
            raise CertificateBundleNotFoundError(f"CA bundle not found: {bundle}")
        return bundle

    paths = ssl.get_default_verify_paths()
    candidates = [Path(p) for p in (paths.cafile, paths.openssl_cafile) if p]
    candidates.extend(_FALLBACK_BUNDLES)
    for candidate in candidates:
        if candidate.is_file():
            logger.debug("Using CA bundle %s", candidate)
            return candidate
    raise CertificateBundleNotFoundError(
        "no CA bundle found on this host; set ca_bundle in the configuration"
    )


def render_dockerfile(cfg: BuildConfig, ca_bundle_name: Optional[str] = BUNDLE_NAME) -> str:
    """Рендерит описание образа; без *ca_bundle_name* сертификаты не добавляются."""
    env = Environment(
        loader=PackageLoader("scratch_fetch", "templates"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template(TEMPLATE_NAME)
    return template.render(
        binary=cfg.binary_name,
        scratch_dir=SCRATCH_DIR,
        ca_bundle=ca_bundle_name if cfg.include_ca_bundle else None,
        ca_bundle_dest=cfg.ca_bundle_dest,
    )


def prepare_context(cfg: BuildConfig, binary: Path) -> Path:
    """Recreate the build context and return the path of the written Dockerfile."""
    binary = Path(binary)
    if not binary.is_file():
        raise FileNotFoundError(f"Executable not found: {binary}")

    context = cfg.context_dir
    if context.exists():
        shutil.rmtree(context)
    context.mkdir(parents=True)

    target = context / cfg.binary_name
    shutil.copy2(binary, target)
    target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    # staticx and the PyInstaller bootloader unpack into /tmp before main runs
    scratch = context / SCRATCH_DIR
    scratch.mkdir()
    scratch.chmod(0o1777)

    bundle_name = None
    if cfg.include_ca_bundle:
        shutil.copyfile(resolve_ca_bundle(cfg), context / BUNDLE_NAME)
        bundle_name = BUNDLE_NAME
    else:
        logger.warning("Building without a CA bundle: HTTPS requests will fail certificate checks")

    dockerfile = context / cfg.dockerfile
    dockerfile.write_text(render_dockerfile(cfg, bundle_name), encoding="utf-8")
    return dockerfile


def docker_build_command(cfg: BuildConfig, dockerfile: Path, context: Path) -> List[str]:
    return [
        "docker",
        "build",
        "--platform",
        cfg.platform,
        "-t",
        cfg.image,
        "-f",
        str(dockerfile),
        str(context),
    ]


def build_image(cfg: BuildConfig, binary: Path) -> Path:
    """Build the image tagged ``cfg.image``; returns the Dockerfile used."""
    dockerfile = prepare_context(cfg, binary)
    run_command("docker build", docker_build_command(cfg, dockerfile, cfg.context_dir))
    logger.info("Built image %s", cfg.image)
    return dockerfile
