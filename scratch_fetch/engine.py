"""scratch_fetch.engine: orchestration of the compile and package steps."""

from __future__ import annotations

from pathlib import Path

from scratch_fetch.build.compiler import compile_static
from scratch_fetch.build.image import build_image
from scratch_fetch.config import BuildConfig
from scratch_fetch.errors import BuildError
from scratch_fetch.logger import logger
from scratch_fetch.models import BuildResult

__all__ = ["compile_binary", "package_binary", "run_build"]


def compile_binary(config: BuildConfig) -> Path:
    logger.info("Compiling static %s executable…", config.platform)
    try:
        return compile_static(config)
    except BuildError as exc:
        logger.error("Compilation failed: %s", exc)
        raise


def package_binary(config: BuildConfig, binary: Path) -> Path:
    logger.info("Packaging %s into image %s…", binary, config.image)
    try:
        return build_image(config, binary)
    except BuildError as exc:
        logger.error("Packaging failed: %s", exc)
        raise


def run_build(config: BuildConfig) -> BuildResult:
    """Compile, then package. A failing step stops the build; rerun it from the start."""
    binary = compile_binary(config)
    dockerfile = package_binary(config, binary)
    return BuildResult(binary=binary, image=config.image, dockerfile=dockerfile)
