"""
Step 1: freeze the fetch program into one statically linked Linux executable.

PyInstaller produces a one-file executable that still loads libc and friends
through the system loader; staticx then bundles those libraries into a static
bootstrap so the result runs where no shared library exists. ``--clean``
discards PyInstaller's caches so every dependency is analysed and collected
again on each build.
"""
from __future__ import annotations

import platform
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Sequence

import scratch_fetch
from scratch_fetch.build.elf import ensure_static
from scratch_fetch.config import BuildConfig
from scratch_fetch.errors import CommandFailedError, TargetMismatchError, ToolNotFoundError
from scratch_fetch.logger import logger

__all__ = [
    "check_target",
    "compile_static",
    "host_arch",
    "pyinstaller_command",
    "resolve_entry_script",
    "run_command",
    "staticx_command",
]

#: how many trailing output lines of a failed tool end up in the error message
OUTPUT_TAIL_LINES = 20

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def host_arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def check_target(cfg: BuildConfig) -> None:
    """PyInstaller cannot cross-compile: the host has to be the target platform."""
    host = f"{platform.system().lower()}/{host_arch()}"
    if host != cfg.platform:
        raise TargetMismatchError(
            f"cannot build {cfg.platform} executables on {host}; "
            f"run the build on a {cfg.platform} host or builder container"
        )


def resolve_entry_script(cfg: BuildConfig) -> Path:
    entry = cfg.entry_script or Path(scratch_fetch.__file__).with_name("__main__.py")
    entry = Path(entry).expanduser().resolve()
    if not entry.is_file():
        raise FileNotFoundError(f"Entry script not found: {entry}")
    return entry


def pyinstaller_command(cfg: BuildConfig, entry: Path) -> List[str]:
    return [
        sys.executable,
        "-m",
        "PyInstaller",
        "--onefile",
        "--clean",
        "--noconfirm",
        "--name",
        f"{cfg.binary_name}.dynamic",
        "--distpath",
        str(cfg.work_dir / "dist"),
        "--workpath",
        str(cfg.work_dir / "work"),
        "--specpath",
        str(cfg.work_dir),
        str(entry),
    ]


def staticx_command(source: Path, target: Path) -> List[str]:
    return ["staticx", str(source), str(target)]


def run_command(step: str, cmd: Sequence[str]) -> str:
    """Run *cmd*, returning its combined output; raise on failure."""
    logger.info("%s: %s", step, " ".join(cmd))
    try:
        proc = subprocess.run(
            list(cmd),
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(f"{step}: {cmd[0]} is not installed") from exc

    output = proc.stdout or ""
    for line in output.splitlines():
        logger.debug("%s | %s", step, line)
    if proc.returncode != 0:
        tail = "\n".join(output.splitlines()[-OUTPUT_TAIL_LINES:])
        raise CommandFailedError(step, proc.returncode, tail)
    return output


def compile_static(cfg: BuildConfig) -> Path:
    """Build ``<build_dir>/dist/<binary_name>`` and verify it is static."""
    check_target(cfg)
    entry = resolve_entry_script(cfg)

    if shutil.which("staticx") is None:
        raise ToolNotFoundError("staticx is not installed (pip install staticx)")

    cfg.work_dir.mkdir(parents=True, exist_ok=True)
    cfg.dist_dir.mkdir(parents=True, exist_ok=True)

    run_command("pyinstaller", pyinstaller_command(cfg, entry))
    frozen = cfg.work_dir / "dist" / f"{cfg.binary_name}.dynamic"

    binary = cfg.dist_dir / cfg.binary_name
    run_command("staticx", staticx_command(frozen, binary))

    ensure_static(binary, cfg.target_arch)
    return binary
