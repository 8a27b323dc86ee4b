# File: tests/conftest.py
import ssl
import struct
from pathlib import Path
from typing import Callable, Optional

import pytest

from scratch_fetch.config import BuildConfig
from scratch_fetch.logger import configure

DATA_DIR = Path(__file__).parent / "data"

PT_LOAD = 1
PT_INTERP = 3


@pytest.fixture(autouse=True)
def reset_logging():
    """
    CliRunner swaps sys.stderr; put the project logger back on the real stream
    after every test.
    """
    yield
    configure()


@pytest.fixture()
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture()
def server_ssl_context() -> ssl.SSLContext:
    """TLS context for a test server presenting a localhost certificate."""
    ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ctx.load_cert_chain(DATA_DIR / "localhost.pem", DATA_DIR / "localhost.key")
    return ctx


@pytest.fixture()
def client_ssl_context() -> ssl.SSLContext:
    """Client context trusting only the test CA."""
    return ssl.create_default_context(cafile=str(DATA_DIR / "ca.pem"))


@pytest.fixture()
def build_config(tmp_path) -> BuildConfig:
    """
    Return a BuildConfig confined to tmp_path, with the test CA as bundle.
    """
    return BuildConfig(
        image="test-scratch",
        build_dir=tmp_path / "build",
        ca_bundle=DATA_DIR / "ca.pem",
    )


def _elf_bytes(
    machine: int = 62,
    interpreter: Optional[str] = None,
    elf_class: int = 2,
    big_endian: bool = False,
) -> bytes:
    order = ">" if big_endian else "<"
    if elf_class == 2:
        ehdr_fmt, phdr_fmt = order + "HHIQQQIHHHHHH", order + "IIQQQQQQ"
    else:
        ehdr_fmt, phdr_fmt = order + "HHIIIIIHHHHHH", order + "IIIIIIII"
    ehsize = 16 + struct.calcsize(ehdr_fmt)
    phentsize = struct.calcsize(phdr_fmt)

    payload = interpreter.encode() + b"\0" if interpreter else b""
    segments = [(PT_LOAD, 0, 0)]
    if interpreter:
        segments.append((PT_INTERP, None, len(payload)))
    phnum = len(segments)
    payload_off = ehsize + phnum * phentsize

    ident = b"\x7fELF" + bytes([elf_class, 2 if big_endian else 1, 1, 0]) + b"\0" * 8
    ehdr = struct.pack(ehdr_fmt, 2, machine, 1, 0, ehsize, 0, 0, ehsize, phentsize, phnum, 0, 0, 0)

    phdrs = b""
    for ptype, offset, size in segments:
        offset = payload_off if offset is None else offset
        if elf_class == 2:
            phdrs += struct.pack(phdr_fmt, ptype, 4, offset, 0, 0, size, size, 1)
        else:
            phdrs += struct.pack(phdr_fmt, ptype, offset, 0, 0, size, size, 4, 1)
    return ident + ehdr + phdrs + payload


@pytest.fixture()
def make_elf(tmp_path) -> Callable[..., Path]:
    """
    Factory writing a minimal ELF executable; pass interpreter= to make it dynamic.
    """

    def _make(name: str = "main", path: Optional[Path] = None, **kwargs) -> Path:
        target = path or tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(_elf_bytes(**kwargs))
        target.chmod(0o755)
        return target

    return _make
