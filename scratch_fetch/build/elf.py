"""
ELF inspection used to prove an executable is statically linked.

A dynamically linked executable names its loader in a ``PT_INTERP`` program
header; inside an empty image that loader does not exist and the container
fails to start with "no such file or directory". A static executable (including
static-pie) has no such header.
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO, Union

from scratch_fetch.errors import BinaryNotStaticError, ElfFormatError, TargetMismatchError
from scratch_fetch.logger import logger
from scratch_fetch.models import ElfInfo

ELF_MAGIC = b"\x7fELF"
ELFCLASS32 = 1
ELFCLASS64 = 2
PT_INTERP = 3

#: ``e_machine`` values per docker architecture name
MACHINES = {
    "amd64": 62,  # EM_X86_64
    "arm64": 183,  # EM_AARCH64
}

# e_type .. e_shstrndx, after the 16-byte e_ident
_EHDR = {ELFCLASS32: "HHIIIIIHHHHHH", ELFCLASS64: "HHIQQQIHHHHHH"}
# (format, index of p_offset, index of p_filesz)
_PHDR = {ELFCLASS32: ("IIIIIIII", 1, 4), ELFCLASS64: ("IIQQQQQQ", 2, 5)}


def _read_exact(fh: BinaryIO, offset: int, size: int) -> bytes:
    fh.seek(offset)
    data = fh.read(size)
    if len(data) != size:
        raise ElfFormatError(f"truncated ELF file: wanted {size} bytes at offset {offset}")
    return data


def read_elf(path: Union[str, Path]) -> ElfInfo:
    """Parse the ELF header and program headers of *path*."""
    path = Path(path)
    with path.open("rb") as fh:
        ident = fh.read(16)
        if len(ident) < 16 or ident[:4] != ELF_MAGIC:
            raise ElfFormatError(f"{path} is not an ELF file")

        elf_class, data_enc = ident[4], ident[5]
        if elf_class not in _EHDR:
            raise ElfFormatError(f"{path}: unknown ELF class {elf_class}")
        if data_enc == 1:
            order, byte_order = "<", "little"
        elif data_enc == 2:
            order, byte_order = ">", "big"
        else:
            raise ElfFormatError(f"{path}: unknown ELF data encoding {data_enc}")

        ehdr_fmt = order + _EHDR[elf_class]
        fields = struct.unpack(ehdr_fmt, _read_exact(fh, 16, struct.calcsize(ehdr_fmt)))
        machine, phoff, phentsize, phnum = fields[1], fields[4], fields[8], fields[9]

        phdr_fmt, off_idx, size_idx = _PHDR[elf_class]
        phdr_fmt = order + phdr_fmt
        phdr_size = struct.calcsize(phdr_fmt)
        if phnum and phentsize < phdr_size:
            raise ElfFormatError(f"{path}: program header entry too small ({phentsize})")

        interpreter = None
        for i in range(phnum):
            entry = struct.unpack(phdr_fmt, _read_exact(fh, phoff + i * phentsize, phdr_size))
            if entry[0] != PT_INTERP:
                continue
            raw = _read_exact(fh, entry[off_idx], entry[size_idx])
            interpreter = raw.split(b"\0", 1)[0].decode("utf-8", "replace")
            break

    return ElfInfo(
        elf_class=elf_class,
        byte_order=byte_order,
        machine=machine,
        interpreter=interpreter,
    )


def ensure_static(path: Union[str, Path], arch: str) -> ElfInfo:
    """Fail unless *path* is a static executable for *arch*."""
    info = read_elf(path)
    expected = MACHINES[arch]
    if info.machine != expected:
        raise TargetMismatchError(
            f"{path} is built for ELF machine {info.machine}, expected {expected} ({arch})"
        )
    if not info.is_static:
        raise BinaryNotStaticError(
            f"{path} is dynamically linked (interpreter {info.interpreter}); "
            "it will not start in an empty image"
        )
    logger.info("%s is a static %s executable", path, arch)
    return info
