"""Detection of binary files by magic bytes and NUL bytes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .logger import log_info

_SNIFF_SIZE = 4096


@dataclass(frozen=True)
class MagicSignature:
    """Leading bytes that identify a known binary format."""

    magic: bytes
    name: str


SIGNATURES: Tuple[MagicSignature, ...] = (
    MagicSignature(b"\x7fELF", "ELF Executable"),
    MagicSignature(b"MZ", "PE Executable (Windows)"),
    MagicSignature(b"\xfe\xed\xfa\xcf", "Mach-O (Mac 64)"),
    MagicSignature(b"\xfe\xed\xfa\xce", "Mach-O (Mac 32)"),
    MagicSignature(b"\xca\xfe\xba\xbe", "Java Class / Mach-O Fat"),
    MagicSignature(b"\x89PNG\r\n\x1a\n", "PNG Image"),
    MagicSignature(b"\xff\xd8\xff", "JPEG Image"),
    MagicSignature(b"GIF8", "GIF Image"),
    MagicSignature(b"PK\x03\x04", "ZIP Archive"),
    MagicSignature(b"\x1f\x8b", "GZIP Archive"),
    MagicSignature(b"BM", "BMP Image"),
    MagicSignature(b"\x00\x00\x01\x00", "ICO Icon"),
)


def match_signature(data: bytes) -> Optional[MagicSignature]:
    """Return the first known signature ``data`` starts with, if any."""
    return next((sig for sig in SIGNATURES if data.startswith(sig.magic)), None)


def looks_binary(path: Union[str, Path]) -> bool:
    """Guess whether a file is binary from its first 4 KiB.

    Unreadable and empty files count as text.
    """
    try:
        with open(path, "rb") as stream:
            head = stream.read(_SNIFF_SIZE)
    except OSError:
        return False

    if not head:
        return False

    signature = match_signature(head)
    if signature is not None:
        log_info(f"Binary detected via magic bytes ({signature.name}): {path}")
        return True

    if b"\x00" in head:
        log_info(f"Binary detected via NUL byte check: {path}")
        return True
    return False