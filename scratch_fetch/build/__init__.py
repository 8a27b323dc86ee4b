"""scratch_fetch.build: two-step build of the static executable and its scratch image."""
from .compiler import compile_static
from .elf import ensure_static, read_elf
from .image import build_image, render_dockerfile

__all__ = ["build_image", "compile_static", "ensure_static", "read_elf", "render_dockerfile"]
