class ScratchFetchError(Exception):
    """Base error for scratch-fetch."""


class BuildError(ScratchFetchError):
    """Raised when the build/package procedure cannot complete."""


class ToolNotFoundError(BuildError):
    """Raised when an external build tool is not installed."""


class CommandFailedError(BuildError):
    """Raised when an external build tool exits with a non-zero status."""

    def __init__(self, step: str, returncode: int, output: str = "") -> None:
        self.step = step
        self.returncode = returncode
        self.output = output
        message = f"{step} failed with exit status {returncode}"
        if output:
            message = f"{message}: {output}"
        super().__init__(message)


class TargetMismatchError(BuildError):
    """Raised when the host or the produced binary does not match the target platform."""


class ElfFormatError(BuildError):
    """Raised when a file is not a readable ELF executable."""


class BinaryNotStaticError(BuildError):
    """Raised when an executable still depends on a dynamic loader."""


class CertificateBundleNotFoundError(BuildError):
    """Raised when no CA bundle is available for the image."""
