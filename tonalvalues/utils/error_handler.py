"""Error types and stage wrapping for the tonal values pipeline"""

from contextlib import contextmanager
from typing import Iterator, Optional


class TonalValuesError(Exception):
    """Base exception for tonal values errors"""
    pass


class StageError(TonalValuesError):
    """Error in a specific pipeline stage"""
    def __init__(self, stage: str, message: str, original_error: Optional[Exception] = None):
        self.stage = stage
        self.original_error = original_error
        super().__init__(f"Stage {stage} failed: {message}")


class ConfigError(TonalValuesError):
    """Invalid invocation or configuration"""
    pass


class ArgumentCountError(ConfigError):
    """Wrong number of positional arguments"""
    def __init__(self, want: int, got: int):
        self.want = want
        self.got = got
        super().__init__(f"wrong number of arguments, want {want} got {got}")


class EmptyPathError(ConfigError):
    """Image path given as an empty string"""
    def __init__(self):
        super().__init__("empty image path")


class ImageIOError(TonalValuesError):
    """Reading or writing an image failed"""
    def __init__(self, path: str, message: str, original_error: Optional[Exception] = None):
        self.path = str(path)
        self.original_error = original_error
        super().__init__(f"{message}: {path}" + (f": {original_error}" if original_error else ""))


class FileOpenError(ImageIOError):
    pass


class DecodeConfigError(ImageIOError):
    pass


class ImageDecodeError(ImageIOError):
    pass


class FileCreateError(ImageIOError):
    pass


class ImageEncodeError(ImageIOError):
    pass


class ImageBoundsError(TonalValuesError):
    """Image dimensions outside the accepted bounds"""
    def __init__(self, description: str, limit_kind: str, limit: int, got: int):
        self.limit = limit
        self.got = got
        super().__init__(f"image too {description}, {limit_kind} {limit}, got {got}")


class ImageTooWideError(ImageBoundsError):
    def __init__(self, limit: int, got: int):
        super().__init__("wide", "max", limit, got)


class ImageTooTallError(ImageBoundsError):
    def __init__(self, limit: int, got: int):
        super().__init__("tall", "max", limit, got)


class ImageTooNarrowError(ImageBoundsError):
    def __init__(self, limit: int, got: int):
        super().__init__("narrow", "min", limit, got)


class ImageTooShortError(ImageBoundsError):
    def __init__(self, limit: int, got: int):
        super().__init__("short", "min", limit, got)


class QuantizerError(TonalValuesError, ValueError):
    """Invalid quantizer parameters"""
    pass


class InvalidRangeError(QuantizerError):
    """Quantizer min is bigger than max"""
    def __init__(self, min_value: int, max_value: int):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(f"min ({min_value}) is bigger than max ({max_value})")


class InvalidStepCountError(QuantizerError):
    """Negative number of tones"""
    def __init__(self, n: int):
        self.n = n
        super().__init__(f"number of tones must not be negative, got {n}")


@contextmanager
def stage(name: str, message: Optional[str] = None) -> Iterator[None]:
    """Context manager wrapping any failure inside a pipeline stage into StageError"""
    try:
        yield
    except StageError:
        raise
    except Exception as e:
        raise StageError(
            stage=name,
            message=f"{message or name}: {str(e)}",
            original_error=e
        ) from e
