from .filesystem import FilesystemPort
from .sink import ResultSinkPort

__all__ = ["FilesystemPort", "ResultSinkPort"]
