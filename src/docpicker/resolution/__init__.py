"""Reference resolution pipeline."""

from .classifier import ReferenceClassifier, ReferenceKind
from .content import ContentResolver, DisplayNameLookup, FileContentResolver, RowCursor
from .errors import CacheDirectoryError, ContentError, MaterializationError, ResolutionError
from .materializer import ByteMaterializer
from .mime import MimeTypeResolver
from .models import OPENABLE_PROJECTION, MaterializedFile, OpenableColumns, RecordBuilder, ResolutionRecord
from .pipeline import DocumentResolver
from .strategies import ContentHandleStrategy, LocalPathStrategy, RemoteUrlStrategy

__all__ = [
    "ByteMaterializer",
    "CacheDirectoryError",
    "ContentError",
    "ContentHandleStrategy",
    "ContentResolver",
    "DisplayNameLookup",
    "DocumentResolver",
    "FileContentResolver",
    "LocalPathStrategy",
    "MaterializationError",
    "MaterializedFile",
    "MimeTypeResolver",
    "OPENABLE_PROJECTION",
    "OpenableColumns",
    "RecordBuilder",
    "ReferenceClassifier",
    "ReferenceKind",
    "RemoteUrlStrategy",
    "ResolutionError",
    "ResolutionRecord",
    "RowCursor",
]
