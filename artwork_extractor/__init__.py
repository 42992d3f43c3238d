# Album Artwork Extractor
# A Python tool to extract embedded cover art from audio files

from .models import (
    AudioTags, AudioFileRef, FolderClassification, FolderContext, PendingArtwork,
    ErrorKind, ApplicationError, FolderResult, WriteResult, ProcessingOptions,
    ProcessingStats, UNBOUNDED_WORKERS
)
from .exceptions import (
    ProcessingError, ValidationError, TagReadError, ImageProcessingError
)
from .path_validator import PathValidator
from .file_scanner import FileScanner
from .tag_reader import TagReader
from .image_codec import ImageCodec
from .name_template import NameTemplateEngine, INVALID_FILENAME_CHARS
from .folder_classifier import FolderClassifier
from .artwork_writer import ArtworkWriter
from .pipeline import ArtExtractionPipeline
from .dispatcher import DirectoryWalker, FolderDispatcher
from .logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from .extraction_manager import ExtractionManager

__all__ = [
    'AudioTags',
    'AudioFileRef',
    'FolderClassification',
    'FolderContext',
    'PendingArtwork',
    'ErrorKind',
    'ApplicationError',
    'FolderResult',
    'WriteResult',
    'ProcessingOptions',
    'ProcessingStats',
    'UNBOUNDED_WORKERS',
    'ProcessingError',
    'ValidationError',
    'TagReadError',
    'ImageProcessingError',
    'PathValidator',
    'FileScanner',
    'TagReader',
    'ImageCodec',
    'NameTemplateEngine',
    'INVALID_FILENAME_CHARS',
    'FolderClassifier',
    'ArtworkWriter',
    'ArtExtractionPipeline',
    'DirectoryWalker',
    'FolderDispatcher',
    'ProgressLogger',
    'LogConfig',
    'create_default_logger',
    'get_default_log_file',
    'ExtractionManager'
]
