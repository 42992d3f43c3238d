"""
データモデル定義

Album Artwork Extractorで使用するデータクラスを定義します。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .exceptions import ValidationError


# ワーカー数の特別値: 利用可能なすべてのCPUを使用
UNBOUNDED_WORKERS = -1

DEFAULT_EXTENSION = '.mp3'
DEFAULT_NAMING_PATTERN = '[sourcepath]/folder[disc].jpg'


@dataclass
class AudioTags:
    """タグ読み取り結果"""
    artist: Optional[str] = None
    album_artist: Optional[str] = None
    album: Optional[str] = None
    disc_number: int = 0
    pictures: List[bytes] = field(default_factory=list)

    @property
    def primary_artist(self) -> Optional[str]:
        """アルバムアーティストを優先した代表アーティスト"""
        if self.album_artist and self.album_artist.strip():
            return self.album_artist
        return self.artist


@dataclass(frozen=True)
class AudioFileRef:
    """オーディオファイルとタグのスナップショット"""
    path: Path
    tags: AudioTags


@dataclass(frozen=True)
class FolderClassification:
    """フォルダ分類結果"""
    is_single_artist: bool
    sole_artist: str = ''  # Variousの場合は空文字


@dataclass
class FolderContext:
    """1フォルダ分の処理コンテキスト"""
    folder: Path
    audio_files: List[AudioFileRef]
    classification: FolderClassification


@dataclass
class PendingArtwork:
    """書き込み予定のアートワーク"""
    target_path: Path
    data: bytes
    source_path: Path
    checksum: Optional[int] = None


class ErrorKind(Enum):
    """エラー種別"""
    TAG_READ = 'tag_read'
    DELETE = 'delete'
    RESIZE = 'resize'
    WRITE = 'write'
    FOLDER = 'folder'


@dataclass(frozen=True)
class ApplicationError:
    """処理中に記録されたエラー"""
    path: Path
    kind: ErrorKind
    message: str


@dataclass
class WriteResult:
    """書き込み結果"""
    written: List[Path] = field(default_factory=list)
    duplicates: List[Path] = field(default_factory=list)
    errors: List[ApplicationError] = field(default_factory=list)


@dataclass
class FolderResult:
    """1フォルダの処理結果"""
    folder: Path
    audio_files: int = 0
    written: List[Path] = field(default_factory=list)
    duplicates: List[Path] = field(default_factory=list)
    skipped_existing: int = 0
    errors: List[ApplicationError] = field(default_factory=list)


@dataclass(frozen=True)
class ProcessingOptions:
    """実行オプション（実行中は不変）"""
    root_path: Path
    extension: str = DEFAULT_EXTENSION
    naming_pattern: str = DEFAULT_NAMING_PATTERN
    overwrite: bool = False
    dedup: bool = False
    resize_width: Optional[int] = None
    resize_height: Optional[int] = None
    max_workers: int = UNBOUNDED_WORKERS
    verbose: bool = False
    include_root: bool = True

    def __post_init__(self):
        # frozenのためobject.__setattr__で正規化する
        object.__setattr__(self, 'root_path', Path(self.root_path))

        extension = self.extension.strip()
        if not extension or extension == '.':
            raise ValidationError("拡張子が指定されていません")
        if not extension.startswith('.'):
            extension = '.' + extension
        object.__setattr__(self, 'extension', extension.lower())

        if not self.naming_pattern:
            raise ValidationError("ファイル名パターンが指定されていません")

        if self.max_workers != UNBOUNDED_WORKERS and self.max_workers < 1:
            raise ValidationError(f"ワーカー数が無効です: {self.max_workers}")

        for name in ('resize_width', 'resize_height'):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValidationError(f"リサイズ指定が無効です: {name}={value}")

    @property
    def resize_bounds(self) -> Optional[Tuple[int, int]]:
        """
        リサイズ上限を取得

        片方のみ指定された場合はもう片方に同じ値を使用します。

        Returns:
            (幅, 高さ) のタプル、リサイズしない場合はNone
        """
        if self.resize_width is None and self.resize_height is None:
            return None
        width = self.resize_width if self.resize_width is not None else self.resize_height
        height = self.resize_height if self.resize_height is not None else self.resize_width
        return width, height


@dataclass
class ProcessingStats:
    """処理統計情報"""
    folders_scanned: int
    audio_files_found: int
    artwork_written: int
    duplicates_skipped: int
    existing_skipped: int
    errors: List[ApplicationError]

    @property
    def succeeded(self) -> bool:
        """エラーが記録されていない場合True"""
        return not self.errors
