"""
ファイルスキャナー

ディレクトリ一覧の列挙と、フォルダ直下のオーディオファイル検索を提供します。
"""

from pathlib import Path
from typing import List

from .path_validator import PathValidator


class FileScanner:
    """ディレクトリをスキャンしてファイルを検索するクラス"""

    def __init__(self, extension: str = '.mp3'):
        """
        FileScannerを初期化

        Args:
            extension: 対象とする拡張子（大文字小文字は区別しない）
        """
        if not extension.startswith('.'):
            extension = '.' + extension
        self.extension = extension.lower()

    def scan_audio_files(self, directory: Path) -> List[Path]:
        """
        フォルダ直下のオーディオファイルを検索（サブディレクトリは対象外）

        Args:
            directory: スキャンするディレクトリ

        Returns:
            見つかったオーディオファイルのパスのリスト（ファイル名順）

        Raises:
            ValidationError: ディレクトリが無効な場合
        """
        PathValidator.validate_directory(directory)

        audio_files = [
            file_path for file_path in directory.iterdir()
            if file_path.is_file() and self.is_audio_file(file_path)
        ]

        return sorted(audio_files)

    def scan_directories(self, root: Path, include_root: bool = True) -> List[Path]:
        """
        ルート配下のすべてのディレクトリを再帰的に列挙

        Args:
            root: ルートディレクトリ
            include_root: ルート自身も結果に含める場合True

        Returns:
            ディレクトリパスのリスト（パス順）

        Raises:
            ValidationError: ディレクトリが無効な場合
        """
        PathValidator.validate_directory(root)

        directories = [path for path in root.rglob('*') if path.is_dir()]
        directories.sort()

        if include_root:
            directories.insert(0, root)

        return directories

    def is_audio_file(self, file_path: Path) -> bool:
        """
        ファイルが対象拡張子のオーディオファイルかどうかを判定

        Args:
            file_path: ファイルパス

        Returns:
            対象ファイルの場合True
        """
        return file_path.suffix.lower() == self.extension
