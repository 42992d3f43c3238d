"""
アートワーク抽出パイプライン

1フォルダ（サブフォルダは含まない）を単位として、タグ読み取り、フォルダ分類、
出力パス生成、既存ファイルの判定、書き込みまでを順に実行します。
失敗はフォルダ内で記録され、呼び出し元へ結果として返されます。
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from .artwork_writer import ArtworkWriter
from .exceptions import TagReadError
from .file_scanner import FileScanner
from .folder_classifier import FolderClassifier
from .image_codec import ImageCodec
from .models import (
    ApplicationError, AudioFileRef, ErrorKind, FolderContext, FolderResult,
    PendingArtwork, ProcessingOptions
)
from .name_template import NameTemplateEngine
from .tag_reader import TagReader


class ArtExtractionPipeline:
    """フォルダ単位でアートワークを抽出するクラス"""

    def __init__(self, options: ProcessingOptions,
                 tag_reader: Optional[TagReader] = None,
                 image_codec: Optional[ImageCodec] = None,
                 name_engine: Optional[NameTemplateEngine] = None,
                 progress_logger=None):
        """
        ArtExtractionPipelineを初期化

        Args:
            options: 実行オプション
            tag_reader: タグ読み取りクラス（Noneの場合は新規作成）
            image_codec: 画像処理クラス（Noneの場合は新規作成）
            name_engine: 出力パス生成クラス（Noneの場合は新規作成）
            progress_logger: 進捗表示用のロガー（省略可）
        """
        self.options = options
        self.tag_reader = tag_reader or TagReader()
        self.file_scanner = FileScanner(options.extension)
        self.classifier = FolderClassifier()
        self.name_engine = name_engine or NameTemplateEngine()
        self.writer = ArtworkWriter(
            image_codec=image_codec,
            resize_bounds=options.resize_bounds,
            dedup=options.dedup,
        )
        self.progress_logger = progress_logger
        self.logger = logging.getLogger(__name__)

    def process_folder(self, folder: Path) -> FolderResult:
        """
        1フォルダを処理

        Args:
            folder: 処理対象のフォルダ

        Returns:
            フォルダの処理結果（エラーは例外ではなく結果に含まれる）
        """
        result = FolderResult(folder=folder)

        # 1. 対象ファイルの列挙
        audio_paths = self.file_scanner.scan_audio_files(folder)
        result.audio_files = len(audio_paths)
        if not audio_paths:
            return result

        # 2. タグ読み取り
        audio_files = self._read_tags(audio_paths, result)

        # 3. フォルダ分類（全ファイルの読み取り後に1回だけ）
        context = FolderContext(
            folder=folder,
            audio_files=audio_files,
            classification=self.classifier.classify(audio_files),
        )

        # 4-8. 出力パス生成と書き込み対象の決定
        pending = self._collect_pending(context, result)

        # 9. 書き込み
        if pending:
            write_result = self.writer.write_batch(pending, self.progress_logger)
            result.written.extend(write_result.written)
            result.duplicates.extend(write_result.duplicates)
            result.errors.extend(write_result.errors)

        self.logger.debug(
            f"フォルダ処理完了: {folder} (ファイル: {result.audio_files}, "
            f"書き込み: {len(result.written)}, エラー: {len(result.errors)})")
        return result

    def _read_tags(self, audio_paths: List[Path], result: FolderResult) -> List[AudioFileRef]:
        """
        タグを読み取り、失敗したファイルはエラーとして記録して除外

        Args:
            audio_paths: オーディオファイルのパス
            result: エラーを記録するフォルダ結果

        Returns:
            読み取りに成功したファイル
        """
        audio_files = []
        for audio_path in audio_paths:
            try:
                tags = self.tag_reader.read(audio_path)
            except TagReadError as e:
                self._record_error(result, audio_path, ErrorKind.TAG_READ, str(e))
                continue
            except Exception as e:
                self._record_error(result, audio_path, ErrorKind.TAG_READ,
                                   f"タグ読み取りエラー: {type(e).__name__}: {e}")
                continue
            audio_files.append(AudioFileRef(path=audio_path, tags=tags))
        return audio_files

    def _collect_pending(self, context: FolderContext,
                         result: FolderResult) -> List[PendingArtwork]:
        """
        書き込み対象のアートワークを収集

        Args:
            context: フォルダの処理コンテキスト
            result: エラーやスキップ数を記録するフォルダ結果

        Returns:
            書き込み予定のアートワーク
        """
        classification = context.classification
        # フォルダ内で解決済みの出力パス（挿入順を保持）
        seen: Dict[Path, None] = {}
        pending = []

        for ref in context.audio_files:
            tags = ref.tags
            target_path = self.name_engine.render(
                pattern=self.options.naming_pattern,
                file_directory=ref.path.parent,
                file_name=ref.path.name,
                artist=classification.sole_artist if classification.is_single_artist
                else tags.primary_artist,
                album=tags.album,
                disc_number=tags.disc_number,
                is_single_artist=classification.is_single_artist,
            )

            # 埋め込み画像がなければ対象外
            if not tags.pictures:
                self.logger.debug(f"埋め込み画像なし: {ref.path.name}")
                continue

            # 同じ出力パスは最初のファイルのみ
            if target_path in seen:
                self.logger.debug(f"出力パス重複のためスキップ: {ref.path.name} -> {target_path}")
                continue
            seen[target_path] = None

            if target_path.exists():
                if not self.options.overwrite:
                    result.skipped_existing += 1
                    self.logger.debug(f"既存ファイルをスキップ: {target_path}")
                    continue
                try:
                    target_path.unlink()
                except OSError as e:
                    self._record_error(result, target_path, ErrorKind.DELETE,
                                       f"既存ファイルの削除に失敗しました: {e}")
                    continue

            # 2枚目以降の画像は使用しない
            pending.append(PendingArtwork(
                target_path=target_path,
                data=tags.pictures[0],
                source_path=ref.path,
            ))

        return pending

    def _record_error(self, result: FolderResult, path: Path,
                      kind: ErrorKind, message: str) -> None:
        result.errors.append(ApplicationError(path=path, kind=kind, message=message))
        if self.progress_logger:
            self.progress_logger.log_error(path, message)
        else:
            self.logger.error(f"処理エラー: {path} - {message}")
