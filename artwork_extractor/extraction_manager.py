"""
抽出処理管理モジュール

実行オプションの検証、フォルダ列挙、フォルダ単位の並列処理、
結果の集計とレポートまでの一連の処理を管理します。
"""

import time
from pathlib import Path
from typing import List, Optional

from .dispatcher import DirectoryWalker, FolderDispatcher
from .file_scanner import FileScanner
from .image_codec import ImageCodec
from .logger import create_default_logger, get_default_log_file
from .models import FolderResult, ProcessingOptions, ProcessingStats
from .name_template import NameTemplateEngine, static_base_directory
from .path_validator import PathValidator
from .pipeline import ArtExtractionPipeline
from .tag_reader import TagReader


class ExtractionManager:
    """アートワーク抽出処理を担当するクラス"""

    def __init__(self, tag_reader: Optional[TagReader] = None,
                 image_codec: Optional[ImageCodec] = None,
                 name_engine: Optional[NameTemplateEngine] = None):
        """
        ExtractionManagerを初期化

        Args:
            tag_reader: タグ読み取りクラス（Noneの場合は新規作成）
            image_codec: 画像処理クラス（Noneの場合は新規作成）
            name_engine: 出力パス生成クラス（Noneの場合は新規作成）
        """
        self.tag_reader = tag_reader or TagReader()
        self.image_codec = image_codec or ImageCodec()
        self.name_engine = name_engine or NameTemplateEngine()
        self.progress_logger = None

    def extract(self, options: ProcessingOptions) -> ProcessingStats:
        """
        ルート配下のオーディオファイルからアートワークを抽出

        Args:
            options: 実行オプション

        Returns:
            処理統計情報（エラーはstats.errorsに含まれる）

        Raises:
            ValidationError: ルートディレクトリが無効、
                           または出力先ディレクトリに書き込めない場合
        """
        log_file = get_default_log_file() if options.verbose else None
        self.progress_logger = create_default_logger(verbose=options.verbose, log_file=log_file)
        self.progress_logger.log_processing_start(options)

        try:
            # 1. 処理開始前の検証（ここでの失敗のみ致命的）
            self._validate(options)

            # 2. フォルダの列挙
            start_time = time.time()
            walker = DirectoryWalker(FileScanner(options.extension))
            folders = walker.enumerate(options.root_path, options.include_root)
            self.progress_logger.log_scan_complete(len(folders), time.time() - start_time)

            # 3. フォルダ単位の処理
            pipeline = ArtExtractionPipeline(
                options,
                tag_reader=self.tag_reader,
                image_codec=self.image_codec,
                name_engine=self.name_engine,
                progress_logger=self.progress_logger,
            )
            dispatcher = FolderDispatcher(options.max_workers)
            results = dispatcher.dispatch(
                folders,
                pipeline.process_folder,
                on_progress=self.progress_logger.log_folder_progress,
            )

            # 4. 結果レポート
            stats = self._aggregate(folders, results)
            self.progress_logger.log_processing_complete(stats)
            return stats

        except Exception as e:
            self.progress_logger.log_error(options.root_path, f"抽出処理エラー: {e}", e)
            raise
        finally:
            self.progress_logger.close()

    def _validate(self, options: ProcessingOptions) -> None:
        """
        ルートディレクトリと出力先ディレクトリを検証

        Args:
            options: 実行オプション

        Raises:
            ValidationError: 検証に失敗した場合
        """
        PathValidator.validate_directory(options.root_path)

        base_directory = static_base_directory(options.naming_pattern)
        if base_directory is not None:
            PathValidator.ensure_output_directory(base_directory)
            self.progress_logger.log_debug(f"出力先ディレクトリ: {base_directory}")

    def _aggregate(self, folders: List[Path], results: List[FolderResult]) -> ProcessingStats:
        """
        フォルダごとの結果を集計

        Args:
            folders: 処理したフォルダ
            results: フォルダごとの処理結果

        Returns:
            処理統計情報
        """
        errors = []
        for result in results:
            errors.extend(result.errors)

        return ProcessingStats(
            folders_scanned=len(folders),
            audio_files_found=sum(result.audio_files for result in results),
            artwork_written=sum(len(result.written) for result in results),
            duplicates_skipped=sum(len(result.duplicates) for result in results),
            existing_skipped=sum(result.skipped_existing for result in results),
            errors=errors,
        )
