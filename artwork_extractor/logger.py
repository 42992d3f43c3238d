"""
ロギングシステム

Album Artwork Extractorのロギング機能を提供します。
標準出力とファイル出力の両方をサポートし、進捗表示とエラーログを管理します。
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import ProcessingOptions, ProcessingStats


@dataclass
class LogConfig:
    """ログ設定"""
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_file: Optional[Path] = None
    verbose: bool = False


class ProgressLogger:
    """進捗表示とロギングを管理するクラス"""

    def __init__(self, config: LogConfig):
        self.config = config
        self.logger = self._setup_logger()
        self._start_time: Optional[datetime] = None

    def _setup_logger(self) -> logging.Logger:
        """ロガーのセットアップ"""
        logger = logging.getLogger('album_artwork_extractor')
        logger.setLevel(logging.DEBUG)

        # 既存のハンドラーをクリア
        logger.handlers.clear()

        console_formatter = logging.Formatter('%(message)s')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.config.console_level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.config.log_file, encoding='utf-8')
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger

    def close(self) -> None:
        """ハンドラーを閉じる"""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def log_processing_start(self, options: ProcessingOptions):
        """処理開始時のサマリー表示"""
        self._start_time = datetime.now()

        self.logger.info("=" * 60)
        self.logger.info("Album Artwork Extractor - 処理開始")
        self.logger.info("=" * 60)
        self.logger.info(f"開始時刻: {self._start_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"ルートディレクトリ: {options.root_path}")
        self.logger.info(f"対象拡張子: {options.extension}")
        self.logger.info(f"命名パターン: {options.naming_pattern}")

        if options.overwrite:
            self.logger.info("  - 既存ファイルを上書きします")
        if options.dedup:
            self.logger.info("  - 同一内容の画像はフォルダ内で1つだけ書き込みます")
        if options.resize_bounds:
            width, height = options.resize_bounds
            self.logger.info(f"  - {width}x{height} 以内にリサイズします")

        self.logger.info("")

    def log_scan_complete(self, folder_count: int, processing_time: float):
        """フォルダ列挙完了のログ"""
        self.logger.info(f"フォルダ列挙完了: {folder_count}個のフォルダ")
        self.logger.info(f"処理時間: {processing_time:.2f}秒")
        self.logger.info("")

    def log_folder_progress(self, total_folders: int, folders_processed: int,
                            current_folder: Optional[Path] = None):
        """フォルダ処理の進捗表示"""
        if not self.config.verbose:
            return

        if current_folder:
            self.logger.info(f"処理完了: {current_folder}")

        if total_folders > 0:
            progress = (folders_processed / total_folders) * 100
            self.logger.info(f"進捗: {folders_processed}/{total_folders} ({progress:.1f}%)")

    def log_artwork_saved(self, target_path: Path):
        """アートワーク保存のログ"""
        self.logger.info(f"保存: {target_path}")

    def log_duplicate(self, target_path: Path):
        """重複アートワークのログ"""
        self.logger.info(f"重複のためスキップ: {target_path}")

    def log_processing_complete(self, stats: ProcessingStats):
        """処理完了時のサマリー表示"""
        end_time = datetime.now()
        total_time = (end_time - self._start_time).total_seconds() if self._start_time else 0

        self.logger.info("=" * 60)
        self.logger.info("処理完了サマリー")
        self.logger.info("=" * 60)
        self.logger.info(f"終了時刻: {end_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"総処理時間: {total_time:.2f}秒")
        self.logger.info("")
        self.logger.info("処理結果:")
        self.logger.info(f"  - フォルダ数: {stats.folders_scanned}")
        self.logger.info(f"  - オーディオファイル数: {stats.audio_files_found}")
        self.logger.info(f"  - 書き込み成功: {stats.artwork_written}")
        self.logger.info(f"  - 重複スキップ: {stats.duplicates_skipped}")
        self.logger.info(f"  - 既存スキップ: {stats.existing_skipped}")
        self.logger.info(f"  - 失敗: {len(stats.errors)}")

        if stats.errors:
            self.logger.info("")
            self.logger.info(f"エラー詳細 ({len(stats.errors)}件):")
            for error in stats.errors:
                self.logger.error(f"  - [{error.kind.value}] {error.path}: {error.message}")

        self.logger.info("=" * 60)

    def log_error(self, file_path: Path, error_message: str, exception: Optional[Exception] = None):
        """エラーログの詳細記録"""
        error_msg = f"エラー - {file_path}: {error_message}"

        if exception:
            error_msg += f" ({type(exception).__name__}: {str(exception)})"

        self.logger.error(error_msg)

        # 詳細なスタックトレースはファイルログのみに記録
        if exception and self.config.log_file:
            self.logger.debug("スタックトレース:", exc_info=exception)

    def log_debug(self, message: str):
        """デバッグメッセージのログ"""
        self.logger.debug(message)


def create_default_logger(verbose: bool = False, log_file: Optional[Path] = None) -> ProgressLogger:
    """デフォルトのロガーを作成"""
    config = LogConfig(
        console_level=logging.DEBUG if verbose else logging.INFO,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=verbose
    )
    return ProgressLogger(config)


def get_default_log_file() -> Path:
    """デフォルトのログファイルパスを取得"""
    log_dir = Path.home() / '.artwork_extractor' / 'logs'
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return log_dir / f'artwork_extractor_{timestamp}.log'
