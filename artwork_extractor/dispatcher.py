"""
フォルダ列挙・並列実行モジュール

ルート配下のフォルダを処理開始前にすべて列挙し、
フォルダ単位のタスクとしてワーカープールに投入します。
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional

from .file_scanner import FileScanner
from .models import ApplicationError, ErrorKind, FolderResult, UNBOUNDED_WORKERS


def resolve_worker_count(max_workers: int) -> int:
    """
    設定されたワーカー数を実際のスレッド数に変換

    Args:
        max_workers: 設定値（UNBOUNDED_WORKERSの場合はCPU数）

    Returns:
        スレッド数
    """
    if max_workers == UNBOUNDED_WORKERS:
        return os.cpu_count() or 1
    return max(1, max_workers)


class DirectoryWalker:
    """処理対象のフォルダを列挙するクラス"""

    def __init__(self, file_scanner: Optional[FileScanner] = None):
        self.file_scanner = file_scanner or FileScanner()

    def enumerate(self, root: Path, include_root: bool = True) -> List[Path]:
        """
        ルート配下のすべてのフォルダを列挙

        Args:
            root: ルートディレクトリ
            include_root: ルート自身も処理対象にする場合True

        Returns:
            フォルダのリスト
        """
        return self.file_scanner.scan_directories(root, include_root)


class FolderDispatcher:
    """フォルダ単位の処理をワーカープールで実行するクラス"""

    def __init__(self, max_workers: int = UNBOUNDED_WORKERS):
        """
        FolderDispatcherを初期化

        Args:
            max_workers: 最大ワーカー数（1の場合は逐次実行）
        """
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def dispatch(self, folders: List[Path],
                 process_folder: Callable[[Path], FolderResult],
                 on_progress: Optional[Callable[[int, int, Path], None]] = None
                 ) -> List[FolderResult]:
        """
        フォルダを処理して結果を収集

        Args:
            folders: 処理するフォルダ
            process_folder: 1フォルダを処理する関数
            on_progress: 進捗通知 (総数, 完了数, フォルダ) を受け取る関数（省略可）

        Returns:
            フォルダごとの処理結果（完了順）
        """
        results: List[FolderResult] = []
        total = len(folders)
        worker_count = resolve_worker_count(self.max_workers)

        if worker_count == 1:
            # 逐次実行
            for folder in folders:
                results.append(self._run_safely(process_folder, folder))
                if on_progress:
                    on_progress(total, len(results), folder)
            return results

        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            future_to_folder = {
                executor.submit(process_folder, folder): folder
                for folder in folders
            }

            for future in as_completed(future_to_folder):
                folder = future_to_folder[future]
                try:
                    results.append(future.result())
                except Exception as e:
                    results.append(self._folder_failure(folder, e))
                if on_progress:
                    on_progress(total, len(results), folder)

        self.logger.debug(f"並列処理完了: {len(results)}/{total}フォルダ (ワーカー: {worker_count})")
        return results

    def _run_safely(self, process_folder: Callable[[Path], FolderResult],
                    folder: Path) -> FolderResult:
        try:
            return process_folder(folder)
        except Exception as e:
            return self._folder_failure(folder, e)

    def _folder_failure(self, folder: Path, exception: Exception) -> FolderResult:
        """予期しないエラーをフォルダ単位のエラーに変換"""
        message = f"フォルダ処理エラー: {type(exception).__name__}: {exception}"
        self.logger.error(f"{message} ({folder})", exc_info=exception)
        return FolderResult(
            folder=folder,
            errors=[ApplicationError(path=folder, kind=ErrorKind.FOLDER, message=message)],
        )
