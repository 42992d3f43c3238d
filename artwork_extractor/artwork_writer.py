"""
アートワーク書き込みモジュール

1フォルダ分の書き込み予定アートワークを、リサイズ・重複排除したうえで
ディスクに書き込みます。書き込み順は出力パスの昇順で固定され、
重複時にどちらが残るかは実行ごとに変わりません。
"""

import logging
import os
import zlib
from pathlib import Path
from typing import Iterable, Optional, Set, Tuple

from .exceptions import ImageProcessingError
from .image_codec import ImageCodec
from .models import ApplicationError, ErrorKind, PendingArtwork, WriteResult


def compute_checksum(data: bytes) -> int:
    """重複判定用のCRC-32チェックサムを計算"""
    return zlib.crc32(data) & 0xFFFFFFFF


class ArtworkWriter:
    """アートワークを書き込むクラス"""

    def __init__(self, image_codec: Optional[ImageCodec] = None,
                 resize_bounds: Optional[Tuple[int, int]] = None,
                 dedup: bool = False):
        """
        ArtworkWriterを初期化

        Args:
            image_codec: 画像処理クラス（Noneの場合は新規作成）
            resize_bounds: リサイズ上限 (幅, 高さ)、リサイズしない場合はNone
            dedup: 同一内容のアートワークを1つだけ書き込む場合True
        """
        self.image_codec = image_codec or ImageCodec()
        self.resize_bounds = resize_bounds
        self.dedup = dedup
        self.logger = logging.getLogger(__name__)

    def write_batch(self, pending: Iterable[PendingArtwork],
                    progress_logger=None) -> WriteResult:
        """
        アートワークをまとめて書き込み

        Args:
            pending: 書き込み予定のアートワーク
            progress_logger: 進捗表示用のロガー（省略可）

        Returns:
            書き込み結果
        """
        result = WriteResult()
        scheduled_checksums: Set[int] = set()

        for artwork in sorted(pending, key=lambda item: str(item.target_path)):
            data = artwork.data

            # リサイズ
            if self.resize_bounds:
                try:
                    data = self.image_codec.resize(data, *self.resize_bounds)
                except ImageProcessingError as e:
                    self._record_error(result, artwork.target_path, ErrorKind.RESIZE,
                                       str(e), progress_logger)
                    continue

            # 重複排除
            if self.dedup:
                artwork.checksum = compute_checksum(data)
                if artwork.checksum in scheduled_checksums:
                    result.duplicates.append(artwork.target_path)
                    self.logger.debug(
                        f"重複アートワークをスキップ: {artwork.target_path} "
                        f"(CRC32: {artwork.checksum:08x})")
                    if progress_logger:
                        progress_logger.log_duplicate(artwork.target_path)
                    continue
                scheduled_checksums.add(artwork.checksum)

            # 書き込み
            try:
                self._write_file(artwork.target_path, data)
            except OSError as e:
                self._record_error(result, artwork.target_path, ErrorKind.WRITE,
                                   f"書き込みエラー: {e}", progress_logger)
                continue

            result.written.append(artwork.target_path)
            self.logger.debug(f"書き込み成功: {artwork.source_path.name} -> {artwork.target_path}")
            if progress_logger:
                progress_logger.log_artwork_saved(artwork.target_path)

        return result

    def _write_file(self, target_path: Path, data: bytes) -> None:
        """
        画像データを書き込み、タイムスタンプを現在時刻に設定

        Args:
            target_path: 出力先パス
            data: 画像データ
        """
        with open(target_path, 'wb') as f:
            f.write(data)
        # 更新日時とアクセス日時を現在時刻に設定（作成日時は変更しない）
        os.utime(target_path, None)

    def _record_error(self, result: WriteResult, path: Path, kind: ErrorKind,
                      message: str, progress_logger=None) -> None:
        result.errors.append(ApplicationError(path=path, kind=kind, message=message))
        if progress_logger:
            progress_logger.log_error(path, message)
        else:
            self.logger.error(f"アートワーク書き込みエラー: {path} - {message}")
