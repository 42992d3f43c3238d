"""
フォルダ分類モジュール

フォルダ内のオーディオファイルが単一アーティストか、
複数アーティスト（Various）かを判定します。
"""

import logging
from typing import Iterable

from .models import AudioFileRef, FolderClassification


class FolderClassifier:
    """フォルダを単一アーティスト/Variousに分類するクラス"""

    def __init__(self):
        """FolderClassifierを初期化"""
        self.logger = logging.getLogger(__name__)

    def classify(self, audio_files: Iterable[AudioFileRef]) -> FolderClassification:
        """
        フォルダを分類

        空でない代表アーティストがちょうど1種類の場合のみ単一アーティストとし、
        0種類または2種類以上の場合はVariousとします。

        Args:
            audio_files: タグ読み取りに成功したオーディオファイル

        Returns:
            分類結果
        """
        artists = set()
        for ref in audio_files:
            artist = ref.tags.primary_artist
            if artist and artist.strip():
                artists.add(artist.strip())

        if len(artists) == 1:
            sole_artist = next(iter(artists))
            self.logger.debug(f"単一アーティストのフォルダ: {sole_artist}")
            return FolderClassification(is_single_artist=True, sole_artist=sole_artist)

        self.logger.debug(f"Variousフォルダ: アーティスト{len(artists)}種類")
        return FolderClassification(is_single_artist=False)
