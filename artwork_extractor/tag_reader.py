"""
タグ読み取りモジュール

オーディオファイルのタグからアーティスト、アルバム、ディスク番号、
埋め込み画像を読み取る機能を提供します。
タグの解析にはmutagenを使用します。
"""

import base64
import logging
from pathlib import Path
from typing import Any, List, Optional

import mutagen
from mutagen.flac import Picture
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Tags

from .exceptions import TagReadError
from .models import AudioTags


def parse_disc_number(value: Any) -> int:
    """
    ディスク番号を整数に変換

    "2/3" のような形式は先頭の数値を使用します。
    解析できない値は0として扱います。

    Args:
        value: タグから取得した値

    Returns:
        ディスク番号（不明な場合は0）
    """
    # MP4の "disk" は [(番号, 枚数)] 形式
    while isinstance(value, (tuple, list)):
        if not value:
            return 0
        value = value[0]
    if value is None:
        return 0
    if isinstance(value, int):
        return max(value, 0)

    text = str(value).strip().split('/', 1)[0].strip()
    try:
        return max(int(text), 0)
    except ValueError:
        return 0


class TagReader:
    """mutagenを使用したタグ読み取りクラス"""

    def __init__(self):
        """TagReaderを初期化"""
        self.logger = logging.getLogger(__name__)

    def read(self, file_path: Path) -> AudioTags:
        """
        ファイルからタグ情報を読み取る

        Args:
            file_path: 読み取り対象のファイルパス

        Returns:
            タグ情報（タグが存在しない場合は空のAudioTags）

        Raises:
            TagReadError: ファイルが読み取れない、または形式が不明な場合
        """
        try:
            audio = mutagen.File(file_path)
        except mutagen.MutagenError as e:
            raise TagReadError(f"タグ解析エラー: {file_path} - {e}") from e
        except OSError as e:
            raise TagReadError(f"ファイル読み取りエラー: {file_path} - {e}") from e
        except Exception as e:
            raise TagReadError(
                f"タグ読み取りエラー: {file_path} - {type(e).__name__}: {e}") from e

        if audio is None:
            raise TagReadError(f"未対応のファイル形式です: {file_path}")

        try:
            result = self._read_tags(audio)
        except Exception as e:
            raise TagReadError(
                f"タグ読み取りエラー: {file_path} - {type(e).__name__}: {e}") from e

        if result is None:
            self.logger.debug(f"タグがありません: {file_path}")
            return AudioTags()

        self.logger.debug(
            f"タグ読み取り完了: {file_path.name} "
            f"(アーティスト: {result.primary_artist}, アルバム: {result.album}, "
            f"ディスク: {result.disc_number}, 画像: {len(result.pictures)}個)")
        return result

    def _read_tags(self, audio) -> Optional[AudioTags]:
        """タグ形式に応じて読み取り（タグがない場合はNone）"""
        tags = audio.tags
        if tags is None:
            return None
        if isinstance(tags, ID3):
            return self._read_id3(tags)
        if isinstance(tags, MP4Tags):
            return self._read_mp4(tags)
        return self._read_vorbis(audio, tags)

    def _read_id3(self, tags: ID3) -> AudioTags:
        """ID3タグ（MP3、AIFF、WAV）から読み取り"""
        return AudioTags(
            artist=self._id3_text(tags, 'TPE1'),
            album_artist=self._id3_text(tags, 'TPE2'),
            album=self._id3_text(tags, 'TALB'),
            disc_number=parse_disc_number(self._id3_text(tags, 'TPOS')),
            pictures=[bytes(frame.data) for frame in tags.getall('APIC')],
        )

    def _read_mp4(self, tags: MP4Tags) -> AudioTags:
        """MP4タグ（M4A、AAC）から読み取り"""
        return AudioTags(
            artist=self._first_text(tags.get('\xa9ART')),
            album_artist=self._first_text(tags.get('aART')),
            album=self._first_text(tags.get('\xa9alb')),
            disc_number=parse_disc_number(tags.get('disk')),
            pictures=[bytes(cover) for cover in tags.get('covr', [])],
        )

    def _read_vorbis(self, audio, tags) -> AudioTags:
        """Vorbisコメント（FLAC、Ogg）などキー/値形式のタグから読み取り"""
        pictures: List[bytes] = []

        # FLACのPICTUREブロック
        for picture in getattr(audio, 'pictures', None) or []:
            pictures.append(bytes(picture.data))

        # Ogg Vorbis/OpusのMETADATA_BLOCK_PICTURE
        for encoded in tags.get('metadata_block_picture', []) or []:
            try:
                pictures.append(bytes(Picture(base64.b64decode(encoded)).data))
            except (ValueError, mutagen.MutagenError) as e:
                self.logger.warning(f"埋め込み画像の解析に失敗しました（スキップ）: {e}")

        return AudioTags(
            artist=self._first_text(tags.get('artist')),
            album_artist=self._first_text(tags.get('albumartist')),
            album=self._first_text(tags.get('album')),
            disc_number=parse_disc_number(self._first_text(tags.get('discnumber'))),
            pictures=pictures,
        )

    def _id3_text(self, tags: ID3, frame_id: str) -> Optional[str]:
        frames = tags.getall(frame_id)
        if not frames or not frames[0].text:
            return None
        return str(frames[0].text[0])

    def _first_text(self, value) -> Optional[str]:
        if not value:
            return None
        first = value[0] if isinstance(value, list) else value
        if isinstance(first, bytes):
            return first.decode('utf-8', errors='replace')
        return str(first)
