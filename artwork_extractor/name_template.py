"""
ファイル名テンプレートモジュール

命名パターンとファイルごとのタグ情報から、出力画像のパスを生成します。

対応するトークン（大文字小文字は区別しない、各トークンは最初の1箇所のみ置換）:
    [sourcepath]  オーディオファイルのあるディレクトリ
    [disc]        2桁ゼロ埋めのディスク番号（0の場合は空文字）
    [artist]      単一アーティストのフォルダならアーティスト名、それ以外は "Various"
    [album]       アルバム名（空の場合は "Unknown"）
"""

import re
import sys
from pathlib import Path
from typing import FrozenSet, Optional

# Windowsのファイル名に使用できない文字
WINDOWS_INVALID_FILENAME_CHARS: FrozenSet[str] = frozenset(
    '<>:"/\\|?*' + ''.join(chr(code) for code in range(32)))

# POSIXのファイル名に使用できない文字
POSIX_INVALID_FILENAME_CHARS: FrozenSet[str] = frozenset('/\0')

INVALID_FILENAME_CHARS: FrozenSet[str] = (
    WINDOWS_INVALID_FILENAME_CHARS if sys.platform == 'win32'
    else POSIX_INVALID_FILENAME_CHARS)

VARIOUS_ARTIST = 'Various'
UNKNOWN_ALBUM = 'Unknown'

_TOKEN_PATTERN = re.compile(r'\[(sourcepath|disc|artist|album)\]', re.IGNORECASE)


def sanitize_filename(value: str, invalid_chars: FrozenSet[str] = INVALID_FILENAME_CHARS,
                      replacement: str = '_') -> str:
    """
    ファイル名に使用できない文字を置換

    Args:
        value: 元の文字列
        invalid_chars: 置換対象の文字集合
        replacement: 置換後の文字

    Returns:
        置換後の文字列
    """
    return ''.join(replacement if c in invalid_chars else c for c in value)


def has_token(pattern: str, token: str) -> bool:
    """パターンにトークンが含まれるか（大文字小文字は区別しない）"""
    return f'[{token}]'.lower() in pattern.lower()


def static_base_directory(pattern: str) -> Optional[Path]:
    """
    パターンの最初のトークンより前にある固定ディレクトリ部分を取得

    [sourcepath] を含むパターンは既存のディレクトリに出力するためNoneを返します。

    Args:
        pattern: 命名パターン

    Returns:
        事前に作成すべきディレクトリ（不要な場合はNone）
    """
    if has_token(pattern, 'sourcepath'):
        return None

    match = _TOKEN_PATTERN.search(pattern)
    prefix = pattern[:match.start()] if match else pattern

    # プレフィックスの最後の区切り文字までがディレクトリ
    cut = max(prefix.rfind('/'), prefix.rfind('\\'))
    if cut < 0:
        return None
    directory = prefix[:cut]
    return Path(directory) if directory else Path(prefix[:cut + 1])


class NameTemplateEngine:
    """命名パターンから出力パスを生成するクラス"""

    def __init__(self, invalid_chars: FrozenSet[str] = INVALID_FILENAME_CHARS):
        """
        NameTemplateEngineを初期化

        Args:
            invalid_chars: アーティスト名/アルバム名で置換する文字集合
        """
        self.invalid_chars = frozenset(invalid_chars)

    def render(self, pattern: str, file_directory: Path, file_name: str,
               artist: Optional[str], album: Optional[str],
               disc_number: int, is_single_artist: bool) -> Path:
        """
        命名パターンから出力パスを生成

        Args:
            pattern: 命名パターン
            file_directory: オーディオファイルのあるディレクトリ
            file_name: オーディオファイル名
            artist: アーティスト名
            album: アルバム名
            disc_number: ディスク番号（不明な場合は0）
            is_single_artist: フォルダが単一アーティストの場合True

        Returns:
            出力画像のパス
        """
        values = {
            'sourcepath': str(file_directory),
            'disc': self._render_disc(disc_number),
            'artist': self._render_artist(artist, is_single_artist),
            'album': self._render_album(album),
        }
        used = set()

        def substitute(match: re.Match) -> str:
            token = match.group(1).lower()
            if token in used:
                return match.group(0)
            used.add(token)
            return values[token]

        return Path(_TOKEN_PATTERN.sub(substitute, pattern))

    def _render_disc(self, disc_number: int) -> str:
        if not disc_number:
            return ''
        return f'{disc_number:02d}'

    def _render_artist(self, artist: Optional[str], is_single_artist: bool) -> str:
        if is_single_artist and artist:
            return sanitize_filename(artist, self.invalid_chars)
        return VARIOUS_ARTIST

    def _render_album(self, album: Optional[str]) -> str:
        if album:
            return sanitize_filename(album, self.invalid_chars)
        return UNKNOWN_ALBUM
