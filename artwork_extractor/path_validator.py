"""
パス検証ユーティリティ

ディレクトリパスの検証と出力先ディレクトリの準備を提供します。
"""

import os
from pathlib import Path

from .exceptions import ValidationError


class PathValidator:
    """パス検証を行うユーティリティクラス"""

    @staticmethod
    def validate_directory(path: Path) -> None:
        """
        ディレクトリの存在とアクセス権を検証

        Args:
            path: 検証するディレクトリパス

        Raises:
            ValidationError: ディレクトリが存在しない、アクセス不可能、
                           またはディレクトリではない場合
        """
        if not path.exists():
            raise ValidationError(f"ディレクトリが存在しません: {path}")

        if not path.is_dir():
            raise ValidationError(f"指定されたパスはディレクトリではありません: {path}")

        # 読み取り権限の確認
        if not os.access(path, os.R_OK):
            raise ValidationError(f"ディレクトリに読み取り権限がありません: {path}")

    @staticmethod
    def validate_writable_directory(path: Path) -> None:
        """
        書き込み可能なディレクトリかどうかを検証

        Args:
            path: 検証するディレクトリパス

        Raises:
            ValidationError: ディレクトリが存在しない、アクセス不可能、
                           または書き込み権限がない場合
        """
        PathValidator.validate_directory(path)

        if not os.access(path, os.W_OK):
            raise ValidationError(f"ディレクトリに書き込み権限がありません: {path}")

    @staticmethod
    def ensure_output_directory(path: Path) -> None:
        """
        出力先ディレクトリを作成し、書き込み可能か検証

        処理開始前に一度だけ呼び出されます。

        Args:
            path: 出力先ディレクトリパス

        Raises:
            ValidationError: ディレクトリを作成できない、または書き込み権限がない場合
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValidationError(f"出力先ディレクトリを作成できません: {path} ({e})") from e

        PathValidator.validate_writable_directory(path)
