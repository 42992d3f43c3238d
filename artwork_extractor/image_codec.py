"""
画像処理モジュール

埋め込み画像のサイズ取得と、アスペクト比を保ったリサイズを提供します。
画像のデコード/エンコードにはPillowを使用します。
"""

import logging
import math
from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from .exceptions import ImageProcessingError


# 元画像の形式が判別できない場合の出力形式
DEFAULT_OUTPUT_FORMAT = 'JPEG'


def fit_dimensions(width: int, height: int,
                   max_width: int, max_height: int) -> Tuple[int, int]:
    """
    上限サイズに収まるサイズを計算（アスペクト比を維持）

    ratio = min(max_width / width, max_height / height) を元サイズに掛け、
    小数点以下を切り捨てます。

    Args:
        width: 元の幅
        height: 元の高さ
        max_width: 幅の上限
        max_height: 高さの上限

    Returns:
        (新しい幅, 新しい高さ) のタプル（最小1ピクセル）

    Raises:
        ImageProcessingError: サイズが0以下の場合
    """
    if width <= 0 or height <= 0 or max_width <= 0 or max_height <= 0:
        raise ImageProcessingError(
            f"無効な画像サイズです: {width}x{height} -> {max_width}x{max_height}")

    ratio = min(max_width / width, max_height / height)
    new_width = max(1, math.floor(width * ratio))
    new_height = max(1, math.floor(height * ratio))
    return new_width, new_height


class ImageCodec:
    """Pillowを使用した画像処理クラス"""

    def __init__(self):
        """ImageCodecを初期化"""
        self.logger = logging.getLogger(__name__)

    def dimensions(self, data: bytes) -> Tuple[int, int]:
        """
        画像のピクセルサイズを取得

        Args:
            data: 画像データ

        Returns:
            (幅, 高さ) のタプル

        Raises:
            ImageProcessingError: 画像をデコードできない場合
        """
        try:
            with Image.open(BytesIO(data)) as img:
                return img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageProcessingError(f"画像のデコードに失敗しました: {e}") from e

    def resize(self, data: bytes, max_width: int, max_height: int) -> bytes:
        """
        画像を上限サイズに合わせてリサイズ

        Args:
            data: 元の画像データ
            max_width: 幅の上限
            max_height: 高さの上限

        Returns:
            リサイズ後の画像データ（元と同じ形式）

        Raises:
            ImageProcessingError: デコード、リサイズ、エンコードに失敗した場合
        """
        try:
            with Image.open(BytesIO(data)) as img:
                output_format = img.format or DEFAULT_OUTPUT_FORMAT
                new_size = fit_dimensions(img.width, img.height, max_width, max_height)

                resized = img.resize(new_size, Image.Resampling.LANCZOS)

                # JPEGはアルファチャンネルやパレットを扱えない
                if output_format == 'JPEG' and resized.mode not in ('RGB', 'L'):
                    resized = resized.convert('RGB')

                output = BytesIO()
                resized.save(output, format=output_format)

                self.logger.debug(
                    f"リサイズ完了: {img.width}x{img.height} -> "
                    f"{new_size[0]}x{new_size[1]} ({output_format})")
                return output.getvalue()
        except ImageProcessingError:
            raise
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageProcessingError(f"画像のリサイズに失敗しました: {e}") from e
