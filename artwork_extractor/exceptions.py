"""
カスタム例外クラス定義

Album Artwork Extractorで使用する例外クラスを定義します。
"""


class ProcessingError(Exception):
    """処理エラーの基底クラス"""
    pass


class ValidationError(ProcessingError):
    """検証エラー"""
    pass


class TagReadError(ProcessingError):
    """タグ読取エラー"""
    pass


class ImageProcessingError(ProcessingError):
    """画像処理エラー"""
    pass
