"""
エッジケースのユニットテスト

Album Artwork Extractorの各コンポーネントのエッジケースをテストします。
"""

import base64
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import mutagen
from mutagen.flac import Picture
from mutagen.id3 import ID3, APIC, TALB, TPE1, TPE2, TPOS
from mutagen.mp4 import MP4Cover, MP4Tags

from artwork_extractor.exceptions import TagReadError
from artwork_extractor.models import AudioTags, ErrorKind, ProcessingOptions
from artwork_extractor.pipeline import ArtExtractionPipeline
from artwork_extractor.tag_reader import TagReader, parse_disc_number


class TestTagReaderEdgeCases(unittest.TestCase):
    """TagReaderのエッジケーステスト"""

    def setUp(self):
        """テスト前の準備"""
        self.tag_reader = TagReader()
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """テスト後のクリーンアップ"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_corrupted_audio_file(self):
        """破損したオーディオファイルはTagReadErrorになる"""
        corrupted = self.temp_dir / "corrupted.mp3"
        corrupted.write_bytes(b"this is not an mpeg stream")

        with self.assertRaises(TagReadError):
            self.tag_reader.read(corrupted)

    def test_missing_file(self):
        """存在しないファイルはTagReadErrorになる"""
        with self.assertRaises(TagReadError):
            self.tag_reader.read(self.temp_dir / "missing.mp3")

    def test_unsupported_format(self):
        """mutagenが形式を判別できない場合はTagReadErrorになる"""
        with patch('artwork_extractor.tag_reader.mutagen.File', return_value=None):
            with self.assertRaises(TagReadError):
                self.tag_reader.read(self.temp_dir / "unknown.xyz")

    def test_mutagen_error_wrapped(self):
        """mutagenの例外はTagReadErrorに変換される"""
        with patch('artwork_extractor.tag_reader.mutagen.File',
                   side_effect=mutagen.MutagenError("bad header")):
            with self.assertRaises(TagReadError) as ctx:
                self.tag_reader.read(self.temp_dir / "bad.mp3")
        self.assertIn("bad header", str(ctx.exception))

    def test_unexpected_exception_wrapped(self):
        """mutagen以外の予期しない例外もTagReadErrorに変換される"""
        error = UnicodeDecodeError('utf-8', b'\xff', 0, 1, 'invalid start byte')
        with patch('artwork_extractor.tag_reader.mutagen.File', side_effect=error):
            with self.assertRaises(TagReadError) as ctx:
                self.tag_reader.read(self.temp_dir / "bad.mp3")
        self.assertIn("UnicodeDecodeError", str(ctx.exception))

    def test_tag_parse_exception_wrapped(self):
        """タグの解析中に発生した例外もTagReadErrorに変換される"""
        class BrokenTags:
            def get(self, key, default=None):
                raise KeyError(key)

        audio = SimpleNamespace(tags=BrokenTags(), pictures=[])
        with patch('artwork_extractor.tag_reader.mutagen.File', return_value=audio):
            with self.assertRaises(TagReadError) as ctx:
                self.tag_reader.read(self.temp_dir / "broken.flac")
        self.assertIsInstance(ctx.exception.__cause__, KeyError)

    def test_file_without_tags(self):
        """タグのないファイルは空のタグ情報になる"""
        audio = SimpleNamespace(tags=None)
        with patch('artwork_extractor.tag_reader.mutagen.File', return_value=audio):
            tags = self.tag_reader.read(self.temp_dir / "untagged.mp3")

        self.assertEqual(tags, AudioTags())

    def test_id3_tags(self):
        """ID3タグからアーティスト、アルバム、ディスク番号、画像を読み取る"""
        id3 = ID3()
        id3.add(TPE1(encoding=3, text=['Track Artist']))
        id3.add(TPE2(encoding=3, text=['Album Artist']))
        id3.add(TALB(encoding=3, text=['Album Title']))
        id3.add(TPOS(encoding=3, text=['2/3']))
        id3.add(APIC(encoding=3, mime='image/jpeg', type=3, desc='Cover', data=b'front'))
        id3.add(APIC(encoding=3, mime='image/jpeg', type=4, desc='Back', data=b'back'))

        with patch('artwork_extractor.tag_reader.mutagen.File',
                   return_value=SimpleNamespace(tags=id3)):
            tags = self.tag_reader.read(self.temp_dir / "tagged.mp3")

        self.assertEqual(tags.artist, 'Track Artist')
        self.assertEqual(tags.album_artist, 'Album Artist')
        self.assertEqual(tags.primary_artist, 'Album Artist')
        self.assertEqual(tags.album, 'Album Title')
        self.assertEqual(tags.disc_number, 2)
        self.assertEqual(sorted(tags.pictures), [b'back', b'front'])

    def test_mp4_tags(self):
        """MP4タグから読み取る"""
        mp4 = MP4Tags()
        mp4['\xa9ART'] = ['Artist']
        mp4['\xa9alb'] = ['Album']
        mp4['disk'] = [(1, 2)]
        mp4['covr'] = [MP4Cover(b'cover-data', imageformat=MP4Cover.FORMAT_JPEG)]

        with patch('artwork_extractor.tag_reader.mutagen.File',
                   return_value=SimpleNamespace(tags=mp4)):
            tags = self.tag_reader.read(self.temp_dir / "track.m4a")

        self.assertEqual(tags.artist, 'Artist')
        self.assertIsNone(tags.album_artist)
        self.assertEqual(tags.album, 'Album')
        self.assertEqual(tags.disc_number, 1)
        self.assertEqual(tags.pictures, [b'cover-data'])

    def test_vorbis_tags(self):
        """Vorbisコメント形式のタグとFLAC/Oggの埋め込み画像を読み取る"""
        flac_picture = Picture()
        flac_picture.data = b'flac-picture'
        ogg_picture = Picture()
        ogg_picture.data = b'ogg-picture'
        encoded = base64.b64encode(ogg_picture.write()).decode('ascii')
        tags_dict = {
            'artist': ['Artist'],
            'albumartist': ['Album Artist'],
            'album': ['Album'],
            'discnumber': ['3'],
            'metadata_block_picture': [encoded],
        }
        audio = SimpleNamespace(tags=tags_dict, pictures=[flac_picture])

        with patch('artwork_extractor.tag_reader.mutagen.File', return_value=audio):
            tags = self.tag_reader.read(self.temp_dir / "track.flac")

        self.assertEqual(tags.primary_artist, 'Album Artist')
        self.assertEqual(tags.album, 'Album')
        self.assertEqual(tags.disc_number, 3)
        self.assertEqual(tags.pictures, [b'flac-picture', b'ogg-picture'])

    def test_parse_disc_number(self):
        """ディスク番号の解析"""
        self.assertEqual(parse_disc_number(None), 0)
        self.assertEqual(parse_disc_number('1'), 1)
        self.assertEqual(parse_disc_number(' 2/3 '), 2)
        self.assertEqual(parse_disc_number('abc'), 0)
        self.assertEqual(parse_disc_number(''), 0)
        self.assertEqual(parse_disc_number('-1'), 0)
        self.assertEqual(parse_disc_number([(4, 5)]), 4)
        self.assertEqual(parse_disc_number([]), 0)


class TestPipelineEdgeCases(unittest.TestCase):
    """ArtExtractionPipelineのエッジケーステスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.folder = self.temp_dir / 'album'
        self.folder.mkdir()
        (self.folder / '01.mp3').write_bytes(b'fake')

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _pipeline(self, **option_kwargs):
        class StaticReader:
            def read(self, file_path):
                return AudioTags(artist='Artist', pictures=[b'cover'])

        options = ProcessingOptions(root_path=self.temp_dir, **option_kwargs)
        return ArtExtractionPipeline(options, tag_reader=StaticReader())

    def test_deletion_failure_recorded(self):
        """既存ファイルの削除に失敗した場合はエラーとして記録され、書き込みは行われない"""
        target = self.folder / 'folder.jpg'
        target.write_bytes(b'old')

        with patch.object(Path, 'unlink', side_effect=PermissionError("locked")):
            result = self._pipeline(overwrite=True).process_folder(self.folder)

        self.assertEqual(result.written, [])
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].kind, ErrorKind.DELETE)
        self.assertEqual(result.errors[0].path, target)
        self.assertEqual(target.read_bytes(), b'old')

    def test_write_failure_recorded(self):
        """書き込みに失敗した場合はエラーとして記録される"""
        with patch('builtins.open', side_effect=OSError("disk full")):
            result = self._pipeline().process_folder(self.folder)

        self.assertEqual(result.written, [])
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].kind, ErrorKind.WRITE)
        self.assertIn("disk full", result.errors[0].message)

    @unittest.skipIf(not hasattr(os, 'geteuid') or os.geteuid() == 0,
                     "権限チェックはroot以外でのみ有効")
    def test_unreadable_folder_raises(self):
        """フォルダ自体が読めない場合は例外が呼び出し元（ディスパッチャ）に伝わる"""
        os.chmod(self.folder, 0o000)
        try:
            with self.assertRaises(Exception):
                self._pipeline().process_folder(self.folder)
        finally:
            os.chmod(self.folder, 0o755)


if __name__ == '__main__':
    unittest.main()
