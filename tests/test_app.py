import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from mutagen.id3 import ID3, TXXX, Encoding

from timed_tags.app import TimedTagsApp
from timed_tags.commands import clear as cmd_clear
from timed_tags.commands import embed as cmd_embed
from timed_tags.commands import show as cmd_show
from timed_tags.config import ChapterSettings, LyricsSettings, Settings, SidecarSettings
from timed_tags.containers import LocalFileSystem, TagFile
from timed_tags.models import UnsupportedFileError
from timed_tags.tag_keys import ID3_RICH_LYRICS, RICH_LYRICS


def make_tag_file(path: Path) -> TagFile:
    audio = mock.Mock()
    audio.tags = ID3()
    audio.info.length = 40.0
    return TagFile(path=path, audio=audio, fs=LocalFileSystem())


class TestTimedTagsApp(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.song = self.tmp / "song.mp3"
        (self.tmp / "song.lrc").write_text("[00:00.000]a\n[00:10.000]b\n", encoding="utf-8")
        (self.tmp / "song.chp").write_text("[00:00.000]Intro\n[00:30.000]Outro\n", encoding="utf-8")
        self.tag_file = make_tag_file(self.song)
        patcher = mock.patch.object(TagFile, "open", return_value=self.tag_file)
        self.open_mock = patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_embed_saves_once_then_is_idempotent(self) -> None:
        app = TimedTagsApp.create(Settings())
        first = app.embed(self.song)
        self.assertTrue(first.changed)
        self.assertTrue(first.saved)
        self.assertEqual(len(first.lyrics), 2)
        self.assertEqual(len(first.chapters), 2)
        self.tag_file.audio.save.assert_called_once()

        second = app.embed(self.song)
        self.assertFalse(second.changed)
        self.assertFalse(second.saved)
        self.tag_file.audio.save.assert_called_once()

    def test_embed_dry_run_does_not_save_or_write_sidecars(self) -> None:
        settings = Settings(lyrics=LyricsSettings(write_sidecar=True))
        report = TimedTagsApp.create(settings).embed(self.song, dry_run=True)
        self.assertTrue(report.changed)
        self.assertFalse(report.saved)
        self.assertEqual(report.sidecars, [])
        self.tag_file.audio.save.assert_not_called()

    def test_embed_rewrites_sidecars_in_configured_format(self) -> None:
        settings = Settings(
            lyrics=LyricsSettings(write_sidecar=True),
            chapters=ChapterSettings(write_sidecar=True),
            sidecar=SidecarSettings(timestamp_digits=2),
        )
        report = TimedTagsApp.create(settings).embed(self.song, language="eng")
        self.assertEqual(report.sidecars, [self.tmp / "song.lrc", self.tmp / "song.chp"])
        self.assertEqual((self.tmp / "song.lrc").read_text(encoding="utf-8"), "[00:00.00]a\n[00:10.00]b\n")
        self.assertEqual(self.tag_file.audio.tags.getall("TLAN")[0].text, ["eng"])
        self.assertEqual(self.tag_file.audio.tags.getall("SYLT")[0].lang, "eng")

    def test_clear_removes_lyrics_but_can_keep_chapters(self) -> None:
        app = TimedTagsApp.create(Settings())
        app.embed(self.song)
        report = app.clear(self.song, lyrics=True, chapters=False)
        self.assertTrue(report.changed)
        tags = self.tag_file.audio.tags
        self.assertEqual(tags.getall("SYLT"), [])
        self.assertEqual(tags.getall(ID3_RICH_LYRICS), [])
        self.assertEqual(len(tags.getall("CHAP")), 2)

    def test_commands_print_summaries(self) -> None:
        app = TimedTagsApp.create(Settings())
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(cmd_embed.run(app, [self.song]), 1)
            cmd_show.run(app, [self.song])
            self.assertEqual(cmd_clear.run(app, [self.song], dry_run=True), 1)
        text = out.getvalue()
        self.assertIn(f"Updated {self.song}", text)
        self.assertIn("lyrics: synchronized, 2 line(s)", text)
        self.assertIn("00:30.000 - 00:40.000  Outro", text)
        self.assertIn("Clear complete (dry-run): 1 of 1 file(s) changed.", text)

    def test_show_command_skips_file_with_corrupt_rich_payload(self) -> None:
        broken = make_tag_file(self.tmp / "broken.mp3")
        broken.audio.tags.add(TXXX(encoding=Encoding.UTF8, desc=RICH_LYRICS, text=["{not json"]))
        self.open_mock.side_effect = [broken, self.tag_file]
        out = io.StringIO()
        with redirect_stdout(out), self.assertLogs("timed_tags.commands.show", level="WARNING") as logs:
            shown = cmd_show.run(TimedTagsApp.create(Settings()), [broken.path, self.song])
        self.assertEqual(shown, 1)
        self.assertIn("Skipping", logs.output[0])
        self.assertIn("broken.mp3", logs.output[0])
        text = out.getvalue()
        self.assertNotIn("broken.mp3", text)
        self.assertIn(str(self.song), text)
        self.assertIn("lyrics: synchronized, 2 line(s)", text)

    def test_embed_command_skips_unsupported_files(self) -> None:
        self.open_mock.side_effect = UnsupportedFileError("Unrecognised media file: x")
        out = io.StringIO()
        with redirect_stdout(out), self.assertLogs("timed_tags.commands.embed", level="WARNING"):
            self.assertEqual(cmd_embed.run(TimedTagsApp.create(Settings()), [self.song]), 0)
        self.assertIn("0 of 1 file(s) changed", out.getvalue())


if __name__ == "__main__":
    unittest.main()
