import json
import unittest
from datetime import timedelta

from mutagen.apev2 import APEv2
from mutagen.mp4 import MP4Tags

from timed_tags.adapters import ApeLyricsAdapter, LyricTypes, Mp4LyricsAdapter, RichLyricsAdapter
from timed_tags.adapters.rich import (
    chapters_from_json,
    chapters_to_json,
    lyrics_from_json,
    lyrics_to_json,
)
from timed_tags.containers import ApeFields, Mp4Fields
from timed_tags.models import ChapterCollection, Lyrics, LyricsChannel, RichPayloadError, TimedEntry


def s(value: float) -> timedelta:
    return timedelta(seconds=value)


class TestApeLyricsAdapter(unittest.TestCase):
    def setUp(self) -> None:
        self.tags = APEv2()
        self.fields = ApeFields(self.tags)
        self.adapter = ApeLyricsAdapter()

    def test_stores_plain_text_only(self) -> None:
        lyrics = Lyrics.from_onsets([(s(0), "first"), (s(10), "second")], s(20))
        self.assertTrue(self.adapter.encode(self.fields, lyrics))
        self.assertFalse(self.adapter.encode(self.fields, lyrics))
        decoded = self.adapter.decode(self.fields)
        self.assertFalse(decoded.synchronized)
        self.assertEqual(decoded.to_simple(), "first\nsecond")

    def test_disabled_simple_type_removes_slot(self) -> None:
        self.adapter.encode(self.fields, Lyrics.from_plain_text("words"))
        self.assertTrue(self.adapter.encode(self.fields, Lyrics.from_plain_text("words"), LyricTypes.SYNCED))
        self.assertNotIn("Lyrics", self.tags)
        self.assertIsNone(self.adapter.decode(self.fields))


class TestMp4LyricsAdapter(unittest.TestCase):
    def setUp(self) -> None:
        self.tags = MP4Tags()
        self.fields = Mp4Fields(self.tags)
        self.adapter = Mp4LyricsAdapter()

    def test_stores_plain_text_in_lyrics_atom(self) -> None:
        lyrics = Lyrics.from_onsets([(s(0), "first"), (s(10), "second")], s(20))
        self.assertTrue(self.adapter.encode(self.fields, lyrics))
        self.assertEqual(self.tags["\xa9lyr"], ["first\nsecond"])
        self.assertFalse(self.adapter.encode(self.fields, lyrics))
        self.assertEqual(self.adapter.decode(self.fields).to_simple(), "first\nsecond")

    def test_reads_existing_atom_and_clears_it(self) -> None:
        self.tags["\xa9lyr"] = ["sung\nwords"]
        decoded = self.adapter.decode(self.fields)
        self.assertFalse(decoded.synchronized)
        self.assertEqual(len(decoded), 2)
        self.assertTrue(self.adapter.encode(self.fields, None))
        self.assertNotIn("\xa9lyr", self.tags)


class TestRichPayloads(unittest.TestCase):
    def test_synchronized_lyrics_keep_channels_and_ranges(self) -> None:
        lyrics = Lyrics(
            True,
            [
                LyricsChannel("Lead", [TimedEntry("hello", s(1), s(4))]),
                LyricsChannel(None, [TimedEntry("hum", s(0), s(9))]),
            ],
        )
        payload = lyrics_to_json(lyrics)
        document = json.loads(payload)
        self.assertEqual(document["channels"][0], {"lyrics": [{"text": "hum", "start": "00:00:00.000", "end": "00:00:09.000"}]})
        self.assertEqual(document["channels"][1]["name"], "Lead")

        decoded = lyrics_from_json(payload)
        self.assertTrue(decoded.synchronized)
        self.assertEqual([c.name for c in decoded.channels], [None, "Lead"])
        self.assertEqual(decoded.channels[1].entries, [TimedEntry("hello", s(1), s(4))])

    def test_plain_lyrics_are_stored_as_strings(self) -> None:
        payload = lyrics_to_json(Lyrics.from_plain_text("a\nb"))
        self.assertEqual(json.loads(payload), {"channels": [{"lyrics": ["a", "b"]}]})
        self.assertFalse(lyrics_from_json(payload).synchronized)

    def test_document_without_entries_is_unsynchronized(self) -> None:
        payload = lyrics_to_json(Lyrics(False, [LyricsChannel()]))
        self.assertEqual(json.loads(payload), {"channels": [{"lyrics": []}]})
        decoded = lyrics_from_json(payload)
        self.assertFalse(decoded.synchronized)
        self.assertEqual(len(decoded.channels), 1)
        self.assertFalse(lyrics_from_json('{"channels": []}').synchronized)

    def test_chapters_round_trip(self) -> None:
        chapters = ChapterCollection.from_onsets([(s(0), "Intro"), (s(3600), "Late")], s(3700))
        decoded = chapters_from_json(chapters_to_json(chapters))
        self.assertEqual(
            [(c.title, c.start, c.end) for c in decoded],
            [("Intro", s(0), s(3600)), ("Late", s(3600), s(3700))],
        )

    def test_corrupt_payload_raises(self) -> None:
        bad_time = json.dumps(
            {"channels": [{"lyrics": [{"text": "a", "start": "bogus", "end": "00:00:01.000"}]}]}
        )
        for payload in ("not json", '{"chapters": 3}', bad_time):
            with self.subTest(payload=payload):
                with self.assertRaises(RichPayloadError):
                    if "chapters" in payload:
                        chapters_from_json(payload)
                    else:
                        lyrics_from_json(payload)

    def test_adapter_updates_slot_in_place(self) -> None:
        adapter = RichLyricsAdapter()
        slot = []
        lyrics = Lyrics.from_plain_text("x")
        self.assertTrue(adapter.encode(slot, lyrics))
        self.assertEqual(len(slot), 1)
        self.assertFalse(adapter.encode(slot, lyrics))
        self.assertTrue(adapter.encode(slot, None))
        self.assertEqual(slot, [])


if __name__ == "__main__":
    unittest.main()
