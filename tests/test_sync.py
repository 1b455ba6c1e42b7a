"""Unit tests for the timeline synchronizer.

WHY: Import, enumerate, and write-back are the only operations that
mutate the host. A wrong ordering or a stale index would edit the wrong
caption; unquantized times would fall between frames.

HOW: Tests run against the in-memory Composition at 10 fps.

RULES:
- The editable list is bottom-to-top: first created, first listed
- write_back resolves a handle, never a list position
"""

import pytest

from whisper_autosub.config import IMPORT_UNDO_LABEL, UPDATE_UNDO_LABEL
from whisper_autosub.core.ir import Caption
from whisper_autosub.core.srt import parse_srt, render_srt
from whisper_autosub.errors import EntityVanishedError, UsageError
from whisper_autosub.host.memory import Composition, MemoryDocument
from whisper_autosub.sync import (
    CaptionEntry,
    entries_to_captions,
    enumerate_captions,
    import_captions,
    write_back,
)


class FlakyComposition(Composition):
    """Composition whose third text creation fails, like a host crash mid-import."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.created = 0

    def add_text_entity(self, text):
        self.created += 1
        if self.created == 3:
            raise RuntimeError("host went away")
        return super().add_text_entity(text)


class TestImport:
    def test_creates_one_entity_per_caption(self, document, composition, sample_captions):
        entities = import_captions(sample_captions, document)
        assert [e.text for e in entities] == [
            "Hello there.",
            "General Kenobi!\nYou are a bold one.",
            "Kill him.",
        ]
        assert len(composition.entities_top_to_bottom()) == 3

    def test_timings_match_captions(self, document, sample_captions):
        entities = import_captions(sample_captions, document)
        assert [(e.start_s, e.end_s) for e in entities] == [
            pytest.approx((0.0, 2.5)),
            pytest.approx((2.5, 5.0)),
            pytest.approx((5.0, 7.2)),
        ]

    def test_timings_snap_to_frames(self, document):
        (entity,) = import_captions([Caption(1, 1.04, 2.96, ["x"])], document)
        assert entity.start_s == pytest.approx(1.0)
        assert entity.end_s == pytest.approx(3.0)

    def test_half_frames_round_up_at_25_fps(self):
        doc = MemoryDocument()
        doc.add_composition(Composition(duration_s=9.0, frame_duration=1.0 / 25))
        first, second = import_captions(
            [Caption(1, 0.0, 4.5, ["Hello there."]), Caption(2, 4.5, 9.0, ["Goodbye."])], doc,
        )
        assert first.end_s == pytest.approx(4.52)
        assert second.start_s == pytest.approx(4.52)
        assert second.end_s == pytest.approx(9.0)

    def test_end_before_start_is_clamped(self, document):
        (entity,) = import_captions([Caption(1, 4.0, 2.0, ["x"])], document)
        assert entity.end_s == pytest.approx(entity.start_s)

    def test_position_centred_near_bottom(self, document, sample_captions):
        entities = import_captions(sample_captions, document)
        assert all(e.position == (960, 980) for e in entities)

    def test_created_in_index_order(self, document):
        captions = [Caption(2, 2.0, 3.0, ["second"]), Caption(1, 0.0, 1.0, ["first"])]
        entities = import_captions(captions, document)
        assert [e.text for e in entities] == ["first", "second"]

    def test_single_undo_step(self, document, composition, sample_captions):
        import_captions(sample_captions, document)
        assert composition.undo_labels == [IMPORT_UNDO_LABEL]
        composition.undo()
        assert composition.entities_top_to_bottom() == []

    def test_empty_track(self, document, composition):
        assert import_captions([], document) == []
        assert composition.undo_labels == []

    def test_interrupted_import_keeps_created_entities(self, sample_captions):
        comp = FlakyComposition(duration_s=9.0, frame_duration=0.1)
        document = MemoryDocument([comp], active_id=comp.id)
        with pytest.raises(RuntimeError):
            import_captions(sample_captions, document)
        assert [e.text for e in comp.entities_top_to_bottom()] == [
            "General Kenobi!\nYou are a bold one.",
            "Hello there.",
        ]
        assert comp.undo_labels == [IMPORT_UNDO_LABEL]

    def test_no_active_container(self, sample_captions):
        with pytest.raises(UsageError):
            import_captions(sample_captions, MemoryDocument())


class TestEnumerate:
    def test_bottom_to_top_order(self, document, composition):
        for name in ("A", "B", "C"):
            composition.add_text_entity(name)
        assert [e.text for e in enumerate_captions(document)] == ["A", "B", "C"]

    def test_imported_track_lists_in_caption_order(self, document, sample_captions):
        import_captions(sample_captions, document)
        entries = enumerate_captions(document)
        assert [e.first_line for e in entries] == ["Hello there.", "General Kenobi!", "Kill him."]

    def test_footage_excluded(self, footage_document, composition):
        composition.add_text_entity("A")
        entries = enumerate_captions(footage_document)
        assert [e.text for e in entries] == ["A"]

    def test_handles_are_entity_ids(self, document, composition):
        entity = composition.add_text_entity("A")
        assert enumerate_captions(document)[0].handle == entity.id

    def test_reflects_host_side_deletion(self, document, composition):
        a = composition.add_text_entity("A")
        composition.add_text_entity("B")
        assert len(enumerate_captions(document)) == 2
        composition.remove_entity(a.id)
        assert [e.text for e in enumerate_captions(document)] == ["B"]

    def test_first_line_handles_crlf(self, document, composition):
        composition.add_text_entity("one\r\ntwo")
        assert enumerate_captions(document)[0].first_line == "one"

    def test_empty_text(self, document, composition):
        composition.add_text_entity("")
        assert enumerate_captions(document)[0].first_line == ""

    def test_no_active_container(self):
        with pytest.raises(UsageError):
            enumerate_captions(MemoryDocument())


class TestWriteBack:
    def test_updates_text_and_timing(self, document, sample_captions):
        import_captions(sample_captions, document)
        target = enumerate_captions(document)[1]
        entry = write_back(document, target.handle, "Edited\nline", 3.0, 4.44)
        assert entry.text == "Edited\nline"
        assert entry.start_s == pytest.approx(3.0)
        assert entry.end_s == pytest.approx(4.4)

    def test_other_entities_untouched(self, document, sample_captions):
        import_captions(sample_captions, document)
        before = enumerate_captions(document)
        write_back(document, before[0].handle, "changed", 0.0, 1.0)
        after = enumerate_captions(document)
        assert after[1:] == before[1:]
        assert [e.handle for e in after] == [e.handle for e in before]

    def test_blank_lines_dropped_so_export_round_trips(self, document):
        import_captions([Caption(1, 0.0, 2.0, ["one"]), Caption(2, 2.0, 4.0, ["next"])], document)
        handle = enumerate_captions(document)[0].handle

        entry = write_back(document, handle, "first\n\nsecond\r\n  \n", 0.0, 2.0)

        assert entry.text == "first\nsecond"
        exported = render_srt(entries_to_captions(enumerate_captions(document)))
        assert [c.lines for c in parse_srt(exported)] == [["first", "second"], ["next"]]

    def test_own_undo_step(self, document, composition, sample_captions):
        import_captions(sample_captions, document)
        handle = enumerate_captions(document)[0].handle
        write_back(document, handle, "changed", 0.0, 1.0)
        assert composition.undo_labels == [IMPORT_UNDO_LABEL, UPDATE_UNDO_LABEL]
        composition.undo()
        assert enumerate_captions(document)[0].text == "Hello there."

    def test_vanished_entity(self, document, composition, sample_captions):
        import_captions(sample_captions, document)
        entries = enumerate_captions(document)
        composition.remove_entity(entries[0].handle)
        with pytest.raises(EntityVanishedError) as excinfo:
            write_back(document, entries[0].handle, "x", 0.0, 1.0)
        assert excinfo.value.handle == entries[0].handle
        # The rest of the in-memory list is still usable
        write_back(document, entries[1].handle, "still works", 2.5, 5.0)

    def test_footage_handle_rejected(self, footage_document, composition):
        (footage,) = composition.selected_entities()
        with pytest.raises(EntityVanishedError):
            write_back(footage_document, footage.id, "x", 0.0, 1.0)

    def test_no_active_container(self):
        with pytest.raises(UsageError):
            write_back(MemoryDocument(), "abc", "x", 0.0, 1.0)


class TestEntries:
    def test_display(self):
        entry = CaptionEntry(handle="h", start_s=61.9, end_s=3725.0, first_line="Hi", text="Hi\nthere")
        assert entry.display() == "00:01:01 > 01:02:05 | Hi"

    def test_entries_to_captions(self, document, sample_captions):
        import_captions(sample_captions, document)
        captions = entries_to_captions(enumerate_captions(document))
        assert [c.index for c in captions] == [1, 2, 3]
        assert [c.lines for c in captions] == [c.lines for c in sample_captions]
        assert [c.end_s for c in captions] == [pytest.approx(c.end_s) for c in sample_captions]
