"""Tests for the FinalizeStage and the ASCII tab renderer."""

import json
from pathlib import Path

from conftest import make_notes
from fretwise.config import Settings
from fretwise.engine.analyzer import analyze_streams
from fretwise.engine.mapper import map_stream
from fretwise.models import MappingConfig, Note, NoteStream, TabEvent
from fretwise.models.pipeline import ProcessingContext
from fretwise.stages.finalize import CONVERTER_VERSION, FinalizeStage, render_text_tab


def event(onset: float, string_index: int, fret: int) -> TabEvent:
    note = Note(onset=onset, duration=0.5, pitch=40, velocity=0.5)
    return TabEvent(note=note, string_index=string_index, fret=fret)


def mapped_context(tmp_path: Path, stream: NoteStream) -> ProcessingContext:
    config = MappingConfig()
    return ProcessingContext(
        source_path=tmp_path / "song.mid",
        output_dir=tmp_path / "output",
        streams=[stream],
        summaries=analyze_streams([stream]),
        duration=2.0,
        tempo_bpm=120.0,
        selected_stream=stream,
        selection_reason="auto",
        mapping_config=config,
        mapping=map_stream(stream, config),
    )


class TestRenderTextTab:
    """Tests for render_text_tab."""

    def test_empty(self):
        assert render_text_tab([]) == ""

    def test_simultaneous_notes_share_a_column(self):
        events = [event(0.0, 0, 0), event(0.0, 5, 0), event(0.5, 2, 10)]
        assert render_text_tab(events) == (
            "e|-0----|\n"
            "B|------|\n"
            "G|------|\n"
            "D|---10-|\n"
            "A|------|\n"
            "E|-0----|\n"
        )

    def test_same_string_same_onset_gets_new_column(self):
        events = [event(0.0, 3, 2), event(0.0, 3, 4)]
        lines = render_text_tab(events).splitlines()
        assert lines[2] == "G|-2-4-|"

    def test_wraps_long_lines(self):
        events = [event(i * 0.5, 0, 1) for i in range(10)]
        text = render_text_tab(events, line_width=20)
        blocks = text.strip("\n").split("\n\n")
        assert len(blocks) == 2
        for line in text.splitlines():
            assert len(line) <= 20


class TestFinalizeStage:
    """Tests for FinalizeStage."""

    def test_stage_name(self):
        """Stage has correct name."""
        assert FinalizeStage().name == "finalize"

    def test_nothing_to_write(self, tmp_path: Path):
        context = ProcessingContext(source_path=tmp_path / "song.mid", output_dir=tmp_path)

        result = FinalizeStage().execute(context)

        assert result.success is False

    def test_creates_output_files(self, tmp_path: Path, melody_stream):
        context = mapped_context(tmp_path, melody_stream)

        result = FinalizeStage().execute(context)

        assert result.success is True
        assert context.tab_json_path == tmp_path / "output" / "tab.json"
        assert context.tab_json_path.exists()
        assert context.tab_text_path == tmp_path / "output" / "tab.txt"
        assert context.tab_text_path.exists()

    def test_json_structure(self, tmp_path: Path, melody_stream):
        context = mapped_context(tmp_path, melody_stream)

        FinalizeStage().execute(context)

        with open(tmp_path / "output" / "tab.json") as f:
            data = json.load(f)

        # camelCase keys
        assert data["sourceFile"] == "song.mid"
        assert data["converterVersion"] == CONVERTER_VERSION
        assert data["tempoBpm"] == 120.0
        assert data["tuning"] == [40, 45, 50, 55, 59, 64]
        assert data["selectedTrack"] == "1"
        assert data["selectionReason"] == "auto"
        assert data["mapping"]["maxFret"] == 12
        assert data["totalCost"] == context.mapping.total_cost

        assert len(data["tracks"]) == 1
        assert data["tracks"][0]["isMelodyCandidate"] is True
        assert data["tracks"][0]["meanConcurrency"] == 1.0

        assert len(data["notes"]) == 4
        first = data["notes"][0]
        assert first["pitch"] == 60
        assert set(first) >= {"onset", "stringIndex", "stringLabel", "fret", "octaveShift", "isFallback"}
        assert first["stringLabel"] == 6 - first["stringIndex"]

    def test_text_tab_has_header(self, tmp_path: Path, melody_stream):
        context = mapped_context(tmp_path, melody_stream)

        FinalizeStage().execute(context)

        text = (tmp_path / "output" / "tab.txt").read_text(encoding="utf-8")
        assert text.startswith("# song.mid\n")
        assert "# Track: Melody" in text
        assert "# Tempo: 120.0 BPM" in text
        assert "e|-" in text

    def test_text_tab_can_be_disabled(self, tmp_path: Path):
        stream = NoteStream(id="1", notes=tuple(make_notes([60, 64])))
        context = mapped_context(tmp_path, stream)

        result = FinalizeStage(Settings(write_text_tab=False)).execute(context)

        assert result.success is True
        assert context.tab_text_path is None
        assert not (tmp_path / "output" / "tab.txt").exists()
