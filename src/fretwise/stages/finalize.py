"""Finalize stage - writes tab.json and a plain-text tab."""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from fretwise import __version__
from fretwise.config import Settings
from fretwise.models.document import TabDocument, TabNote, TrackInfo
from fretwise.models.pipeline import ProcessingContext, StageResult
from fretwise.models.tab import STANDARD_TUNING, TabEvent
from fretwise.pipeline.base import PipelineStage

# Version of the converter
CONVERTER_VERSION = __version__

# Row letters, indexed by string (low E first)
STRING_LETTERS = ("E", "A", "D", "G", "B", "e")


def render_text_tab(events: Sequence[TabEvent], line_width: int = 80) -> str:
    """Render mapped events as ASCII tablature.

    Events with the same onset share a column unless they land on the same
    string. Columns wrap into blocks of at most ``line_width`` characters,
    high e on top.
    """
    columns: list[dict[int, str]] = []
    last_onset: float | None = None
    for event in events:
        onset = round(event.note.onset, 3)
        cell = str(event.fret)
        if columns and onset == last_onset and event.string_index not in columns[-1]:
            columns[-1][event.string_index] = cell
        else:
            columns.append({event.string_index: cell})
        last_onset = onset

    if not columns:
        return ""

    # Room for the "e|-" prefix and closing "|"
    budget = max(1, line_width - 4)
    blocks: list[list[list[str]]] = []
    rows: list[list[str]] = [[] for _ in STRING_LETTERS]
    used = 0
    for column in columns:
        cell_width = max(len(cell) for cell in column.values()) + 1
        if used and used + cell_width > budget:
            blocks.append(rows)
            rows = [[] for _ in STRING_LETTERS]
            used = 0
        for string_index, row in enumerate(rows):
            row.append(column.get(string_index, "").ljust(cell_width, "-"))
        used += cell_width
    blocks.append(rows)

    rendered = []
    for block in blocks:
        lines = [
            f"{STRING_LETTERS[s]}|-{''.join(block[s])}|"
            for s in reversed(range(len(STRING_LETTERS)))
        ]
        rendered.append("\n".join(lines))
    return "\n\n".join(rendered) + "\n"


class FinalizeStage(PipelineStage):
    """Stage 5: Finalize.

    Output directory structure:
    {song_name}/
    ├── tab.json    # TabDocument serialized (camelCase keys)
    └── tab.txt     # ASCII tablature (optional)
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    @property
    def name(self) -> str:
        return "finalize"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Write tab.json and tab.txt."""
        warnings: list[str] = []

        if context.mapping is None:
            return self._fail("No tablature to write")

        try:
            document = self._build_document(context)

            context.output_dir.mkdir(parents=True, exist_ok=True)

            json_path = context.output_dir / "tab.json"
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(self._to_serializable(document), f, indent=2, ensure_ascii=False)
            context.tab_json_path = json_path
            warnings.append(f"Wrote {json_path}")

            if self.settings.write_text_tab:
                text_path = context.output_dir / "tab.txt"
                self._write_text_tab(context, text_path)
                context.tab_text_path = text_path
                warnings.append(f"Wrote {text_path}")

        except OSError as e:
            return self._fail(f"Failed to write tablature: {e}")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )

    def _write_text_tab(self, context: ProcessingContext, text_path: Path) -> None:
        assert context.mapping is not None
        header = [f"# {context.source_path.name}"]
        if context.selected_stream is not None:
            header.append(f"# Track: {context.selected_stream.label}")
        if context.tempo_bpm:
            header.append(f"# Tempo: {context.tempo_bpm:.1f} BPM")
        header.append("# Tuning: " + " ".join(STANDARD_TUNING.string_names))

        body = render_text_tab(context.mapping.events, self.settings.tab_line_width)
        with open(text_path, "w", encoding="utf-8") as f:
            f.write("\n".join(header) + "\n\n" + body)

    def _build_document(self, context: ProcessingContext) -> TabDocument:
        """Build a TabDocument from the processing context."""
        assert context.mapping is not None

        tracks = [
            TrackInfo(
                id=s.stream.id,
                name=s.stream.name,
                channel=s.stream.channel,
                program=s.stream.program,
                is_percussion=s.stream.is_percussion,
                is_melody_candidate=s.is_melody_candidate,
                note_count=s.statistics.note_count,
                mean_pitch=s.statistics.mean_pitch,
                mean_velocity=s.statistics.mean_velocity,
                mean_concurrency=s.statistics.mean_concurrency,
                total_duration=s.statistics.total_duration,
            )
            for s in context.summaries
        ]

        notes = [
            TabNote(
                onset=e.note.onset,
                duration=e.note.duration,
                pitch=e.note.pitch,
                velocity=e.note.velocity,
                string_index=e.string_index,
                string_label=e.string_label,
                fret=e.fret,
                octave_shift=e.octave_shift,
                is_fallback=e.is_fallback,
            )
            for e in context.mapping.events
        ]

        config = context.mapping_config
        return TabDocument(
            source_file=context.source_path.name,
            processing_date=datetime.now(timezone.utc).isoformat(),
            converter_version=CONVERTER_VERSION,
            duration=context.duration or 0.0,
            tempo_bpm=context.tempo_bpm,
            tuning=list(STANDARD_TUNING.open_pitches),
            selected_track=context.selected_stream.id if context.selected_stream else None,
            selection_reason=context.selection_reason,
            mapping=config.as_dict() if config else {},
            total_cost=context.mapping.total_cost,
            tracks=tracks,
            notes=notes,
        )

    def _to_serializable(self, obj) -> dict:
        """Convert a dataclass hierarchy to a JSON-ready dict with camelCase keys."""
        if hasattr(obj, "__dataclass_fields__"):
            return self._convert_dict_keys(asdict(obj))
        elif isinstance(obj, dict):
            return self._convert_dict_keys(obj)
        else:
            return obj

    def _convert_dict_keys(self, d: dict) -> dict:
        result = {}
        for key, value in d.items():
            if isinstance(key, str) and "_" in key:
                camel_key = self._to_camel_case(key)
            else:
                camel_key = key

            result[camel_key] = self._process_value(value)
        return result

    def _process_value(self, value):
        if isinstance(value, dict):
            return self._convert_dict_keys(value)
        elif isinstance(value, (list, tuple)):
            return [self._process_value(item) for item in value]
        elif isinstance(value, Path):
            return str(value)
        else:
            return value

    def _to_camel_case(self, snake_str: str) -> str:
        """Convert snake_case to camelCase."""
        components = snake_str.split("_")
        return components[0] + "".join(x.title() for x in components[1:])
