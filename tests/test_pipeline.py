"""Tests for the combine pipeline."""

import logging

import pytest
from pydantic import ValidationError
from src.pipeline import RunOptions, build_speakers, run_pipeline


def _speakers(alice_path, bob_path):
    return build_speakers(
        ["Alice", "Bob"],
        ["GM", "Player"],
        ["Narrator", "Thorin"],
        ["Runs the game", "Dwarf fighter"],
        [alice_path, bob_path],
    )


def test_build_speakers_pairs_values():
    speakers = _speakers("a.vtt", "b.vtt")
    assert [s.display_name for s in speakers] == ["Alice", "Bob"]
    assert speakers[1].character_name == "Thorin"
    assert speakers[1].source_file == "b.vtt"


def test_build_speakers_rejects_mismatched_lengths():
    with pytest.raises(ValueError, match="must have the same length") as excinfo:
        build_speakers(["A", "B"], ["r", "r"], ["c", "c"], ["d", "d"], ["1", "2", "3"])
    assert "--transcript=3" in str(excinfo.value)


def test_run_options_validation():
    assert RunOptions().dedupe.value == "off"
    assert RunOptions(dedupe="unique").dedupe.value == "unique"
    with pytest.raises(ValidationError):
        RunOptions(dedupe="sometimes")
    with pytest.raises(ValidationError):
        RunOptions(chunks=0)
    with pytest.raises(ValidationError):
        RunOptions(skip_filters=["/(broken/"])
    with pytest.raises(ValidationError):
        RunOptions(input_format="srt")


def test_end_to_end_two_speakers(tmp_path, two_speaker_files):
    output = tmp_path / "combined.txt"

    written = run_pipeline(_speakers(*two_speaker_files), str(output))

    assert written == [output]
    assert output.read_text(encoding="utf-8") == (
        "Summary:\n"
        "Alice - GM - Narrator - Runs the game\n"
        "Bob - Player - Thorin - Dwarf fighter\n"
        "\n"
        "Transcripts:\n"
        "[00:00:01.000 --> 00:00:02.000] Alice: Hi\n"
        "[00:00:03.000 --> 00:00:04.000] Bob: Hello\n"
        "[00:00:05.000 --> 00:00:06.000] Alice: Bye\n"
    )


def test_pipeline_applies_filters_and_dedupe(tmp_path, write_vtt):
    alice = write_vtt(
        "alice.vtt",
        [
            ("00:00:01.000", "00:00:02.000", "hello"),
            ("00:00:02.000", "00:00:03.000", "hello"),
            ("00:00:03.000", "00:00:04.000", "[BLANK_AUDIO]"),
            ("00:00:04.000", "00:00:05.000", "world"),
            ("00:00:05.000", "00:00:06.000", "hello"),
        ],
    )
    # the same text from another speaker is never deduplicated against Alice
    bob = write_vtt("bob.vtt", [("00:00:01.500", "00:00:02.500", "hello")])
    output = tmp_path / "out.txt"
    options = RunOptions(
        dedupe="unique", skip_filters=["[BLANK_AUDIO]"], timestamped=False
    )

    run_pipeline(_speakers(alice, bob), str(output), options)

    body = output.read_text().split("Transcripts:\n", 1)[1]
    assert body.splitlines() == ["Alice: hello", "Bob: hello", "Alice: world"]


def test_pipeline_chunks(tmp_path, two_speaker_files):
    output = tmp_path / "session.txt"

    written = run_pipeline(
        _speakers(*two_speaker_files), str(output), RunOptions(chunks=2)
    )

    assert [p.name for p in written] == ["session.part1.txt", "session.part2.txt"]
    assert not output.exists()
    lines = []
    for path in written:
        content = path.read_text()
        assert content.startswith("Summary:\nAlice - GM")
        lines.extend(content.split("Transcripts:\n", 1)[1].splitlines())
    assert [line.split("] ", 1)[1] for line in lines] == [
        "Alice: Hi",
        "Bob: Hello",
        "Alice: Bye",
    ]


def test_pipeline_creates_output_directory(tmp_path, two_speaker_files):
    output = tmp_path / "nested" / "dir" / "out.txt"
    run_pipeline(_speakers(*two_speaker_files), str(output))
    assert output.exists()


def test_pipeline_re_merges_rendered_transcripts(tmp_path):
    first = tmp_path / "alice.txt"
    first.write_text(
        "[00:00:05.000 --> 00:00:06.000] later\n"
        "a note without time\n"
        "[0:00:09.5 --> 0:00:10.0] last\n"
    )
    second = tmp_path / "bob.txt"
    second.write_text("[00:00:07.000 --> 00:00:08.000] middle\n")
    output = tmp_path / "out.txt"

    run_pipeline(
        _speakers(str(first), str(second)),
        str(output),
        RunOptions(speaker_label="character"),
    )

    body = output.read_text().split("Transcripts:\n", 1)[1].splitlines()
    assert body == [
        "[00:00:05.000 --> 00:00:06.000] Narrator: later",
        "Narrator: a note without time",
        "[00:00:07.000 --> 00:00:08.000] Thorin: middle",
        "[00:00:09.500 --> 00:00:10.000] Narrator: last",
    ]


def test_missing_transcript_fails_without_output(tmp_path, two_speaker_files, caplog):
    alice, _ = two_speaker_files
    output = tmp_path / "out.txt"

    with caplog.at_level(logging.INFO):
        with pytest.raises(FileNotFoundError, match="missing.vtt"):
            run_pipeline(_speakers(alice, str(tmp_path / "missing.vtt")), str(output))

    assert not output.exists()
    assert "Pipeline failed with FileNotFoundError" in caplog.text
    assert "Troubleshooting tips" in caplog.text


def test_undecodable_transcript_reports_path(tmp_path, two_speaker_files):
    alice, _ = two_speaker_files
    bad = tmp_path / "bad.vtt"
    bad.write_bytes(b"00:00:01.000 --> 00:00:02.000\n\xff\xfe\xfa\n")

    with pytest.raises(UnicodeDecodeError, match="bad.vtt"):
        run_pipeline(_speakers(alice, str(bad)), str(tmp_path / "out.txt"))
    assert not (tmp_path / "out.txt").exists()


def test_per_file_diagnostics_are_logged(tmp_path, write_vtt, caplog):
    alice = write_vtt(
        "alice.vtt",
        [
            ("00:00:01.000", "00:00:02.000", "hi"),
            ("00:00:02.000", "00:00:03.000", "  "),
        ],
    )
    bob = write_vtt("bob.vtt", [("00:00:03.000", "00:00:04.000", "yo")])

    with caplog.at_level(logging.INFO):
        run_pipeline(_speakers(alice, bob), str(tmp_path / "out.txt"))

    assert "alice.vtt: 2 entries seen, 1 malformed" in caplog.text
    assert "1 retained" in caplog.text
    assert "Transcripts combined and saved to" in caplog.text
