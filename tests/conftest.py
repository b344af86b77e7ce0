"""Configuration file for pytest."""

import pytest


@pytest.fixture
def write_vtt(tmp_path):
    """
    Fixture that writes a caption file from (start, end, text) tuples and
    returns its path as a string.
    """

    def _write(name, cues, header=True):
        blocks = ["WEBVTT\n"] if header else []
        for start, end, text in cues:
            blocks.append(f"{start} --> {end}\n{text}\n")
        path = tmp_path / name
        path.write_text("\n".join(blocks), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def two_speaker_files(write_vtt):
    alice = write_vtt(
        "alice.vtt",
        [
            ("00:00:01.000", "00:00:02.000", "Hi"),
            ("00:00:05.000", "00:00:06.000", "Bye"),
        ],
    )
    bob = write_vtt("bob.vtt", [("00:00:03.000", "00:00:04.000", "Hello")])
    return alice, bob
