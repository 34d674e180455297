"""Tests for the text, CSV and record renderings."""

from __future__ import annotations

from rel_display import format_index, format_table, to_csv, to_records


def test_format_table(studio):
    text = format_table(studio, width=16)
    lines = text.splitlines()
    assert lines[0] == " Table studio"
    assert lines[1] == lines[3] == lines[-1]
    assert lines[2].split() == ["|", "name", "address", "presNo", "|"]
    assert len(lines) == 4 + len(studio) + 1
    assert "Universal_City" in lines[5]


def test_format_table_clips_long_values(studio):
    text = format_table(studio, width=6)
    assert "Los_A…" in text


def test_format_index_in_key_order(studio):
    lines = format_index(studio).splitlines()
    assert lines[0] == " Index for studio (tree)"
    assert lines[2].startswith("['DreamWorks']")
    assert lines[4].startswith("['Universal']")


def test_to_csv(movie_no):
    assert to_csv(movie_no) == "title,year,studioNo\nStar_Wars,1977,12345\nJaws,1975,555"


def test_to_records(studio_no):
    assert to_records(studio_no) == [
        {"studioNo": 12345, "studioName": "Fox"},
        {"studioNo": 777, "studioName": "Universal"},
    ]
