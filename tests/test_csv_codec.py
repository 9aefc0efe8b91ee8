import csv
import io

from personal_crm.services.csv_codec import encode_field, encode_row, encode_rows, parse_csv


def test_parse_quoted_fields() -> None:
    text = 'name,notes\n"Doe, Jane","said ""hi""\nthen left"\n'

    assert parse_csv(text) == [
        ["name", "notes"],
        ["Doe, Jane", 'said "hi"\nthen left'],
    ]


def test_parse_ignores_carriage_returns_and_final_newline() -> None:
    assert parse_csv("a,b\r\n1,2\r\n") == [["a", "b"], ["1", "2"]]
    assert parse_csv("a,b\n1,2") == [["a", "b"], ["1", "2"]]


def test_parse_keeps_interior_blank_lines_and_empty_fields() -> None:
    assert parse_csv("a\n\nb\n\n\n") == [["a"], [""], ["b"]]
    assert parse_csv("x,,\n") == [["x", "", ""]]
    assert parse_csv("") == []


def test_encode_field_quotes_only_when_needed() -> None:
    assert encode_field(None) == ""
    assert encode_field("plain") == "plain"
    assert encode_field(42) == "42"
    assert encode_field("a,b") == '"a,b"'
    assert encode_field('say "hi"') == '"say ""hi"""'
    assert encode_field("two\nlines") == '"two\nlines"'
    assert encode_field("cr\rhere") == '"cr\rhere"'


def test_encode_row_keeps_lone_empty_field() -> None:
    assert encode_row([""]) == '""'
    assert encode_row(["", ""]) == ","


def test_round_trip() -> None:
    rows = [
        ["first_name", "last_name", "notes"],
        ["Jane", "", 'likes "tea", cake'],
        [""],
        ["Multi", "Line", "one\ntwo\r\nthree"],
        ["", "", ""],
    ]

    assert parse_csv(encode_rows(rows)) == rows


def test_encoded_rows_read_back_with_stdlib_reader() -> None:
    rows = [["name", "notes"], ["Doe, Jane", 'said "hi"\nthen left'], ["", "x"]]

    text = encode_rows(rows)

    assert "\r" not in text
    assert list(csv.reader(io.StringIO(text))) == rows
