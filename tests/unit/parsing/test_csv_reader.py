from engagement_dashboard.parsing.csv_reader import read_dicts, split_rows


def test_split_rows_handles_quoted_delimiters():
    rows = list(split_rows('a,"1,234",c\n'))
    assert rows == [(1, ["a", "1,234", "c"])]


def test_split_rows_skips_blank_lines_and_tracks_line_numbers():
    text = "h1,h2\n\nx,y\r\n   \nz,w"
    rows = list(split_rows(text))
    assert rows == [(1, ["h1", "h2"]), (3, ["x", "y"]), (5, ["z", "w"])]


def test_split_rows_keeps_newline_inside_quotes():
    rows = list(split_rows('a,"line1\nline2"\nb,c\n'))
    assert rows[0] == (1, ["a", "line1\nline2"])
    assert rows[1] == (3, ["b", "c"])


def test_split_rows_trims_fields():
    assert list(split_rows("  a ,  b  \n")) == [(1, ["a", "b"])]


def test_read_dicts_pads_short_rows_and_strips_bom():
    text = "\ufeffname,count,extra\nalice,3\n"
    rows = list(read_dicts(text))
    assert rows == [(2, {"name": "alice", "count": "3", "extra": ""})]


def test_read_dicts_empty_text_yields_nothing():
    assert list(read_dicts("")) == []
