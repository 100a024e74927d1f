from fsbuckets import properties

import io
import pytest


class TestDumps:
    def test_header_comments(self):
        lines = properties.dumps({}).splitlines()
        assert lines[0] == "#"
        assert lines[1].startswith("#")
        assert len(lines) == 2

    def test_no_comment(self):
        lines = properties.dumps({"a": "b"}, comment=None).splitlines()
        assert len(lines) == 2
        assert lines[1] == "a=b"

    def test_sorted_key_value_lines(self):
        text = properties.dumps({"b": "2", "a": "1"})
        assert text.splitlines()[2:] == ["a=1", "b=2"]

    def test_escapes(self):
        text = properties.dumps(
            {"key with space": " leading", "sep=:": "a#b!c\\d", "ctl": "x\ty\nz"},
            comment=None,
        )
        lines = text.splitlines()[1:]
        assert "ctl=x\\ty\\nz" in lines
        assert "key\\ with\\ space=\\ leading" in lines
        assert "sep\\=\\:=a\\#b\\!c\\\\d" in lines

    def test_non_ascii_as_unicode_escapes(self):
        text = properties.dumps({"name": "caf\u00e9 \U0001f600"}, comment=None)
        assert "name=caf\\u00E9 \\uD83D\\uDE00" in text.splitlines()

    def test_dump_writes_latin1_bytes(self):
        out = io.BytesIO()
        properties.dump({"Content-Type": "image/png"}, out)
        assert out.getvalue().endswith(b"Content-Type=image/png\n")


class TestLoads:
    def test_separators(self):
        text = "a=1\nb:2\nc 3\nd = 4\ne\t:\t5\nf\n"
        assert properties.loads(text) == {
            "a": "1",
            "b": "2",
            "c": "3",
            "d": "4",
            "e": "5",
            "f": "",
        }

    def test_comments_and_blank_lines(self):
        text = "# comment\n! other\n\n   \n  key=value\n"
        assert properties.loads(text) == {"key": "value"}

    def test_continuation(self):
        text = "key=one \\\n    two\\\n three\nnext=1\n"
        assert properties.loads(text) == {"key": "one twothree", "next": "1"}

    def test_escaped_backslash_is_not_continuation(self):
        assert properties.loads("path=c:\\\\\nnext=1\n") == {
            "path": "c:\\",
            "next": "1",
        }

    def test_crlf_line_endings(self):
        assert properties.loads("a=1\r\nb=2\r\n") == {"a": "1", "b": "2"}

    def test_unicode_escapes(self):
        assert properties.loads("name=caf\\u00e9 \\uD83D\\uDE00\n") == {
            "name": "caf\u00e9 \U0001f600"
        }

    def test_value_may_contain_separators(self):
        assert properties.loads("url=http://x/?a=b\n") == {"url": "http://x/?a=b"}

    def test_malformed_unicode_escape(self):
        with pytest.raises(properties.PropertiesError):
            properties.loads("key=\\u12\n")

    def test_load_reads_latin1_bytes(self):
        assert properties.load(io.BytesIO(b"name=caf\xe9\n")) == {"name": "caf\u00e9"}


class TestRoundtrip:
    def test_awkward_values_survive(self):
        data = {
            "Content-MD5": "XrY7u+Ae7tCTyyK7j1rNww==",
            "x-amz-meta-note": "  spaces, = and : and # and \\ and \u00fc\n",
            "x-amz-meta-empty": "",
            "key with spaces": "v",
        }
        assert properties.loads(properties.dumps(data)) == data
