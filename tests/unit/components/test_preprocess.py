"""
Unit tests for comment stripping and container blanking.
"""

from wardmap.preprocess import blank_containers, mask_comments, preprocess, strip_comments


def line_count(text: str) -> int:
    return len(text.split("\n"))


class TestStripComments:
    def test_line_comment_truncates(self):
        assert strip_comments("component A [0.1, 0.2] // note") == "component A [0.1, 0.2] "

    def test_url_lines_keep_slashes(self):
        text = "url shop [https://example.com/shop]"
        assert strip_comments(text) == text

    def test_indented_url_line_kept(self):
        text = "  url shop [https://example.com]"
        assert strip_comments(text) == text

    def test_block_comment_blanks_lines(self):
        text = "a\n/* b\nc */ d\ne"
        assert strip_comments(text) == "a\n\n d\ne"

    def test_block_comment_same_line(self):
        assert strip_comments("component A /* x */ [0.1, 0.2]") == "component A  [0.1, 0.2]"

    def test_unterminated_block_comment(self):
        assert strip_comments("a\n/* b\nc") == "a\n\n"

    def test_url_inside_block_comment_is_blanked(self):
        assert strip_comments("/*\nurl a [http://x]\n*/") == "\n\n"

    def test_line_count_preserved(self):
        samples = [
            "",
            "\n\n",
            "a // b\n/* c\n\nd */\ne",
            "/* never closed\nx\ny\n",
            "url x [http://a//b]\n// only comment\n",
            "one /* a */ two /* b\nthree */ four // five",
        ]
        for sample in samples:
            assert line_count(strip_comments(sample)) == line_count(sample)

    def test_text_without_comments_unchanged(self):
        text = "title T\ncomponent A [0.1, 0.2]\nA->B"
        assert strip_comments(text) == text


class TestMaskComments:
    def test_comments_become_spaces(self):
        assert mask_comments("/* c */ A->B // tail") == "        A->B        "

    def test_columns_line_up_with_the_raw_text(self):
        text = "a /* b\nc */ d\nurl x [http://e]"
        masked = mask_comments(text)
        assert [len(line) for line in masked.split("\n")] == [len(line) for line in text.split("\n")]
        assert masked.split("\n")[1].index("d") == text.split("\n")[1].index("d")
        assert masked.split("\n")[2] == "url x [http://e]"

    def test_same_code_as_strip(self):
        text = "component A /* x */ [0.1, 0.2] // y"
        assert mask_comments(text).split() == strip_comments(text).split()


class TestBlankContainers:
    def test_blanks_brace_block(self):
        text = "pipeline K\n{\n  component X [0.5]\n}\ncomponent Y [0.1, 0.2]"
        assert blank_containers(text) == "pipeline K\n\n\n\ncomponent Y [0.1, 0.2]"

    def test_brace_on_header_line(self):
        text = "pipeline K {\n  component X [0.5]\n}"
        assert blank_containers(text) == "pipeline K\n\n"

    def test_line_count_preserved(self):
        text = "pipeline A\n{\ncomponent B [0.2]\n}\npipeline C {\n}\n"
        assert line_count(blank_containers(text)) == line_count(text)

    def test_unclosed_block_blanks_to_end(self):
        assert blank_containers("a\n{\nb\nc") == "a\n\n\n"


class TestPreprocess:
    def test_two_views(self):
        text = "pipeline K // kettles\n{\n  component X [0.5]\n}"
        views = preprocess(text)
        assert "component X [0.5]" in views.stripped
        assert "component X" not in views.flattened
        assert line_count(views.stripped) == line_count(views.flattened) == line_count(text)

    def test_blanking_can_be_disabled(self):
        views = preprocess("pipeline K\n{\ncomponent X [0.5]\n}", blank=False)
        assert views.flattened == views.stripped
