"""Tests for the tinycss2-backed stylesheet model."""

from csspurge.stylesheet import (
    AtRule,
    StyleRule,
    Verbatim,
    parse_stylesheet,
    split_selector_list,
)


def _rules(source):
    return [n for n in parse_stylesheet(source).nodes if not isinstance(n, Verbatim)]


# ---------------------------------------------------------------------------
# Style rules
# ---------------------------------------------------------------------------


class TestStyleRules:
    def test_single_rule(self):
        (rule,) = _rules(".btn { color: red; }")
        assert isinstance(rule, StyleRule)
        assert rule.selectors == (".btn",)
        assert rule.block == " color: red; "

    def test_selector_list_is_split_on_top_level_commas(self):
        (rule,) = _rules("h1, .title > a,#x{margin:0}")
        assert rule.selectors == ("h1", ".title > a", "#x")

    def test_commas_inside_functions_do_not_split(self):
        (rule,) = _rules(".a:is(.b, .c), .d{x:y}")
        assert rule.selectors == (".a:is(.b, .c)", ".d")

    def test_escaped_selector_is_kept_escaped(self):
        (rule,) = _rules(r".md\:flex{display:flex}")
        assert rule.selectors == (r".md\:flex",)

    def test_with_selectors_rebuilds_prelude(self):
        (rule,) = _rules(".a, .b, .c{x:y}")
        kept = rule.with_selectors((".a", ".c"))
        assert kept.serialize() == ".a, .c{x:y}"

    def test_with_same_selectors_keeps_original_text(self):
        (rule,) = _rules(".a ,.b {x:y}")
        assert rule.with_selectors(rule.selectors) is rule


class TestSplitSelectorList:
    def test_empty(self):
        assert split_selector_list([]) == ()


# ---------------------------------------------------------------------------
# At-rules and other nodes
# ---------------------------------------------------------------------------


class TestAtRules:
    def test_media_children_are_parsed(self):
        (media,) = _rules("@media (min-width: 640px) { .sm { a: b } }")
        assert isinstance(media, AtRule)
        assert media.keyword == "media"
        children = [c for c in media.children if isinstance(c, StyleRule)]
        assert children[0].selectors == (".sm",)

    def test_keyframes_block_is_opaque(self):
        (rule,) = _rules("@keyframes spin { from { a: b } to { a: c } }")
        assert rule.children is None
        assert "from" in rule.block

    def test_statement_at_rule(self):
        (rule,) = _rules('@import url("x.css");')
        assert rule.block is None
        assert rule.serialize() == '@import url("x.css");'

    def test_comments_are_kept(self):
        nodes = parse_stylesheet("/* hi */.a{}").nodes
        assert nodes[0] == Verbatim(text="/* hi */")
        assert nodes[0].is_comment

    def test_unterminated_rule_is_dropped(self):
        sheet = parse_stylesheet(".a{x:y}.b")
        assert sheet.serialize() == ".a{x:y}"


class TestRoundTrip:
    def test_serialize_reproduces_source(self):
        source = (
            "/* base */\n"
            "html, body { margin: 0; }\n"
            "@import url(reset.css);\n"
            "@media (min-width: 1px) and (max-width: 2.5em) {\n"
            "  .a > .b:hover { color: #fff; }\n"
            "}\n"
            "@font-face { font-family: X; src: url(x.woff2); }\n"
            ".c::after { content: \"\"; }\n"
        )
        assert parse_stylesheet(source).serialize() == source
