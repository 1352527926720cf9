"""Tests for the Parser: filter chain, placeholders and the page scenarios."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import read_fixture
from folio.content import Page, SourceNotFoundError
from folio.filters import CallableFilter, MarkdownFilter
from folio.frontmatter import FrontMatterSyntaxError
from folio.helpers import DataHelper, FrontMatterHelper
from folio.layout import Layout
from folio.parser import ParseResult, Parser


def upper(body, page):
    return body.upper()


def truncate(body, page):
    return body[:5]


class StaticHelper:
    def __init__(self, token, value):
        self.token = token
        self.value = value
        self.calls = 0

    def can_resolve(self, token):
        return token == self.token

    def resolve(self, token, page):
        self.calls += 1
        return self.value


def markdown_layout():
    return Layout().add_filter(MarkdownFilter())


# --- Scenarios ---


def test_from_string_with_empty_layout():
    """Without filters only {NAME} is replaced."""
    page = Page()
    page.name = "Hello world!"
    page.body = "# {NAME}\nThis is a sample page."
    result = Parser().parse_page(page)
    assert result.html == read_fixture("output", "PlainName.html")


def test_from_string_with_markdown():
    page = Page("# {NAME}\nThis is a sample page.", name="Hello world!")
    result = Parser(markdown_layout()).parse_page(page)
    assert result.html == read_fixture("output", "SimplePlate.html")


def test_from_markdown_file(fixtures_dir):
    page = Page.from_file(fixtures_dir / "pages" / "HelloWorld.md", name="Hello world!")
    result = Parser(markdown_layout()).parse_page(page)
    assert result.html == read_fixture("output", "SimplePlate.html")


def test_with_front_matter(fixtures_dir):
    """Front matter supplies NAME when no name was set."""
    page = Page.from_file(fixtures_dir / "pages" / "FrontMatter.md")
    result = Parser(markdown_layout()).parse_page(page)
    assert dict(page.front_matter) == {"name": "Hello world!"}
    assert dict(result.front_matter) == {"name": "Hello world!"}
    assert result.name == "Hello world!"
    assert result.html == read_fixture("output", "FrontMatter.html")


def test_unterminated_front_matter(fixtures_dir):
    path = fixtures_dir / "pages" / "Unterminated.md"
    original = path.read_text(encoding="utf-8")
    page = Page.from_file(path)
    with pytest.raises(FrontMatterSyntaxError):
        Parser(markdown_layout()).parse_page(page)
    assert page.body == original


# --- Properties ---


def test_body_without_front_matter_is_filtered_then_substituted():
    body = "hello {NAME} and {SITE}"
    layout = Layout.of(
        filters=[CallableFilter(upper)],
        helpers=[DataHelper({"SITE": "folio"})],
    )
    page = Page.from_string(body, name="World")
    result = Parser(layout).parse_page(page)
    assert result.html == "HELLO World AND folio"
    assert dict(result.front_matter) == {}


def test_string_and_file_pages_render_identically(tmp_path):
    text = "---\nname: Same\ntitle: Twin\n---\n# {NAME}\n\n*{TITLE}*"
    source = tmp_path / "twin.md"
    source.write_text(text, encoding="utf-8")
    layout = markdown_layout().add_helper(FrontMatterHelper())
    parser = Parser(layout)

    from_string = parser.parse_page(Page.from_string(text))
    from_file = parser.parse_page(Page.from_file(source))
    assert from_string.html == from_file.html
    assert "<em>Twin</em>" in from_file.html


def test_file_with_byte_order_mark_renders_like_string(tmp_path):
    text = "---\nname: Hi\n---\n{NAME}"
    source = tmp_path / "bom.md"
    source.write_bytes(("\ufeff" + text).encode("utf-8"))

    from_file = Parser().parse_page(Page.from_file(source))
    assert from_file.html == Parser().parse_string(text).html == "Hi"


def test_filters_run_in_registration_order():
    page_text = "abcdefgh"
    upper_first = Layout.of(filters=[CallableFilter(upper), CallableFilter(truncate)])
    truncate_first = Layout.of(
        filters=[CallableFilter(truncate), CallableFilter(lambda b, p: b + "-tail")]
    )
    parser = Parser()
    assert parser.parse_string(page_text, layout=upper_first).html == "ABCDE"
    assert parser.parse_string(page_text, layout=truncate_first).html == "abcde-tail"


def test_order_dependent_filters():
    """B(A(body)) differs from A(B(body))."""
    append = CallableFilter(lambda body, page: body + " world", name="append")
    shout = CallableFilter(upper)
    text = "hello"
    assert Parser().parse_string(text, layout=Layout.of([shout, append])).html == "HELLO world"
    assert Parser().parse_string(text, layout=Layout.of([append, shout])).html == "HELLO WORLD"


def test_identity_filter_is_a_legal_no_op():
    layout = Layout.of(filters=[CallableFilter(lambda body, page: body)])
    assert Parser(layout).parse_string("same").html == "same"


def test_filters_see_extracted_front_matter():
    seen = {}

    def record(body, page):
        seen["front_matter"] = dict(page.front_matter)
        seen["body"] = body
        return body

    layout = Layout.of(filters=[CallableFilter(record)])
    Parser(layout).parse_string("---\nlayout: post\n---\ncontent")
    assert seen == {"front_matter": {"layout": "post"}, "body": "content"}


def test_unresolved_tokens_pass_through():
    result = Parser().parse_string("a {UNKNOWN} b {NAME}")
    assert result.html == "a {UNKNOWN} b {NAME}"


def test_only_uppercase_tokens_are_placeholders():
    result = Parser().parse_string("{name} {Name} { NAME } {NAME1} {NAME}", name="X")
    assert result.html == "{name} {Name} { NAME } {NAME1} X"


def test_substitution_is_single_pass():
    loop = StaticHelper("LOOP", "{LOOP}{NAME}")
    layout = Layout.of(helpers=[loop])
    result = Parser(layout).parse_string("{LOOP}", name="N")
    assert result.html == "{LOOP}{NAME}"
    assert loop.calls == 1


def test_first_matching_helper_wins():
    first = StaticHelper("SITE", "first")
    second = StaticHelper("SITE", "second")
    layout = Layout.of(helpers=[first, second])
    assert Parser(layout).parse_string("{SITE}").html == "first"
    assert second.calls == 0


def test_registered_helper_outranks_implicit_name():
    layout = Layout.of(helpers=[StaticHelper("NAME", "override")])
    assert Parser(layout).parse_string("{NAME}", name="page").html == "override"


def test_helper_returning_none_passes_token_on():
    class Declining:
        def can_resolve(self, token):
            return True

        def resolve(self, token, page):
            return None

    layout = Layout.of(helpers=[Declining(), StaticHelper("SITE", "ok")])
    assert Parser(layout).parse_string("{SITE} {NAME}", name="n").html == "ok n"


def test_replacement_text_is_literal():
    layout = Layout.of(helpers=[StaticHelper("PATH", r"C:\new\1")])
    assert Parser(layout).parse_string("{PATH}").html == r"C:\new\1"


def test_call_layout_overrides_parser_layout():
    parser = Parser(Layout.of(filters=[CallableFilter(upper)]))
    assert parser.parse_string("abc").html == "ABC"
    assert parser.parse_string("abc", layout=Layout()).html == "abc"


def test_result_is_immutable():
    result = Parser().parse_string("text", name="n")
    assert isinstance(result, ParseResult)
    assert str(result) == "text"
    with pytest.raises(AttributeError):
        result.html = "changed"


def test_filter_errors_propagate_unchanged():
    def boom(body, page):
        raise LookupError("filter failed")

    layout = Layout.of(filters=[CallableFilter(boom)])
    with pytest.raises(LookupError, match="filter failed"):
        Parser(layout).parse_string("text")


def test_helper_errors_propagate_unchanged():
    class Broken:
        def can_resolve(self, token):
            return True

        def resolve(self, token, page):
            raise KeyError(token)

    layout = Layout.of(helpers=[Broken()])
    with pytest.raises(KeyError):
        Parser(layout).parse_string("{ANY}")


def test_unreadable_file_surfaces_at_parse():
    class FlakyLoader:
        def __init__(self):
            self.fail = False

        def load(self, path):
            if self.fail:
                raise SourceNotFoundError(path, "gone")
            return "ok"

    loader = FlakyLoader()
    page = Page.from_file("a.md", loader=loader)
    # Simulate a page whose content was never read.
    page._loaded = False
    loader.fail = True
    with pytest.raises(SourceNotFoundError):
        Parser().parse_page(page)


def test_reparsing_the_same_page_is_stable():
    page = Page.from_string("---\nname: Again\n---\n{NAME}")
    parser = Parser()
    assert parser.parse_page(page).html == "Again"
    assert parser.parse_page(page).html == "Again"


def test_concurrent_renders_share_one_layout():
    calls = []
    lock = threading.Lock()

    def track(body, page):
        with lock:
            calls.append(page.name)
        return body

    layout = markdown_layout().add_filter(CallableFilter(track))
    layout.add_helper(FrontMatterHelper())
    parser = Parser(layout)

    def render(index):
        text = f"---\ntitle: Page {index}\n---\n# {{TITLE}}"
        return parser.parse_page(Page.from_string(text, name=str(index))).html

    with ThreadPoolExecutor(max_workers=8) as pool:
        outputs = list(pool.map(render, range(40)))

    assert outputs == [f"<h1>Page {i}</h1>\n" for i in range(40)]
    assert sorted(calls, key=int) == [str(i) for i in range(40)]
    assert layout.frozen
