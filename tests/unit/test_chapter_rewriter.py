# ABOUTME: Unit tests for chapter markup rewriting: images, SVG images, and links.
# ABOUTME: Also covers body extraction and stripping of stylesheet and viewport tags.

from inkshelf.epub.rewriter import (
    NO_OP_HREF,
    extract_body_content,
    find_resource,
    fix_internal_links,
    process_chapter_content,
    replace_image_sources,
    replace_svg_images,
    strip_layout_overrides,
)
from inkshelf.epub.types import Chapter

PNG_URL = "data:image/png;base64,iVBORw0KGgo="
RESOURCES = {"OEBPS/images/a.png": PNG_URL}


class TestFindResource:
    """Tests for find_resource's lookup order."""

    def test_exact_path(self) -> None:
        assert find_resource("OEBPS/images/a.png", RESOURCES) == PNG_URL

    def test_bare_filename(self) -> None:
        assert find_resource("elsewhere/a.png", {"a.png": PNG_URL}) == PNG_URL

    def test_common_directories(self) -> None:
        assert find_resource("a.png", {"OEBPS/Images/a.png": PNG_URL}) == PNG_URL

    def test_empty_value_is_missing(self) -> None:
        assert find_resource("a.png", {"a.png": ""}) is None

    def test_not_found(self) -> None:
        assert find_resource("b.png", RESOURCES) is None


class TestReplaceImageSources:
    """Tests for raster <img> rewriting."""

    def test_relative_source_resolved(self) -> None:
        content = '<p><img alt="a" src="../images/a.png"/></p>'
        result = replace_image_sources(content, RESOURCES, "text/ch1.xhtml", "OEBPS")
        assert result == f'<p><img alt="a" src="{PNG_URL}"/></p>'

    def test_missing_image_placeholder(self) -> None:
        content = '<p><img src="../images/lost.png" alt="lost"/></p>'
        result = replace_image_sources(content, RESOURCES, "text/ch1.xhtml", "OEBPS")
        assert result == '<p><div class="missing-image">Image not found: lost.png</div></p>'

    def test_placeholder_escapes_filename(self) -> None:
        content = '<img src="a&lt;b.png"/>'
        result = replace_image_sources(content, {}, "ch1.xhtml", "")
        assert "Image not found: a&amp;lt;b.png" in result

    def test_data_uri_left_alone(self) -> None:
        content = f'<img src="{PNG_URL}"/>'
        assert replace_image_sources(content, {}, "ch1.xhtml", "") == content

    def test_data_src_attribute_ignored(self) -> None:
        """Only the real src attribute is rewritten."""
        content = '<img data-src="lazy.png" src="../images/a.png"/>'
        result = replace_image_sources(content, RESOURCES, "text/ch1.xhtml", "OEBPS")
        assert result == f'<img data-src="lazy.png" src="{PNG_URL}"/>'


class TestReplaceSvgImages:
    """Tests for SVG <image xlink:href> rewriting."""

    def test_resolved(self) -> None:
        content = '<svg><image width="600" xlink:href="../images/a.png"/></svg>'
        result = replace_svg_images(content, RESOURCES, "text/ch1.xhtml", "OEBPS")
        assert result == f'<svg><image width="600" xlink:href="{PNG_URL}"/></svg>'

    def test_unresolved_unchanged(self) -> None:
        content = '<svg><image width="600" xlink:href="../images/lost.png"/></svg>'
        result = replace_svg_images(content, RESOURCES, "text/ch1.xhtml", "OEBPS")
        assert result == content


class TestFixInternalLinks:
    """Tests for anchor rewriting."""

    def test_external_links_untouched(self) -> None:
        content = '<a class="ext" href="https://example.com/x?y=1">site</a> <a href="http://a.b">b</a>'
        assert fix_internal_links(content) == content

    def test_fragment_link(self) -> None:
        assert fix_internal_links('<a href="ch2.xhtml#note1">1</a>') == '<a href="#note1">1</a>'

    def test_bare_fragment_kept(self) -> None:
        assert fix_internal_links('<a href="#top">top</a>') == '<a href="#top">top</a>'

    def test_cross_document_link_neutralized(self) -> None:
        result = fix_internal_links('<a href="ch2.xhtml">next</a>')
        assert result == f'<a href="{NO_OP_HREF}">next</a>'


class TestProcessChapterContent:
    """Tests for the full three-pass rewrite."""

    def test_wraps_in_chapter_container(self) -> None:
        chapter = Chapter(id="c1", href="text/ch1.xhtml", raw_content="<p>Hello</p>")
        result = process_chapter_content(chapter, RESOURCES, "OEBPS")
        assert result == (
            '<div class="chapter" data-chapter-id="c1" id="chapter-c1"><p>Hello</p></div>'
        )

    def test_all_passes_applied(self) -> None:
        raw = (
            '<img src="../images/a.png"/>'
            '<svg><image xlink:href="../images/a.png"/></svg>'
            '<a href="ch2.xhtml#s2">on</a>'
        )
        chapter = Chapter(id="c1", href="text/ch1.xhtml", raw_content=raw)
        result = process_chapter_content(chapter, RESOURCES, "OEBPS")

        assert result.count(PNG_URL) == 2
        assert 'href="#s2"' in result

    def test_empty_content(self) -> None:
        chapter = Chapter(id="c1", href="ch1.xhtml", raw_content="")
        assert process_chapter_content(chapter, RESOURCES, "") == ""

    def test_resources_not_modified(self) -> None:
        resources = dict(RESOURCES)
        chapter = Chapter(id="c1", href="ch1.xhtml", raw_content='<img src="missing.png"/>')
        process_chapter_content(chapter, resources, "")
        assert resources == RESOURCES

    def test_deterministic(self) -> None:
        chapter = Chapter(id="c1", href="text/ch1.xhtml", raw_content='<img src="../images/a.png"/>')
        first = process_chapter_content(chapter, RESOURCES, "OEBPS")
        assert process_chapter_content(chapter, RESOURCES, "OEBPS") == first


class TestMarkupCleanup:
    """Tests for extract_body_content and strip_layout_overrides."""

    def test_body_extracted(self) -> None:
        markup = '<html><head><title>t</title></head><body class="x"><p>In</p></body></html>'
        assert extract_body_content(markup) == "<p>In</p>"

    def test_no_body_returns_input(self) -> None:
        assert extract_body_content("<p>fragment</p>") == "<p>fragment</p>"

    def test_stylesheets_and_viewport_removed(self) -> None:
        markup = (
            '<link rel="stylesheet" href="../styles/main.css"/>'
            '<link rel="next" href="ch2.xhtml"/>'
            '<meta name="viewport" content="width=600, height=800"/>'
            "<p>Text</p>"
        )
        assert strip_layout_overrides(markup) == '<link rel="next" href="ch2.xhtml"/><p>Text</p>'
