from app.agent.artifacts import GeneratedBrief, GeneratedPage


def test_generated_page_fills_defaults():
    page = GeneratedPage.from_raw({"url_path": "lottery/hanoi/", "page_type": "cluster", "title_pattern": "หวยฮานอย {brand}"})

    assert page is not None
    assert page.url_path == "/lottery/hanoi"
    assert page.category == "general"
    assert page.is_required is False
    assert page.priority == "secondary"


def test_generated_page_replaces_unknown_values():
    page = GeneratedPage.from_raw(
        {"url_path": "/vip", "page_type": "landing", "category": "esports", "priority": "urgent", "is_required": "true"}
    )

    assert page is not None
    assert page.page_type == "support"
    assert page.category == "general"
    assert page.priority == "secondary"
    assert page.is_required is True
    assert page.title_pattern == "{brand}"


def test_generated_page_without_path_is_rejected():
    assert GeneratedPage.from_raw({"page_type": "pillar"}) is None
    assert GeneratedPage.from_raw({"url_path": "   "}) is None
    assert GeneratedPage.from_raw("/lottery") is None


def test_generated_brief_defaults():
    brief = GeneratedBrief.from_raw({"meta_title": "หวยฮานอย {brand}"})

    assert brief.meta_title == "หวยฮานอย {brand}"
    assert brief.h1 == ""
    assert brief.word_count.min == 1500
    assert brief.word_count.max == 2000
    assert brief.content_structure == []
    assert brief.keywords == []
    assert brief.internal_links == []
    assert brief.cta_placements == []


def test_generated_brief_keeps_valid_entries_only():
    brief = GeneratedBrief.from_raw(
        {
            "content_structure": [
                {"h2": "หวยฮานอยคืออะไร", "h3s": ["เวลาออกผล", ""]},
                {"h3s": ["orphan"]},
            ],
            "word_count": {"min": 800},
            "keywords": ["หวยฮานอย", None, "แทงหวย"],
            "internal_links": [{"target": "/lottery", "type": "pillar"}, {"anchor_suggestion": "no target"}],
            "cta_placements": [{"position": "after_intro", "text": "สมัครเลย", "link": "/register"}],
        }
    )

    assert [section.h2 for section in brief.content_structure] == ["หวยฮานอยคืออะไร"]
    assert brief.content_structure[0].h3s == ["เวลาออกผล"]
    assert (brief.word_count.min, brief.word_count.max) == (800, 2000)
    assert brief.keywords == ["หวยฮานอย", "แทงหวย"]
    assert [link.target for link in brief.internal_links] == ["/lottery"]
    assert brief.cta_placements[0].link == "/register"
