from typing import Any

DEFAULT_TONE = "professional"
DEFAULT_WORD_COUNT_RANGE = "1500-2000"

BRIEF_LINK_RULES = """
## Internal link requirements:
- Homepage (/) is the main pillar: link to every category pillar.
- Category pillar (/lottery): link to the homepage once + all of its clusters.
- Cluster (/lottery/hanoi): link to its pillar once + one other cluster.
- Place 2 CTAs on every page.
"""

BRIEF_OUTPUT_EXAMPLE = """
## Output format (JSON):
{
  "meta_title": "หวยฮานอย {brand} - เว็บแทงหวยฮานอยออนไลน์ จ่ายจริง",
  "meta_description": "แทงหวยฮานอย {brand} เว็บตรง อัตราจ่ายสูง...",
  "h1": "หวยฮานอย {brand}",
  "content_structure": [
    {
      "h2": "หวยฮานอยคืออะไร",
      "h3s": ["เวลาออกผลหวยฮานอย", "วิธีดูผลหวยฮานอย"],
      "description": "อธิบายพื้นฐานเกี่ยวกับหวยฮานอย"
    }
  ],
  "word_count": {"min": 1500, "max": 2000},
  "keywords": ["หวยฮานอย", "แทงหวยฮานอย"],
  "internal_links": [
    {"target": "/", "anchor_suggestion": "{brand}", "type": "pillar"}
  ],
  "cta_placements": [
    {"position": "after_intro", "text": "สมัครเลย", "link": "/register"}
  ]
}

Write a complete content brief that is ready for SEO copywriting.
"""


def build_brief_prompt(page: Any, project: Any) -> str:
    header = (
        "You are an SEO content strategist for gaming websites in Thailand.\n\n"
        "## Input:\n"
        f"- Brand: {project.brand_name}\n"
        f"- Page: {page.url_path}\n"
        f"- Page Type: {page.page_type}\n"
        f"- Category: {page.category or 'general'}\n"
        f"- Title Pattern: {page.title_pattern}\n"
        f"- Tone: {project.tone or DEFAULT_TONE}\n"
        f"- Word Count: {project.word_count_range or DEFAULT_WORD_COUNT_RANGE}\n"
        f"- Language: {project.output_language}\n"
    )
    return f"{header}{BRIEF_LINK_RULES}{BRIEF_OUTPUT_EXAMPLE}"
