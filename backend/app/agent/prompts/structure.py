import json
from typing import Any

from app.agent.templates import (
    ROOT_CONVERSION_PATHS,
    ROOT_FEATURE_PATHS,
    ROOT_SUPPORT_PATHS,
    get_required_pages,
)

NO_EXISTING_PATTERNS = "none"

STRUCTURE_RULES = """
## SEO Information Architecture rules (very important!):

### 1. Root level pages (never nested under a category):
- **Support pages**: {support_paths}
- **Conversion pages**: {conversion_paths}
- **Feature pages**: {feature_paths}
- These are global pages used across the whole site and do not belong to any single category.

### 2. Category structure (Pillar + Clusters):
- **Pillar page** (parent): /lottery, /casino, /slots, /football
- **Cluster pages** (children): /lottery/hanoi, /lottery/laos, /casino/baccarat, /slots/pg
- **Rule**: a cluster page must be directly about its pillar's topic.

### 3. Correct examples:
- /rules (global, used site-wide)
- /lottery (pillar)
- /lottery/hanoi (cluster, directly about lottery)
- /lottery/how-to-play (cluster, directly about lottery)

### 4. Wrong examples:
- /lottery/rules (rules are site-wide, not lottery specific)
- /lottery/register (registration is site-wide)
- /lottery/contact (contact is site-wide)

## URL rules:
1. **Split pages by the given percentages** (rounding is fine).
2. **Pillar-Cluster model**: one pillar page per category, cluster pages directly related to their pillar.
3. **Support pages at root level**: rules, FAQ, terms, privacy, blog, about live at / and are never nested.
4. **Conversion pages at root level**: register, login, download live at /.
5. **URLs must not repeat**: check against the patterns already used.
6. **Title pattern**: "<Thai title> {{brand}}" only (no English words in the title).
7. **URL style**: follow the selected style (nested: /lottery/hanoi, flat: /hanoi-lottery).

## Page types:
- **pillar**: parent page of a category (/lottery, /casino)
- **cluster**: child content page (/lottery/hanoi, /casino/baccarat)
- **conversion**: a page asking the user to take an action (/register, /login)
- **support**: general supporting page (/contact, /about, /faq, /rules, /terms)
"""

STRUCTURE_OUTPUT_EXAMPLE = """
## Output format (JSON):
{
  "pages": [
    {
      "url_path": "/",
      "page_type": "pillar",
      "title_pattern": "หน้าหลัก {brand}",
      "category": "general",
      "is_required": true,
      "priority": "main"
    },
    {
      "url_path": "/lottery",
      "page_type": "pillar",
      "title_pattern": "หวยออนไลน์ {brand}",
      "category": "lottery",
      "is_required": false,
      "priority": "primary"
    },
    {
      "url_path": "/lottery/hanoi",
      "page_type": "cluster",
      "title_pattern": "หวยฮานอย {brand}",
      "category": "lottery",
      "is_required": false,
      "priority": "secondary"
    },
    {
      "url_path": "/rules",
      "page_type": "support",
      "title_pattern": "กติกาและเงื่อนไข {brand}",
      "category": "general",
      "is_required": false,
      "priority": "secondary"
    }
  ],
  "internal_links": {
    "/": ["/lottery", "/casino", "/rules", "/contact"],
    "/lottery": ["/", "/lottery/hanoi", "/lottery/laos"]
  }
}

Build a structure that follows SEO best practice and the information architecture rules above.
"""


def build_structure_prompt(params: Any, existing_patterns: list[str]) -> str:
    """
    Render the sitemap instruction for one project.
    `params` is anything carrying the project fields (a Project or ProjectCreate).
    """
    required_lines = "\n".join(
        f"{index}. {page['path']} ({page['title']}) - {page['type']}"
        for index, page in enumerate(get_required_pages(), start=1)
    )
    patterns = ", ".join(existing_patterns) if existing_patterns else NO_EXISTING_PATTERNS
    focus = json.dumps(params.focus_percentages or {}, ensure_ascii=False)

    header = (
        "You are an SEO & Information Architecture specialist for gaming websites in Thailand.\n\n"
        "## Input:\n"
        f"- Brand: {params.brand_name}\n"
        f"- Domain: {params.domain}\n"
        f"- Focus Type: {params.focus_type}\n"
        f"- Percentages: {focus}\n"
        f"- Number of pages: {params.total_pages}\n"
        f"- URL Style: {params.url_style}\n"
        f"- Language: {params.output_language}\n\n"
        "## Mandatory pages (always include, mark is_required true):\n"
        f"{required_lines}\n\n"
        "## URL patterns already used (do not repeat):\n"
        f"{patterns}\n"
    )
    rules = STRUCTURE_RULES.format(
        support_paths=", ".join(ROOT_SUPPORT_PATHS),
        conversion_paths=", ".join(ROOT_CONVERSION_PATHS),
        feature_paths=", ".join(ROOT_FEATURE_PATHS),
    )
    return f"{header}{rules}{STRUCTURE_OUTPUT_EXAMPLE}"
