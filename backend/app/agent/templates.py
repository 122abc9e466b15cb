"""Built-in page templates, focus-type presets and URL style helpers."""
from typing import TypedDict


class PageTemplate(TypedDict, total=False):
    path: str
    title: str
    type: str
    required: bool


FOCUS_TYPE_CONFIGS: dict[str, dict[str, int]] = {
    "บอลล้วน": {"football": 100},
    "บอล + คาสิโน": {"football": 60, "casino": 40},
    "คาสิโนล้วน": {"casino": 100},
    "คาสิโน + สล็อต": {"casino": 60, "slots": 40},
    "สล็อตล้วน": {"slots": 100},
    "หวยล้วน": {"lottery": 100},
    "หวย + คาสิโน": {"lottery": 60, "casino": 40},
    "หวย + คาสิโน + สล็อต": {"lottery": 50, "casino": 30, "slots": 20},
    "หวย + คาสิโน + สล็อต + บอล": {"lottery": 40, "casino": 25, "slots": 20, "football": 15},
}

PAGE_TEMPLATES: dict[str, list[PageTemplate]] = {
    "lottery": [
        {"path": "/lottery", "title": "หวยออนไลน์", "type": "pillar"},
        {"path": "/lottery/thai", "title": "หวยไทย", "type": "cluster"},
        {"path": "/lottery/hanoi", "title": "หวยฮานอย", "type": "cluster"},
        {"path": "/lottery/laos", "title": "หวยลาว", "type": "cluster"},
        {"path": "/lottery/yeekee", "title": "หวยยี่กี", "type": "cluster"},
        {"path": "/lottery/stock", "title": "หวยหุ้น", "type": "cluster"},
        {"path": "/results", "title": "ผลหวย", "type": "support"},
    ],
    "casino": [
        {"path": "/casino", "title": "คาสิโนออนไลน์", "type": "pillar"},
        {"path": "/casino/live", "title": "คาสิโนสด", "type": "cluster"},
        {"path": "/casino/baccarat", "title": "บาคาร่า", "type": "cluster"},
        {"path": "/casino/roulette", "title": "รูเล็ต", "type": "cluster"},
        {"path": "/casino/sicbo", "title": "ซิกโบ", "type": "cluster"},
    ],
    "slots": [
        {"path": "/slots", "title": "สล็อตออนไลน์", "type": "pillar"},
        {"path": "/slots/pg", "title": "สล็อต PG", "type": "cluster"},
        {"path": "/slots/joker", "title": "สล็อต Joker", "type": "cluster"},
        {"path": "/slots/jackpot", "title": "สล็อตแจ็คพอต", "type": "cluster"},
    ],
    "football": [
        {"path": "/football", "title": "แทงบอลออนไลน์", "type": "pillar"},
        {"path": "/football/live", "title": "แทงบอลสด", "type": "cluster"},
        {"path": "/football/step", "title": "บอลสเต็ป", "type": "cluster"},
        {"path": "/football/odds", "title": "ราคาบอล", "type": "cluster"},
    ],
    "general": [
        {"path": "/", "title": "หน้าหลัก", "type": "pillar", "required": True},
        {"path": "/register", "title": "สมัครสมาชิก", "type": "conversion", "required": True},
        {"path": "/promotion", "title": "โปรโมชั่น", "type": "support", "required": True},
        {"path": "/contact", "title": "ติดต่อเรา", "type": "support", "required": True},
        {"path": "/login", "title": "เข้าสู่ระบบ", "type": "conversion"},
        {"path": "/about", "title": "เกี่ยวกับเรา", "type": "support"},
        {"path": "/faq", "title": "คำถามที่พบบ่อย", "type": "support"},
        {"path": "/rules", "title": "กติกาและเงื่อนไข", "type": "support"},
        {"path": "/blog", "title": "บทความ", "type": "support"},
    ],
}

# Global pages that always live at the root, never under a category
ROOT_SUPPORT_PATHS = ("/about", "/contact", "/terms", "/privacy", "/rules", "/faq", "/blog")
ROOT_CONVERSION_PATHS = ("/register", "/login", "/download")
ROOT_FEATURE_PATHS = ("/promotion", "/vip", "/affiliate")


def get_required_pages() -> list[PageTemplate]:
    return [page for page in PAGE_TEMPLATES["general"] if page.get("required")]


def required_paths() -> list[str]:
    return [page["path"] for page in get_required_pages()]


def focus_percentages_for(focus_type: str) -> dict[str, int]:
    return dict(FOCUS_TYPE_CONFIGS.get(focus_type, {}))


def convert_to_flat_style(path: str) -> str:
    """`/lottery/hanoi` -> `/hanoi-lottery`; mandatory and single-segment paths are kept."""
    if path in required_paths():
        return path
    parts = [part for part in path.split("/") if part]
    if len(parts) == 2:
        return f"/{parts[1]}-{parts[0]}"
    if len(parts) > 2:
        return "/" + "-".join(parts)
    return path
