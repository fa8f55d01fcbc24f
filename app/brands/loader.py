"""
JSON loader for the tracked brand seed list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from urllib.parse import quote

from app.config import DEFAULT_LOGO_URL_TEMPLATE, resolve_config_path
from app.domain.assortment import is_premium_brand

# Row keys used by the cross-brand projections, which key brand columns by name.
RESERVED_BRAND_NAMES = frozenset({"bucket", "category"})


@dataclass(frozen=True)
class SeedCompetitor:
    """
    One tracked brand as configured before any data is produced for it.
    """

    name: str
    url: str
    logo: str
    premium: bool = False


def build_logo_url(name: str, template: str = DEFAULT_LOGO_URL_TEMPLATE) -> str:
    return template.format(name=quote(name, safe=""))


def validate_logo_url_template(template: str) -> None:
    """
    Raise ValueError unless the template formats with only a ``{name}`` field.
    """

    try:
        build_logo_url("brand", template)
    except (KeyError, IndexError, ValueError) as exc:
        raise ValueError(
            f"Invalid logo url template '{template}': only the {{name}} placeholder is supported."
        ) from exc


def load_seed_competitors(
    *,
    config_path: str,
    logo_url_template: str = DEFAULT_LOGO_URL_TEMPLATE,
) -> list[SeedCompetitor]:
    """
    Load the tracked brand list from a JSON file.

    Entries without a name or url are skipped; duplicate names keep the
    first occurrence. A brand named after a projection row key
    (see RESERVED_BRAND_NAMES) or a malformed logo template raises
    ValueError.
    """

    validate_logo_url_template(logo_url_template)

    path = resolve_config_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Competitor seed file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw_data, dict):
        raise ValueError("Invalid competitor seed file: top level must be an object.")
    competitors = raw_data.get("competitors", [])
    if not isinstance(competitors, list):
        raise ValueError("Invalid competitor seed file: 'competitors' must be a list.")

    parsed: list[SeedCompetitor] = []
    seen: set[str] = set()
    for entry in competitors:
        if not isinstance(entry, dict):
            continue

        name = str(entry.get("name", "")).strip()
        url = str(entry.get("url", "")).strip()
        if not name or not url or name in seen:
            continue
        if name.lower() in RESERVED_BRAND_NAMES:
            raise ValueError(
                f"Invalid competitor seed file: brand name '{name}' is reserved."
            )
        seen.add(name)

        parsed.append(
            SeedCompetitor(
                name=name,
                url=url,
                logo=_optional_str(entry.get("logo")) or build_logo_url(name, logo_url_template),
                premium=_optional_bool(entry.get("premium"), is_premium_brand(name)),
            )
        )

    return parsed


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default
