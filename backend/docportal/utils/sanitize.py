"""Higienização de texto recebido do cliente antes da persistência."""

import html
import re

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def sanitize_text(value: str | None) -> str:
    if not value:
        return ""
    return html.escape(value, quote=True).replace("&#x27;", "&#39;").strip()


def sanitize_rich_content(value: str | None) -> str:
    if not value:
        return ""
    return sanitize_text(_SCRIPT_BLOCK.sub("", value))
