"""Render the ranked selection as the HTML digest email.

Layout, top to bottom:

  header         date, item count, number of sources monitored
  Regulatory     articles tagged Regulatory
  Market & Jobs  articles tagged Market or Jobs
  Opportunities  every article's opportunity line, if it has one
  Selected       the full ranked list with score, tags, bullets, rationale

Sections are inclusion-based (one article can appear in several) and empty
sections are left out entirely.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from html import escape

from models import AnalyzedArticle
from profiles import DigestProfile

_LINK_STYLE = "color: #4299e1;"
_H2_STYLE = "color: #2d3748;"
_RULE = '<hr style="border: 1px solid #e2e8f0;">'

# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def render_digest(
    articles: Sequence[AnalyzedArticle],
    profile: DigestProfile,
    sources_monitored: int,
    today: date | None = None,
) -> str:
    """Return the complete HTML body for one digest."""
    day = today or date.today()

    regulatory = [a for a in articles if "Regulatory" in (a.tags or ())]
    market_jobs = [a for a in articles if {"Market", "Jobs"} & set(a.tags or ())]
    opportunities = [a.opportunity for a in articles if a.opportunity]

    parts = [
        '<div style="font-family: Arial, sans-serif; max-width: 700px; margin: 0 auto; padding: 20px;">',
        '<h1 style="color: #1a202c; border-bottom: 2px solid #4299e1; padding-bottom: 10px;">'
        f"{escape(profile.digest_title)}</h1>",
        f'<p style="color: #718096;"><strong>{day.strftime("%A %d %B %Y")}</strong> · '
        f"{len(articles)} relevant items · {sources_monitored} sources monitored</p>",
        _RULE,
    ]

    if regulatory:
        parts.append(_link_section("Regulatory Signals", regulatory))
    if market_jobs:
        parts.append(_link_section("Market &amp; Jobs Signals", market_jobs))
    if opportunities:
        items = "".join(f"<li>{escape(text)}</li>" for text in opportunities)
        parts.append(
            f'<h2 style="{_H2_STYLE}">{escape(profile.brand)} Opportunities</h2><ul>{items}</ul>'
        )

    parts.append(f'{_RULE}<h2 style="{_H2_STYLE}">Selected Articles</h2>')
    parts.extend(_article_entry(rank, article, profile) for rank, article in enumerate(articles, start=1))

    parts.append(
        f'<hr style="border: 1px solid #e2e8f0; margin-top: 30px;">'
        f'<p style="color: #a0aec0; font-size: 12px;">{escape(profile.brand)} Intelligence Brief · '
        f"{sources_monitored} sources monitored</p>"
    )
    parts.append("</div>")
    return "\n".join(parts)


def build_subject(profile: DigestProfile, count: int, today: date | None = None) -> str:
    day = today or date.today()
    return f"{profile.subject_prefix} - {count} items ({day.strftime('%d-%m-%Y')})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _link_section(heading: str, articles: Sequence[AnalyzedArticle]) -> str:
    items = "".join(
        f'<li><a href="{escape(a.url)}" style="{_LINK_STYLE}">{escape(a.title)}</a></li>'
        for a in articles
    )
    return f'<h2 style="{_H2_STYLE}">{heading}</h2><ul>{items}</ul>'


def _article_entry(rank: int, article: AnalyzedArticle, profile: DigestProfile) -> str:
    bullets = "".join(
        f'<li style="margin-bottom: 4px;">{escape(line)}</li>' for line in article.summary or ()
    )
    tags = ", ".join(article.tags or ())
    callout = ""
    if article.opportunity:
        callout = (
            '<p style="margin: 8px 0; padding: 8px; background: #ebf8ff; border-radius: 4px; color: #2b6cb0;">'
            f"<strong>{escape(profile.brand)}:</strong> {escape(article.opportunity)}</p>"
        )
    return (
        '<div style="margin-bottom: 30px; padding: 15px; border-left: 3px solid #4A5568; '
        'background: #f7fafc; border-radius: 4px;">'
        f'<h3 style="margin: 0 0 5px 0; color: #1a202c;">{rank}. {escape(article.title)}</h3>'
        f'<p style="color: #718096; font-size: 13px; margin: 0 0 10px 0;">'
        f"Score: {article.score}/10 · {escape(tags)}</p>"
        f'<ul style="margin: 0 0 10px 0; color: #2d3748;">{bullets}</ul>'
        f'<p style="margin: 0 0 5px 0; color: #2d3748;"><strong>Why this matters:</strong> '
        f"{escape(article.why_matters)}</p>"
        f"{callout}"
        f'<p style="margin: 10px 0 0 0;"><a href="{escape(article.url)}" style="{_LINK_STYLE}">'
        "Read full article →</a></p>"
        "</div>"
    )
