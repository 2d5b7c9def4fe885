"""Digest profiles: the feeds, keywords and prompt wording of one briefing variant."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DigestProfile:
    """Everything that differs between briefing variants; the pipeline logic does not."""

    name: str
    digest_title: str
    subject_prefix: str
    brand: str
    analyst_role: str
    audience: str
    focus_areas: tuple[str, ...]
    priority_areas: tuple[str, ...]
    ignore_areas: tuple[str, ...]
    feeds: tuple[str, ...]
    keywords: tuple[str, ...] = ()


_GOOGLE_ALERTS = "https://www.google.com/alerts/feeds/09449303513221250695"

AI_GOVERNANCE = DigestProfile(
    name="ai_governance",
    digest_title="Daily AI Governance Intelligence Brief",
    subject_prefix="AI Governance Brief",
    brand="RouteAI",
    analyst_role=(
        "You are my AI Governance Intelligence Analyst for RouteAI, a platform helping "
        "Dutch SMEs comply with the EU AI Act."
    ),
    audience="an AI governance consultant serving Dutch SMEs",
    focus_areas=(
        "EU AI Act implementation, deadlines, enforcement updates",
        "ISO/IEC 42001 & 42005 certification developments",
        "NIST AI RMF updates",
        "AI risk governance frameworks",
        "Dutch/European SME AI adoption and compliance",
        "AI literacy and training requirements",
        "Regulatory enforcement actions or fines",
        "EDIH network developments in Netherlands",
        "AI governance job market signals",
    ),
    priority_areas=(
        "Dutch or European AI regulation",
        "SME/MKB AI compliance challenges",
        "AI governance tools or frameworks",
        "ISO 42001 certification guidance",
        "Practical AI implementation for non-technical organizations",
        "Shadow IT and AI tool governance in workplaces",
    ),
    ignore_areas=(
        "US-only policy (unless directly relevant to EU)",
        "General AI product launches without governance angle",
        "Hype, marketing, press releases",
        "Shallow opinion without substance",
        "Consumer AI apps (ChatGPT features, etc.)",
        "AI art, entertainment, gaming",
    ),
    feeds=(
        # Google Alerts: AI governance jobs
        f"{_GOOGLE_ALERTS}/712363126844262138",
        f"{_GOOGLE_ALERTS}/8360176497618448162",
        f"{_GOOGLE_ALERTS}/8360176497618447048",
        f"{_GOOGLE_ALERTS}/16104860397407571115",
        f"{_GOOGLE_ALERTS}/712363126844260895",
        f"{_GOOGLE_ALERTS}/10529135105258354989",
        # AI regulation
        f"{_GOOGLE_ALERTS}/10002060156204656018",
        # Negative alerts, still monitored
        f"{_GOOGLE_ALERTS}/17057346079060550580",
        f"{_GOOGLE_ALERTS}/18323230671601558587",
        # AI compliance NL
        f"{_GOOGLE_ALERTS}/8058027391759189925",
        # AI risk
        f"{_GOOGLE_ALERTS}/1576620731540475628",
        # AI wet Nederland
        f"{_GOOGLE_ALERTS}/8506129854880045759",
        # AI law firms
        f"{_GOOGLE_ALERTS}/10002060156204655808",
        # Shadow IT
        f"{_GOOGLE_ALERTS}/451554340955659707",
        # EC AI Act
        f"{_GOOGLE_ALERTS}/9227181759097594092",
        # AI industry impact
        f"{_GOOGLE_ALERTS}/13385062984594143224",
        # AI workplace governance
        f"{_GOOGLE_ALERTS}/7124011456707508388",
        # ISO 42001
        f"{_GOOGLE_ALERTS}/2164771014014474126",
        # EU AI Act
        f"{_GOOGLE_ALERTS}/3370223869929194536",
        f"{_GOOGLE_ALERTS}/14759970723841580188",
        # Additional sources
        "https://digital-strategy.ec.europa.eu/en/rss.xml",
        "https://www.nist.gov/news-events/news/rss.xml",
        "https://artificialintelligence-news.com/feed/",
        "https://www.technologyreview.com/feed/",
    ),
    # Recall-biased: broad stems so the pre-filter only drops clearly off-topic items.
    keywords=(
        "ai act",
        "artificial intelligence",
        "ai governance",
        "governance",
        "complian",
        "regulat",
        "iso 42001",
        "42001",
        "nist",
        "risk",
        "shadow it",
        "ai literacy",
        "toezicht",
        "wetgeving",
        "algoritme",
    ),
)

PROFILES: dict[str, DigestProfile] = {
    AI_GOVERNANCE.name: AI_GOVERNANCE,
}

DEFAULT_PROFILE = AI_GOVERNANCE.name


def get_profile(name: str) -> DigestProfile:
    """Return the registered profile with this name, or raise KeyError."""
    try:
        return PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise KeyError(f"Unknown digest profile {name!r}; known profiles: {known}") from None
