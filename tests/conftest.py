"""
Shared test configuration for distillery.

Provides HTML fixtures (a clean article, the same article beside page
chrome) and a document factory with a fixed snapshot time so rendered
output is reproducible.
"""

from datetime import datetime, timezone
from typing import Callable

import pytest

from distillery.dom import Document

CAPTURED_AT = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)
ARTICLE_URL = "https://example.com/news/salt-in-the-delta"
ARTICLE_TITLE = "Salt in the Delta"

PARAGRAPHS = (
    "The river delta has changed more in the last decade than in the previous century of recorded observation. "
    "Farmers who once planted rice along the southern banks now grow salt tolerant shrimp in flooded ponds. "
    "Engineers blame a combination of upstream dams, sand mining and rising seas for the rapid shift in soil "
    "chemistry. Local officials have responded with a patchwork of dikes and sluice gates that rarely work "
    "together as intended. Residents describe the result as a landscape that floods in the wrong places while "
    "drying out where water is needed most. Scientists at the regional university have spent five years "
    "measuring salinity at more than two hundred monitoring wells across the province. Their data suggest the "
    "saltwater front advances roughly one kilometer inland every year during the dry season months. Families "
    "living near the coast say they can taste the difference in their drinking water by early March.",
    "Adapting to these conditions requires money, patience and a willingness to abandon methods that sustained "
    "villages for generations. A cooperative in one coastal district pooled savings from forty households to buy "
    "solar pumps and lined storage tanks. Members rotate responsibility for checking water quality each morning "
    "and record their readings in a shared notebook kept at the temple. When salinity rises above a threshold, "
    "the group switches irrigation to stored rainwater until the tide pattern changes again. Yields from this "
    "approach have stayed stable while neighboring farms lost nearly a third of their harvest in recent "
    "droughts. Agricultural extension workers now bring visitors from other provinces to study how the "
    "cooperative organizes its schedule and finances. Critics note that such projects depend heavily on trust, "
    "which cannot simply be shipped to another community along with equipment. Still, the model shows that "
    "careful local coordination can soften the worst effects of a changing environment.",
    "National planners are drafting a strategy that would concentrate future investment in fewer, larger "
    "infrastructure projects near major cities. Supporters argue that scale brings efficiency and clearer "
    "accountability when gates or embankments fail during heavy storms. Opponents worry that remote hamlets "
    "will be left to manage alone, without the technical help that made earlier pilots succeed. Several "
    "provincial leaders have asked for a hybrid plan that funds both regional barriers and small community "
    "water systems. Whatever approach wins approval, experts agree that decisions made over the next few years "
    "will shape the delta for decades. Young people weighing whether to stay or migrate are watching the debate "
    "closely, knowing their livelihoods hang in the balance. In the end, the fate of the delta depends on "
    "whether policy can keep pace with the water itself.",
)

TRENDING_LINKS = (
    "Storm season forecast for the coast",
    "Ten recipes with river shrimp",
    "Election results by province",
    "Why ferries keep running late",
)


def article_markup(title: str = ARTICLE_TITLE, extra: str = "") -> str:
    body = "".join(f"<p>{p}</p>" for p in PARAGRAPHS)
    return f"<article><h1>{title}</h1>{body}{extra}</article>"


def trending_aside() -> str:
    items = "".join(f'<li><a href="/story/{i}">{text}</a></li>' for i, text in enumerate(TRENDING_LINKS))
    return f'<aside class="trending"><h3>Trending</h3><ul>{items}</ul></aside>'


def page(body: str, title: str = ARTICLE_TITLE) -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture
def paragraphs():
    """The three article paragraphs, about 150 words each."""
    return PARAGRAPHS


@pytest.fixture
def clean_article_html() -> str:
    """An <article> with an h1 and three long paragraphs, nothing else."""
    return page(article_markup())


@pytest.fixture
def sidebar_article_html() -> str:
    """The clean article beside a site nav and a trending-links aside."""
    nav = '<nav class="menu"><a href="/">Home</a><a href="/world">World</a><a href="/science">Science</a></nav>'
    return page(nav + article_markup() + trending_aside())


@pytest.fixture
def article_page() -> Callable[..., str]:
    """Builds a page around the article: markup before/after it and extra markup inside it."""

    def _build(before: str = "", after: str = "", extra: str = "", title: str = ARTICLE_TITLE) -> str:
        return page(before + article_markup(title, extra) + after, title)

    return _build


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory for documents with a fixed URL and snapshot time."""

    def _make(html: str, **kwargs) -> Document:
        kwargs.setdefault("url", ARTICLE_URL)
        kwargs.setdefault("captured_at", CAPTURED_AT)
        return Document.from_html(html, **kwargs)

    return _make
