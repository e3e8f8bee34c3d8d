"""
Synthetic feed items.

These catalogs keep the application usable when no live feed can be
reached: the fetcher falls back to them, and the relevance filter uses the
regional catalog when a regional query matches nothing in the pool.  The
functions are pure apart from reading the clock, and never raise.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..models.schemas import FeedItem, Sentiment

MOCK_SOURCES = ["BBC News", "CNN", "Reuters", "The Guardian", "Nation Africa", "Standard Media"]

# Lower-cased terms that mark a query as regional.
REGIONAL_TRIGGER_TERMS = ("kenya", "nairobi", "ruto", "mombasa", "kisumu", "east africa")


def is_regional_query(query: Optional[str]) -> bool:
    if not query:
        return False
    term = query.strip().lower()
    return any(trigger in term for trigger in REGIONAL_TRIGGER_TERMS)


def _timestamps():
    today = datetime.now(timezone.utc)
    yesterday = today - timedelta(days=1)
    return today.isoformat(), yesterday.isoformat()


def generate_mock_items() -> List[FeedItem]:
    """Return the general fallback catalog (six items, newest first where dates differ)."""
    today, yesterday = _timestamps()
    return [
        FeedItem(
            id="mock-1",
            title="Kenya's Tech Industry Sees Surge in Investment",
            description=(
                "Kenya's technology sector has attracted over $100 million in new investments over the past "
                "quarter, signaling growing confidence in the country's digital economy."
            ),
            content=(
                "Kenya's technology sector has attracted over $100 million in new investments over the past "
                "quarter, signaling growing confidence in the country's digital economy. Startups focusing on "
                "fintech, agritech and healthtech have seen particular interest from international investors."
            ),
            link="https://example.com/kenya-tech",
            source=MOCK_SOURCES[0],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/2559941/pexels-photo-2559941.jpeg",
            publish_date=today,
            sentiment=Sentiment.POSITIVE,
        ),
        FeedItem(
            id="mock-2",
            title="Climate Change Impacts East African Agriculture",
            description=(
                "Farmers across East Africa are adapting to changing weather patterns with new techniques "
                "and crop varieties."
            ),
            content=(
                "Farmers across East Africa are adapting to changing weather patterns with new techniques and "
                "crop varieties. Government initiatives are supporting these transitions with training and "
                "subsidized equipment."
            ),
            link="https://example.com/climate-agriculture",
            source=MOCK_SOURCES[1],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/2280549/pexels-photo-2280549.jpeg",
            publish_date=yesterday,
            sentiment=Sentiment.NEUTRAL,
        ),
        FeedItem(
            id="mock-3",
            title="New Infrastructure Project to Connect East African Nations",
            description=(
                "A major transportation corridor is being developed to facilitate trade between Kenya, "
                "Uganda, and Tanzania."
            ),
            content=(
                "A major transportation corridor is being developed to facilitate trade between Kenya, Uganda, "
                "and Tanzania. The project includes highways, railways, and digital infrastructure to boost "
                "regional commerce."
            ),
            link="https://example.com/infrastructure",
            source=MOCK_SOURCES[2],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/1134166/pexels-photo-1134166.jpeg",
            publish_date=yesterday,
            sentiment=Sentiment.POSITIVE,
        ),
        FeedItem(
            id="mock-4",
            title="Healthcare Innovation Challenge Launched in Nairobi",
            description=(
                "A new initiative aims to find technological solutions to healthcare access challenges in "
                "rural Kenya."
            ),
            content=(
                "A new initiative aims to find technological solutions to healthcare access challenges in rural "
                "Kenya. The program will provide funding and mentorship to selected projects with potential for "
                "national scale."
            ),
            link="https://example.com/healthcare",
            source=MOCK_SOURCES[3],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/5214949/pexels-photo-5214949.jpeg",
            publish_date=today,
            sentiment=Sentiment.NEGATIVE,
        ),
        FeedItem(
            id="mock-5",
            title="Educational Reforms Target Digital Literacy",
            description=(
                "Kenya's education ministry announces comprehensive plan to integrate technology skills across "
                "all levels of education."
            ),
            content=(
                "Kenya's education ministry announces comprehensive plan to integrate technology skills across "
                "all levels of education. The initiative aims to prepare students for an increasingly digital "
                "job market."
            ),
            link="https://example.com/education",
            source=MOCK_SOURCES[4],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/8471799/pexels-photo-8471799.jpeg",
            publish_date=yesterday,
            sentiment=Sentiment.POSITIVE,
        ),
        FeedItem(
            id="mock-6",
            title="Tourism Recovery Efforts Show Promising Results",
            description=(
                "Kenya's tourism sector reports significant growth as international travel restrictions ease."
            ),
            content=(
                "Kenya's tourism sector reports significant growth as international travel restrictions ease. "
                "New marketing campaigns and sustainability initiatives are attracting visitors back to the "
                "country's parks and beaches."
            ),
            link="https://example.com/tourism",
            source=MOCK_SOURCES[5],
            source_url="https://example.com",
            image_url="https://images.pexels.com/photos/19351937/pexels-photo-19351937.jpeg",
            publish_date=today,
            sentiment=Sentiment.POSITIVE,
        ),
    ]


def generate_regional_mock_items(topic: Optional[str] = None) -> List[FeedItem]:
    """
    Return the Kenya-oriented catalog used for regional queries.

    ``topic`` only labels the catalog in its item links so the UI can show
    which query produced it; the content is fixed.
    """
    today, yesterday = _timestamps()
    slug = "-".join((topic or "kenya").strip().lower().split()) or "kenya"
    entries = [
        (
            "President William Ruto Launches National Housing Programme",
            "President William Ruto has launched an affordable housing programme expected to deliver "
            "thousands of units across Nairobi and other major towns.",
            "Nation Africa",
            "https://nation.africa",
            today,
            Sentiment.POSITIVE,
        ),
        (
            "Nairobi Securities Exchange Posts Quarterly Gains",
            "Shares on the Nairobi Securities Exchange rose during the quarter as banking and telecom "
            "stocks attracted renewed investor interest.",
            "Business Daily",
            "https://www.businessdailyafrica.com",
            today,
            Sentiment.POSITIVE,
        ),
        (
            "Kenya Expands Renewable Energy Capacity in the Rift Valley",
            "New geothermal wells in the Rift Valley are set to add significant capacity to Kenya's "
            "national grid over the coming year.",
            "Standard Media",
            "https://www.standardmedia.co.ke",
            yesterday,
            Sentiment.NEUTRAL,
        ),
        (
            "Farmers in Western Kenya Brace for Long Rains",
            "Meteorologists warn of heavy rainfall in western Kenya, prompting county governments to "
            "prepare flood response plans for farming communities.",
            "Citizen Digital",
            "https://www.citizen.digital",
            yesterday,
            Sentiment.NEGATIVE,
        ),
        (
            "Mombasa Port Records Higher Cargo Volumes",
            "The Kenya Ports Authority reports higher cargo throughput at Mombasa as regional trade "
            "with Uganda and Rwanda continues to recover.",
            "The Star Kenya",
            "https://www.the-star.co.ke",
            yesterday,
            Sentiment.POSITIVE,
        ),
    ]
    items: List[FeedItem] = []
    for index, (title, description, source, source_url, published, sentiment) in enumerate(entries, start=1):
        items.append(
            FeedItem(
                id=f"kenya-mock-{index}",
                title=title,
                description=description,
                content=description,
                link=f"https://example.com/{slug}/{index}",
                source=source,
                source_url=source_url,
                publish_date=published,
                sentiment=sentiment,
            )
        )
    return items


def fallback_subset(items: List[FeedItem]) -> List[FeedItem]:
    """Every third record of ``items``; what a feed with no reachable transport contributes."""
    return [item for index, item in enumerate(items) if index % 3 == 0]
