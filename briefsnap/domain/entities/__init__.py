"""Typed records for database documents and third-party payloads."""

from briefsnap.domain.entities.article import Article, SitemapEntry
from briefsnap.domain.entities.calendar import CalendarEvent
from briefsnap.domain.entities.comment import Comment
from briefsnap.domain.entities.summary import ArticleSummary, NewsSummary, SummaryType
from briefsnap.domain.entities.user import ReadingHistoryItem, UserPreferences
from briefsnap.domain.entities.weather import LocationSuggestion, WeatherReport

__all__ = [
    "Article",
    "ArticleSummary",
    "CalendarEvent",
    "Comment",
    "LocationSuggestion",
    "NewsSummary",
    "ReadingHistoryItem",
    "SitemapEntry",
    "SummaryType",
    "UserPreferences",
    "WeatherReport",
]
