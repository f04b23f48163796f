"""Shared constants: cache key format, query sizes, content defaults."""

# Cache keys: "<prefix>:<discriminator>"; components must not contain the separator.
CACHE_KEY_SEP = ":"

# Query sizes
ARTICLES_PER_PAGE = 10
SITEMAP_ARTICLE_LIMIT = 1000
READING_HISTORY_LIMIT = 100
RELATED_ARTICLES_LIMIT = 3
RELATED_RECENT_CANDIDATES = 5
POPULAR_VIEW_RATIO = 0.5

DEFAULT_ARTICLE_DESCRIPTION = "Read this article on BriefSnap"
NO_SUMMARY_MESSAGE = "No summaries available. Please check back later."

# Location search
LOCATION_QUERY_MIN_LENGTH = 2
LOCATION_SUGGESTION_LIMIT = 5
LOCATION_SEARCH_DEBOUNCE_SECONDS = 0.3

# Weather payload slices
WEATHER_HOURLY_POINTS = 24
WEATHER_DAILY_POINTS = 5
