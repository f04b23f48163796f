"""Firestore collection and field names (schema-in-code).

Firestore has no DDL; these constants are the single source of truth for
the collections the service reads and writes.
"""

COLLECTION_ARTICLES = "articles"
COLLECTION_COMMENTS = "comments"
COLLECTION_NEWS_SUMMARIES = "news_summaries"
COLLECTION_ARTICLE_SUMMARIES = "article_summaries"
COLLECTION_USERS = "users"
COLLECTION_READING_HISTORY = "reading_history"

FIELD_TIMESTAMP = "timestamp"
FIELD_VIEW_COUNT = "viewCount"
FIELD_DOCUMENT_NAME = "__name__"
