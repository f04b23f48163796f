"""Firestore repository implementations."""

from briefsnap.infrastructure.firebase.repositories.article_repo_firestore import (
    FirestoreArticleRepository,
)
from briefsnap.infrastructure.firebase.repositories.comment_repo_firestore import (
    FirestoreCommentRepository,
)
from briefsnap.infrastructure.firebase.repositories.summary_repo_firestore import (
    FirestoreSummaryRepository,
)
from briefsnap.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)

__all__ = [
    "FirestoreArticleRepository",
    "FirestoreCommentRepository",
    "FirestoreSummaryRepository",
    "FirestoreUserRepository",
]
