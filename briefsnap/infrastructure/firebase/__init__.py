"""Firestore REST access, ID-token verification and repositories."""

from briefsnap.infrastructure.firebase.auth import AuthenticatedUser, FirebaseTokenVerifier
from briefsnap.infrastructure.firebase.client import close_firebase, init_firebase

__all__ = [
    "AuthenticatedUser",
    "FirebaseTokenVerifier",
    "close_firebase",
    "init_firebase",
]
