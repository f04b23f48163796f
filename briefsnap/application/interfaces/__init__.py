"""Ports implemented by the infrastructure layer."""

from briefsnap.application.interfaces.repositories import (
    IArticleRepository,
    ICommentRepository,
    ISummaryRepository,
    IUserRepository,
)
from briefsnap.application.interfaces.services import (
    ICalendarGateway,
    IDeploymentTrigger,
    IModerationClient,
    IWeatherClient,
)

__all__ = [
    "IArticleRepository",
    "ICalendarGateway",
    "ICommentRepository",
    "IDeploymentTrigger",
    "IModerationClient",
    "ISummaryRepository",
    "IUserRepository",
    "IWeatherClient",
]
