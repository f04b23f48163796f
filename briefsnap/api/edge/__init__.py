"""Edge-function routes served next to the data API.

Moderation, social preview, rebuild webhook and identity-provider auth
proxy, plus sitemap.xml. They answer with the bodies and statuses the web
client and third parties already expect.
"""

from fastapi import APIRouter

from briefsnap.api.edge import auth_proxy, moderation, preview, sitemap_xml, webhook

edge_router = APIRouter()

edge_router.include_router(moderation.router, tags=["edge"])
edge_router.include_router(preview.router, tags=["edge"])
edge_router.include_router(webhook.router, tags=["edge"])
edge_router.include_router(auth_proxy.router, tags=["edge"])
edge_router.include_router(sitemap_xml.router, tags=["edge"])

__all__ = ["edge_router"]
