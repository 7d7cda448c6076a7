"""
Services module for business logic separation.

- URLShorteningService: validate, dedup and store URLs, build short links
- RedirectService: decode tokens and look up the stored URL
"""

from shortener.services.redirect_service import RedirectService
from shortener.services.url_service import URLShorteningService, build_short_link

__all__ = ["RedirectService", "URLShorteningService", "build_short_link"]
