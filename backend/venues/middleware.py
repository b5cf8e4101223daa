import logging
import uuid

from django.conf import settings
from django.http import JsonResponse

from .managers import set_current_venue
from .models import Venue

logger = logging.getLogger(__name__)


class VenueNotFoundError(Exception):
    """Raised when the venue cannot be resolved from the request."""
    pass


def _meta_key(header_name):
    return "HTTP_" + header_name.upper().replace("-", "_")


class VenueMiddleware:
    """
    Resolves the identity context for API requests.

    The upstream gateway authenticates staff and forwards two headers:
    - venue header (X-Venue-ID by default): venue UUID or slug
    - staff header (X-Staff-ID by default): opaque staff identifier

    Sets request.venue and request.staff_id, and the thread-local venue used
    by VenueManager. The thread-local is ALWAYS cleared after the response.
    """

    exempt_prefixes = ("/api/health/",)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.venue = None
        request.staff_id = request.META.get(_meta_key(settings.STAFF_HEADER)) or None

        if not request.path.startswith("/api/") or request.path.startswith(self.exempt_prefixes):
            set_current_venue(None)
            return self.get_response(request)

        try:
            venue = self.get_venue_from_request(request)
            request.venue = venue

            # CRITICAL: Set thread-local context for VenueManager
            set_current_venue(venue)

            if not venue.is_active:
                logger.warning(f"Rejected request for inactive venue {venue.slug}")
                return JsonResponse({
                    'error': 'Venue is inactive',
                    'code': 'VENUE_INACTIVE'
                }, status=403)

            return self.get_response(request)

        except VenueNotFoundError as e:
            return JsonResponse({
                'error': str(e),
                'code': 'VENUE_NOT_FOUND'
            }, status=400)

        finally:
            # CRITICAL: Always clean up thread-local context
            set_current_venue(None)

    def get_venue_from_request(self, request):
        header_value = request.META.get(_meta_key(settings.VENUE_HEADER), "").strip()
        if not header_value:
            raise VenueNotFoundError(f"{settings.VENUE_HEADER} header is required")

        try:
            venue_id = uuid.UUID(header_value)
        except ValueError:
            venue_id = None

        lookup = {"id": venue_id} if venue_id else {"slug": header_value}
        try:
            return Venue.objects.get(**lookup)
        except Venue.DoesNotExist:
            raise VenueNotFoundError(f"Venue '{header_value}' not found")
