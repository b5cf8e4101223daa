from threading import local

from django.db import models

# Thread-local storage for current venue
_thread_locals = local()


def set_current_venue(venue):
    """
    Set the current venue for this thread.

    Args:
        venue: Venue instance or None to clear

    Called by VenueMiddleware to establish the venue context for a request.
    """
    _thread_locals.venue = venue


def get_current_venue():
    """
    Get the current venue for this thread.

    Returns:
        Venue instance or None if no venue context is set
    """
    return getattr(_thread_locals, 'venue', None)


class VenueManager(models.Manager):
    """
    Automatically filters querysets by the current venue.

    FAILS CLOSED: Returns empty queryset if no venue context is set.
    This prevents accidental data leakage across venues.

    Usage:
        class Order(models.Model):
            venue = models.ForeignKey('venues.Venue', on_delete=models.CASCADE)

            objects = VenueManager()  # Default manager (venue-filtered)
            all_objects = models.Manager()  # Bypass filter for background jobs

        # In view:
        orders = Order.objects.all()  # Automatically filtered by request.venue
    """

    def get_queryset(self):
        venue = get_current_venue()

        if venue:
            return super().get_queryset().filter(venue=venue)

        # FAIL CLOSED
        return super().get_queryset().none()
