from django.dispatch import Signal

# Custom payment signals, sent after the database transaction commits.
# Receivers get: payment, order
payment_processed = Signal()
payment_refunded = Signal()
