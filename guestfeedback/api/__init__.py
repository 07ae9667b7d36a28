"""
API routers
"""

from guestfeedback.api import (  # noqa: F401
    admin,
    auth,
    forms,
    hotels,
    notifications,
    payment_methods,
    public,
    reviews,
    users,
    webhooks,
)
