"""FormGuard: contact-form validation core."""

__version__ = "0.1.0"
