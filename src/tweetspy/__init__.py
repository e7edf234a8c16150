"""Command core for an instant-messaging bot driving a social-media account."""

__version__ = "0.4.0"
