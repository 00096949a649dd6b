"""Linear ticket provider."""

from sprout.infrastructure.linear.client import LINEAR_API_URL, LinearClient, parse_issue

__all__ = [
    "LINEAR_API_URL",
    "LinearClient",
    "parse_issue",
]
