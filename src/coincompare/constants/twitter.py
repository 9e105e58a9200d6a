"""Twitter/X follower lookup constants."""

from typing import Final

TWITTER_API_BASE_URL: Final[str] = "https://api.twitter.com"
TWITTER_API_TIMEOUT_SECONDS: Final[float] = 10.0

MOBILE_PROFILE_URL: Final[str] = "https://mobile.twitter.com/{handle}"
MOBILE_USER_AGENT: Final[str] = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_7_1 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/14.1.2 Mobile/15E148 Safari/604.1"
)
MOBILE_VIEWPORT: Final[dict[str, int]] = {"width": 390, "height": 844}

SUSPENDED_SELECTOR: Final[str] = 'div[data-testid="emptyState"]'
SUSPENDED_TEXT: Final[str] = "Account suspended"
FOLLOWERS_SELECTORS: Final[tuple[str, ...]] = ('a[href$="verified_followers"]',)
FOLLOWERS_SELECTOR_TIMEOUT_MS: Final[int] = 5000
CONTENT_SETTLE_MS: Final[int] = 3000
