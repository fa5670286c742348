"""User-authorization prompts.

A prompt receives the authorization URL once and shows it to the user. The
host application is responsible for collecting the verifier or code the
user is given afterwards and passing it to the next flow step.
"""

import sys
import webbrowser
from typing import Protocol, TextIO

from structlog import get_logger


logger = get_logger(__name__)


class AuthorizationPrompt(Protocol):
    """Notification that user authorization is needed at ``url``."""

    def __call__(self, url: str) -> None: ...


class ConsolePrompt:
    """Print the authorization link for the user to open manually."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def __call__(self, url: str) -> None:
        print("Open this URL in a browser and grant access:", file=self.stream)
        print(url, file=self.stream)
        print("Then enter the verification code shown.", file=self.stream)


class BrowserPrompt:
    """Open the authorization URL in the system default browser.

    Falls back to printing the link when no browser can be launched.
    """

    def __init__(self, fallback: AuthorizationPrompt | None = None):
        self.fallback = fallback or ConsolePrompt()

    def __call__(self, url: str) -> None:
        logger.info("oauth_browser_opening", auth_url=url)
        if not webbrowser.open(url):
            logger.info(
                "oauth_manual_url",
                message="If browser doesn't open, visit this URL",
                auth_url=url,
            )
            self.fallback(url)
