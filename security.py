#!/usr/bin/env python3
"""Security validation utilities for bitbucket-to-github."""

import os
import re
from typing import List, Optional


class SecurityValidator:
    """Security validation utilities for input sanitization and validation."""

    MAX_REPO_NAME_LENGTH = 100
    MAX_URL_LENGTH = 2048
    MAX_USERNAME_LENGTH = 255
    MAX_SLUG_LENGTH = 100
    MAX_PATH_LENGTH = 500

    SAFE_REPO_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
    # Bitbucket usernames are frequently e-mail addresses
    SAFE_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9._+@-]+$")
    SAFE_SLUG_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    @staticmethod
    def _has_control_chars(value: str) -> bool:
        return "\x00" in value or any(ord(c) < 32 for c in value)

    @classmethod
    def validate_repo_name(cls, name: str) -> str:
        """Validate a GitHub repository name derived from a clone URL."""
        if not name or not isinstance(name, str):
            raise ValueError("Repository name must be a non-empty string")

        if len(name) > cls.MAX_REPO_NAME_LENGTH:
            raise ValueError(
                f"Repository name exceeds maximum length of {cls.MAX_REPO_NAME_LENGTH}"
            )

        if ".." in name or "/" in name or "\\" in name:
            raise ValueError("Repository name contains invalid path characters")

        if cls._has_control_chars(name):
            raise ValueError(
                "Repository name contains null bytes or control characters"
            )

        if not cls.SAFE_REPO_NAME_PATTERN.match(name):
            raise ValueError(f"Repository name contains invalid characters: {name}")

        return name

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate an API or clone URL.

        scp-style ``git@host:path`` and ``ssh://`` URLs are reported as the
        ``ssh`` scheme.
        """
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        if cls._has_control_chars(url):
            raise ValueError("URL contains null bytes or control characters")

        if url.startswith("git@") or url.lower().startswith("ssh://"):
            scheme = "ssh"
        elif url.lower().startswith(("http://", "https://")):
            scheme = url.split("://")[0].lower()
        else:
            raise ValueError("URL must use http, https, or SSH (git@) scheme")

        if allowed_schemes and scheme not in allowed_schemes:
            raise ValueError(
                f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
            )

        return url

    @classmethod
    def validate_username(cls, username: str) -> str:
        """Validate a Bitbucket username or e-mail."""
        if not username or not isinstance(username, str):
            raise ValueError("Username must be a non-empty string")

        if len(username) > cls.MAX_USERNAME_LENGTH:
            raise ValueError(
                f"Username exceeds maximum length of {cls.MAX_USERNAME_LENGTH}"
            )

        if cls._has_control_chars(username):
            raise ValueError("Username contains null bytes or control characters")

        if not cls.SAFE_USERNAME_PATTERN.match(username):
            raise ValueError("Username contains invalid characters")

        return username

    @classmethod
    def validate_slug(cls, slug: str, kind: str = "Slug") -> str:
        """Validate a workspace, organization or team identifier."""
        if not slug or not isinstance(slug, str):
            raise ValueError(f"{kind} must be a non-empty string")

        if len(slug) > cls.MAX_SLUG_LENGTH:
            raise ValueError(f"{kind} exceeds maximum length of {cls.MAX_SLUG_LENGTH}")

        if cls._has_control_chars(slug):
            raise ValueError(f"{kind} contains null bytes or control characters")

        if ".." in slug:
            raise ValueError(f"{kind} contains path traversal sequences")

        if not cls.SAFE_SLUG_PATTERN.match(slug):
            raise ValueError(f"{kind} contains invalid characters")

        return slug

    @classmethod
    def validate_file_path(cls, path: str) -> str:
        """Validate a local file or directory path and return it normalized."""
        if not path or not isinstance(path, str):
            raise ValueError("File path must be a non-empty string")

        if len(path) > cls.MAX_PATH_LENGTH:
            raise ValueError(
                f"File path exceeds maximum length of {cls.MAX_PATH_LENGTH}"
            )

        if "\x00" in path:
            raise ValueError("File path contains null bytes")

        return os.path.normpath(path)

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        patterns = [
            (r"https://[^:/@\s]+:[^@\s]+@", "https://[REDACTED]@"),  # URLs with credentials
            (r"(?<![a-z0-9])(token|password)\s*[=:]\s*\S+", r"\1=[REDACTED]"),  # assignments only
            (r"ATBB[A-Za-z0-9_=-]+", "[BITBUCKET_TOKEN_REDACTED]"),  # app passwords
            (r"ATATT[A-Za-z0-9_=-]+", "[ATLASSIAN_TOKEN_REDACTED]"),  # API tokens
            (r"gh[pousr]_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
            (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        ]

        sanitized = message
        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
