#!/usr/bin/env python3
"""Naming and topic helpers for bitbucket-to-github."""

import re
import string

UNCATEGORIZED = "uncategorized"
MAX_TOPIC_LENGTH = 50

# ASCII-only lowercasing; other characters are dropped by the charset filter
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_INVALID_TOPIC_CHARS = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def sanitize_topic(raw: str) -> str:
    """Turn a Bitbucket project name into a GitHub topic.

    GitHub topics must be lowercase, use hyphens instead of spaces, contain
    only a-z, 0-9 and hyphens, and be at most 50 characters. Characters that
    are neither spaces nor valid are deleted, not replaced. Truncation happens
    before edge hyphens are stripped, so the result can be shorter than 50.

    An empty result means no topic should be attached.
    """
    topic = raw.translate(_ASCII_LOWER)
    topic = topic.replace(" ", "-")
    topic = _INVALID_TOPIC_CHARS.sub("", topic)
    topic = _HYPHEN_RUNS.sub("-", topic)
    topic = topic[:MAX_TOPIC_LENGTH]
    return topic.strip("-")


def is_attachable_topic(topic: str) -> bool:
    """Empty topics and the uncategorized sentinel are never attached."""
    return bool(topic) and topic != UNCATEGORIZED


def repo_dir_from_clone_url(clone_url: str) -> str:
    """Return the local mirror directory name for a clone URL.

    Example: 'git@bitbucket.org:team/api.git' -> 'api.git'
    """
    trimmed = clone_url.rstrip("/")
    if "/" in trimmed:
        segment = trimmed.rsplit("/", 1)[-1]
    else:
        # scp-style URL without a path separator, e.g. host:repo.git
        segment = trimmed.rsplit(":", 1)[-1]
    if not segment:
        raise ValueError(f"cannot derive repository directory from '{clone_url}'")
    return segment


def github_name_from_dir(dirname: str) -> str:
    """Strip the trailing '.git' of a mirror directory name."""
    if dirname.endswith(".git") and len(dirname) > len(".git"):
        return dirname[: -len(".git")]
    return dirname
