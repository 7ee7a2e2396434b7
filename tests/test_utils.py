"""Tests for topic sanitizing and mirror naming helpers."""

from __future__ import annotations

import re

import pytest

from utils import (github_name_from_dir, is_attachable_topic,
                   repo_dir_from_clone_url, sanitize_topic)

TOPIC_PATTERN = re.compile(r'^[a-z0-9]+(-[a-z0-9]+)*$')

SAMPLES = [
    '',
    'My Cool Project!!',
    '  --Multi   Space--  ',
    'UNCATEGORIZED',
    'snake_case_name',
    'Équipe Données',
    '---',
    'a' * 49 + ' b',
    'Platform / Infra (Legacy) 2019',
    'x' * 120,
    '   ',
    '日本語 project',
]


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('My Cool Project!!', 'my-cool-project'),
        ('  --Multi   Space--  ', 'multi-space'),
        ('', ''),
        ('UNCATEGORIZED', 'uncategorized'),
        ('snake_case_name', 'snakecasename'),
        ('Équipe Données', 'quipe-donnes'),
        ('Team Alpha', 'team-alpha'),
        ('---', ''),
    ],
)
def test_sanitize_topic_examples(raw: str, expected: str) -> None:
    """Known project names map to the expected topics."""
    assert sanitize_topic(raw) == expected


@pytest.mark.parametrize('raw', SAMPLES)
def test_sanitize_topic_is_idempotent(raw: str) -> None:
    once = sanitize_topic(raw)
    assert sanitize_topic(once) == once


@pytest.mark.parametrize('raw', SAMPLES)
def test_sanitize_topic_output_is_valid_topic(raw: str) -> None:
    topic = sanitize_topic(raw)
    assert len(topic) <= 50
    if topic:
        assert TOPIC_PATTERN.match(topic)


def test_sanitize_topic_truncates_before_stripping() -> None:
    """A hyphen left at position 50 by truncation is stripped afterwards."""
    raw = 'a' * 49 + ' b'
    assert sanitize_topic(raw) == 'a' * 49


def test_sanitize_topic_truncates_long_names() -> None:
    assert sanitize_topic('x' * 120) == 'x' * 50


@pytest.mark.parametrize(
    'topic, attachable',
    [('', False), ('uncategorized', False), ('team-alpha', True)],
)
def test_is_attachable_topic(topic: str, attachable: bool) -> None:
    assert is_attachable_topic(topic) is attachable


@pytest.mark.parametrize(
    'url, dirname',
    [
        ('git@bitbucket.org:ws/api.git', 'api.git'),
        ('git@src:/ns/repo.git', 'repo.git'),
        ('https://user@bitbucket.org/ws/web-app.git', 'web-app.git'),
        ('https://bitbucket.org/ws/plain/', 'plain'),
        ('git@host:solo.git', 'solo.git'),
    ],
)
def test_repo_dir_from_clone_url(url: str, dirname: str) -> None:
    assert repo_dir_from_clone_url(url) == dirname


def test_repo_dir_from_clone_url_rejects_empty_segment() -> None:
    with pytest.raises(ValueError):
        repo_dir_from_clone_url('git@host:')


def test_github_name_from_dir() -> None:
    assert github_name_from_dir('repo.git') == 'repo'
    assert github_name_from_dir('my.service.git') == 'my.service'
    assert github_name_from_dir('plain') == 'plain'
    assert github_name_from_dir('.git') == '.git'
