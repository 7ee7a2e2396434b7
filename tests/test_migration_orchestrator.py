"""Tests for MigrationOrchestrator."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock, call

from config import (CloneMethod, GitHubConfig, MigrationBehaviorConfig,
                    MigratorConfig)
from exceptions import GitCommandError, MigrationError
from migration_orchestrator import (EXIT_EXECUTION_ERROR, EXIT_SUCCESS,
                                    MigrationOrchestrator)
from models import RepositoryRecord

RECORD = {
    'clone_url': 'git@src:/ns/repo.git',
    'project_name': 'Team Alpha',
    'repository_name': 'repo',
    'full_name': 'ns/repo',
}


def _write_input(tmp_path: Path, entries: List[Dict[str, str]]) -> str:
    path = tmp_path / 'bitbucket_repos.json'
    path.write_text(json.dumps(entries), encoding='utf-8')
    return str(path)


def _make_config(tmp_path: Path, input_path: str, **behavior) -> MigratorConfig:
    return MigratorConfig(
        github=GitHubConfig(
            api_url='https://api.github.com',
            token='gh-token',
            org='Four-Agency',
            team='CTU',
        ),
        behavior=MigrationBehaviorConfig(
            input_path=input_path,
            workdir=str(tmp_path / 'mirrors'),
            **behavior,
        ),
    )


def _make_orchestrator(tmp_path: Path, entries: List[Dict[str, str]], **behavior):
    cfg = _make_config(tmp_path, _write_input(tmp_path, entries), **behavior)
    target = MagicMock()
    target.remote_url.side_effect = lambda name: f'git@github.com:Four-Agency/{name}'
    mirror = MagicMock()
    mirror.clone.side_effect = lambda url: tmp_path / 'mirrors' / url.rsplit('/', 1)[-1]
    return MigrationOrchestrator(cfg, target=target, mirror=mirror), target, mirror


def test_end_to_end_single_record(tmp_path: Path) -> None:
    """One record drives repo creation, topic, remotes and a mirror push."""
    orchestrator, target, mirror = _make_orchestrator(tmp_path, [RECORD])
    repo_dir = tmp_path / 'mirrors' / 'repo.git'

    assert orchestrator.run() == EXIT_SUCCESS

    target.connect.assert_called_once()
    mirror.clone.assert_called_once_with('git@src:/ns/repo.git')
    target.create_repo.assert_called_once_with('repo', private=True, team='CTU')
    target.add_topic.assert_called_once_with('repo', 'team-alpha')
    mirror.set_origin.assert_called_once_with(repo_dir, 'git@github.com:Four-Agency/repo')
    mirror.add_remote.assert_called_once_with(repo_dir, 'bitbucket', 'git@src:/ns/repo.git')
    mirror.push_mirror.assert_called_once_with(repo_dir, 'origin', env=None)


def test_migrate_returns_result(tmp_path: Path) -> None:
    orchestrator, _, _ = _make_orchestrator(tmp_path, [])

    result = orchestrator.migrate(RepositoryRecord.from_dict(RECORD))

    assert result.ok
    assert result.github_name == 'repo'
    assert result.topic == 'team-alpha'


def test_uncategorized_and_empty_topics_are_not_attached(tmp_path: Path) -> None:
    entries = [
        dict(RECORD, clone_url='git@src:/ns/a.git', project_name='uncategorized'),
        dict(RECORD, clone_url='git@src:/ns/b.git', project_name='UNCATEGORIZED'),
        dict(RECORD, clone_url='git@src:/ns/c.git', project_name='!!!'),
    ]
    orchestrator, target, _ = _make_orchestrator(tmp_path, entries)

    assert orchestrator.run() == EXIT_SUCCESS

    assert target.create_repo.call_count == 3
    target.add_topic.assert_not_called()


def test_first_failure_stops_batch(tmp_path: Path) -> None:
    entries = [
        dict(RECORD, clone_url='git@src:/ns/a.git'),
        dict(RECORD, clone_url='git@src:/ns/b.git'),
    ]
    orchestrator, target, mirror = _make_orchestrator(tmp_path, entries)
    target.create_repo.side_effect = MigrationError('already exists')

    assert orchestrator.run() == EXIT_EXECUTION_ERROR

    mirror.clone.assert_called_once_with('git@src:/ns/a.git')
    mirror.push_mirror.assert_not_called()


def test_continue_on_error_reports_every_record(tmp_path: Path) -> None:
    entries = [
        dict(RECORD, clone_url='git@src:/ns/a.git'),
        dict(RECORD, clone_url='git@src:/ns/b.git'),
    ]
    orchestrator, _, mirror = _make_orchestrator(
        tmp_path, entries, continue_on_error=True
    )
    mirror.push_mirror.side_effect = [GitCommandError(['git', 'push'], 1, 'rejected'), None]

    records = [
        RepositoryRecord.from_dict(entry) for entry in entries
    ]
    results = orchestrator.migrate_all(records)

    assert [r.ok for r in results] == [False, True]
    assert 'rejected' in results[0].error
    assert mirror.clone.call_args_list == [call('git@src:/ns/a.git'), call('git@src:/ns/b.git')]


def test_continue_on_error_run_exit_code(tmp_path: Path) -> None:
    entries = [
        dict(RECORD, clone_url='git@src:/ns/a.git'),
        dict(RECORD, clone_url='git@src:/ns/b.git'),
    ]
    orchestrator, target, mirror = _make_orchestrator(
        tmp_path, entries, continue_on_error=True
    )
    target.create_repo.side_effect = [MigrationError('boom'), None]

    assert orchestrator.run() == EXIT_EXECUTION_ERROR
    assert mirror.push_mirror.call_count == 1


def test_invalid_repo_name_fails_before_clone(tmp_path: Path) -> None:
    orchestrator, _, mirror = _make_orchestrator(
        tmp_path, [dict(RECORD, clone_url='git@src:/ns/bad name.git')]
    )

    assert orchestrator.run() == EXIT_EXECUTION_ERROR
    mirror.clone.assert_not_called()


def test_https_push_uses_askpass_environment(tmp_path: Path) -> None:
    orchestrator, _, mirror = _make_orchestrator(
        tmp_path, [RECORD], push_method=CloneMethod.HTTPS
    )

    assert orchestrator.run() == EXIT_SUCCESS

    env = mirror.push_mirror.call_args.kwargs['env']
    assert env['GIT_TERMINAL_PROMPT'] == '0'
    assert 'GIT_ASKPASS' in env


def test_dry_run_touches_nothing(tmp_path: Path, capsys) -> None:
    orchestrator, target, mirror = _make_orchestrator(tmp_path, [RECORD], dry_run=True)

    assert orchestrator.run() == EXIT_SUCCESS

    target.connect.assert_not_called()
    mirror.clone.assert_not_called()
    assert 'Four-Agency/repo topic=team-alpha' in capsys.readouterr().out


def test_unreadable_input_fails(tmp_path: Path) -> None:
    cfg = _make_config(tmp_path, str(tmp_path / 'missing.json'))
    orchestrator = MigrationOrchestrator(cfg, target=MagicMock(), mirror=MagicMock())

    assert orchestrator.run() == EXIT_EXECUTION_ERROR
    orchestrator.gh.connect.assert_not_called()


def test_connect_exit_code_is_returned(tmp_path: Path) -> None:
    orchestrator, target, _ = _make_orchestrator(tmp_path, [RECORD])
    target.connect.side_effect = SystemExit(40)

    assert orchestrator.run() == 40


def test_progress_lines_show_names_verbatim(tmp_path: Path, capsys) -> None:
    entry = dict(RECORD, repository_name='Password Vault', project_name='Token Service')
    orchestrator, target, _ = _make_orchestrator(tmp_path, [entry])

    assert orchestrator.run() == EXIT_SUCCESS

    out = capsys.readouterr().out
    assert 'Processing: Password Vault' in out
    assert 'Project: Token Service' in out
    target.add_topic.assert_called_once_with('repo', 'token-service')
