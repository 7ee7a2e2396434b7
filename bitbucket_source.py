#!/usr/bin/env python3
"""Bitbucket API wrapper for listing workspace repositories."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional

import requests

from config import DEFAULT_BITBUCKET_API, DEFAULT_PAGE_LEN, CloneMethod
from exceptions import FetchError
from logging_utils import Logger
from models import RepositoryRecord
from repository_file import normalize_lines
from utils import UNCATEGORIZED


def records_from_page(
    payload: Dict[str, Any], clone_method: CloneMethod
) -> List[RepositoryRecord]:
    """Extract one record per clone link matching the requested transport.

    Repositories without a link of that transport produce no record.
    """
    records: List[RepositoryRecord] = []
    for repo in payload.get("values") or []:
        links = (repo.get("links") or {}).get("clone") or []
        project_name = (repo.get("project") or {}).get("name")
        if project_name is None:
            project_name = UNCATEGORIZED
        for link in links:
            if link.get("name") != clone_method.value or not link.get("href"):
                continue
            records.append(
                RepositoryRecord(
                    clone_url=link["href"],
                    project_name=project_name,
                    repository_name=repo.get("name") or "",
                    full_name=repo.get("full_name") or "",
                )
            )
    return records


class BitbucketSource:
    """Wrapper around the Bitbucket Cloud REST API to enumerate repositories."""

    def __init__(
        self,
        username: str,
        token: str,
        api_url: str = DEFAULT_BITBUCKET_API,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.auth = (username, token)
        self.session.headers.update({"Accept": "application/json"})

    def first_page_url(self, workspace: str, page_len: int) -> str:
        return f"{self.api_url}/repositories/{workspace}?pagelen={page_len}"

    def _fetch_page(self, url: str) -> Dict[str, Any]:
        try:
            response = self.session.get(url)
        except requests.RequestException as e:
            raise FetchError(f"failed to contact bitbucket api: {e}", url=url) from e

        if response.status_code >= 400:
            raise FetchError(
                f"HTTP {response.status_code} fetching {url}",
                status_code=response.status_code,
                url=url,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                f"invalid JSON from {url}", status_code=response.status_code,
                url=url, body=response.text,
            ) from e

    def iter_pages(self, workspace: str, page_len: int) -> Iterator[Dict[str, Any]]:
        """Yield page payloads, following each page's 'next' URL verbatim."""
        url: Optional[str] = self.first_page_url(workspace, page_len)
        page = 0
        while url:
            page += 1
            Logger.debug(f"fetching page {page}: {url}")
            payload = self._fetch_page(url)
            yield payload
            url = payload.get("next") or None

    def collect_lines(
        self,
        workspace: str,
        clone_method: CloneMethod,
        page_len: int = DEFAULT_PAGE_LEN,
    ) -> List[str]:
        """Serialized records for every page, in fetch order, not deduplicated."""
        Logger.info(
            f"fetching repositories for workspace '{workspace}' "
            f"(clone type: {clone_method.value})..."
        )
        lines: List[str] = []
        for payload in self.iter_pages(workspace, page_len):
            lines.extend(
                record.to_line() for record in records_from_page(payload, clone_method)
            )
        return lines

    def collect(
        self,
        workspace: str,
        clone_method: CloneMethod,
        page_len: int = DEFAULT_PAGE_LEN,
    ) -> List[RepositoryRecord]:
        """Return the deduplicated records of a workspace."""
        return [
            RepositoryRecord.from_dict(json.loads(line))
            for line in normalize_lines(self.collect_lines(workspace, clone_method, page_len))
        ]

