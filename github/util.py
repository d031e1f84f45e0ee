# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import contextlib
import logging
import urllib.parse

import github3.exceptions
import requests.exceptions
from github3.github import GitHub

import release_notes.labels as rnl
import release_notes.model as rnm

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _translate_errors(what: str):
    try:
        yield
    except github3.exceptions.NotFoundError as nfe:
        raise rnm.NotFoundError(f'{what} not found: {nfe}') from nfe
    except (
        github3.exceptions.GitHubException,
        requests.exceptions.RequestException,
    ) as e:
        raise rnm.TransportError(f'failed to retrieve {what}: {e}') from e


def _last_page(response: requests.Response) -> int:
    '''
    returns the number of the last page as advertised by the `Link` response-header, or 0 if
    there is no (further) page.
    '''
    if not (last := response.links.get('last')):
        return 0

    query = urllib.parse.parse_qs(urllib.parse.urlparse(last['url']).query)
    if not (pages := query.get('page')):
        return 0

    return int(pages[0])


def commit_from_dict(raw: dict) -> rnm.Commit:
    '''
    converts commits as returned from `repos/{org}/{repo}/commits` (which wrap the git-commit
    into the `commit` attribute), as well as plain git-commits (`repos/{org}/{repo}/git/commits`)
    '''
    git_commit = raw.get('commit') or raw
    author = raw.get('author') or {}

    return rnm.Commit(
        sha=raw['sha'],
        message=git_commit.get('message') or '',
        author_login=author.get('login'),
        committer_date=(git_commit.get('committer') or {}).get('date'),
    )


def pull_request_from_github3(pull_request) -> rnm.PullRequest:
    return rnm.PullRequest(
        number=pull_request.number,
        body=pull_request.body or '',
        user_login=pull_request.user.login if pull_request.user else None,
        labels=rnl.label_names(pull_request.labels),
    )


def issue_from_github3(issue) -> rnm.Issue:
    return rnm.Issue(
        number=issue.number,
        labels=rnl.label_names(issue.original_labels),
    )


class RepositoryHelper:
    '''
    read-only access to commits, pull requests and issues of GitHub repositories, as needed
    for collecting release notes. Errors returned from GitHub are translated into
    `release_notes.model.NotFoundError` and `release_notes.model.TransportError`.

    No retries are done.
    '''
    def __init__(
        self,
        github_api: GitHub=None,
    ):
        if not github_api:
            raise ValueError('must pass github_api')

        self.github = github_api

    # pylint: disable=protected-access
    # noinspection PyProtectedMember
    def get_commit(self, org: str, repo: str, sha: str) -> rnm.Commit:
        with _translate_errors(f'commit {org}/{repo}@{sha}'):
            url = self.github._build_url('repos', org, repo, 'git', 'commits', sha)
            raw = self.github._json(self.github._get(url), 200)

        if not raw:
            raise rnm.NotFoundError(f'commit {org}/{repo}@{sha} not found')

        return commit_from_dict(raw)

    # pylint: disable=protected-access
    # noinspection PyProtectedMember
    def list_commits(
        self,
        org: str,
        repo: str,
        branch: str,
        since: str,
        until: str,
        page: int=1,
        per_page: int=100,
    ) -> tuple[list[rnm.Commit], int]:
        '''
        returns the requested page of commits on `branch` committed between `since` and `until`
        (ISO-8601 timestamps), and the number of the last page.
        '''
        params = {
            'sha': branch,
            'since': since,
            'until': until,
            'page': page,
            'per_page': per_page,
        }
        logger.debug(f'listing commits for {org}/{repo} {params=}')

        with _translate_errors(f'commits of {org}/{repo}'):
            url = self.github._build_url('repos', org, repo, 'commits')
            response = self.github._get(url, params=params)
            raw = self.github._json(response, 200)

        return [commit_from_dict(raw_commit) for raw_commit in raw or ()], _last_page(response)

    def get_pull_request(self, org: str, repo: str, number: int) -> rnm.PullRequest:
        with _translate_errors(f'pull request {org}/{repo}#{number}'):
            pull_request = self.github.pull_request(org, repo, number)

        if not pull_request:
            raise rnm.NotFoundError(f'pull request {org}/{repo}#{number} not found')

        return pull_request_from_github3(pull_request)

    def get_issue(self, org: str, repo: str, number: int) -> rnm.Issue:
        with _translate_errors(f'issue {org}/{repo}#{number}'):
            issue = self.github.issue(org, repo, number)

        if not issue:
            raise rnm.NotFoundError(f'issue {org}/{repo}#{number} not found')

        return issue_from_github3(issue)
