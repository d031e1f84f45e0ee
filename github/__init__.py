# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import github3


def normalise_host(host: str) -> str:
    '''
    returns the hostname of the given GitHub-instance, which may be passed with or without
    schema (e.g. `https://github.example.org/` -> `github.example.org`)
    '''
    if '://' in host:
        host = host.split('://')[-1]
    return host.strip('/')


def github_api(
    host: str='github.com',
    token: str=None,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance for the given host. If no token is passed,
    the environment variable GITHUB_TOKEN is honoured. For hosts other than github.com, a
    GitHub-Enterprise api instance is returned.
    '''
    host = normalise_host(host)
    token = token or os.environ.get('GITHUB_TOKEN')

    if host == 'github.com':
        return github3.GitHub(token=token)

    return github3.GitHubEnterprise(
        url=f'https://{host}',
        token=token,
    )
