'''
helpers for classifying pull requests and issues by their labels.

Labels are expected to follow the `<prefix>/<name>` convention (e.g. `area/build`, `kind/bug`,
`sig/ui`). All functions in this module are total, i.e. they never raise for well-typed input.
'''
import collections.abc
import typing

from pydash import _

import release_notes.model as rnm

ACTION_REQUIRED_LABEL = 'release-note-action-required'

AREA_PREFIX = 'area/'
KIND_PREFIX = 'kind/'
SIG_PREFIX = 'sig/'


def label_names(labels: collections.abc.Iterable[typing.Any]) -> tuple[str, ...]:
    '''
    flattens labels to their names. Accepts plain strings, dicts as returned from the GitHub
    API, and objects exposing a `name` attribute (e.g. `github3.issues.label.ShortLabel`).
    '''
    def name(label) -> str:
        if isinstance(label, str):
            return label
        if isinstance(label, collections.abc.Mapping):
            return label['name']
        return label.name

    return tuple(name(label) for label in labels or ())


def pull_request_labels(pull_request: rnm.PullRequest) -> tuple[str, ...]:
    return label_names(pull_request.labels)


def issue_labels(issue: rnm.Issue) -> tuple[str, ...]:
    return label_names(issue.labels)


def strings_with_prefix(
    values: collections.abc.Iterable[str],
    prefix: str,
) -> tuple[str, ...]:
    '''
    returns the suffixes of all values starting with `prefix` (order is retained, duplicates
    are removed).
    '''
    return tuple(_.uniq([
        value.removeprefix(prefix) for value in values
        if value.startswith(prefix)
    ]))


def has_string(values: collections.abc.Iterable[str], value: str) -> bool:
    return value in values


def is_action_required(pull_request: rnm.PullRequest) -> bool:
    return has_string(pull_request_labels(pull_request), ACTION_REQUIRED_LABEL)


def prettify_sig_list(sigs: collections.abc.Iterable[str]) -> str:
    '''
    formats SIG names (without `sig/` prefix) for display, e.g. `('ui', 'api')` yields
    `sig/ui, sig/api`. Returns an empty string for no SIGs.
    '''
    return ', '.join(f'{SIG_PREFIX}{sig}' for sig in sigs)
