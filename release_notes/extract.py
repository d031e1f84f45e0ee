'''
regular-expression based extraction of release-note information from commit messages and
pull request bodies.

Pattern tables are evaluated in the given order, first match wins. They reflect the different
conventions used over time in pull request templates, hence some entries might look redundant.
Do not reorder or deduplicate them.
'''
import re

import release_notes.model as rnm


CLOSE_ISSUE_KEYWORDS = 'Close|Closes|Closed|Fix|Fixes|Fixed|Resolve|Resolves|Resolved'

r'''
\x60 -> `
'''
_note_patterns = (
    re.compile(r'\x60{3}release-note\r\n(?P<note>.+)'),
    re.compile(r'\x60{3}dev-release-note\r\n(?P<note>.+)'),
    re.compile(r'\x60{3}\r\n(?P<note>.+)\r\n\x60{3}'),
    re.compile(r'\x60{3}release-note\n(?P<note>.+)\n\x60{3}'),
)

_action_required_patterns = (
    re.compile(r'^\[action required\]\s', flags=re.IGNORECASE),
    re.compile(r'^action required:\s', flags=re.IGNORECASE),
)

_star_pattern = re.compile(r'^\*\s', flags=re.IGNORECASE)

_pull_request_number_pattern = re.compile(r'\(#(?P<number>\d+)\)')

_issue_numbers_pattern = re.compile(
    rf'({CLOSE_ISSUE_KEYWORDS}) #?(?P<number>\d+)',
    flags=re.IGNORECASE,
)

# all spellings of "there is no release note" that appear in pull request bodies
exclusion_patterns = tuple(re.compile(p) for p in (
    r'\x60{3}release-note\r\nNONE',
    r'\x60{3}release-note\r\n\s+NONE',
    r'\x60{3}release-note\r\nNONE',
    r'\x60{3}release-note\r\n"NONE"',
    r'\x60{3}release-note\r\nNone',
    r'\x60{3}release-note\r\nnone',
    r'\x60{3}release-note\r\nN/A',
    r'\x60{3}release-note\r\n\r\n\x60{3}',
    r'\x60{3}release-note\r\n\x60{3}',
    r'/release-note-none',
    r'\r\n\r\nNONE',
    r'\x60{3}NONE\r\n\x60{3}',
    r'\x60{3}release-note \r\nNONE\r\n\x60{3}',
    r'NONE\r\n\x60{3}',
    r'\r\nNone',
    r'\r\nNONE\r\n',
))

# note: the first pattern matches any body; the remaining ones are kept for reference
inclusion_patterns = tuple(re.compile(p) for p in (
    r'.*',
    r'release-note',
    r'Does this PR introduce a user-facing change?',
))


def _strip_action_required(note: str) -> str:
    for pattern in _action_required_patterns:
        note = pattern.sub('', note, count=1)
    return note


def _strip_star(note: str) -> str:
    return _star_pattern.sub('', note, count=1)


def note_text_from_string(content: str) -> str:
    '''
    returns the text of the release note contained in the given string (a commit message, a
    pull request body, ..). This is the first line within the ```release-note ``` stanza.

    raises NoMatchError if no release note stanza is found.
    '''
    for pattern in _note_patterns:
        if not (match := pattern.search(content)):
            continue

        note = match.group('note').removesuffix('\r')
        note = _strip_action_required(note)
        return _strip_star(note)

    raise rnm.NoMatchError('no matches found when parsing note text from commit string')


def note_text_from_commit(commit: rnm.Commit) -> str:
    '''
    returns the commit message's subject with pull request references (e.g. `(#1234)`) removed
    '''
    text = _pull_request_number_pattern.sub('', commit.subject)
    return text.strip()


def pr_number_from_commit(commit: rnm.Commit) -> int:
    '''
    returns the number of the pull request the given commit was merged from. Squash-merges
    carry the pull request number in the subject, e.g. `Fix widget rendering (#1234)`.

    raises NoMatchError if the subject does not contain a pull request reference.
    '''
    if not (match := _pull_request_number_pattern.search(commit.subject)):
        raise rnm.NoMatchError(f'no PR found for this commit: {commit.sha}')

    return int(match.group('number'))


def issue_numbers_from_commit(commit: rnm.Commit) -> list[int]:
    '''
    returns the numbers of issues closed by the given commit (by means of "closes #1", "fixes
    #2", ..) in order of appearance.

    raises NoMatchError if the commit message does not reference any issue.
    '''
    issue_numbers = [
        int(match.group('number'))
        for match in _issue_numbers_pattern.finditer(commit.message)
    ]
    if not issue_numbers:
        raise rnm.NoMatchError(f'no matches found when parsing issues from commit {commit.sha}')

    return issue_numbers


def is_excluded(body: str) -> bool:
    return any(pattern.search(body) for pattern in exclusion_patterns)


def is_included(body: str) -> bool:
    return any(pattern.search(body) for pattern in inclusion_patterns)


def has_release_note(pull_request: rnm.PullRequest) -> bool:
    '''
    returns whether the given pull request carries a release note. Exclusion has precedence,
    everything not excluded is considered to carry a release note.
    '''
    body = pull_request.body or ''

    if is_excluded(body):
        return False

    return is_included(body)
