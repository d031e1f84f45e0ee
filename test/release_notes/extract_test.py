import pytest

import release_notes.extract as rne
import release_notes.model as rnm

from test.release_notes.default_util import (
    commit,
    pull_request,
)


@pytest.mark.parametrize('content,expected', [
    ('```release-note\r\nAdd foo\r\n```', 'Add foo'),
    ('```dev-release-note\r\nFaster builds\r\n```', 'Faster builds'),
    ('```\r\nPlain fence\r\n```', 'Plain fence'),
    ('```release-note\nUnix newlines\n```', 'Unix newlines'),
    ('some text\r\n```release-note\r\nFirst line\r\nSecond line\r\n```', 'First line'),
])
def test_note_text_from_string(content, expected):
    assert rne.note_text_from_string(content) == expected


@pytest.mark.parametrize('note,expected', [
    ('[Action Required] Remove legacy flag', 'Remove legacy flag'),
    ('[ACTION REQUIRED] Remove legacy flag', 'Remove legacy flag'),
    ('action required: rotate keys', 'rotate keys'),
    ('* Starred note', 'Starred note'),
    ('Mentions [action required] later', 'Mentions [action required] later'),
])
def test_note_text_from_string_strips_markers(note, expected):
    content = f'```release-note\r\n{note}\r\n```'

    assert rne.note_text_from_string(content) == expected


def test_note_text_from_string_no_match():
    with pytest.raises(rnm.NoMatchError):
        rne.note_text_from_string('no release note in here')

    with pytest.raises(rnm.NoMatchError):
        rne.note_text_from_string('')


def test_note_text_from_commit():
    c = commit('abc', 'Add dark mode toggle (#5678)')
    assert rne.note_text_from_commit(c) == 'Add dark mode toggle'

    c = commit('abc', 'Add dark mode toggle (#5678)\r', body='more details (#1)')
    assert rne.note_text_from_commit(c) == 'Add dark mode toggle'


def test_pr_number_from_commit():
    assert rne.pr_number_from_commit(commit('abc', 'Fix widget rendering (#1234)')) == 1234


def test_pr_number_from_commit_only_considers_subject():
    c = commit('abc', 'Fix widget rendering', body='see (#1234)')

    with pytest.raises(rnm.NoMatchError):
        rne.pr_number_from_commit(c)


def test_issue_numbers_from_commit():
    c = commit('abc', 'Fix thing (#1)', body='Fixes #12, closes #13\nresolved 14')

    assert rne.issue_numbers_from_commit(c) == [12, 13, 14]


def test_issue_numbers_from_commit_no_match():
    with pytest.raises(rnm.NoMatchError):
        rne.issue_numbers_from_commit(commit('abc', 'Fix thing (#1)', body='see #12'))


@pytest.mark.parametrize('body', [
    '```release-note\r\nNONE\r\n```',
    '```release-note\r\n  NONE\r\n```',
    '```release-note\r\n"NONE"\r\n```',
    '```release-note\r\nN/A\r\n```',
    '```release-note\r\n\r\n```',
    '```release-note\r\n```',
    '/release-note-none',
    '```NONE\r\n```',
    '```release-note \r\nNONE\r\n```',
    'Some description\r\n\r\nNONE',
    'Nothing to note: NONE\r\n```',
    'Some description\r\nNone of the users are affected',
    'Some description\r\nNONE\r\nmore text',
])
def test_is_excluded(body):
    assert rne.is_excluded(body)
    assert not rne.has_release_note(pull_request(1, body=body))


def test_has_release_note():
    assert rne.has_release_note(pull_request(1, body='```release-note\r\nAdd foo\r\n```'))
    # everything not excluded carries a release note
    assert rne.has_release_note(pull_request(1, body='just a description'))
    assert rne.has_release_note(pull_request(1, body=''))


def test_exclusion_patterns_are_kept():
    assert len(rne.exclusion_patterns) == 16
    assert rne.exclusion_patterns[0].pattern == r'\x60{3}release-note\r\nNONE'
    assert rne.exclusion_patterns[-1].pattern == r'\r\nNONE\r\n'
