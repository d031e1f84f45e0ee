import threading
import unittest
import unittest.mock

import pytest

import ctx
import release_notes.model as rnm

from test.release_notes.default_util import api_config


def release_note(**kwargs) -> rnm.ReleaseNote:
    return rnm.ReleaseNote(**{
        'commit': 'abc',
        'text': 'Add foo',
        'markdown': 'Add foo ([#1](https://github.com/o/r/pull/1), [@foo](https://github.com/foo))',
        'author': 'foo',
        'author_url': 'https://github.com/foo',
        'pr_url': 'https://github.com/o/r/pull/1',
        'pr_number': 1,
        **kwargs,
    })


def test_commit_subject():
    c = rnm.Commit(sha='abc', message='Fix widget (#1)\r\n\r\nlong description')
    assert c.subject == 'Fix widget (#1)'

    assert rnm.Commit(sha='abc', message='').subject == ''


def test_release_note_error_names_commit():
    e = rnm.ReleaseNoteError(sha='abc123', msg='error parsing release note from commit')

    assert e.sha == 'abc123'
    assert str(e) == 'error parsing release note from commit abc123'
    assert isinstance(e, rnm.ReleaseNotesError)


def test_as_dict_omits_empty_values():
    assert release_note().as_dict() == {
        'commit': 'abc',
        'text': 'Add foo',
        'markdown': 'Add foo ([#1](https://github.com/o/r/pull/1), [@foo](https://github.com/foo))',
        'author': 'foo',
        'author_url': 'https://github.com/foo',
        'pr_url': 'https://github.com/o/r/pull/1',
        'pr_number': 1,
    }


def test_as_dict_with_labels():
    raw = release_note(
        areas=('build',),
        sigs=('ui', 'api'),
        duplicate=True,
    ).as_dict()

    assert raw['areas'] == ['build']
    assert raw['sigs'] == ['ui', 'api']
    assert raw['duplicate'] is True
    assert 'kinds' not in raw
    assert 'feature' not in raw


def test_urls():
    cfg = api_config(host='github.example.org')

    assert cfg.user_url('alice') == 'https://github.example.org/alice'
    assert cfg.pull_request_url(42) == 'https://github.example.org/madeup/current-repo/pull/42'


def test_ensure_not_cancelled():
    event = threading.Event()
    cfg = api_config(context=event)

    cfg.ensure_not_cancelled()
    api_config().ensure_not_cancelled()

    event.set()
    with pytest.raises(rnm.CancelledError):
        cfg.ensure_not_cancelled()


class ApiConfigTest(unittest.TestCase):
    def setUp(self):
        self.cfg = ctx.GlobalConfig(
            defaults=ctx.ReleaseNotesDefaults(
                org='default-org',
                repo='default-repo',
                branch='main',
                host='github.com',
                bot_login='bot',
            ),
        )
        patcher = unittest.mock.patch.object(ctx, 'cfg', self.cfg)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_defaults(self):
        cfg = rnm.api_config()

        self.assertEqual('default-org', cfg.org)
        self.assertEqual('default-repo', cfg.repo)
        self.assertEqual('main', cfg.branch)
        self.assertEqual('github.com', cfg.host)
        self.assertIsNone(cfg.context)

    def test_overrides(self):
        event = threading.Event()
        cfg = rnm.api_config(context=event, org='o', repo=None, branch='release-1.0')

        self.assertEqual('o', cfg.org)
        self.assertEqual('default-repo', cfg.repo)
        self.assertEqual('release-1.0', cfg.branch)
        self.assertIs(event, cfg.context)
