import dataclasses
import enum
import typing

import ctx


class ReleaseNotesError(RuntimeError):
    pass


class NoMatchError(ReleaseNotesError):
    '''
    raised if none of the regular expressions used to extract information from a commit message
    or pull request body matched. Callers treat this as "skip", never as fatal.
    '''
    pass


class NotFoundError(ReleaseNotesError):
    pass


class TransportError(ReleaseNotesError):
    pass


class ValidationError(ReleaseNotesError, ValueError):
    pass


class CancelledError(ReleaseNotesError):
    pass


class ReleaseNoteError(ReleaseNotesError):
    def __init__(self, sha: str, msg: str):
        self.sha = sha
        super().__init__(f'{msg} {sha}')


class NoteSource(enum.StrEnum):
    COMMIT_MESSAGE = 'commit-message'
    PULL_REQUEST_BODY = 'pull-request-body'


@dataclasses.dataclass(frozen=True)
class Commit:
    sha: str
    message: str
    author_login: str | None = None
    committer_date: str | None = None

    @property
    def subject(self) -> str:
        return self.message.split('\n', 1)[0].rstrip('\r')


@dataclasses.dataclass(frozen=True)
class PullRequest:
    number: int
    body: str = ''
    user_login: str | None = None
    labels: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class Issue:
    number: int
    labels: tuple[str, ...] = ()


class Cancellable(typing.Protocol):
    def is_set(self) -> bool:
        ...


@dataclasses.dataclass(frozen=True, kw_only=True)
class GithubApiConfig:
    '''
    request context for one invocation of the public entry points of `release_notes.fetch`.

    `context` is an optional cancellation handle (e.g. `threading.Event`). It is checked before
    each request to the GitHub API, so cancellation takes effect at the next request.
    '''
    context: Cancellable | None = None
    org: str
    repo: str
    branch: str
    host: str = 'github.com'

    def ensure_not_cancelled(self):
        if self.context is not None and self.context.is_set():
            raise CancelledError(f'cancelled whilst processing {self.org}/{self.repo}')

    def user_url(self, login: str) -> str:
        return f'https://{self.host}/{login}'

    def pull_request_url(self, number: int) -> str:
        return f'https://{self.host}/{self.org}/{self.repo}/pull/{number}'


def api_config(
    context: Cancellable | None=None,
    org: str | None=None,
    repo: str | None=None,
    branch: str | None=None,
    host: str | None=None,
) -> GithubApiConfig:
    '''
    returns a `GithubApiConfig` with the given overrides applied onto the configured defaults
    (see `ctx.ReleaseNotesDefaults`). Overrides that are `None` retain the default.
    '''
    defaults = ctx.cfg.defaults

    return GithubApiConfig(
        context=context,
        org=org or defaults.org,
        repo=repo or defaults.repo,
        branch=branch or defaults.branch,
        host=host or defaults.host,
    )


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseNote:
    commit: str
    text: str
    markdown: str
    author: str
    author_url: str
    pr_url: str
    pr_number: int
    areas: tuple[str, ...] = ()
    kinds: tuple[str, ...] = ()
    sigs: tuple[str, ...] = ()
    feature: bool = False
    duplicate: bool = False
    action_required: bool = False

    def as_dict(self) -> dict:
        '''
        returns a dict suitable for JSON serialisation. Empty label-lists and boolean flags
        which are not set are omitted.
        '''
        raw = dataclasses.asdict(self)

        return {
            k: list(v) if isinstance(v, tuple) else v
            for k, v in raw.items()
            if not (k in ('areas', 'kinds', 'sigs') and not v)
            and not (k in ('feature', 'duplicate', 'action_required') and not v)
        }
