'''
Release Notes Collector

Collects release notes for all commits between two commit digests on a branch of a GitHub
repository. Each commit is associated with the pull request it was merged from (and, if
referenced, the issue it closes); pull request and issue labels are used to classify the
resulting release notes.

The GitHub API is accessed through a "client" exposing the following methods (see
`github.util.RepositoryHelper`):

- get_commit(org, repo, sha) -> Commit
- list_commits(org, repo, branch, since, until, page, per_page) -> (commits, last_page)
- get_pull_request(org, repo, number) -> PullRequest
- get_issue(org, repo, number) -> Issue
'''
import logging

import ctx
import release_notes.extract as rne
import release_notes.labels as rnl
import release_notes.model as rnm

logger = logging.getLogger(__name__)

COMMITS_PER_PAGE = 100


def list_commits(
    client,
    start: str,
    end: str,
    cfg: rnm.GithubApiConfig=None,
    **overrides,
) -> list[rnm.Commit]:
    '''
    returns all commits on the configured branch, committed between the commits referenced by
    `start` and `end`. Failing to retrieve any of the boundary commits is fatal.
    '''
    cfg = cfg or rnm.api_config(**overrides)

    cfg.ensure_not_cancelled()
    start_commit = client.get_commit(cfg.org, cfg.repo, start)
    cfg.ensure_not_cancelled()
    end_commit = client.get_commit(cfg.org, cfg.repo, end)

    page = 1
    cfg.ensure_not_cancelled()
    commits, last_page = client.list_commits(
        cfg.org,
        cfg.repo,
        cfg.branch,
        start_commit.committer_date,
        end_commit.committer_date,
        page,
        COMMITS_PER_PAGE,
    )
    commits = list(commits)
    page += 1

    while page <= last_page:
        cfg.ensure_not_cancelled()
        commit_page, _ = client.list_commits(
            cfg.org,
            cfg.repo,
            cfg.branch,
            start_commit.committer_date,
            end_commit.committer_date,
            page,
            COMMITS_PER_PAGE,
        )
        commits.extend(commit_page)
        page += 1

    return commits


def pr_from_commit(
    client,
    commit: rnm.Commit,
    cfg: rnm.GithubApiConfig=None,
    **overrides,
) -> rnm.PullRequest:
    '''
    returns the pull request the given commit was merged from.

    raises NoMatchError if the commit does not reference a pull request, NotFoundError if the
    referenced pull request does not exist.
    '''
    cfg = cfg or rnm.api_config(**overrides)

    number = rne.pr_number_from_commit(commit)

    cfg.ensure_not_cancelled()
    return client.get_pull_request(cfg.org, cfg.repo, number)


def get_issue(
    client,
    number: int,
    cfg: rnm.GithubApiConfig=None,
    **overrides,
) -> rnm.Issue:
    cfg = cfg or rnm.api_config(**overrides)

    cfg.ensure_not_cancelled()
    return client.get_issue(cfg.org, cfg.repo, number)


def list_commits_with_notes(
    client,
    logger: logging.Logger,
    start: str,
    end: str,
    cfg: rnm.GithubApiConfig=None,
    **overrides,
) -> list[rnm.Commit]:
    '''
    same as `list_commits`, except that only commits carrying a release note are returned
    (see `release_notes.extract.has_release_note`).
    '''
    logger = logger or logging.getLogger(__name__)
    cfg = cfg or rnm.api_config(**overrides)

    commits = list_commits(client, start, end, cfg=cfg)
    logger.info(f'no. of commits: {len(commits)}')

    filtered_commits = []
    for commit in commits:
        try:
            pull_request = pr_from_commit(client, commit, cfg=cfg)
        except rnm.NoMatchError:
            logger.debug(f'no PR found for {commit.sha}: {commit.subject}')
            continue
        except (rnm.NotFoundError, rnm.TransportError) as e:
            logger.error(f'error retrieving PR for commit {commit.sha}: {e}')
            continue

        if not rne.has_release_note(pull_request):
            logger.debug(f'excluding {commit.sha}: {commit.subject}')
            continue

        filtered_commits.append(commit)

    return filtered_commits


def release_note_from_commit(
    commit: rnm.Commit,
    client,
    cfg: rnm.GithubApiConfig=None,
    note_source: rnm.NoteSource=rnm.NoteSource.COMMIT_MESSAGE,
    **overrides,
) -> rnm.ReleaseNote:
    '''
    returns a fully contextualised release note for the given commit.

    By default, the note text is taken from the commit's subject. Passing
    `NoteSource.PULL_REQUEST_BODY` will instead extract it from the ```release-note``` stanza
    of the pull request body.

    raises ReleaseNoteError (naming the commit) if the release note cannot be created.
    '''
    cfg = cfg or rnm.api_config(**overrides)

    try:
        pull_request = pr_from_commit(client, commit, cfg=cfg)
    except (rnm.NoMatchError, rnm.NotFoundError, rnm.TransportError) as e:
        raise rnm.ReleaseNoteError(
            sha=commit.sha,
            msg='error parsing release note from commit',
        ) from e

    issue = None
    try:
        issue_numbers = rne.issue_numbers_from_commit(commit)
    except rnm.NoMatchError:
        issue_numbers = ()

    if issue_numbers:
        logger.debug(f'{commit.sha} references issues {issue_numbers}')
        try:
            issue = get_issue(client, issue_numbers[0], cfg=cfg)
        except (rnm.NotFoundError, rnm.TransportError) as e:
            raise rnm.ReleaseNoteError(
                sha=commit.sha,
                msg='error parsing release note from commit',
            ) from e

    if note_source is rnm.NoteSource.PULL_REQUEST_BODY:
        try:
            text = rne.note_text_from_string(pull_request.body or '')
        except rnm.NoMatchError as e:
            raise rnm.ReleaseNoteError(
                sha=commit.sha,
                msg='error parsing release note from commit',
            ) from e
    else:
        text = rne.note_text_from_commit(commit)

    pr_labels = rnl.pull_request_labels(pull_request)

    if rnl.has_string(rnl.strings_with_prefix(pr_labels, rnl.KIND_PREFIX), 'feature'):
        is_feature = True
    elif issue is not None and not rnl.has_string(rnl.issue_labels(issue), 'bug'):
        is_feature = True
    else:
        is_feature = False

    areas = rnl.strings_with_prefix(pr_labels, rnl.AREA_PREFIX)
    if issue is not None and not areas:
        areas = rnl.strings_with_prefix(rnl.issue_labels(issue), rnl.AREA_PREFIX)

    sigs = rnl.strings_with_prefix(pr_labels, rnl.SIG_PREFIX)
    is_action_required = rnl.is_action_required(pull_request)

    # no user for pull requests of deleted accounts
    author = pull_request.user_login or ''
    author_url = cfg.user_url(author) if author else ''
    pr_url = cfg.pull_request_url(pull_request.number)

    note_suffix = ''
    is_duplicate = False
    if is_action_required or is_feature:
        if sigs_list_pretty := rnl.prettify_sig_list(sigs):
            note_suffix = f'Courtesy of {sigs_list_pretty}'
    elif len(sigs) > 1:
        is_duplicate = True

    if author:
        markdown = f'{text} ([#{pull_request.number}]({pr_url}), [@{author}]({author_url}))'
    else:
        markdown = f'{text} ([#{pull_request.number}]({pr_url}))'
    if note_suffix:
        markdown = f'{markdown} {note_suffix}'

    return rnm.ReleaseNote(
        commit=commit.sha,
        text=text,
        markdown=markdown,
        author=author,
        author_url=author_url,
        pr_url=pr_url,
        pr_number=pull_request.number,
        areas=areas,
        kinds=rnl.strings_with_prefix(pr_labels, rnl.KIND_PREFIX),
        sigs=sigs,
        feature=is_feature,
        duplicate=is_duplicate,
        action_required=is_action_required,
    )


def list_release_notes(
    client,
    logger: logging.Logger,
    start: str,
    end: str,
    context: rnm.Cancellable | None=None,
    org: str | None=None,
    repo: str | None=None,
    branch: str | None=None,
    note_source: rnm.NoteSource=rnm.NoteSource.COMMIT_MESSAGE,
    bot_login: str | None=None,
) -> list[rnm.ReleaseNote]:
    '''
    returns fully contextualised release notes for all commits (carrying a release note)
    between the given commit digests. Notes are returned in commit order; of several notes
    with identical text, only the first is kept.

    Failing to create the release note for a single commit is logged, and the commit is
    skipped. Failing to retrieve the range of commits is fatal.
    '''
    logger = logger or logging.getLogger(__name__)
    bot_login = bot_login or ctx.cfg.defaults.bot_login
    cfg = rnm.api_config(
        context=context,
        org=org,
        repo=repo,
        branch=branch,
    )

    commits = list_commits_with_notes(client, logger, start, end, cfg=cfg)

    seen_texts = set()
    notes = []
    for commit in commits:
        if commit.author_login == bot_login:
            logger.debug(f'skipping {commit.sha} authored by {bot_login}')
            continue

        try:
            note = release_note_from_commit(
                commit,
                client,
                cfg=cfg,
                note_source=note_source,
            )
        except rnm.ReleaseNoteError as e:
            logger.error(
                'error getting the release note from commit while listing release notes: '
                f'{e}: {e.__cause__}'
            )
            continue

        if note.text.strip() == 'NONE':
            continue

        if note.text in seen_texts:
            continue

        seen_texts.add(note.text)
        notes.append(note)

    return notes
