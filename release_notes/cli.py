#!/usr/bin/env python3

import argparse
import json
import logging
import os
import sys

import ci.log
import ci.util
import ctx
import github
import github.util
import release_notes.document as rnd
import release_notes.fetch as rnf
import release_notes.model as rnm

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='release-notes',
        description='collect release notes from merged pull requests between two commits',
    )
    parser.add_argument(
        '--github-token',
        default=os.environ.get('GITHUB_TOKEN'),
        help='GitHub auth-token (defaults to $GITHUB_TOKEN)',
    )
    parser.add_argument(
        '--start-sha',
        default=os.environ.get('START_SHA'),
        help='commit to collect release notes from (defaults to $START_SHA)',
    )
    parser.add_argument(
        '--end-sha',
        default=os.environ.get('END_SHA'),
        help='commit to collect release notes up to (defaults to $END_SHA)',
    )
    parser.add_argument('--org', default=None)
    parser.add_argument('--repo', default=None)
    parser.add_argument('--branch', default=None)
    parser.add_argument(
        '--note-source',
        type=rnm.NoteSource,
        choices=tuple(rnm.NoteSource),
        default=rnm.NoteSource.COMMIT_MESSAGE,
        help='where to read the release note text from',
    )
    parser.add_argument(
        '--format',
        choices=('markdown', 'json'),
        default='markdown',
    )
    parser.add_argument(
        '--output',
        default='-',
        help='output file to write to (`-` for stdout, which is the default)',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        default=False,
    )

    return parser.parse_args(argv)


def validate_args(parsed: argparse.Namespace):
    try:
        ci.util.not_empty(parsed.github_token, name='github-token')
        ci.util.not_empty(parsed.start_sha, name='start-sha')
        ci.util.not_empty(parsed.end_sha, name='end-sha')
    except ci.util.Failure as f:
        raise rnm.ValidationError(f'missing required value: {f}') from f


def write_notes(
    notes: list[rnm.ReleaseNote],
    outfh,
    output_format: str='markdown',
) -> bool:
    if output_format == 'json':
        try:
            json.dump([note.as_dict() for note in notes], outfh, indent=2)
            outfh.write('\n')
            outfh.flush()
        except OSError as e:
            logger.error(f'error writing release notes as json: {e}')
            return False
        return True

    document = rnd.create_document(notes)
    return rnd.render_markdown(document, outfh)


def run(parsed: argparse.Namespace, context: rnm.Cancellable | None=None) -> int:
    validate_args(parsed)

    host = ctx.cfg.defaults.host
    client = github.util.RepositoryHelper(
        github_api=github.github_api(
            host=host,
            token=parsed.github_token,
        ),
    )

    notes = rnf.list_release_notes(
        client,
        logger,
        parsed.start_sha,
        parsed.end_sha,
        context=context,
        org=parsed.org,
        repo=parsed.repo,
        branch=parsed.branch,
        note_source=parsed.note_source,
    )
    logger.info(f'collected {len(notes)} release note(s)')

    if parsed.output == '-':
        ok = write_notes(notes, sys.stdout, output_format=parsed.format)
    else:
        try:
            with open(parsed.output, 'w') as f:
                ok = write_notes(notes, f, output_format=parsed.format)
        except OSError as e:
            logger.error(f'cannot write release notes to {parsed.output}: {e}')
            return 1
        if ok:
            logger.info(f'wrote release notes to {parsed.output}')

    return 0 if ok else 1


def main(argv=None):
    parsed = parse_args(argv)

    ci.log.configure_default_logging(
        stdout_level=logging.DEBUG if parsed.verbose else logging.INFO,
    )

    try:
        exit_code = run(parsed)
    except rnm.ReleaseNotesError as e:
        logger.error(f'error generating release notes: {e}')
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
