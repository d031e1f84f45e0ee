import collections
import dataclasses
import logging
import os
import typing

import mako.template

import release_notes.labels as rnl
import release_notes.model as rnm

logger = logging.getLogger(__name__)

own_dir = os.path.abspath(os.path.dirname(__file__))
TEMPLATE_FILE = os.path.join(own_dir, 'release_notes.md.mako')


@dataclasses.dataclass
class Document:
    '''
    release notes (rendered as markdown lines) grouped by category. Each note is part of
    exactly one group.
    '''
    action_required: list[str] = dataclasses.field(default_factory=list)
    new_features: list[str] = dataclasses.field(default_factory=list)
    # pretty sig-list -> notes
    duplicates: dict[str, list[str]] = dataclasses.field(
        default_factory=lambda: collections.defaultdict(list),
    )
    # sig -> notes
    sigs: dict[str, list[str]] = dataclasses.field(
        default_factory=lambda: collections.defaultdict(list),
    )
    bug_fixes: list[str] = dataclasses.field(default_factory=list)
    uncategorized: list[str] = dataclasses.field(default_factory=list)

    def is_empty(self) -> bool:
        return not any((
            self.action_required,
            self.new_features,
            self.duplicates,
            self.sigs,
            self.bug_fixes,
            self.uncategorized,
        ))


def create_document(notes: typing.Iterable[rnm.ReleaseNote]) -> Document:
    document = Document()

    for note in notes:
        if note.action_required:
            document.action_required.append(note.markdown)
        elif note.feature:
            document.new_features.append(note.markdown)
        elif note.duplicate:
            header = rnl.prettify_sig_list(sorted(note.sigs))
            document.duplicates[header].append(note.markdown)
        elif rnl.has_string(note.kinds, 'bug'):
            document.bug_fixes.append(note.markdown)
        elif note.sigs:
            for sig in note.sigs:
                document.sigs[sig].append(note.markdown)
        else:
            document.uncategorized.append(note.markdown)

    return document


def render_markdown_str(document: Document) -> str:
    template = mako.template.Template(filename=TEMPLATE_FILE)
    return template.render(
        document=document,
        sig_prefix=rnl.SIG_PREFIX,
    )


def render_markdown(document: Document, outfh: typing.TextIO) -> bool:
    '''
    renders the given document as markdown and writes it to `outfh`. If writing fails, the error
    is logged and `False` is returned.
    '''
    markdown = render_markdown_str(document)

    try:
        outfh.write(markdown)
        outfh.flush()
    except OSError as e:
        logger.error(f'error rendering release note document to markdown: {e}')
        return False

    return True
