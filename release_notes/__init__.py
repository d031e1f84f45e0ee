'''
Release Notes Collector

Collects release notes for all commits between two commits on a branch of a GitHub repository
and renders them as a markdown document, grouped by category.

Each commit is associated with the pull request it was merged from (squash-merges carry the
pull request number in the commit subject). Pull requests whose body does not contain a release
note are skipped. Labels of pull requests (and of issues closed by the commit) are used to
classify release notes into areas, kinds and SIGs.

See `release_notes.fetch.list_release_notes` and `release_notes.document`.
'''
