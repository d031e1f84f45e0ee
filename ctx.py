# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import os

import dacite

import ci.util

'''
Execution context. Holds the configuration (defaults for org, repo, branch, ..) used by
`release_notes`. Sources are applied in order, later sources overwrite earlier ones:

- built-in defaults
- ~/.release-notes.cfg (YAML)
- environment variables
'''

cfg = None # initialised upon importing this module

CFG_FILE_NAME = '.release-notes.cfg'


@dataclasses.dataclass
class ReleaseNotesDefaults:
    org: str | None = None
    repo: str | None = None
    branch: str | None = None
    host: str | None = None
    bot_login: str | None = None


@dataclasses.dataclass
class GlobalConfig:
    defaults: ReleaseNotesDefaults | None = None


def _builtin_defaults():
    return GlobalConfig(
        defaults=ReleaseNotesDefaults(
            org='netdata',
            repo='netdata',
            branch='master',
            host='github.com',
            bot_login='netdatabot',
        ),
    )


def merge_cfgs(ctor, left, right):
    if not left or not right:
        return left or right # nothing to merge

    left_dict = dataclasses.asdict(left)

    # do not overwrite existing values w/ None
    right_dict = {k: v for k,v in dataclasses.asdict(right).items() if v is not None}

    if not right_dict:
        return left

    merged = ci.util.merge_dicts(left_dict, right_dict)

    return dacite.from_dict(
        data_class=ctor,
        data=merged,
    )


def merge_global_cfg(left: GlobalConfig, right: GlobalConfig):
    return GlobalConfig(
        defaults=merge_cfgs(ReleaseNotesDefaults, left.defaults, right.defaults),
    )


def _config_from_env(env=os.environ):
    if server_url := env.get('GITHUB_SERVER_URL'):
        host = server_url.removeprefix('https://').removeprefix('http://').strip('/')
    else:
        host = None

    return GlobalConfig(
        defaults=ReleaseNotesDefaults(
            org=env.get('RELEASE_NOTES_ORG'),
            repo=env.get('RELEASE_NOTES_REPO'),
            branch=env.get('RELEASE_NOTES_BRANCH'),
            host=host,
            bot_login=env.get('RELEASE_NOTES_BOT_LOGIN'),
        ),
    )


def _config_from_user_home():
    cfg_file_path = os.path.join(os.path.expanduser('~'), CFG_FILE_NAME)
    if not os.path.isfile(cfg_file_path):
        return None

    return _config_from_file(cfg_file_path)


def _config_from_file(path: str):
    raw = ci.util.parse_yaml_file(path) or {}

    return dacite.from_dict(
        data_class=GlobalConfig,
        data=raw,
    )


def load_config(*additional_cfgs: GlobalConfig):
    global cfg
    cfg = _builtin_defaults()

    additional_cfgs = (
        _config_from_user_home(),
        _config_from_env(),
        *additional_cfgs,
    )

    for additional_cfg in additional_cfgs:
        if not additional_cfg:
            continue

        cfg = merge_global_cfg(cfg, additional_cfg)

    return cfg


load_config()
