# Copyright (c) 2019-2020 SAP SE or an SAP affiliate company. All rights reserved. This file is
# licensed under the Apache Software License, v. 2 except as noted otherwise in the LICENSE file
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import copy
import functools

import deepmerge
import yaml


class Failure(RuntimeError, ValueError):
    pass


def fail(msg=None):
    raise Failure(msg or 1)


def not_empty(value, name: str='passed value'):
    if not value:
        fail(f'{name} must not be empty')
    return value


def not_none(value, name: str='passed value'):
    if value is None:
        fail(f'{name} must not be None')
    return value


def parse_yaml_file(path, max_elements_count=10000):
    '''
    parses the YAML document at the given path using `yaml.SafeLoader`.

    @raises ValueError if the document contains more than `max_elements_count` elements
    '''
    with open(path) as f:
        parsed = yaml.load(f, Loader=yaml.SafeLoader)

    # mitigate yaml bomb
    _count_elements(parsed, max_elements_count=max_elements_count)
    return parsed


def _count_elements(value, count=0, max_elements_count=10000):
    if isinstance(value, dict):
        for v in value.values():
            count = _count_elements(v, count=count + 1, max_elements_count=max_elements_count)
    elif isinstance(value, (list, tuple)):
        for v in value:
            count = _count_elements(v, count=count + 1, max_elements_count=max_elements_count)
    else:
        count += 1

    if count > max_elements_count:
        raise ValueError(f'max element count exceeded: {max_elements_count=}')

    return count


def merge_dicts(base: dict, *other: dict):
    '''
    returns the deep-merge of copies of the given dicts (the arguments remain unmodified). In
    case of conflicts, values from later dicts overwrite values from earlier ones. Lists are
    overwritten, not concatenated.
    '''
    not_none(base, name='base')
    not_empty(other, name='other')

    merger = deepmerge.Merger(
        [(dict, ['merge'])],
        ['override'],
        ['override'],
    )

    return functools.reduce(
        lambda merged, o: merger.merge(merged, copy.deepcopy(o)),
        [base, *other],
        {},
    )
