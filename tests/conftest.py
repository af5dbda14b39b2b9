"""
Shared test fixtures and utilities for the hashpath test suite.
"""

import pytest

from hashpath.core.hashtag_info import HashtagInfo
from hashpath.structure.sources import parse_data_sources

SESSION_PATH = "instance('commcaresession')/session"
CASE_PATH = f"instance('casedb')/cases/case[@case_id = {SESSION_PATH}/data/case_id]"
PARENT_PATH = f"instance('casedb')/cases/case[@case_id = {CASE_PATH}/index/parent]"

CASE_DESCRIPTORS = [
    {
        "id": "commcaresession",
        "uri": "jr://instance/session",
        "path": "/session",
        "name": "Session",
        "structure": {
            "data": {
                "structure": {
                    "case_id": {
                        "reference": {
                            "source": "casedb",
                            "subset": "mother",
                            "key": "@case_id",
                        }
                    }
                }
            }
        },
    },
    {
        "id": "casedb",
        "uri": "jr://instance/casedb",
        "path": "/cases/case",
        "name": "Cases",
        "structure": {
            "case_name": {},
            "date_opened": {"name": "opened on"},
        },
        "subsets": [
            {
                "id": "mother",
                "key": "@case_type",
                "name": "Mother",
                "structure": {"edd": {}},
                "related": {"parent": "household"},
            },
            {
                "id": "household",
                "key": "@case_type",
                "name": "Household",
                "structure": {"address": {}},
            },
        ],
    },
]


@pytest.fixture
def form_hashtag_info():
    """Bundle with two form questions, as a form would supply."""
    return HashtagInfo.from_hashtag_map(
        {
            "#form/text1": "/data/text1",
            "#form/text2": "/data/text2",
        }
    )


@pytest.fixture
def case_sources():
    """Session, mother and household descriptors with a parent relation."""
    return parse_data_sources(CASE_DESCRIPTORS)


@pytest.fixture
def case_paths():
    """Expected paths of the session, primary case and parent case nodes."""
    return {
        "session": SESSION_PATH,
        "case": CASE_PATH,
        "parent": PARENT_PATH,
    }
