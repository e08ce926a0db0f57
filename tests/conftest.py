"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import pytest

from acs.issuers import CredentialIssuer, ReviewTokenIssuer, SystemManager
from acs.parameters import setup_public_parameters, setup_protocol_parameters
from acs.primitives import PedersenCommitment, UserSecret
from acs.reviews import ReviewVerifier, create_review

ATTRIBUTE_NAMES = ["name", "age", "country"]
USER_ATTRIBUTES = {"name": "alice", "age": 27, "country": "LU"}
ITEM = "item-42"


@pytest.fixture(scope="session")
def pp():
    return setup_public_parameters()


@pytest.fixture(scope="session")
def group(pp):
    return pp.group


@pytest.fixture(scope="session")
def protocol_parameters(pp):
    return setup_protocol_parameters(pp)


@pytest.fixture(scope="session")
def issuers(pp):
    return [CredentialIssuer(pp, ATTRIBUTE_NAMES) for _ in range(4)]


@pytest.fixture(scope="session")
def attribute_spaces(issuers):
    return [issuer.attribute_space() for issuer in issuers]


@pytest.fixture
def user(group):
    return UserSecret.generate(group)


@pytest.fixture
def pseudonym_secret(pp, user):
    _, open_value = PedersenCommitment(pp.group).create_pseudonym(
        pp.par_c, user
    )
    return open_value


@pytest.fixture
def credentials(issuers, user):
    return [issuer.issue(user, USER_ATTRIBUTES) for issuer in issuers]


@pytest.fixture(scope="session")
def system_manager(pp):
    return SystemManager(pp)


@pytest.fixture(scope="session")
def token_issuer(pp):
    return ReviewTokenIssuer(pp)


@pytest.fixture
def review_verifier(pp, system_manager, token_issuer):
    return ReviewVerifier(
        pp, system_manager.public_identity, token_issuer.public_identity
    )


@pytest.fixture
def make_review(pp, system_manager, token_issuer):
    def _make_review(usk, message="5 stars", item=ITEM):
        return create_review(
            pp,
            system_manager.public_identity,
            usk,
            system_manager.register(usk),
            token_issuer.issue_token(usk, item),
            token_issuer.rater_public_key,
            item,
            message,
        )

    return _make_review
