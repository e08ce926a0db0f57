"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import pytest
from charm.toolbox.pairinggroup import ZR

from acs.errors import TypeMismatchError
from acs.fiatshamir import FiatShamirSignature
from acs.issuers import ReviewTokenIssuer, SystemManager
from acs.primitives import UserSecret
from acs.records import Review
from acs.reviews import ReviewVerifier, create_review

from conftest import ITEM


def copy_review(review, **changes):
    fields = dict(vars(review))
    fields.update(changes)
    return Review(**fields)


@pytest.fixture
def other_user(group):
    return UserSecret.generate(group)


def test_honest_review_verifies(review_verifier, make_review, user):
    review = make_review(user)
    assert review.item == ITEM
    assert review_verifier.verify(review)


def test_tampered_message(review_verifier, make_review, user):
    review = make_review(user, "5 stars")
    assert not review_verifier.verify(copy_review(review, message="1 star"))


def test_tampered_response(group, review_verifier, make_review, user):
    review = make_review(user)
    responses = dict(review.rating_signature.responses)
    responses["usk"] = responses["usk"] + group.init(ZR, 1)
    signature = FiatShamirSignature(
        review.rating_signature.announcements, responses
    )
    assert not review_verifier.verify(
        copy_review(review, rating_signature=signature)
    )


def test_tampered_item(review_verifier, make_review, user):
    review = make_review(user)
    assert not review_verifier.verify(copy_review(review, item="item-43"))


def test_token_of_another_user(
    pp, system_manager, token_issuer, review_verifier, user, other_user
):
    review = create_review(
        pp,
        system_manager.public_identity,
        user,
        system_manager.register(user),
        token_issuer.issue_token(other_user, ITEM),
        token_issuer.rater_public_key,
        ITEM,
        "5 stars",
    )
    assert not review_verifier.verify(review)


def test_other_system_manager(pp, token_issuer, make_review, user):
    verifier = ReviewVerifier(
        pp, SystemManager(pp).public_identity, token_issuer.public_identity
    )
    assert not verifier.verify(make_review(user))


def test_verify_expects_a_review(review_verifier):
    with pytest.raises(TypeMismatchError):
        review_verifier.verify("5 stars")
    with pytest.raises(TypeError):
        review_verifier.verify(None)


def test_reviews_of_the_same_user_link(review_verifier, make_review, user):
    first = make_review(user, "5 stars")
    second = make_review(user, "4 stars")
    assert not first.l1 == second.l1
    assert review_verifier.are_from_same_user(first, second)
    assert review_verifier.are_from_same_user(second, first)


def test_reviews_of_different_users_do_not_link(
    review_verifier, make_review, user, other_user
):
    assert not review_verifier.are_from_same_user(
        make_review(user), make_review(other_user)
    )


def test_linking_needs_valid_reviews(review_verifier, make_review, user):
    first = make_review(user, "5 stars")
    second = copy_review(make_review(user, "4 stars"), message="3 stars")
    assert not review_verifier.are_from_same_user(first, second)
    assert not review_verifier.are_from_same_user(second, first)


def test_linking_skips_pairings_for_rejected_reviews(
    monkeypatch, review_verifier, make_review, user
):
    first = make_review(user, "5 stars")
    second = make_review(user, "4 stars")

    calls = []
    bilinear_map = review_verifier.pp.bilinear_map

    def counting_bilinear_map(lhs, rhs):
        calls.append((lhs, rhs))
        return bilinear_map(lhs, rhs)

    monkeypatch.setattr(
        review_verifier.pp, "bilinear_map", counting_bilinear_map
    )
    monkeypatch.setattr(review_verifier, "verify", lambda review: False)
    assert not review_verifier.are_from_same_user(first, second)
    assert calls == []


def test_no_link_pairings_after_a_real_rejection(
    monkeypatch, review_verifier, make_review, user
):
    genuine = make_review(user, "5 stars")
    tampered = copy_review(make_review(user, "4 stars"), message="3 stars")

    events = []
    bilinear_map = review_verifier.pp.bilinear_map
    verify = review_verifier.verify

    def counting_bilinear_map(lhs, rhs):
        events.append("pair")
        return bilinear_map(lhs, rhs)

    def recording_verify(review):
        valid = verify(review)
        events.append("verified" if valid else "rejected")
        return valid

    monkeypatch.setattr(
        review_verifier.pp, "bilinear_map", counting_bilinear_map
    )
    monkeypatch.setattr(review_verifier, "verify", recording_verify)

    for first, second in [(genuine, tampered), (tampered, genuine)]:
        del events[:]
        assert not review_verifier.are_from_same_user(first, second)
        assert "rejected" in events
        assert "pair" in events
        assert events[-1] == "rejected"


def test_linking_expects_reviews(review_verifier, make_review, user):
    with pytest.raises(TypeMismatchError):
        review_verifier.are_from_same_user(make_review(user), object())


def test_linking_uses_the_verifier_rater_key(
    pp, system_manager, make_review, user
):
    # Reviews carry their own rater key and verify under it, but linking
    # hashes the item under the rater key the verifier was set up with.
    other_rater = ReviewTokenIssuer(pp)
    verifier = ReviewVerifier(
        pp, system_manager.public_identity, other_rater.public_identity
    )
    first = make_review(user, "5 stars")
    second = make_review(user, "4 stars")
    assert verifier.verify(first)
    assert verifier.verify(second)
    assert not verifier.are_from_same_user(first, second)
