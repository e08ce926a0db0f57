"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import pytest
from charm.toolbox.pairinggroup import ZR, G1

from acs.parameters import (
    DEFAULT_PAIRING_CURVE,
    PAIRING_CURVE_ENV,
    get_pairing_curve,
)
from acs.primitives import (
    IssuerPublicKey,
    PedersenCommitment,
    PSExtendedSignatureScheme,
    PSSignature,
    encode_attribute,
    product,
    serialize_elements,
)


@pytest.fixture
def scheme(pp):
    return PSExtendedSignatureScheme(pp)


@pytest.fixture
def signed(group, scheme):
    signing_key, verification_key = scheme.generate_key_pair(3)
    messages = [group.random(ZR) for _ in range(3)]
    return verification_key, messages, scheme.sign(signing_key, messages)


def test_sign_and_verify(group, scheme, signed):
    verification_key, messages, signature = signed
    assert scheme.verify(verification_key, messages, signature)
    assert scheme.verify(
        verification_key, messages, scheme.randomize(signature)
    )

    other_messages = messages[:2] + [group.random(ZR)]
    assert not scheme.verify(verification_key, other_messages, signature)
    assert not scheme.verify(verification_key, messages[:2], signature)


def test_sign_needs_one_message_per_key_element(group, scheme):
    signing_key, _ = scheme.generate_key_pair(2)
    with pytest.raises(ValueError):
        scheme.sign(signing_key, [group.random(ZR)])


def test_identity_signature_is_rejected(group, scheme, signed):
    verification_key, messages, _ = signed
    identity = group.random(G1) ** group.init(ZR, 0)
    assert not scheme.verify(
        verification_key, messages, PSSignature(identity, identity)
    )


def test_blinded_signature_relation(pp, scheme, signed):
    verification_key, messages, signature = signed
    blinded, t = scheme.blind(signature)
    e = pp.bilinear_map
    public_g2 = product(
        [verification_key.x_tilde]
        + [y ** m for y, m in zip(verification_key.y_tilde, messages)]
    )
    assert e(blinded.sigma_2, verification_key.g_tilde) == e(
        blinded.sigma_1, public_g2
    ) * (e(blinded.sigma_1, verification_key.g_tilde) ** t)
    assert not scheme.verify(verification_key, messages, blinded)


def test_verification_key_lookup(scheme, issuers):
    public_key = issuers[0].public_key
    verification_key = public_key.verification_key
    assert scheme.get_verification_key(public_key) is verification_key
    assert scheme.get_verification_key(verification_key) is verification_key
    with pytest.raises(TypeError):
        scheme.get_verification_key("key")


def test_issuer_public_key_equality(issuers):
    public_key = issuers[0].public_key
    same = IssuerPublicKey(
        public_key.verification_key, list(public_key.attribute_names)
    )
    assert public_key == same
    assert not public_key == issuers[1].public_key
    assert not public_key == IssuerPublicKey(
        public_key.verification_key, ["a", "b", "c"]
    )


def test_pedersen_commitment(pp, user):
    pedersen = PedersenCommitment(pp.group)
    commitment, open_value = pedersen.commit(pp.par_c, user.usk)
    assert pedersen.verify(pp.par_c, commitment, open_value)
    open_value.message = open_value.message + pp.group.init(ZR, 1)
    assert not pedersen.verify(pp.par_c, commitment, open_value)

    pseudonym, pseudonym_secret = pedersen.create_pseudonym(pp.par_c, user)
    assert pseudonym_secret.message == user.usk
    assert pedersen.open(pp.par_c, pseudonym_secret) == pseudonym.commitment


def test_encode_attribute(group):
    assert encode_attribute(group, 27) == group.init(ZR, 27)
    assert encode_attribute(group, "LU") == encode_attribute(group, "LU")
    assert not encode_attribute(group, "LU") == encode_attribute(group, "FR")
    assert not encode_attribute(group, "27") == encode_attribute(group, 27)


def test_serialization_separates_nesting(group):
    assert serialize_elements(group, [b"ab", b"c"]) != serialize_elements(
        group, [b"a", b"bc"]
    )
    assert serialize_elements(group, [[b"a"], b"b"]) != serialize_elements(
        group, [b"a", [b"b"]]
    )
    assert serialize_elements(group, {2: b"x", 1: b"y"}) == serialize_elements(
        group, {1: b"y", 2: b"x"}
    )


def test_pairing_curve_from_environment(monkeypatch):
    monkeypatch.delenv(PAIRING_CURVE_ENV, raising=False)
    assert get_pairing_curve() == DEFAULT_PAIRING_CURVE
    monkeypatch.setenv(PAIRING_CURVE_ENV, "BN254-test")
    assert get_pairing_curve() == "BN254-test"
    assert get_pairing_curve("SS512") == "SS512"
