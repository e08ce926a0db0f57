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

from acs.fiatshamir import (
    FiatShamirSignature,
    FiatShamirSignatureScheme,
    FiatShamirSigningKey,
    FiatShamirVerificationKey,
)
from acs.sigmaprotocol import (
    GeneralizedSchnorrProtocol,
    GeneralizedSchnorrProtocolProvider,
    Problem,
)


@pytest.fixture
def statement(group):
    """Two relations sharing the secret x: y1 = g^x, y2 = g^x * h^r."""
    g = group.random(G1)
    h = group.random(G1)
    x = group.random(ZR)
    r = group.random(ZR)
    problems = [
        Problem(g ** x, [(g, "x")]),
        Problem((g ** x) * (h ** r), [(g, "x"), (h, "r")]),
    ]
    return problems, {"x": x, "r": r}


def test_problem_without_terms(group):
    with pytest.raises(ValueError):
        Problem(group.random(G1), [])


def test_variables_are_shared_across_problems(group, statement):
    problems, witnesses = statement
    protocol = GeneralizedSchnorrProtocol(group, problems, witnesses)
    assert protocol.variables() == ["x", "r"]
    assert protocol.is_fulfilled()


def test_wrong_witness_is_not_fulfilled(group, statement):
    problems, witnesses = statement
    witnesses = dict(witnesses, r=group.random(ZR))
    assert not GeneralizedSchnorrProtocol(
        group, problems, witnesses
    ).is_fulfilled()
    assert not GeneralizedSchnorrProtocol(group, problems).is_fulfilled()


def test_honest_transcript(group, statement):
    problems, witnesses = statement
    prover = GeneralizedSchnorrProtocol(group, problems, witnesses)
    verifier = GeneralizedSchnorrProtocol(group, problems)

    announcements = prover.compute_announcements()
    challenge = group.random(ZR)
    responses = prover.compute_responses(challenge)
    assert verifier.verify(announcements, challenge, responses)
    assert not verifier.verify(announcements, group.random(ZR), responses)


def test_responses_need_announcements(group, statement):
    problems, witnesses = statement
    prover = GeneralizedSchnorrProtocol(group, problems, witnesses)
    with pytest.raises(RuntimeError):
        prover.compute_responses(group.random(ZR))


def test_simulated_transcript(group, statement):
    problems, _ = statement
    verifier = GeneralizedSchnorrProtocol(group, problems)
    challenge = group.random(ZR)
    announcements, responses = verifier.simulate_transcript(challenge)
    assert verifier.verify(announcements, challenge, responses)


def test_responses_must_cover_the_variables(group, statement):
    problems, witnesses = statement
    prover = GeneralizedSchnorrProtocol(group, problems, witnesses)
    announcements = prover.compute_announcements()
    challenge = group.random(ZR)
    responses = prover.compute_responses(challenge)
    del responses["r"]
    verifier = GeneralizedSchnorrProtocol(group, problems)
    assert not verifier.verify(announcements, challenge, responses)
    assert not verifier.verify(announcements[:1], challenge, responses)


def test_fiat_shamir_signature(group, statement):
    problems, witnesses = statement
    provider = GeneralizedSchnorrProtocolProvider(group)
    signature_scheme = FiatShamirSignatureScheme(group, provider)
    signing_key = FiatShamirSigningKey(
        provider.create_prover_protocol(problems, witnesses)
    )
    verification_key = FiatShamirVerificationKey(problems)

    signature = signature_scheme.sign("hello", signing_key)
    assert signature_scheme.verify("hello", signature, verification_key)
    assert signature_scheme.verify(b"hello", signature, verification_key)
    assert not signature_scheme.verify("bye", signature, verification_key)


def test_fiat_shamir_signature_binds_the_statement(group, statement):
    problems, witnesses = statement
    provider = GeneralizedSchnorrProtocolProvider(group)
    signature_scheme = FiatShamirSignatureScheme(group, provider)
    signature = signature_scheme.sign(
        "hello",
        FiatShamirSigningKey(
            provider.create_prover_protocol(problems, witnesses)
        ),
    )

    g = problems[0].terms[0][0]
    other_problems = [Problem(g ** group.random(ZR), [(g, "x")]), problems[1]]
    assert not signature_scheme.verify(
        "hello", signature, FiatShamirVerificationKey(other_problems)
    )


def test_tampered_fiat_shamir_response(group, statement):
    problems, witnesses = statement
    provider = GeneralizedSchnorrProtocolProvider(group)
    signature_scheme = FiatShamirSignatureScheme(group, provider)
    signature = signature_scheme.sign(
        "hello",
        FiatShamirSigningKey(
            provider.create_prover_protocol(problems, witnesses)
        ),
    )
    responses = dict(signature.responses)
    responses["x"] = responses["x"] + group.init(ZR, 1)
    tampered = FiatShamirSignature(signature.announcements, responses)
    assert not signature_scheme.verify(
        "hello", tampered, FiatShamirVerificationKey(problems)
    )


def test_verify_needs_a_protocol_provider(group, statement):
    problems, witnesses = statement
    signature_scheme = FiatShamirSignatureScheme(group)
    signature = signature_scheme.sign(
        "hello",
        FiatShamirSigningKey(
            GeneralizedSchnorrProtocol(group, problems, witnesses)
        ),
    )
    with pytest.raises(ValueError):
        signature_scheme.verify(
            "hello", signature, FiatShamirVerificationKey(problems)
        )
