"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from collections import OrderedDict

from acs.errors import MalformedInputError
from acs.primitives import encode_attribute, product
from acs.records import PSCredential
from acs.sigmaprotocol import GeneralizedSchnorrProtocol, Problem

USK = "usk"
NYM_RANDOM = "nym_random"
BLINDING_VALUE = "t"


def attribute_variable(name):
    return "attribute:" + name


def get_fixed_attributes(sub_policy, witness):
    """Attributes whose values are part of the public statement."""
    fixed = OrderedDict(witness.disclosed_elements)
    fixed.update(sub_policy.required_attributes)
    return fixed


def compute_credential_problem(
    public_parameters, issuer_public_key, blinded, fixed
):
    """Knowledge of usk, hidden attributes and t such that the blinded
    signature verifies on the fixed attributes."""
    group = public_parameters.group
    e = public_parameters.bilinear_map
    verification_key = issuer_public_key.verification_key
    hidden = [
        name for name in issuer_public_key.attribute_names if name not in fixed
    ]

    public_g2 = product(
        [verification_key.x_tilde]
        + [
            issuer_public_key.y_tilde_for(name)
            ** encode_attribute(group, value)
            for name, value in fixed.items()
        ]
    )
    target = e(blinded.sigma_2, verification_key.g_tilde) * (
        e(blinded.sigma_1, public_g2) ** -1
    )

    terms = [(e(blinded.sigma_1, verification_key.y_tilde[0]), USK)]
    for name in hidden:
        terms.append(
            (
                e(blinded.sigma_1, issuer_public_key.y_tilde_for(name)),
                attribute_variable(name),
            )
        )
    terms.append(
        (e(blinded.sigma_1, verification_key.g_tilde), BLINDING_VALUE)
    )
    return Problem(target, terms), hidden


def compute_pseudonym_problem(public_parameters, pseudonym):
    par_c = public_parameters.par_c
    return Problem(
        pseudonym.commitment, [(par_c["g"], USK), (par_c["h"], NYM_RANDOM)]
    )


def create_protocol_for_subpolicy(
    public_parameters, sub_policy, witness, pseudonym
):
    """Compiles one sub-policy leaf into a generalized Schnorr protocol.

    Without a credential the protocol only carries the statement and can be
    simulated, never proven.
    """
    credential = witness.credential
    if credential is not None and not isinstance(credential, PSCredential):
        raise MalformedInputError(
            "Leaf %d: unsupported credential type %s"
            % (witness.leaf_id, type(credential).__name__)
        )

    group = public_parameters.group
    fixed = get_fixed_attributes(sub_policy, witness)
    credential_problem, hidden = compute_credential_problem(
        public_parameters,
        sub_policy.issuer_public_key,
        witness.blinded_signature,
        fixed,
    )
    pseudonym_problem = compute_pseudonym_problem(public_parameters, pseudonym)

    witnesses = None
    if witness.has_credential():
        witnesses = {
            USK: witness.usk,
            NYM_RANDOM: witness.nym_random,
            BLINDING_VALUE: witness.blinding_value,
        }
        for name in hidden:
            witnesses[attribute_variable(name)] = encode_attribute(
                group, credential.get_attribute(name)
            )

    return GeneralizedSchnorrProtocol(
        group, [credential_problem, pseudonym_problem], witnesses
    )
