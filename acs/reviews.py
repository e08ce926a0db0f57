"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import logging

from charm.toolbox.pairinggroup import ZR, G1

from acs.errors import TypeMismatchError
from acs.fiatshamir import (
    FiatShamirSignatureScheme,
    FiatShamirSigningKey,
    FiatShamirVerificationKey,
)
from acs.primitives import (
    SHA256,
    PSExtendedSignatureScheme,
    encode_attribute,
    serialize_elements,
)
from acs.records import Review, ReviewToken
from acs.sigmaprotocol import (
    GeneralizedSchnorrProtocol,
    GeneralizedSchnorrProtocolProvider,
    Problem,
)

logger = logging.getLogger(__name__)

# Secrets of the rating protocol
R = "r"
USK = "usk"
T_REGISTRATION = "t_registration"
T_TOKEN = "t_token"


def hash_rating_public_key_and_item(token, public_parameters):
    """Hashes the rater key and the rated item into G1."""
    group = public_parameters.group
    data = SHA256(
        serialize_elements(group, [token.rater_public_key, str(token.item)])
    )
    return group.hash(data, G1)


def compute_blinded_signature_problem(
    public_parameters, verification_key, blinded, fixed_messages, usk_index
):
    """Knowledge of usk and t for a blinded PS signature on messages that
    are public except for the user secret at usk_index."""
    e = public_parameters.bilinear_map
    public_g2 = verification_key.x_tilde
    for index, message in fixed_messages.items():
        public_g2 = public_g2 * (verification_key.y_tilde[index] ** message)
    target = e(blinded.sigma_2, verification_key.g_tilde) * (
        e(blinded.sigma_1, public_g2) ** -1
    )
    return target, e(blinded.sigma_1, verification_key.y_tilde[usk_index])


class RateVerifyProtocolFactory:
    """Rebuilds the statement a review's signature proves:

    L1 = h ** r, L2 = lb ** r * g~ ** usk, the blinded registration
    information is a system manager signature on usk and the blinded token
    a rater signature on (usk, item).
    """

    def __init__(
        self,
        public_parameters,
        blinded_registration_information,
        system_manager_public_key,
        linkability_basis,
        token,
        l1,
        l2,
    ):
        self.public_parameters = public_parameters
        self.blinded_registration_information = (
            blinded_registration_information
        )
        self.system_manager_public_key = system_manager_public_key
        self.linkability_basis = linkability_basis
        self.token = token
        self.l1 = l1
        self.l2 = l2

    def get_problems(self):
        pp = self.public_parameters
        e = pp.bilinear_map
        group = pp.group
        h = hash_rating_public_key_and_item(self.token, pp)

        registration = self.blinded_registration_information
        registration_target, registration_base = (
            compute_blinded_signature_problem(
                pp, self.system_manager_public_key, registration, {}, 0
            )
        )

        rater_key = self.token.rater_public_key
        token_signature = self.token.blinded_token_signature
        token_target, token_base = compute_blinded_signature_problem(
            pp,
            rater_key,
            token_signature,
            {1: encode_attribute(group, self.token.item)},
            0,
        )

        return [
            Problem(self.l1, [(h, R)]),
            Problem(
                self.l2, [(self.linkability_basis, R), (pp.g_tilde, USK)]
            ),
            Problem(
                registration_target,
                [
                    (registration_base, USK),
                    (
                        e(
                            registration.sigma_1,
                            self.system_manager_public_key.g_tilde,
                        ),
                        T_REGISTRATION,
                    ),
                ],
            ),
            Problem(
                token_target,
                [
                    (token_base, USK),
                    (e(token_signature.sigma_1, rater_key.g_tilde), T_TOKEN),
                ],
            ),
        ]

    def get_protocol(self, witnesses=None):
        return GeneralizedSchnorrProtocol(
            self.public_parameters.group, self.get_problems(), witnesses
        )


def create_review(
    public_parameters,
    system_manager_public_identity,
    usk,
    registration_information,
    token_signature,
    rater_public_key,
    item,
    message,
):
    """Rates item: blinds the registration information and the review
    token and signs message with the rating protocol."""
    group = public_parameters.group
    signature_scheme = PSExtendedSignatureScheme(public_parameters)

    blinded_registration, t_registration = signature_scheme.blind(
        registration_information
    )
    blinded_token, t_token = signature_scheme.blind(token_signature)
    token = ReviewToken(blinded_token, item, rater_public_key)

    r = group.random(ZR)
    h = hash_rating_public_key_and_item(token, public_parameters)
    l1 = h ** r
    l2 = (system_manager_public_identity.linkability_basis ** r) * (
        public_parameters.g_tilde ** usk.usk
    )

    factory = RateVerifyProtocolFactory(
        public_parameters,
        blinded_registration,
        system_manager_public_identity.public_key,
        system_manager_public_identity.linkability_basis,
        token,
        l1,
        l2,
    )
    protocol = factory.get_protocol(
        {
            R: r,
            USK: usk.usk,
            T_REGISTRATION: t_registration,
            T_TOKEN: t_token,
        }
    )
    fiat_shamir = FiatShamirSignatureScheme(
        group, GeneralizedSchnorrProtocolProvider(group)
    )
    rating_signature = fiat_shamir.sign(
        message, FiatShamirSigningKey(protocol)
    )
    return Review(
        blinded_token,
        item,
        rater_public_key,
        l1,
        l2,
        blinded_registration,
        system_manager_public_identity.public_key,
        message,
        rating_signature,
    )


class ReviewVerifier:
    """Verifies reviews and links reviews of the same user."""

    def __init__(
        self,
        public_parameters,
        system_manager_public_identity,
        review_token_issuer_public_identity,
    ):
        self.pp = public_parameters
        self.system_manager_public_identity = system_manager_public_identity

        signature_scheme = PSExtendedSignatureScheme(public_parameters)
        self.rater_public_key = signature_scheme.get_verification_key(
            review_token_issuer_public_identity.issuer_public_key
        )

    def verify(self, review):
        """Checks the review's signature against the rating statement
        rebuilt from the review."""
        if not isinstance(review, Review):
            raise TypeMismatchError("Expected Review")

        token = ReviewToken(
            review.blinded_token_signature,
            review.item,
            review.rater_public_key,
        )
        factory = RateVerifyProtocolFactory(
            self.pp,
            review.blinded_registration_information,
            review.system_manager_public_key,
            self.system_manager_public_identity.linkability_basis,
            token,
            review.l1,
            review.l2,
        )
        rate_verify_protocol = factory.get_protocol()
        protocol_provider = GeneralizedSchnorrProtocolProvider(self.pp.group)
        signature_scheme = FiatShamirSignatureScheme(
            self.pp.group, protocol_provider, SHA256
        )
        verification_key = FiatShamirVerificationKey(
            rate_verify_protocol.get_problems()
        )
        valid = signature_scheme.verify(
            review.message, review.rating_signature, verification_key
        )
        if not valid:
            logger.info("Rejected review of item %s", review.item)
        return valid

    def are_from_same_user(self, review1, review2):
        """Links two verified reviews. The rater key of the verifier is
        used for both, review2 is assumed to be for the same rater."""
        if not self.verify(review1) or not self.verify(review2):
            return False

        e = self.pp.bilinear_map
        l1, l2 = review1.l1, review1.l2
        l1_star, l2_star = review2.l1, review2.l2

        left_side = e(
            l1 * (l1_star ** -1),
            self.system_manager_public_identity.linkability_basis,
        )

        token = ReviewToken(
            review1.blinded_token_signature,
            review1.item,
            self.rater_public_key,
        )
        h = hash_rating_public_key_and_item(token, self.pp)

        right_side = e(h, l2 * (l2_star ** -1))
        return left_side == right_side
