"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from collections import OrderedDict

from charm.toolbox.pairinggroup import ZR

from acs.policies import AttributeSpace
from acs.primitives import (
    IssuerPublicKey,
    PSExtendedSignatureScheme,
    encode_attribute,
)
from acs.records import (
    PSCredential,
    ReviewTokenIssuerPublicIdentity,
    SystemManagerPublicIdentity,
)

# Direct signing on known messages. The blind issuance protocols live
# outside of this package.

REVIEW_TOKEN_ATTRIBUTES = ["item"]


class CredentialIssuer:
    """Attribute authority signing (usk, attributes...) credentials."""

    def __init__(self, public_parameters, attribute_names):
        self.pp = public_parameters
        self.signature_scheme = PSExtendedSignatureScheme(public_parameters)
        self.signing_key, verification_key = (
            self.signature_scheme.generate_key_pair(len(attribute_names) + 1)
        )
        self.public_key = IssuerPublicKey(verification_key, attribute_names)

    def attribute_space(self):
        return AttributeSpace(self.public_key, self.public_key.attribute_names)

    def issue(self, usk, attributes):
        attributes = OrderedDict(
            (name, attributes[name])
            for name in self.public_key.attribute_names
        )
        messages = [usk.usk] + [
            encode_attribute(self.pp.group, value)
            for value in attributes.values()
        ]
        signature = self.signature_scheme.sign(self.signing_key, messages)
        return PSCredential(self.public_key, attributes, signature)


class SystemManager:
    """Registers users and publishes the linkability basis."""

    def __init__(self, public_parameters):
        self.signature_scheme = PSExtendedSignatureScheme(public_parameters)
        self.signing_key, public_key = self.signature_scheme.generate_key_pair(
            1
        )
        self.linkability_secret = public_parameters.group.random(ZR)
        self.public_identity = SystemManagerPublicIdentity(
            public_parameters.g_tilde ** self.linkability_secret, public_key
        )

    def register(self, usk):
        return self.signature_scheme.sign(self.signing_key, [usk.usk])


class ReviewTokenIssuer:
    """Hands out tokens allowing a registered user to rate one item."""

    def __init__(self, public_parameters):
        self.pp = public_parameters
        self.signature_scheme = PSExtendedSignatureScheme(public_parameters)
        self.signing_key, verification_key = (
            self.signature_scheme.generate_key_pair(
                len(REVIEW_TOKEN_ATTRIBUTES) + 1
            )
        )
        self.public_identity = ReviewTokenIssuerPublicIdentity(
            IssuerPublicKey(verification_key, REVIEW_TOKEN_ATTRIBUTES)
        )

    @property
    def rater_public_key(self):
        return self.signature_scheme.get_verification_key(
            self.public_identity.issuer_public_key
        )

    def issue_token(self, usk, item):
        return self.signature_scheme.sign(
            self.signing_key,
            [usk.usk, encode_attribute(self.pp.group, item)],
        )
