"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from collections import OrderedDict


def dict_from_class(cls):
    excluded_keys = ["__dict__", "__doc__", "__module__", "__weakref__"]
    return dict(
        (key, value)
        for (key, value) in cls.__dict__.items()
        if key not in excluded_keys
    )


class PSCredential:
    """Attribute values signed by one issuer, message 0 being the user
    secret."""

    def __init__(self, issuer_public_key, attributes, signature):
        self.issuer_public_key = issuer_public_key
        self.attributes = OrderedDict(attributes)
        self.signature = signature

    def get_attribute(self, name):
        return self.attributes[name]


class SelectiveDisclosure:
    def __init__(self, issuer_public_key, attributes_to_disclose=()):
        self.issuer_public_key = issuer_public_key
        self.attributes_to_disclose = list(attributes_to_disclose)

    def is_empty(self):
        return not self.attributes_to_disclose


class DisclosedAttributes:
    def __init__(self, issuer_public_key, disclosed_elements):
        self.issuer_public_key = issuer_public_key
        self.disclosed_elements = list(disclosed_elements)


class Witness:
    """Secrets backing one sub-policy leaf.

    credential is None when the prover owns no credential for the leaf;
    blinded_signature and blinding_value are sampled together with the
    witness so that compiling the leaf protocol is deterministic.
    """

    def __init__(self, credential, nym_random, usk, leaf_id, disclosure):
        self.credential = credential
        self.nym_random = nym_random
        self.usk = usk
        self.leaf_id = leaf_id
        self.disclosure = disclosure
        self.disclosed_elements = OrderedDict()
        self.blinded_signature = None
        self.blinding_value = None

    def set_disclosed_elements(self, disclosed_elements):
        self.disclosed_elements = OrderedDict(disclosed_elements)

    def set_blinding(self, blinded_signature, blinding_value):
        self.blinded_signature = blinded_signature
        self.blinding_value = blinding_value

    @property
    def issuer_public_key(self):
        return self.disclosure.issuer_public_key

    def has_credential(self):
        return self.credential is not None


class ReviewToken:
    def __init__(self, blinded_token_signature, item, rater_public_key):
        self.blinded_token_signature = blinded_token_signature
        self.item = item
        self.rater_public_key = rater_public_key


class Review:
    """A rating submitted under the linkability tokens L1 and L2."""

    def __init__(
        self,
        blinded_token_signature,
        item,
        rater_public_key,
        l1,
        l2,
        blinded_registration_information,
        system_manager_public_key,
        message,
        rating_signature,
    ):
        self.blinded_token_signature = blinded_token_signature
        self.item = item
        self.rater_public_key = rater_public_key
        self.l1 = l1
        self.l2 = l2
        self.blinded_registration_information = (
            blinded_registration_information
        )
        self.system_manager_public_key = system_manager_public_key
        self.message = message
        self.rating_signature = rating_signature


class SystemManagerPublicIdentity:
    def __init__(self, linkability_basis, public_key):
        self.linkability_basis = linkability_basis
        self.public_key = public_key


class ReviewTokenIssuerPublicIdentity:
    def __init__(self, issuer_public_key):
        self.issuer_public_key = issuer_public_key
