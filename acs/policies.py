"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from acs.errors import MalformedPolicyError


class Policy:
    """A node of an access policy."""


class ThresholdPolicy(Policy):
    """Satisfied when at least threshold of its children are."""

    def __init__(self, threshold, children):
        self.threshold = threshold
        self.children = list(children)
        if not 0 <= threshold <= len(self.children):
            raise MalformedPolicyError(
                "Threshold %d does not fit %d children"
                % (threshold, len(self.children))
            )

    def get_threshold(self):
        return self.threshold

    def get_children(self):
        return self.children


class SubPolicyPolicyFact(Policy):
    """Leaf to be proven with a credential of one issuer.

    required_attributes maps attribute names to the values the credential
    has to carry; they are checked inside the proof without being listed
    among the disclosed attributes.
    """

    def __init__(self, issuer_public_key, required_attributes=None):
        self.issuer_public_key = issuer_public_key
        self.required_attributes = dict(required_attributes or {})


class SigmaProtocolPolicyFact(Policy):
    """Leaf holding a compiled sigma protocol and its leaf id."""

    def __init__(self, protocol, leaf_id):
        self.protocol = protocol
        self.leaf_id = leaf_id


class AttributeSpace:
    def __init__(self, issuer_public_key, attribute_names):
        self.issuer_public_key = issuer_public_key
        self.attribute_names = list(attribute_names)


def get_sub_policies(policy):
    """Sub-policy leaves in the order leaf ids are assigned."""
    if isinstance(policy, SubPolicyPolicyFact):
        return [policy]
    if not isinstance(policy, ThresholdPolicy):
        raise MalformedPolicyError("Malformed Policy!")
    sub_policies = []
    for child in policy.children:
        sub_policies.extend(get_sub_policies(child))
    return sub_policies


def get_sigma_protocol_leaves(policy):
    if isinstance(policy, SigmaProtocolPolicyFact):
        return [policy]
    if not isinstance(policy, ThresholdPolicy):
        raise MalformedPolicyError("Malformed Policy!")
    leaves = []
    for child in policy.children:
        leaves.extend(get_sigma_protocol_leaves(child))
    return leaves


def find_attribute_space(attribute_spaces, issuer_public_key):
    for attribute_space in attribute_spaces:
        if attribute_space.issuer_public_key == issuer_public_key:
            return attribute_space
    return None
