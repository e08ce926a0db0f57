"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import itertools
import logging
from collections import OrderedDict

from acs.credentialprotocol import create_protocol_for_subpolicy
from acs.errors import (
    ArgumentCountMismatchError,
    MalformedInputError,
    MalformedPolicyError,
)
from acs.fiatshamir import FiatShamirSignatureScheme, FiatShamirSigningKey
from acs.policies import (
    SigmaProtocolPolicyFact,
    SubPolicyPolicyFact,
    ThresholdPolicy,
    find_attribute_space,
    get_sub_policies,
)
from acs.popk import (
    ProofOfPartialKnowledgeProtocol,
    ProofOfPartialKnowledgePublicParameters,
)
from acs.primitives import (
    PedersenCommitment,
    PSExtendedSignatureScheme,
    Pseudonym,
    serialize_elements,
)
from acs.records import DisclosedAttributes, SelectiveDisclosure, Witness

logger = logging.getLogger(__name__)


def build_witness(
    public_parameters,
    sub_policy,
    credential,
    usk,
    pseudonym_secret,
    leaf_id,
    disclosure=None,
):
    """Collects the secrets for one sub-policy leaf.

    credential may be None, the leaf then cannot be proven and gets a
    random stand-in for the blinded signature. A missing disclosure means
    nothing of the credential is disclosed.
    """
    if disclosure is None:
        disclosure = SelectiveDisclosure(sub_policy.issuer_public_key, [])
    if not disclosure.issuer_public_key == sub_policy.issuer_public_key:
        raise MalformedInputError(
            "Leaf %d: disclosure refers to another issuer" % leaf_id
        )

    witness = Witness(
        credential, pseudonym_secret.random_value, usk.usk, leaf_id, disclosure
    )
    signature_scheme = PSExtendedSignatureScheme(public_parameters)

    if credential is None:
        if not disclosure.is_empty():
            raise MalformedInputError(
                "Leaf %d: cannot disclose attributes without a credential"
                % leaf_id
            )
        witness.set_blinding(signature_scheme.random_blinded_signature(), None)
        return witness

    if not credential.issuer_public_key == sub_policy.issuer_public_key:
        raise MalformedInputError(
            "Leaf %d: credential was issued by another issuer" % leaf_id
        )
    if list(credential.attributes) != (
        sub_policy.issuer_public_key.attribute_names
    ):
        raise MalformedInputError(
            "Leaf %d: credential attributes do not match the issuer key"
            % leaf_id
        )

    disclosed_elements = OrderedDict()
    for name in disclosure.attributes_to_disclose:
        if name not in credential.attributes:
            raise MalformedInputError(
                "Leaf %d: unknown attribute %s" % (leaf_id, name)
            )
        disclosed_elements[name] = credential.get_attribute(name)
    witness.set_disclosed_elements(disclosed_elements)
    witness.set_blinding(*signature_scheme.blind(credential.signature))
    return witness


class PolicyProvingProtocol:
    """The composed proof together with the attributes it discloses."""

    def __init__(self, protocol, disclosed_attributes):
        self.protocol = protocol
        self.disclosed_attributes = list(disclosed_attributes)

    def get_disclosed_attributes(self):
        return self.disclosed_attributes

    def is_fulfilled(self):
        return self.protocol.is_fulfilled()

    def prove(self, message=b""):
        signature_scheme = FiatShamirSignatureScheme(self.protocol.group)
        return signature_scheme.sign(
            message, FiatShamirSigningKey(self.protocol)
        )

    def verify(self, transcript, message=b""):
        signature_scheme = FiatShamirSignatureScheme(self.protocol.group)
        return signature_scheme.verify_transcript(
            message, transcript, self.protocol
        )

    def serialize_proof(self, transcript):
        """The statement, blinded signatures and pseudonym included, followed
        by the transcript."""
        return serialize_elements(
            self.protocol.group, [self.protocol.get_problems(), transcript]
        )


class ProtocolFactory:
    """Parses a policy against the known attribute spaces.

    The i-th disclosure belongs to the i-th sub-policy in the order of
    get_sub_policies; None stands for disclosing nothing.
    """

    def __init__(
        self,
        protocol_parameters,
        public_parameters,
        attribute_spaces,
        policy,
        disclosures=None,
    ):
        if isinstance(policy, SubPolicyPolicyFact):
            policy = ThresholdPolicy(1, [policy])
        if not isinstance(policy, ThresholdPolicy):
            raise MalformedPolicyError("Expected a threshold policy")

        self.protocol_parameters = protocol_parameters
        self.public_parameters = public_parameters
        self.attribute_spaces = list(attribute_spaces)
        self.policy = policy
        self.sub_policies = get_sub_policies(policy)

        if disclosures is None:
            disclosures = [None] * len(self.sub_policies)
        if len(disclosures) != len(self.sub_policies):
            raise ArgumentCountMismatchError(
                "The number of provided disclosures does not match the number"
                + " of sub policies"
            )
        self.disclosures = list(disclosures)
        self._check_attribute_spaces()

    def _check_attribute_spaces(self):
        for index, sub_policy in enumerate(self.sub_policies):
            attribute_space = find_attribute_space(
                self.attribute_spaces, sub_policy.issuer_public_key
            )
            if attribute_space is None:
                raise MalformedPolicyError(
                    "Sub policy %d refers to an unknown issuer" % index
                )
            for name in sub_policy.required_attributes:
                if name not in attribute_space.attribute_names:
                    raise MalformedPolicyError(
                        "Sub policy %d requires unknown attribute %s"
                        % (index, name)
                    )
            disclosure = self.disclosures[index]
            if disclosure is None:
                continue
            for name in disclosure.attributes_to_disclose:
                if name not in attribute_space.attribute_names:
                    raise MalformedInputError(
                        "Disclosure %d names unknown attribute %s"
                        % (index, name)
                    )

    def get_sub_policies(self):
        return self.sub_policies


class ProverProtocolFactory(ProtocolFactory):
    """Builds the protocol proving that the owned credentials fulfill a
    policy.

    credentials[i] is used for the i-th sub-policy and may be None when the
    user holds no credential for it.
    """

    def __init__(
        self,
        protocol_parameters,
        public_parameters,
        attribute_spaces,
        credentials,
        usk,
        pseudonym_secret,
        policy,
        disclosures=None,
    ):
        super().__init__(
            protocol_parameters,
            public_parameters,
            attribute_spaces,
            policy,
            disclosures,
        )
        # The disclosure count is already checked against the sub policies
        if credentials is None or len(credentials) != len(self.disclosures):
            raise ArgumentCountMismatchError(
                "The number of provided credentials does not match the number"
                + " of sub policies"
            )
        self.credentials = list(credentials)
        self.usk = usk
        self.pseudonym_secret = pseudonym_secret
        self.pseudonym = Pseudonym(
            PedersenCommitment(public_parameters.group).open(
                public_parameters.par_c, pseudonym_secret
            )
        )

    def create_protocol_for_subpolicy(self, sub_policy, witness):
        return create_protocol_for_subpolicy(
            self.public_parameters, sub_policy, witness, self.pseudonym
        )

    def get_protocol(self):
        witnesses = []
        transformed_policy = self.transform_policy(
            self.policy, witnesses, itertools.count()
        )

        disclosed_attributes = [
            DisclosedAttributes(
                witness.issuer_public_key,
                list(witness.disclosed_elements.values()),
            )
            for witness in witnesses
            if witness.disclosed_elements
        ]

        popk_public_parameters = ProofOfPartialKnowledgePublicParameters(
            self.protocol_parameters.lsss_provider,
            self.public_parameters.group,
        )
        # Witnesses already sit inside the leaf protocols
        inner_protocol = ProofOfPartialKnowledgeProtocol(
            popk_public_parameters, transformed_policy
        )
        logger.debug(
            "Policy transformed into %d leaves, %d with disclosures",
            len(witnesses),
            len(disclosed_attributes),
        )
        return PolicyProvingProtocol(inner_protocol, disclosed_attributes)

    def transform_policy(self, policy, witnesses, leaf_counter):
        """Replaces the sub-policy leaves by sigma protocol leaves.

        Leaf ids come from leaf_counter in pre-order, left to right, over
        the whole tree and index into the credentials and disclosures.
        """
        transformed_children = []
        for child_policy in policy.get_children():
            if isinstance(child_policy, SubPolicyPolicyFact):
                leaf_id = next(leaf_counter)
                witness = build_witness(
                    self.public_parameters,
                    child_policy,
                    self.credentials[leaf_id],
                    self.usk,
                    self.pseudonym_secret,
                    leaf_id,
                    self.disclosures[leaf_id],
                )
                witnesses.append(witness)
                protocol = self.create_protocol_for_subpolicy(
                    child_policy, witness
                )
                transformed_children.append(
                    SigmaProtocolPolicyFact(protocol, leaf_id)
                )
            elif isinstance(child_policy, ThresholdPolicy):
                transformed_children.append(
                    self.transform_policy(
                        child_policy, witnesses, leaf_counter
                    )
                )
            else:
                raise MalformedPolicyError("Malformed Policy!")
        return ThresholdPolicy(policy.get_threshold(), transformed_children)
