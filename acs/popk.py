"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import logging
from collections import OrderedDict
from collections.abc import Mapping

from charm.toolbox.pairinggroup import ZR

from acs.errors import MalformedInputError, MalformedPolicyError
from acs.policies import (
    SigmaProtocolPolicyFact,
    ThresholdPolicy,
    get_sigma_protocol_leaves,
)

logger = logging.getLogger(__name__)


class ProofOfPartialKnowledgePublicParameters:
    def __init__(self, lsss_provider, group):
        self.lsss_provider = lsss_provider
        self.group = group


class ProofOfPartialKnowledgeProtocol:
    """Proves that the sigma protocols at the leaves of a threshold tree
    are satisfied as the thresholds demand, without revealing which.

    Challenges flow down the tree as threshold shares of the verifier's
    challenge. Branches the prover does not prove for real get random
    challenges up front and simulated transcripts. Announcements and
    responses are keyed by leaf id; each response entry carries the leaf
    challenge next to the leaf responses.
    """

    def __init__(self, public_parameters, policy):
        if not isinstance(policy, ThresholdPolicy):
            raise MalformedPolicyError("Expected a threshold policy")
        self.group = public_parameters.group
        self.lsss_provider = public_parameters.lsss_provider
        self.policy = policy
        self.leaves = OrderedDict()
        for leaf in get_sigma_protocol_leaves(policy):
            if leaf.leaf_id in self.leaves:
                raise MalformedPolicyError(
                    "Leaf id %s is used twice" % leaf.leaf_id
                )
            self.leaves[leaf.leaf_id] = leaf.protocol
        self._check_thresholds(policy)
        self._fulfilled = None
        self._simulated = None

    def _check_thresholds(self, node):
        if isinstance(node, SigmaProtocolPolicyFact):
            return
        if node.threshold < 1:
            raise MalformedPolicyError(
                "Threshold nodes need a threshold of at least one"
            )
        for child in node.children:
            self._check_thresholds(child)

    def get_problems(self):
        problems = OrderedDict()
        for leaf_id, protocol in self.leaves.items():
            problems[leaf_id] = protocol.get_problems()
        return problems

    def _leaf_fulfillment(self):
        fulfilled = {}
        for leaf_id, protocol in self.leaves.items():
            fulfilled[leaf_id] = protocol.is_fulfilled()
        return fulfilled

    def _is_fulfilled(self, node, fulfilled):
        if isinstance(node, SigmaProtocolPolicyFact):
            return fulfilled[node.leaf_id]
        satisfied = 0
        for child in node.children:
            if self._is_fulfilled(child, fulfilled):
                satisfied += 1
        return satisfied >= node.threshold

    def is_fulfilled(self):
        return self._is_fulfilled(self.policy, self._leaf_fulfillment())

    def _real_children(self, node):
        real = []
        for index, child in enumerate(node.children):
            if len(real) == node.threshold:
                break
            if self._is_fulfilled(child, self._fulfilled):
                real.append(index)
        return real

    def _challenge_of(self, node, leaf_challenges):
        if isinstance(node, SigmaProtocolPolicyFact):
            return leaf_challenges.get(node.leaf_id)
        shares = []
        for child in node.children:
            share = self._challenge_of(child, leaf_challenges)
            if share is None:
                return None
            shares.append(share)
        return self.lsss_provider.reconstruct(shares, node.threshold)

    def _commit(self, node, announcements):
        real = self._real_children(node)
        for index, child in enumerate(node.children):
            if index not in real:
                self._simulate(child, self.group.random(ZR), announcements)
            elif isinstance(child, SigmaProtocolPolicyFact):
                announcements[child.leaf_id] = (
                    child.protocol.compute_announcements()
                )
            else:
                self._commit(child, announcements)

    def _simulate(self, node, challenge, announcements):
        if isinstance(node, SigmaProtocolPolicyFact):
            leaf_announcements, responses = node.protocol.simulate_transcript(
                challenge
            )
            announcements[node.leaf_id] = leaf_announcements
            self._simulated[node.leaf_id] = (challenge, responses)
            return
        shares = self.lsss_provider.share(
            challenge, len(node.children), node.threshold
        )
        for child, share in zip(node.children, shares):
            self._simulate(child, share, announcements)

    def _respond(self, node, challenge, responses):
        real = self._real_children(node)
        simulated_challenges = dict(
            (leaf_id, entry[0]) for leaf_id, entry in self._simulated.items()
        )
        known = {}
        for index, child in enumerate(node.children):
            if index not in real:
                known[index] = self._challenge_of(child, simulated_challenges)
        shares = self.lsss_provider.complete_shares(
            challenge, known, len(node.children), node.threshold
        )
        for index in real:
            child = node.children[index]
            if isinstance(child, SigmaProtocolPolicyFact):
                responses[child.leaf_id] = {
                    "challenge": shares[index],
                    "responses": child.protocol.compute_responses(
                        shares[index]
                    ),
                }
            else:
                self._respond(child, shares[index], responses)

    def compute_announcements(self):
        self._fulfilled = self._leaf_fulfillment()
        if not self._is_fulfilled(self.policy, self._fulfilled):
            self._fulfilled = None
            raise MalformedInputError(
                "The available credentials do not fulfill the policy"
            )
        self._simulated = {}
        announcements = OrderedDict()
        try:
            self._commit(self.policy, announcements)
        except Exception:
            self._simulated = None
            self._fulfilled = None
            raise
        logger.debug(
            "Committed to %d leaves, %d of them simulated",
            len(announcements),
            len(self._simulated),
        )
        return OrderedDict(
            (leaf_id, announcements[leaf_id]) for leaf_id in self.leaves
        )

    def compute_responses(self, challenge):
        if self._simulated is None:
            raise RuntimeError("Announcements have not been computed")
        responses = {}
        self._respond(self.policy, challenge, responses)
        for leaf_id, entry in self._simulated.items():
            responses[leaf_id] = {
                "challenge": entry[0],
                "responses": entry[1],
            }
        self._simulated = None
        self._fulfilled = None
        return OrderedDict(
            (leaf_id, responses[leaf_id]) for leaf_id in self.leaves
        )

    def simulate_transcript(self, challenge):
        self._simulated = {}
        announcements = OrderedDict()
        self._simulate(self.policy, challenge, announcements)
        responses = OrderedDict()
        for leaf_id in self.leaves:
            leaf_challenge, leaf_responses = self._simulated[leaf_id]
            responses[leaf_id] = {
                "challenge": leaf_challenge,
                "responses": leaf_responses,
            }
        self._simulated = None
        return (
            OrderedDict(
                (leaf_id, announcements[leaf_id]) for leaf_id in self.leaves
            ),
            responses,
        )

    def _is_well_formed(self, announcements, responses):
        if not isinstance(announcements, Mapping):
            return False
        if not isinstance(responses, Mapping):
            return False
        if set(announcements) != set(self.leaves):
            return False
        if set(responses) != set(self.leaves):
            return False
        for entry in responses.values():
            if not isinstance(entry, Mapping):
                return False
            if set(entry) != {"challenge", "responses"}:
                return False
        return True

    def verify(self, announcements, challenge, responses):
        if not self._is_well_formed(announcements, responses):
            return False
        leaf_challenges = {}
        for leaf_id, protocol in self.leaves.items():
            entry = responses[leaf_id]
            if not protocol.verify(
                announcements[leaf_id], entry["challenge"], entry["responses"]
            ):
                return False
            leaf_challenges[leaf_id] = entry["challenge"]
        reconstructed = self._challenge_of(self.policy, leaf_challenges)
        return reconstructed is not None and reconstructed == challenge
