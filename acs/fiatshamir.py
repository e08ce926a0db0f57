"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import logging

from charm.toolbox.pairinggroup import ZR

from acs.primitives import SHA256, serialize_elements

logger = logging.getLogger(__name__)


class FiatShamirSigningKey:
    def __init__(self, protocol):
        self.protocol = protocol


class FiatShamirVerificationKey:
    def __init__(self, problems):
        self.problems = problems


class FiatShamirSignature:
    def __init__(self, announcements, responses):
        self.announcements = announcements
        self.responses = responses

    def elements(self):
        return [self.announcements, self.responses]


class FiatShamirSignatureScheme:
    """Turns a sigma protocol into a signature scheme on messages.

    The challenge is hash_function(problems || announcements || message)
    mapped into ZR, so a signature also binds the statement it proves.
    protocol_provider is only needed to verify against a verification key.
    """

    def __init__(self, group, protocol_provider=None, hash_function=SHA256):
        self.group = group
        self.protocol_provider = protocol_provider
        self.hash_function = hash_function

    def compute_challenge(self, problems, announcements, message):
        if isinstance(message, str):
            message = message.encode("utf-8")
        digest = self.hash_function(
            serialize_elements(self.group, [problems, announcements, message])
        )
        return self.group.hash(digest, ZR)

    def sign(self, message, signing_key):
        protocol = signing_key.protocol
        announcements = protocol.compute_announcements()
        challenge = self.compute_challenge(
            protocol.get_problems(), announcements, message
        )
        responses = protocol.compute_responses(challenge)
        return FiatShamirSignature(announcements, responses)

    def verify_transcript(self, message, signature, protocol):
        challenge = self.compute_challenge(
            protocol.get_problems(), signature.announcements, message
        )
        return protocol.verify(
            signature.announcements, challenge, signature.responses
        )

    def verify(self, message, signature, verification_key):
        if self.protocol_provider is None:
            raise ValueError("No protocol provider to rebuild the protocol")
        protocol = self.protocol_provider.create_verifier_protocol(
            verification_key.problems
        )
        valid = self.verify_transcript(message, signature, protocol)
        if not valid:
            logger.debug("Fiat-Shamir signature rejected")
        return valid
