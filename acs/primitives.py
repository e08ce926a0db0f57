"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import hashlib
from functools import reduce

from charm.toolbox.pairinggroup import ZR, G1, pair


def SHA256(bytes_):
    hash_ = hashlib.new("sha256")
    hash_.update(bytes_)
    return hash_.digest()


def product(factors):
    """Multiplies a non-empty sequence of group elements."""
    return reduce(lambda lhs, rhs: lhs * rhs, factors)


def encode_attribute(group, value):
    """Maps an attribute value to the exponent it is signed as."""
    if isinstance(value, int) and not isinstance(value, bool):
        return group.init(ZR, value)
    return group.hash(str(value), ZR)


def serialize_elements(group, obj):
    """Packs nested group elements in a bijective way, every chunk is
    prefixed by its length."""
    if isinstance(obj, dict):
        chunks = [b"d", str(len(obj)).encode("utf-8")]
        for key in sorted(obj):
            chunks.append(serialize_elements(group, key))
            chunks.append(serialize_elements(group, obj[key]))
    elif isinstance(obj, (list, tuple)):
        chunks = [b"l", str(len(obj)).encode("utf-8")]
        chunks.extend(serialize_elements(group, item) for item in obj)
    elif hasattr(obj, "elements"):
        chunks = [b"o", serialize_elements(group, obj.elements())]
    elif isinstance(obj, bytes):
        chunks = [b"b", obj]
    elif isinstance(obj, str):
        chunks = [b"s", obj.encode("utf-8")]
    elif isinstance(obj, int):
        chunks = [b"i", str(obj).encode("utf-8")]
    else:
        chunks = [b"e", group.serialize(obj)]
    return b"|".join(
        str(len(chunk)).encode("utf-8") + b"||" + chunk for chunk in chunks
    )


class UserSecret:
    """The user's secret key, the first message of every credential."""

    def __init__(self, usk):
        self.usk = usk

    @classmethod
    def generate(cls, group):
        return cls(group.random(ZR))


# Pedersen Commitment Scheme
class PedersenOpenValue:
    def __init__(self, message, random_value):
        self.message = message
        self.random_value = random_value


class Pseudonym:
    """Commitment to the user secret shown to a verifier instead of an
    identity."""

    def __init__(self, commitment):
        self.commitment = commitment

    def elements(self):
        return [self.commitment]


class PedersenCommitment:
    def __init__(self, pairing_group):
        self.pairing_group = pairing_group

    def setup(self):
        g = self.pairing_group.random(G1)
        alpha = self.pairing_group.random(ZR)
        h = g ** alpha
        par = {"group": self.pairing_group, "g": g, "h": h}
        return par

    def commit(self, par, x):
        opening = self.pairing_group.random(ZR)
        commitment = (par["g"] ** x) * (par["h"] ** opening)
        return commitment, PedersenOpenValue(x, opening)

    def open(self, par, open_value):
        return (par["g"] ** open_value.message) * (
            par["h"] ** open_value.random_value
        )

    def verify(self, par, commitment, open_value):
        return self.open(par, open_value) == commitment

    def create_pseudonym(self, par, user_secret):
        commitment, open_value = self.commit(par, user_secret.usk)
        return Pseudonym(commitment), open_value


# Pointcheval-Sanders signatures on message vectors
class PSSignature:
    def __init__(self, sigma_1, sigma_2):
        self.sigma_1 = sigma_1
        self.sigma_2 = sigma_2

    def elements(self):
        return [self.sigma_1, self.sigma_2]


class PSSigningKey:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class PSVerificationKey:
    def __init__(self, g_tilde, x_tilde, y_tilde):
        self.g_tilde = g_tilde
        self.x_tilde = x_tilde
        self.y_tilde = list(y_tilde)

    def elements(self):
        return [self.g_tilde, self.x_tilde, self.y_tilde]

    def __eq__(self, other):
        if not isinstance(other, PSVerificationKey):
            return NotImplemented
        return (
            self.g_tilde == other.g_tilde
            and self.x_tilde == other.x_tilde
            and len(self.y_tilde) == len(other.y_tilde)
            and all(a == b for a, b in zip(self.y_tilde, other.y_tilde))
        )

    __hash__ = None


class IssuerPublicKey:
    """Public key of an attribute authority. Message 0 is always the user
    secret, message i + 1 is the attribute attribute_names[i]."""

    def __init__(self, verification_key, attribute_names):
        self.verification_key = verification_key
        self.attribute_names = list(attribute_names)

    def y_tilde_for(self, attribute_name):
        index = self.attribute_names.index(attribute_name)
        return self.verification_key.y_tilde[index + 1]

    def elements(self):
        return [self.verification_key, self.attribute_names]

    def __eq__(self, other):
        if not isinstance(other, IssuerPublicKey):
            return NotImplemented
        return (
            self.attribute_names == other.attribute_names
            and self.verification_key == other.verification_key
        )

    __hash__ = None


class PSExtendedSignatureScheme:
    def __init__(self, public_parameters):
        self.group = public_parameters.group
        self.g_tilde = public_parameters.g_tilde

    def generate_key_pair(self, n):
        x = self.group.random(ZR)
        y = [self.group.random(ZR) for _ in range(n)]
        verification_key = PSVerificationKey(
            self.g_tilde, self.g_tilde ** x, [self.g_tilde ** y_i for y_i in y]
        )
        return PSSigningKey(x, y), verification_key

    def sign(self, signing_key, messages):
        if len(messages) != len(signing_key.y):
            raise ValueError("Expected %d messages" % len(signing_key.y))
        h = self.group.random(G1)
        exponent = signing_key.x
        for y_i, m_i in zip(signing_key.y, messages):
            exponent = exponent + (y_i * m_i)
        return PSSignature(h, h ** exponent)

    def verify(self, verification_key, messages, signature):
        if len(messages) != len(verification_key.y_tilde):
            return False
        zero = self.group.init(ZR, 0)
        if signature.sigma_1 == signature.sigma_1 ** zero:
            return False
        lhs = pair(
            signature.sigma_1,
            product(
                [verification_key.x_tilde]
                + [
                    y_tilde ** m_i
                    for y_tilde, m_i in zip(verification_key.y_tilde, messages)
                ]
            ),
        )
        rhs = pair(signature.sigma_2, verification_key.g_tilde)
        return lhs == rhs

    def randomize(self, signature):
        r = self.group.random(ZR)
        return PSSignature(signature.sigma_1 ** r, signature.sigma_2 ** r)

    def blind(self, signature):
        """Returns a randomized signature whose second element is hidden
        by t, together with t. The pair (blinded, t) satisfies
        e(s2, g~) = e(s1, X~ * prod(Y~_i ** m_i)) * e(s1, g~) ** t."""
        r = self.group.random(ZR)
        t = self.group.random(ZR)
        sigma_1 = signature.sigma_1 ** r
        sigma_2 = (signature.sigma_2 * (signature.sigma_1 ** t)) ** r
        return PSSignature(sigma_1, sigma_2), t

    def random_blinded_signature(self):
        """Stand-in for a blinded signature the prover does not own."""
        return PSSignature(self.group.random(G1), self.group.random(G1))

    def get_verification_key(self, issuer_public_key):
        if isinstance(issuer_public_key, IssuerPublicKey):
            return issuer_public_key.verification_key
        if isinstance(issuer_public_key, PSVerificationKey):
            return issuer_public_key
        raise TypeError("Expected a PS issuer public key")
