"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from collections.abc import Mapping

from charm.toolbox.pairinggroup import ZR

from acs.primitives import product


def generate_random_exponents(group, names):
    exponents = {}
    for name in names:
        exponents[name] = group.random(ZR)
    return exponents


class Problem:
    """Relation target = prod(base ** secret) over one of G1, G2 or GT.

    terms is a list of (base, name) pairs. A name used in several problems
    of one protocol refers to the same secret.
    """

    def __init__(self, target, terms):
        if not terms:
            raise ValueError("A problem needs at least one term")
        self.target = target
        self.terms = list(terms)

    def variables(self):
        return [name for (_, name) in self.terms]

    def evaluate(self, exponents):
        return product(
            [base ** exponents[name] for (base, name) in self.terms]
        )

    def elements(self):
        return [self.target, [[base, name] for (base, name) in self.terms]]


class GeneralizedSchnorrProtocol:
    """Schnorr-style sigma protocol for a conjunction of problems.

    The prover variant carries witnesses (name -> ZR), the verifier variant
    only the problems.
    """

    def __init__(self, group, problems, witnesses=None):
        self.group = group
        self.problems = list(problems)
        self.witnesses = witnesses
        self.random_witnesses = None

    def get_problems(self):
        return self.problems

    def variables(self):
        names = []
        for problem in self.problems:
            for name in problem.variables():
                if name not in names:
                    names.append(name)
        return names

    def is_fulfilled(self):
        if self.witnesses is None:
            return False
        for name in self.variables():
            if self.witnesses.get(name) is None:
                return False
        for problem in self.problems:
            if not problem.evaluate(self.witnesses) == problem.target:
                return False
        return True

    def compute_announcements(self):
        self.random_witnesses = generate_random_exponents(
            self.group, self.variables()
        )
        return [
            problem.evaluate(self.random_witnesses)
            for problem in self.problems
        ]

    def compute_responses(self, challenge):
        if self.random_witnesses is None:
            raise RuntimeError("Announcements have not been computed")
        responses = {}
        for name in self.variables():
            responses[name] = self.random_witnesses[name] + (
                challenge * self.witnesses[name]
            )
        self.random_witnesses = None
        return responses

    def simulate_transcript(self, challenge):
        responses = generate_random_exponents(self.group, self.variables())
        announcements = [
            problem.evaluate(responses) * ((problem.target ** challenge) ** -1)
            for problem in self.problems
        ]
        return announcements, responses

    def verify(self, announcements, challenge, responses):
        if not isinstance(announcements, (list, tuple)):
            return False
        if not isinstance(responses, Mapping):
            return False
        if len(announcements) != len(self.problems):
            return False
        if set(responses) != set(self.variables()):
            return False
        for problem, announcement in zip(self.problems, announcements):
            lhs = problem.evaluate(responses)
            rhs = announcement * (problem.target ** challenge)
            if not lhs == rhs:
                return False
        return True


class GeneralizedSchnorrProtocolProvider:
    def __init__(self, group):
        self.group = group

    def create_verifier_protocol(self, problems):
        return GeneralizedSchnorrProtocol(self.group, problems)

    def create_prover_protocol(self, problems, witnesses):
        return GeneralizedSchnorrProtocol(self.group, problems, witnesses)
