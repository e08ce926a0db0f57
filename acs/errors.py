"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""


class ACSError(Exception):
    """Base class for errors raised by the credential system core."""


class ArgumentCountMismatchError(ACSError, ValueError):
    """The number of credentials or disclosures does not match the number
    of sub-policy leaves of the policy."""


class MalformedPolicyError(ACSError):
    """The policy is not a threshold tree over sub-policies."""


class MalformedInputError(ACSError):
    """Caller supplied secrets do not fit the policy leaf they are
    aligned with."""


class TypeMismatchError(ACSError, TypeError):
    """An object handed to a verifier is not the expected variant."""
