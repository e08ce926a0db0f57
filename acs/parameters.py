"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import logging
import os

from charm.toolbox.pairinggroup import PairingGroup, G2, pair

from acs.lsss import ThresholdLSSSProvider
from acs.primitives import PedersenCommitment

logger = logging.getLogger(__name__)

# Pairing curve selection
PAIRING_CURVE_ENV = "ACS_PAIRING_CURVE"
DEFAULT_PAIRING_CURVE = "BN254"


class PublicParameters:
    """System wide parameters: the pairing group, a G2 generator shared by
    all PS keys and the Pedersen parameters used for pseudonyms."""

    def __init__(self, group, g_tilde, par_c):
        self.group = group
        self.g_tilde = g_tilde
        self.par_c = par_c
        self.bilinear_map = pair


class ProtocolParameters:
    """Input shared by prover and verifier protocol instances."""

    def __init__(self, lsss_provider):
        self.lsss_provider = lsss_provider


def get_pairing_curve(curve=None):
    if curve is not None:
        return curve
    return os.environ.get(PAIRING_CURVE_ENV, DEFAULT_PAIRING_CURVE)


def setup_public_parameters(curve=None):
    curve = get_pairing_curve(curve)
    group = PairingGroup(curve)
    par_c = PedersenCommitment(group).setup()
    logger.debug("Public parameters set up on curve %s", curve)
    return PublicParameters(group, group.random(G2), par_c)


def setup_protocol_parameters(public_parameters):
    return ProtocolParameters(ThresholdLSSSProvider(public_parameters.group))
