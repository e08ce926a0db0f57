"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

import argparse
import logging
import time
from pathlib import Path

from openpyxl import load_workbook, Workbook
from texttable import Texttable

from acs.issuers import CredentialIssuer, ReviewTokenIssuer, SystemManager
from acs.parameters import setup_public_parameters, setup_protocol_parameters
from acs.policies import SubPolicyPolicyFact, ThresholdPolicy
from acs.primitives import PedersenCommitment, UserSecret
from acs.prover import ProverProtocolFactory
from acs.records import SelectiveDisclosure, dict_from_class
from acs.reviews import ReviewVerifier, create_review

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ATTRIBUTE_NAMES = ["name", "age", "country"]
USER_ATTRIBUTES = {"name": "alice", "age": 27, "country": "LU"}
ITEM = "item-42"

logger = logging.getLogger("acs.protocol")


def draw_table(headings, data):
    """Prints an ASCII table to console."""
    table = Texttable()
    table.add_rows([headings, data])
    print(table.draw())


def setup(n_issuers):
    """Sets up the public parameters, one attribute authority per policy
    leaf, the system manager and the review token issuer."""
    pp = setup_public_parameters()
    protocol_parameters = setup_protocol_parameters(pp)
    issuers = [CredentialIssuer(pp, ATTRIBUTE_NAMES) for _ in range(n_issuers)]
    return (
        pp,
        protocol_parameters,
        issuers,
        SystemManager(pp),
        ReviewTokenIssuer(pp),
    )


def prove_policy(n_missing, n_disclosed):
    """Proves a threshold policy over all issuers with the credentials of
    all but the last n_missing issuers."""
    usk = first_user
    _, pseudonym_secret = PedersenCommitment(group).create_pseudonym(
        pp.par_c, usk
    )

    credentials = [issuer.issue(usk, USER_ATTRIBUTES) for issuer in issuers]
    for index in range(len(issuers) - n_missing, len(issuers)):
        credentials[index] = None

    disclosures = [None] * len(issuers)
    disclosures[0] = SelectiveDisclosure(
        issuers[0].public_key, ATTRIBUTE_NAMES[:n_disclosed]
    )

    policy = ThresholdPolicy(
        args.threshold,
        [SubPolicyPolicyFact(issuer.public_key) for issuer in issuers],
    )

    t_protocol_start = time.time()
    factory = ProverProtocolFactory(
        protocol_parameters,
        pp,
        [issuer.attribute_space() for issuer in issuers],
        credentials,
        usk,
        pseudonym_secret,
        policy,
        disclosures,
    )
    policy_proving_protocol = factory.get_protocol()
    t_protocol = time.time() - t_protocol_start

    t_prove_start = time.time()
    proof = policy_proving_protocol.prove(b"session")
    t_prove = time.time() - t_prove_start

    t_verify_start = time.time()
    if not policy_proving_protocol.verify(proof, b"session"):
        print("Abort: (Verifier) Policy proof rejected.")
        exit()
    t_verify = time.time() - t_verify_start

    if args.verbose:
        for disclosed in policy_proving_protocol.get_disclosed_attributes():
            print("Disclosed: " + str(dict_from_class(disclosed)))

    proof_size = len(policy_proving_protocol.serialize_proof(proof))
    return t_protocol, t_prove, t_verify, proof_size


def rate_and_link():
    """Two reviews of one user and one of another user on the same item."""
    verifier = ReviewVerifier(
        pp, system_manager.public_identity, token_issuer.public_identity
    )
    reviews = []
    t_rate_start = time.time()
    for usk, message in [
        (first_user, "5 stars"),
        (first_user, "4 stars"),
        (second_user, "1 star"),
    ]:
        reviews.append(
            create_review(
                pp,
                system_manager.public_identity,
                usk,
                system_manager.register(usk),
                token_issuer.issue_token(usk, ITEM),
                token_issuer.rater_public_key,
                ITEM,
                message,
            )
        )
    t_rate = (time.time() - t_rate_start) / len(reviews)

    t_review_verify_start = time.time()
    if not verifier.verify(reviews[0]):
        print("Abort: (Verifier) Review rejected.")
        exit()
    t_review_verify = time.time() - t_review_verify_start

    t_link_start = time.time()
    linked = verifier.are_from_same_user(reviews[0], reviews[1])
    t_link = time.time() - t_link_start
    unlinked = not verifier.are_from_same_user(reviews[0], reviews[2])
    if not (linked and unlinked):
        print("Abort: (Verifier) Linking reviews gave a wrong answer.")
        exit()
    return t_rate, t_review_verify, t_link


parser = argparse.ArgumentParser(
    description="Benchmark of policy proofs over anonymous credentials and"
    + " of review verification and linking"
)
parser.add_argument(
    "leaves", metavar="N", type=int, help="Number of policy leaves"
)
parser.add_argument(
    "-t",
    "--threshold",
    metavar="T",
    type=int,
    default=1,
    help="Number of leaves that have to be fulfilled (Default: 1)",
)
parser.add_argument(
    "-d",
    "--disclose",
    metavar="D",
    type=int,
    default=0,
    help="Attributes of the first credential to disclose (Default: 0)",
)
parser.add_argument(
    "-m",
    "--missing",
    metavar="M",
    type=int,
    default=0,
    help="Leaves without a credential (Default: 0)",
)
parser.add_argument(
    "-v",
    "--verbose",
    action="store_true",
    default=False,
    help="Display disclosed attributes and debug output",
)

args = parser.parse_args()

logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT
)

if not 1 <= args.leaves <= 64:
    print("Please enter a number of leaves between 1 and 64.")
    exit()
if not 1 <= args.threshold <= args.leaves - args.missing:
    print(
        "The threshold has to be at least 1 and can not exceed the number"
        + " of leaves with a credential."
    )
    exit()
if not 0 <= args.disclose <= len(ATTRIBUTE_NAMES) or (
    args.disclose and args.missing >= args.leaves
):
    print(
        "Please disclose between 0 and %d attributes of an owned credential."
        % len(ATTRIBUTE_NAMES)
    )
    exit()

t_setup_start = time.time()
pp, protocol_parameters, issuers, system_manager, token_issuer = setup(
    args.leaves
)
t_setup = time.time() - t_setup_start
group = pp.group

first_user = UserSecret.generate(group)
second_user = UserSecret.generate(group)

t_protocol, t_prove, t_verify, proof_size = prove_policy(
    args.missing, args.disclose
)
t_rate, t_review_verify, t_link = rate_and_link()
logger.info("Policy proof and review checks passed")

output_headings = [
    "N",
    "Leaves",
    "Threshold",
    "Missing",
    "Disclosed",
    "Setup",
    "Protocol Compilation",
    "Prove",
    "Verify",
    "Proof Size (Bytes)",
    "Rate",
    "Review Verify",
    "Link",
]

file_name = "ACS-Timing-data.xlsx"
if not Path(file_name).exists():
    results_workbook = Workbook()
    results_counter = 1
    results_max_row = 0
else:
    results_workbook = load_workbook(file_name)
    results_max_row = results_workbook.active.max_row
    results_counter = (
        results_workbook.active["A" + str(results_max_row)].value + 1
    )
results_worksheet = results_workbook.active

if results_max_row == 0:
    results_worksheet.append(output_headings)
timing_data = [
    results_counter,
    args.leaves,
    args.threshold,
    args.missing,
    args.disclose,
    t_setup,
    t_protocol,
    t_prove,
    t_verify,
    proof_size,
    t_rate,
    t_review_verify,
    t_link,
]
results_worksheet.append(timing_data)
results_workbook.save(file_name)

draw_table(output_headings[:5], timing_data[:5])
draw_table(output_headings[5:10], timing_data[5:10])
draw_table(output_headings[10:], timing_data[10:])
