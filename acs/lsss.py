"""
SPDX-FileCopyrightText: 2021 University of Luxembourg
SPDX-License-Identifier: GPL-3.0-or-later
SPDXVersion: SPDX-2.2

Authors:
       Aditya Damodaran, aditya.damodaran@uni.lu
       Alfredo Rial, alfredo.rial@uni.lu
"""

from charm.toolbox.pairinggroup import ZR


class ThresholdLSSSProvider:
    """Shamir sharing of challenges along a threshold node.

    A node with n children and threshold t shares its secret with a
    polynomial of degree n - t through (0, secret); child i (0-based) holds
    the evaluation at x = i + 1. Any n - t shares together with the secret
    fix the other t shares.
    """

    def __init__(self, group):
        self.group = group

    def _x(self, index):
        return self.group.init(ZR, index + 1)

    def _interpolate(self, points, x):
        """Lagrange interpolation at x through points [(x_j, y_j)]."""
        total = None
        for j, (x_j, y_j) in enumerate(points):
            numerator = self.group.init(ZR, 1)
            denominator = self.group.init(ZR, 1)
            for m, (x_m, _) in enumerate(points):
                if m == j:
                    continue
                numerator = numerator * (x - x_m)
                denominator = denominator * (x_j - x_m)
            term = y_j * (numerator / denominator)
            total = term if total is None else total + term
        return total

    def share(self, secret, n, threshold):
        known = {}
        for index in range(n - threshold):
            known[index] = self.group.random(ZR)
        return self.complete_shares(secret, known, n, threshold)

    def complete_shares(self, secret, known, n, threshold):
        """known maps exactly n - threshold child indices to their share."""
        if not 1 <= threshold <= n:
            raise ValueError("Threshold t must satisfy 1 <= t <= n")
        if len(known) != n - threshold:
            raise ValueError(
                "Expected %d fixed shares, got %d"
                % (n - threshold, len(known))
            )
        points = [(self.group.init(ZR, 0), secret)]
        points.extend(
            (self._x(index), known[index]) for index in sorted(known)
        )
        shares = []
        for index in range(n):
            if index in known:
                shares.append(known[index])
            else:
                shares.append(self._interpolate(points, self._x(index)))
        return shares

    def reconstruct(self, shares, threshold):
        """Returns the shared secret, or None when the shares do not lie on
        one polynomial of degree len(shares) - threshold."""
        n = len(shares)
        if not 1 <= threshold <= n:
            raise ValueError("Threshold t must satisfy 1 <= t <= n")
        degree = n - threshold
        points = [
            (self._x(index), shares[index]) for index in range(degree + 1)
        ]
        for index in range(degree + 1, n):
            if not self._interpolate(points, self._x(index)) == shares[index]:
                return None
        return self._interpolate(points, self.group.init(ZR, 0))
